# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : results.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Immutable records produced by evaluation and optimization.
#
# CREATED : 2025-10-18
# UPDATED : 2025-10-18
# =============================================================================

"""
Result records for the credit_tuner classifier.

Includes:
1. `EvaluationResult` - cross-validated score of one configuration.
2. `SearchTrial` - a configuration paired with its evaluation.
3. `SearchResult` - the ordered trial log of one optimization run.

All records are frozen and hold tuples rather than arrays, so they compare
by value and survive a joblib round trip unchanged.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

Number = Union[int, float]


@dataclass(frozen=True)
class EvaluationResult:
    """
    Score of one configuration.

    Attributes
    ----------
    score : float
        Mean validation AUC across folds at `best_round`.
    best_round : int
        1-based boosting round with the highest mean AUC.
    metric_curve : tuple of float
        Mean validation AUC per boosting round.
    predictions : tuple of float, optional
        Out-of-fold probabilities aligned with the training rows.
    """

    score: float
    best_round: int
    metric_curve: Tuple[float, ...] = ()
    predictions: Optional[Tuple[float, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "score", float(self.score))
        object.__setattr__(self, "best_round", int(self.best_round))
        object.__setattr__(self, "metric_curve", tuple(float(v) for v in self.metric_curve))
        if self.predictions is not None:
            object.__setattr__(self, "predictions", tuple(float(v) for v in self.predictions))

    def prediction_array(self) -> np.ndarray:
        if self.predictions is None:
            raise ValueError("Evaluation was run without out-of-fold predictions")
        return np.asarray(self.predictions, dtype=float)


@dataclass(frozen=True)
class SearchTrial:
    index: int
    params: Dict[str, Number]
    result: EvaluationResult

    def __post_init__(self):
        # own copy: the caller's dict may change after evaluation
        object.__setattr__(self, "params", dict(self.params))

    @property
    def score(self) -> float:
        return self.result.score


@dataclass(frozen=True)
class SearchResult:
    trials: Tuple[SearchTrial, ...]

    def __post_init__(self):
        object.__setattr__(self, "trials", tuple(self.trials))

    @property
    def best(self) -> SearchTrial:
        """Trial with the highest score; the earliest one wins ties."""
        if not self.trials:
            raise ValueError("Search result holds no trials")
        return max(self.trials, key=lambda t: t.score)

    @property
    def best_params(self) -> Dict[str, Number]:
        return dict(self.best.params)

    def to_frame(self) -> pd.DataFrame:
        """One row per trial: index, parameters, score and best round."""
        rows = [
            {"trial": t.index, **t.params, "score": t.score, "best_round": t.result.best_round}
            for t in self.trials
        ]
        return pd.DataFrame(rows)
