# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================#
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : train.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Cross-validated evaluation of LightGBM configurations and the
#           final classifier fit.
#
# CREATED : 2025-07-10
# UPDATED : 2025-10-18
# =============================================================================

"""
Training module for the credit_tuner classifier using LightGBM.

Includes:
1. `lgb_params` - Merges a tuned configuration with the fixed parameters.
2. `evaluate_configuration` - Cross-validates one configuration with early
   stopping and returns its best mean AUC.
3. `make_cv_lgm` - Binds data and folds into a one-argument evaluator.
4. `lgb_LGBMClassifier` - Builds the final LGBMClassifier.
"""

import logging
import math

import lightgbm as lgb
import numpy as np
from lightgbm.basic import LightGBMError

from credit_tuner.config import FIXED_PARAMS
from credit_tuner.model.results import EvaluationResult
from credit_tuner.utils.errors import TrainingDivergence


# -----------------------------------------------------------------------------
# Function: lgb_params
# -----------------------------------------------------------------------------
def lgb_params(params, seed):
    """
    Return the full LightGBM parameter dict for a tuned configuration.

    Parameters
    ----------
    params : dict
        Tuned hyperparameters (a configuration from the search space).
    seed : int
        LightGBM random seed.
    """
    full = dict(FIXED_PARAMS)
    full.update(params)
    full["seed"] = seed
    return full


# -----------------------------------------------------------------------------
# Function: evaluate_configuration
# -----------------------------------------------------------------------------
def evaluate_configuration(
    params,
    train_x,
    train_y,
    cv_split,
    search_space,
    max_boost_round,
    early_stopping_rounds,
    seed=132,
    return_predictions=False,
):
    """
    Cross-validate one hyperparameter configuration.

    For each fold a booster is trained on the remaining folds and scored on
    the held-out fold; the validation AUC is averaged across folds per
    boosting round. The best round is the first round with the highest mean
    AUC, and training stops after `early_stopping_rounds` rounds without
    improvement.

    Parameters
    ----------
    params : dict
        Configuration to evaluate; must lie inside `search_space`.
    train_x : pd.DataFrame
        Training features.
    train_y : array-like
        Binary training labels.
    cv_split : list of (np.ndarray, np.ndarray)
        Fold assignment from `cv_split_func`.
    search_space : SearchSpace
        Declared bounds used to validate `params`.
    max_boost_round : int
        Upper bound on the number of boosting rounds.
    early_stopping_rounds : int
        Patience, in rounds, before stopping early.
    seed : int, optional
        LightGBM random seed (default: 132).
    return_predictions : bool, optional
        Also compute out-of-fold probabilities at the best round.

    Returns
    -------
    EvaluationResult

    Raises
    ------
    ConfigurationInvalid
        If `params` is not a valid configuration of `search_space`.
    TrainingDivergence
        If LightGBM fails or reports a non-finite AUC.
    """
    params = search_space.normalize(params)

    dtrain = lgb.Dataset(train_x, label=np.asarray(train_y), free_raw_data=False)
    try:
        cv_results = lgb.cv(
            lgb_params(params, seed),
            dtrain,
            num_boost_round=max_boost_round,
            folds=cv_split,
            callbacks=[lgb.early_stopping(early_stopping_rounds, verbose=False)],
            return_cvbooster=return_predictions,
        )
    except LightGBMError as e:
        raise TrainingDivergence(
            f"LightGBM failed for configuration {params}: {e}",
            details={"params": dict(params)},
        ) from e

    # "valid auc-mean" on LightGBM 4.x, "auc-mean" before
    curve_key = next(k for k in cv_results if k.endswith("auc-mean"))
    curve = [float(v) for v in cv_results[curve_key]]
    if not curve or not all(math.isfinite(v) for v in curve):
        raise TrainingDivergence(
            f"Non-finite validation AUC for configuration {params}",
            details={"params": dict(params)},
        )

    best_round = int(np.argmax(curve)) + 1
    score = curve[best_round - 1]

    predictions = None
    if return_predictions:
        predictions = np.zeros(len(train_x), dtype=float)
        boosters = cv_results["cvbooster"].boosters
        for booster, (_, val_index) in zip(boosters, cv_split):
            predictions[val_index] = booster.predict(
                train_x.iloc[val_index], num_iteration=best_round
            )

    logging.debug(f"> CV AUC {round(score, 4)} at round {best_round} for {params}")
    return EvaluationResult(
        score=score,
        best_round=best_round,
        metric_curve=tuple(curve),
        predictions=None if predictions is None else tuple(predictions),
    )


# -----------------------------------------------------------------------------
# Function: make_cv_lgm
# -----------------------------------------------------------------------------
def make_cv_lgm(
    train_x,
    train_y,
    cv_split,
    search_space,
    max_boost_round,
    early_stopping_rounds,
    seed=132,
):
    """
    Bind the training data, folds and boosting budget into an evaluator.

    Returns
    -------
    callable
        `cv_lgm(params) -> EvaluationResult`, scoring without out-of-fold
        predictions; this is the callback driven by the optimizer.
    """

    def cv_lgm(params):
        return evaluate_configuration(
            params,
            train_x,
            train_y,
            cv_split,
            search_space,
            max_boost_round,
            early_stopping_rounds,
            seed=seed,
        )

    return cv_lgm


# -----------------------------------------------------------------------------
# Function: lgb_LGBMClassifier
# -----------------------------------------------------------------------------
def lgb_LGBMClassifier(params, n_estimators, seed=132):
    """
    Initialize a LightGBM LGBMClassifier for a tuned configuration.

    Parameters
    ----------
    params : dict
        Tuned hyperparameters.
    n_estimators : int
        Number of trees, usually the best round found by cross-validation.
    seed : int, optional
        Random seed (default: 132).

    Returns
    -------
    model : lgb.LGBMClassifier
        Configured, unfitted classifier.
    """
    full = lgb_params(params, seed)
    full.pop("seed")
    return lgb.LGBMClassifier(n_estimators=int(n_estimators), random_state=seed, **full)
