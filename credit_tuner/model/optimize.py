# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : optimize.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Bayesian hyperparameter search driven by bayes_opt.
#
# CREATED : 2025-07-10
# UPDATED : 2025-10-18
# =============================================================================

"""
Optimization driver for the credit_tuner classifier.

`optimize` evaluates `init_points` random configurations, then lets the
Gaussian-process surrogate of `bayes_opt` pick `n_iter` more by maximizing an
upper-confidence-bound acquisition. Every evaluation is appended to an
ordered trial log; the best configuration is derived from that log.

A failing evaluation aborts the whole search: evaluator errors propagate
unchanged, and any other exception is wrapped in `EvaluatorError`.
"""

import logging

from bayes_opt import BayesianOptimization, acquisition

from credit_tuner.model.results import SearchResult, SearchTrial
from credit_tuner.utils.errors import EvaluatorError


# -----------------------------------------------------------------------------
# Function: optimize
# -----------------------------------------------------------------------------
def optimize(evaluator, search_space, init_points, n_iter, kappa=2.576, random_state=None):
    """
    Maximize the evaluator's score over the search space.

    Parameters
    ----------
    evaluator : callable
        `evaluator(params) -> EvaluationResult`, e.g. from `make_cv_lgm`.
    search_space : SearchSpace
        Bounded parameters to search; validated before any evaluation.
    init_points : int
        Number of random configurations evaluated first (>= 1).
    n_iter : int
        Number of surrogate-guided configurations evaluated afterwards (>= 0).
    kappa : float, optional
        Exploration parameter of the UCB acquisition (default: 2.576).
    random_state : int, optional
        Seed for the random draws and the acquisition optimizer.

    Returns
    -------
    SearchResult
        `init_points + n_iter` trials in evaluation order.

    Raises
    ------
    EmptySearchSpace
        If the search space is malformed.
    EvaluatorError
        If any evaluation fails; remaining iterations are not run.
    """
    search_space.validate()
    if init_points < 1:
        raise ValueError(f"init_points must be at least 1, got {init_points}")
    if n_iter < 0:
        raise ValueError(f"n_iter must be non-negative, got {n_iter}")

    trials = []

    def target(**raw):
        index = len(trials)
        params = search_space.cast(raw)
        try:
            result = evaluator(params)
        except EvaluatorError:
            logging.error(f"Trial {index} failed for {params}")
            raise
        except Exception as e:
            logging.error(f"Trial {index} failed for {params}")
            raise EvaluatorError(
                f"Evaluation of trial {index} failed: {e}",
                details={"trial": index, "params": params},
            ) from e

        trials.append(SearchTrial(index=index, params=params, result=result))
        logging.info(
            f"> Trial {index:>3}: AUC {round(result.score, 4)} "
            f"(round {result.best_round}) {params}"
        )
        return result.score

    optimizer = BayesianOptimization(
        f=target,
        pbounds=search_space.pbounds(),
        acquisition_function=acquisition.UpperConfidenceBound(kappa=kappa),
        random_state=random_state,
        verbose=0,
        allow_duplicate_points=True,
    )

    logging.info(
        f"> Bayesian optimization: {init_points} initial points, "
        f"{n_iter} iterations, kappa={kappa}"
    )
    optimizer.maximize(init_points=init_points, n_iter=n_iter)

    search_result = SearchResult(tuple(trials))
    best = search_result.best
    logging.info(f"> Best trial {best.index}: AUC {round(best.score, 4)} {best.params}")
    return search_result
