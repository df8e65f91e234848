# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# # -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : config.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Configuration settings for data retrieval, cross-validation and
#           Bayesian hyperparameter tuning of the LightGBM classifier.
#
# CREATED : 2025-10-10
# UPDATED : 2025-10-18
# =============================================================================

"""
Configuration module for the credit_tuner boost-tree classifier.

Contains dataset metadata, fixed and tunable LightGBM hyperparameters,
tuning defaults, and the names of cached artifacts.
Command-line flags in `main.py` override the run-time defaults below.
"""

from typing import Dict, List, Tuple

# -----------------------------
# Dataset
# -----------------------------
# Statlog (German Credit Data), space-delimited, no header
DATA_URL: str = (
    "https://archive.ics.uci.edu/ml/machine-learning-databases/"
    "statlog/german/german.data"
)

# Local copy; fetched when absent
DATA_PATH: str = "data/german.data"

# Column ordering as documented in german.doc
COLUMNS: List[str] = [
    "status",
    "duration",
    "credit_history",
    "purpose",
    "amount",
    "savings",
    "employment_duration",
    "installment_rate",
    "personal_status_sex",
    "other_debtors",
    "present_residence",
    "property",
    "age",
    "other_installment_plans",
    "housing",
    "number_credits",
    "job",
    "people_liable",
    "telephone",
    "foreign_worker",
    "credit_risk",
]

# Outcome column; recoded so that 1 = bad credit, 0 = good credit
LABEL: str = "credit_risk"

# -----------------------------
# Training configuration
# -----------------------------
# Fraction of records held out for the final test set
test_frac: float = 0.3

# Number of stratified folds for cross-validation
cv_folds: int = 5

# Maximum number of boosting iterations (trees)
max_boost_round: int = 1000

# Rounds without AUC improvement before a CV run stops
early_stopping_rounds: int = 50

# Random seed for splits, folds, LightGBM and the optimizer
random_seed: int = 132

# Parameters passed to LightGBM unchanged on every fit
FIXED_PARAMS: Dict[str, object] = {
    "boosting_type": "gbdt",
    "objective": "binary",
    "metric": "auc",
    "verbose": -1,
    "is_unbalance": True,
}

# -----------------------------
# Bayesian optimization
# -----------------------------
# name -> (lower, upper, is_integer); bounds are closed intervals
PARAM_BOUNDS: Dict[str, Tuple[float, float, bool]] = {
    "learning_rate": (0.01, 0.3, False),
    "num_leaves": (5, 50, True),
    "min_data_in_leaf": (5, 20, True),
    "max_depth": (1, 15, True),
    "lambda_l1": (0.1, 5.0, False),
    "lambda_l2": (0.1, 5.0, False),
    "bagging_fraction": (0.1, 1.0, False),
    "bagging_freq": (1, 10, True),
    "colsample_bytree": (0.3, 0.8, False),
}

# Random configurations evaluated before the surrogate takes over
init_points: int = 10

# GP-guided iterations after the initial sample
n_iter: int = 20

# Exploration parameter of the upper-confidence-bound acquisition
kappa: float = 2.576

# -----------------------------
# Threshold selection
# -----------------------------
# 0.01, 0.02, ..., 0.99
THRESHOLDS: Tuple[float, ...] = tuple(round(0.01 * i, 2) for i in range(1, 100))

# -----------------------------
# Cached artifacts
# -----------------------------
SEARCH_RESULT_FILE: str = "search_result.pkl"
FINAL_CV_FILE: str = "final_cv.pkl"

# -----------------------------
# Model metadata
# -----------------------------
# Model name identifier
NAME: str = "credit_tuner"

# Description
MODEL_DESCRIPTION: str = (
    "LightGBM gradient boosting model tuned with Bayesian search. "
    "Predicts bad/good credit risk from the German credit application records."
)

# -----------------------------
# Notes
# -----------------------------
# - Cached artifacts are reused as-is; delete the cache directory after
#   changing the data, the code or PARAM_BOUNDS.
# - All paths are relative; modify if needed.
# =============================================================================
