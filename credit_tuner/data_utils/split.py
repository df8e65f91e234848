# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : split.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Provide the stratified train/test split and the stratified
#           cross-validation fold assignment.
#
# CREATED : 2025-07-10
# UPDATED : 2025-10-18
# =============================================================================

"""
Data splitting utilities for the credit_tuner classifier.

This module includes:
1. `train_test_split_func` - split the dataset into training and holdout
   sets, stratified on the outcome label.
2. `cv_split_func` - assign training rows to stratified K folds.

Both take the random seed explicitly; neither touches global random state.
"""

from sklearn.model_selection import StratifiedKFold, train_test_split


# -----------------------------------------------------------------------------
# Function: train_test_split_func
# -----------------------------------------------------------------------------
def train_test_split_func(data, label, test_size, random_state=132):
    """
    Split dataset into training and holdout sets with stratified sampling.

    Parameters
    ----------
    data : pd.DataFrame
        The full dataset, features plus outcome column.
    label : str
        Name of the binary outcome column.
    test_size : float
        Fraction of records placed in the holdout set (e.g. 0.3).
    random_state : int, optional
        Random seed for reproducibility (default: 132).

    Returns
    -------
    train_x, train_y, test_x, test_y : tuple
        Feature frames and outcome series with reset indices. The two
        partitions are disjoint and together cover every record.
    """
    assert label in data.columns, f"Outcome column '{label}' not found!"

    train_data, test_data = train_test_split(
        data,
        test_size=test_size,
        stratify=data[label],
        shuffle=True,
        random_state=random_state,
    )

    train_data = train_data.reset_index(drop=True)
    test_data = test_data.reset_index(drop=True)

    train_x = train_data.drop(columns=[label])
    train_y = train_data[label]
    test_x = test_data.drop(columns=[label])
    test_y = test_data[label]

    return train_x, train_y, test_x, test_y


# -----------------------------------------------------------------------------
# Function: cv_split_func
# -----------------------------------------------------------------------------
def cv_split_func(data, labels, fold, random_state=132):
    """
    Generate stratified cross-validation folds.

    Parameters
    ----------
    data : pd.DataFrame
        Training features.
    labels : array-like
        Outcome labels used for stratification.
    fold : int
        Number of folds.
    random_state : int, optional
        Random seed for reproducibility (default: 132).

    Returns
    -------
    cv_split : list of (np.ndarray, np.ndarray)
        (train_index, val_index) per fold. The list can be iterated many
        times, once per evaluated configuration.
    """
    assert fold >= 2, "Cross-validation needs at least 2 folds!"

    splitter = StratifiedKFold(n_splits=fold, shuffle=True, random_state=random_state)
    return list(splitter.split(data, labels))
