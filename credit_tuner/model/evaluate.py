# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : evaluate.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Decision-threshold selection and confusion-matrix reporting.
#
# CREATED : 2025-07-10
# UPDATED : 2025-10-18
# =============================================================================


"""
Evaluation utilities for the credit_tuner classifier.

Includes:
1. `get_metrices` - Compute sensitivity, specificity, accuracy or balanced accuracy.
2. `select_threshold` - Sweep a probability cutoff and keep the one whose
   binarized predictions reach the highest AUC.
3. `confusion_report` - Confusion matrix and derived statistics at a cutoff.
4. `format_confusion_matrix` - Plain-text rendering of a `ConfusionReport`.
"""

from dataclasses import dataclass

import numpy as np
from sklearn.metrics import confusion_matrix, roc_auc_score

from credit_tuner.config import THRESHOLDS


# -----------------------------------------------------------------------------
# Class: ConfusionReport
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ConfusionReport:
    tn: int
    fp: int
    fn: int
    tp: int

    @property
    def sensitivity(self):
        return _ratio(self.tp, self.tp + self.fn)

    @property
    def specificity(self):
        return _ratio(self.tn, self.tn + self.fp)

    @property
    def balanced_accuracy(self):
        return (self.sensitivity + self.specificity) / 2

    @property
    def accuracy(self):
        return _ratio(self.tp + self.tn, self.tp + self.tn + self.fp + self.fn)

    def as_dict(self):
        return {
            "TN": self.tn,
            "FP": self.fp,
            "FN": self.fn,
            "TP": self.tp,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "balanced_accuracy": self.balanced_accuracy,
            "accuracy": self.accuracy,
        }


def _ratio(num, den):
    return num / float(den) if den else float("nan")


# -----------------------------------------------------------------------------
# Function: confusion_report
# -----------------------------------------------------------------------------
def confusion_report(y_true, y_pred):
    """
    Compute the confusion matrix of binary labels and predictions.

    Parameters
    ----------
    y_true : array-like
        True class labels (0 or 1).
    y_pred : array-like
        Predicted class labels (0 or 1).

    Returns
    -------
    ConfusionReport
        Counts plus sensitivity, specificity, balanced accuracy and accuracy.
        Ratios with a zero denominator are NaN.
    """
    # [[TN, FP],
    #  [FN, TP]]
    tn, fp, fn, tp = confusion_matrix(
        np.asarray(y_true), np.asarray(y_pred), labels=[0, 1]
    ).ravel()
    return ConfusionReport(tn=int(tn), fp=int(fp), fn=int(fn), tp=int(tp))


# -----------------------------------------------------------------------------
# Function: get_metrices
# -----------------------------------------------------------------------------
def get_metrices(y_true, y_pred, metric):
    """
    Compute one classification metric from binary labels and predictions.

    Parameters
    ----------
    y_true : array-like
        True class labels (0 or 1).
    y_pred : array-like
        Predicted class labels (0 or 1).
    metric : str
        'sns' (sensitivity), 'spe' (specificity), 'accuracy' or
        'balanced_accuracy'.

    Returns
    -------
    score : float
    """
    assert metric in [
        "sns",
        "spe",
        "accuracy",
        "balanced_accuracy",
    ], "Metric must be 'sns', 'spe', 'accuracy' or 'balanced_accuracy'."

    report = confusion_report(y_true, y_pred)
    if metric == "sns":
        return report.sensitivity
    elif metric == "spe":
        return report.specificity
    elif metric == "accuracy":
        return report.accuracy
    return report.balanced_accuracy


# -----------------------------------------------------------------------------
# Function: select_threshold
# -----------------------------------------------------------------------------
def select_threshold(pred_prob, y_true, thresholds=THRESHOLDS):
    """
    Pick the probability cutoff whose binarized predictions score best.

    For every candidate cutoff, predictions at or above the cutoff become 1
    and the rest 0; the AUC of those binary predictions against the true
    labels is recorded. The first cutoff, in ascending order, reaching the
    highest AUC is returned.

    Parameters
    ----------
    pred_prob : array-like
        Predicted probabilities for the positive class.
    y_true : array-like
        True labels (0 or 1); both classes must be present.
    thresholds : sequence of float, optional
        Candidate cutoffs (default: 0.01, 0.02, ..., 0.99).

    Returns
    -------
    threshold : float
        Selected cutoff.
    metric_curve : list of (float, float)
        (cutoff, AUC) for every candidate, in ascending cutoff order.
    """
    pred_prob = np.asarray(pred_prob, dtype=float)
    y_true = np.asarray(y_true)
    thresholds = sorted(float(t) for t in thresholds)

    if not thresholds:
        raise ValueError("At least one candidate threshold is required")
    if pred_prob.shape[0] != y_true.shape[0]:
        raise ValueError(
            f"Got {pred_prob.shape[0]} predictions for {y_true.shape[0]} labels"
        )
    if np.unique(y_true).size != 2:
        raise ValueError("Threshold selection needs both classes in y_true")

    metric_curve = []
    for k in thresholds:
        y_pred = (pred_prob >= k).astype(int)
        metric_curve.append((k, float(roc_auc_score(y_true, y_pred))))

    best = int(np.argmax([auc for _, auc in metric_curve]))
    return metric_curve[best][0], metric_curve


# -----------------------------------------------------------------------------
# Function: format_confusion_matrix
# -----------------------------------------------------------------------------
def format_confusion_matrix(report, positive="bad", negative="good"):
    """
    Render a confusion matrix with its summary statistics as plain text.

    Rows are predictions and columns reference labels.
    """
    width = max(len(positive), len(negative), len(str(report.tn + report.fp + report.fn + report.tp)))
    lines = [
        f"{'Prediction':<12}{'Reference':^{2 * (width + 2)}}",
        f"{'':<12}{negative:>{width + 2}}{positive:>{width + 2}}",
        f"{negative:<12}{report.tn:>{width + 2}}{report.fn:>{width + 2}}",
        f"{positive:<12}{report.fp:>{width + 2}}{report.tp:>{width + 2}}",
        "",
        f"{'Sensitivity':<20}: {report.sensitivity:.4f}",
        f"{'Specificity':<20}: {report.specificity:.4f}",
        f"{'Balanced Accuracy':<20}: {report.balanced_accuracy:.4f}",
        f"{'Accuracy':<20}: {report.accuracy:.4f}",
    ]
    return "\n".join(lines)
