# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# SCRIPT  : errors.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Exception types raised by the data, tuning and cache layers
#
# CREATED : 2025-10-18
# UPDATED : 2025-10-18
# =============================================================================

from typing import Any, Dict, Optional


class CreditTunerError(Exception):
    """Base exception for credit_tuner errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class EvaluatorError(CreditTunerError):
    """A model evaluation failed; aborts the running search."""


class ConfigurationInvalid(EvaluatorError):
    """Hyperparameter configuration is outside its bounds or has the wrong keys."""


class TrainingDivergence(EvaluatorError):
    """The boosting procedure reported a numerical failure."""


class EmptySearchSpace(CreditTunerError):
    """Search space has no parameters or a bound with lower > upper."""


class CacheCorrupt(CreditTunerError):
    """A persisted artifact could not be deserialized."""


class DatasetUnavailable(CreditTunerError):
    """The dataset could not be fetched."""


class DatasetInvalid(CreditTunerError):
    """The dataset does not match its documented layout."""
