"""
Pytest Configuration and Shared Fixtures for the credit_tuner Test Suite.

Provides:
- a small synthetic binary-classification frame with stratified folds
- a reduced search space that keeps LightGBM fits fast
- a fake German credit file written in the raw space-delimited layout
"""

# Standard Imports
from pathlib import Path

# Third-Party Imports
import numpy as np
import pandas as pd
import pytest

# Internal Imports
from credit_tuner.config import COLUMNS
from credit_tuner.data_utils.dataset import FACTOR_LEVELS
from credit_tuner.data_utils.split import cv_split_func
from credit_tuner.model.results import EvaluationResult
from credit_tuner.model.search_space import SearchSpace


# SYNTHETIC TRAINING DATA
@pytest.fixture
def classification_data():
    """200 rows, two informative numeric features and one categorical feature."""
    rng = np.random.default_rng(7)
    n = 200
    x = pd.DataFrame(
        {
            "x1": rng.normal(size=n),
            "x2": rng.normal(size=n),
            "x3": pd.Categorical(rng.choice(["a", "b", "c"], size=n)),
        }
    )
    y = pd.Series(
        (x["x1"] + 0.5 * x["x2"] + rng.normal(scale=0.5, size=n) > 0).astype(int),
        name="credit_risk",
    )
    return x, y


@pytest.fixture
def folds(classification_data):
    x, y = classification_data
    return cv_split_func(x, y, fold=3, random_state=0)


# SEARCH SPACE
@pytest.fixture
def small_space():
    return SearchSpace.from_bounds(
        {
            "learning_rate": (0.05, 0.3, False),
            "max_depth": (1, 15, True),
            "num_leaves": (4, 16, True),
        }
    )


@pytest.fixture
def quadratic_evaluator():
    """Cheap deterministic evaluator peaking at learning_rate=0.1, max_depth=5."""

    def evaluator(params):
        score = 1.0 - (params["learning_rate"] - 0.1) ** 2 - ((params["max_depth"] - 5) / 15.0) ** 2
        return EvaluationResult(score=score, best_round=10, metric_curve=(score,))

    return evaluator


# RAW DATASET FILE
def _fake_german_rows(n, seed):
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        bad = i % 3 == 0
        row = []
        for col in COLUMNS:
            if col in FACTOR_LEVELS:
                codes = list(FACTOR_LEVELS[col])
                if col == "status":
                    # informative: bad credits mostly overdrawn
                    row.append(codes[0] if bad and rng.random() < 0.7 else rng.choice(codes))
                else:
                    row.append(str(rng.choice(codes)))
            elif col == "credit_risk":
                row.append("2" if bad else "1")
            else:
                row.append(str(int(rng.integers(1, 60))))
        rows.append(" ".join(str(v) for v in row))
    return rows


@pytest.fixture
def german_file(tmp_path) -> Path:
    """120 records in the Statlog layout; every third record is a bad credit."""
    path = tmp_path / "german.data"
    path.write_text("\n".join(_fake_german_rows(120, seed=3)) + "\n")
    return path
