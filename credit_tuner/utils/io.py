# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# SCRIPT  : io.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Result cache and output helpers for DataFrames, models and JSON
#
# OVERVIEW:
#   The result cache persists expensive artifacts (the full optimization
#   search, the final cross-validation run) as joblib blobs under fixed file
#   names. A present file is always trusted: there is no staleness check, so
#   the cache directory must be cleared by hand when data, code or search
#   bounds change. Unreadable blobs raise CacheCorrupt instead of being
#   recomputed.
#
# USAGE   :
#   result = cached(cache_dir / "search_result.pkl", lambda: optimize(...))
#   save_data(df, "output.csv")
#   save_model(model, "model.dat")
#   save_json(params, "best_params.json")
#
# CREATED : 2025-07-10
# UPDATED : 2025-10-18
# =============================================================================

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

import joblib
import pandas as pd

from credit_tuner.utils.errors import CacheCorrupt


# -----------------------------------------------------------------------------
# Function: load_if_present
# -----------------------------------------------------------------------------
def load_if_present(path: Union[str, Path], expected_type: Optional[type] = None) -> Optional[Any]:
    """
    Load a cached artifact if its file exists.

    Parameters
    ----------
    path : str or Path
        Fixed file path of the artifact.
    expected_type : type, optional
        If given, the loaded object must be an instance of this type.

    Returns
    -------
    Any or None
        The deserialized artifact, or None if no file exists at `path`.

    Raises
    ------
    CacheCorrupt
        If the file exists but cannot be deserialized, or holds an object of
        the wrong type.
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        artifact = joblib.load(path)
    except Exception as exc:
        # truncated pickles, bad compressed streams, removed classes, ...
        raise CacheCorrupt(
            f"Cached artifact {path} could not be loaded: {exc}",
            details={"path": str(path)},
        ) from exc

    if expected_type is not None and not isinstance(artifact, expected_type):
        raise CacheCorrupt(
            f"Cached artifact {path} holds {type(artifact).__name__}, "
            f"expected {expected_type.__name__}",
            details={"path": str(path)},
        )

    logging.info(f"> Loaded cached artifact: {path}")
    return artifact


# -----------------------------------------------------------------------------
# Function: store
# -----------------------------------------------------------------------------
def store(path: Union[str, Path], artifact: Any) -> None:
    """
    Persist an artifact with joblib, creating parent directories.

    Overwrites existing files at the same path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(artifact, path)
    logging.info(f"> Stored artifact: {path}")


# -----------------------------------------------------------------------------
# Function: cached
# -----------------------------------------------------------------------------
def cached(
    path: Union[str, Path],
    compute: Callable[[], Any],
    expected_type: Optional[type] = None,
) -> Any:
    """
    Return the artifact stored at `path`, computing and storing it if absent.

    `compute` is not called at all when the file exists.
    """
    artifact = load_if_present(path, expected_type=expected_type)
    if artifact is not None:
        return artifact

    artifact = compute()
    store(path, artifact)
    return artifact


# -----------------------------------------------------------------------------
# Function: save_data
# -----------------------------------------------------------------------------
def save_data(data: pd.DataFrame, path: Union[str, Path]) -> None:
    """
    Save a pandas DataFrame to a CSV file, with header and without row indices.
    """
    data.to_csv(path, index=False, header=True)


# -----------------------------------------------------------------------------
# Function: save_model
# -----------------------------------------------------------------------------
def save_model(model: Any, path: Union[str, Path]) -> None:
    """
    Serialize a trained model using joblib; load it back with joblib.load().
    """
    joblib.dump(model, path)


# -----------------------------------------------------------------------------
# Function: save_json
# -----------------------------------------------------------------------------
def save_json(data: Union[dict, list], path: Union[str, Path]) -> None:
    """
    Save a dictionary or list as a pretty-printed UTF-8 JSON file.
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=4)
