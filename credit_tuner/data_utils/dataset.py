# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# -*- coding: utf-8 -*-
# =============================================================================
# SCRIPT  : dataset.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Fetch, read and recode the Statlog German credit dataset.
#
# CREATED : 2025-10-18
# UPDATED : 2025-10-18
# =============================================================================

"""
Dataset utilities for the credit_tuner classifier.

This module includes:
1. `fetch_dataset` - download the raw file once and keep a local copy.
2. `read_dataset` - apply the documented column ordering and coerce the
   numeric columns to integers.
3. `recode_factors` - replace the `Axx` codes with readable factor levels and
   recode the outcome so that 1 marks a bad credit.
4. `load_dataset` - all of the above.
"""

import logging
import time
from pathlib import Path

import pandas as pd
import requests

from credit_tuner.config import COLUMNS, LABEL
from credit_tuner.utils.errors import DatasetInvalid, DatasetUnavailable

# code -> label, per categorical column, in the order documented in german.doc
FACTOR_LEVELS = {
    "status": {
        "A11": "... < 0 DM",
        "A12": "0 <= ... < 200 DM",
        "A13": "... >= 200 DM / salary for at least 1 year",
        "A14": "no checking account",
    },
    "credit_history": {
        "A30": "no credits taken/all credits paid back duly",
        "A31": "all credits at this bank paid back duly",
        "A32": "existing credits paid back duly till now",
        "A33": "delay in paying off in the past",
        "A34": "critical account/other credits existing",
    },
    "purpose": {
        "A40": "car (new)",
        "A41": "car (used)",
        "A42": "furniture/equipment",
        "A43": "radio/television",
        "A44": "domestic appliances",
        "A45": "repairs",
        "A46": "education",
        "A47": "vacation",
        "A48": "retraining",
        "A49": "business",
        "A410": "others",
    },
    "savings": {
        "A61": "... < 100 DM",
        "A62": "100 <= ... < 500 DM",
        "A63": "500 <= ... < 1000 DM",
        "A64": "... >= 1000 DM",
        "A65": "unknown/no savings account",
    },
    "employment_duration": {
        "A71": "unemployed",
        "A72": "< 1 yr",
        "A73": "1 <= ... < 4 yrs",
        "A74": "4 <= ... < 7 yrs",
        "A75": ">= 7 yrs",
    },
    "personal_status_sex": {
        "A91": "male : divorced/separated",
        "A92": "female : divorced/separated/married",
        "A93": "male : single",
        "A94": "male : married/widowed",
        "A95": "female : single",
    },
    "other_debtors": {
        "A101": "none",
        "A102": "co-applicant",
        "A103": "guarantor",
    },
    "property": {
        "A121": "real estate",
        "A122": "building society savings agreement/life insurance",
        "A123": "car or other",
        "A124": "unknown/no property",
    },
    "other_installment_plans": {
        "A141": "bank",
        "A142": "stores",
        "A143": "none",
    },
    "housing": {
        "A151": "rent",
        "A152": "own",
        "A153": "for free",
    },
    "job": {
        "A171": "unemployed/unskilled - non-resident",
        "A172": "unskilled - resident",
        "A173": "skilled employee/official",
        "A174": "manager/self-empl./highly qualif. employee",
    },
    "telephone": {
        "A191": "no",
        "A192": "yes (under customer name)",
    },
    "foreign_worker": {
        "A201": "yes",
        "A202": "no",
    },
}

NUMERIC_COLUMNS = [c for c in COLUMNS if c not in FACTOR_LEVELS]

# raw outcome code -> recoded label (1 = good, 2 = bad)
OUTCOME_CODES = {1: 0, 2: 1}


# -----------------------------------------------------------------------------
# Function: fetch_dataset
# -----------------------------------------------------------------------------
def fetch_dataset(url, path, retries=3, delay=5.0):
    """
    Make sure a local copy of the dataset exists, downloading it if absent.

    Parameters
    ----------
    url : str
        Network location of the raw file.
    path : str or Path
        Deterministic local path of the cached copy.
    retries : int, optional
        Maximum number of download attempts (default: 3).
    delay : float, optional
        Seconds to wait between attempts (default: 5.0).

    Returns
    -------
    Path
        Path of the local copy.

    Raises
    ------
    DatasetUnavailable
        If every download attempt failed.
    """
    path = Path(path)
    if path.exists():
        logging.info(f"> Using cached dataset: {path}")
        return path

    logging.info(f"> Downloading dataset from {url}")
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    for attempt in range(1, retries + 1):
        try:
            _stream_download(url, tmp_path)
            tmp_path.replace(path)
            logging.info(f"> Dataset saved to: {path}")
            return path
        except (requests.RequestException, OSError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            if attempt == retries:
                logging.error(f"Download failed after {retries} attempts")
                raise DatasetUnavailable(
                    f"Could not download dataset from {url}",
                    details={"url": url, "attempts": retries},
                ) from e
            logging.warning(
                f"Attempt {attempt}/{retries} failed: {e}. Retrying in {delay}s..."
            )
            time.sleep(delay)


def _stream_download(url, tmp_path):
    with requests.get(url, timeout=60, stream=True, allow_redirects=True) as r:
        r.raise_for_status()
        with open(tmp_path, "wb") as f:
            for chunk in r.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)


# -----------------------------------------------------------------------------
# Function: read_dataset
# -----------------------------------------------------------------------------
def read_dataset(path):
    """
    Read the whitespace-delimited raw file into a DataFrame.

    Columns are named after `config.COLUMNS`; numeric columns are coerced to
    int64 and categorical columns are kept as their raw `Axx` codes.

    Raises
    ------
    DatasetInvalid
        If the column count is wrong or a numeric column holds non-integers.
    """
    data = pd.read_csv(path, sep=r"\s+", header=None, dtype=str)

    if data.shape[1] != len(COLUMNS):
        raise DatasetInvalid(
            f"Expected {len(COLUMNS)} columns in {path}, found {data.shape[1]}"
        )
    data.columns = COLUMNS

    for col in NUMERIC_COLUMNS:
        try:
            data[col] = pd.to_numeric(data[col], errors="raise").astype("int64")
        except (ValueError, TypeError) as e:
            raise DatasetInvalid(
                f"Column '{col}' must hold integers", details={"column": col}
            ) from e

    return data


# -----------------------------------------------------------------------------
# Function: recode_factors
# -----------------------------------------------------------------------------
def recode_factors(data):
    """
    Replace categorical codes with factor labels and recode the outcome.

    Every categorical column becomes a pandas Categorical whose categories are
    exactly the declared levels, so unseen levels still appear in the
    category list. The outcome column becomes 0 (good) / 1 (bad).

    Raises
    ------
    DatasetInvalid
        If a column holds a code, or the outcome a value, that is not declared.
    """
    data = data.copy()

    for col, levels in FACTOR_LEVELS.items():
        unknown = sorted(set(data[col].unique()) - set(levels))
        if unknown:
            raise DatasetInvalid(
                f"Undeclared levels in column '{col}': {unknown}",
                details={"column": col, "levels": unknown},
            )
        data[col] = pd.Categorical(
            data[col].map(levels), categories=list(levels.values())
        )

    unknown = sorted(set(data[LABEL].unique()) - set(OUTCOME_CODES))
    if unknown:
        raise DatasetInvalid(
            f"Undeclared outcome values: {unknown}", details={"column": LABEL}
        )
    data[LABEL] = data[LABEL].map(OUTCOME_CODES).astype("int64")

    return data


# -----------------------------------------------------------------------------
# Function: load_dataset
# -----------------------------------------------------------------------------
def load_dataset(url, path):
    """
    Fetch (if needed), read and recode the dataset.

    Returns
    -------
    pd.DataFrame
        Cleaned dataset with the binary outcome in `config.LABEL`.
    """
    path = fetch_dataset(url, path)
    data = recode_factors(read_dataset(path))

    logging.info(f"> Number of records: {data.shape[0]}")
    logging.info(
        f"> Outcome distribution (1 = bad): {data[LABEL].value_counts().to_dict()}"
    )
    return data
