# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# SCRIPT  : logger.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Initialize and configure logging for a tuning run
#
# OVERVIEW:
#   Routes timestamped, leveled messages to the console and to a run.log file
#   inside the run's output directory, so that every trial of a long Bayesian
#   search can be inspected after the fact.
#
# INPUTS  :
#   - output_dir : Directory path where the log file will be saved
#
# OUTPUTS :
#   - run.log file in the specified output directory
#   - Console output of INFO-level messages
#
# USAGE   :
#   init_logger("runs/german")
#   logging.info("Tuning started")
#
# CREATED : 2025-10-10
# UPDATED : 2025-10-18
#
# NOTE    :
#   - Calling init_logger again replaces the handlers of the previous run.
# =============================================================================


import logging
from pathlib import Path


def init_logger(output_dir, level=logging.INFO, filename="run.log"):
    """
    Initialize and configure the root logger for a credit_tuner run.

    Parameters
    ----------
    output_dir : str or Path
        Directory where the log file will be created; created if missing.
    level : int, optional
        Minimum level of messages that are emitted (default: logging.INFO).
    filename : str, optional
        Name of the log file inside `output_dir` (default: 'run.log').

    Returns
    -------
    Path
        Path of the log file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    log_file = output_dir / filename

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
        force=True,
    )

    logging.info(f"Logger initialized. Log file: {log_file}")
    return log_file
