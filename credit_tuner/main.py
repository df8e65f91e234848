# =============================================================================
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: GPL-3.0-or-later
# =============================================================================
# SCRIPT  : main.py
# PROJECT : credit_tuner - German Credit Risk Classifier
# PURPOSE : Tune, train and evaluate a LightGBM credit-risk classifier with
#           Bayesian hyperparameter optimization.
#
# OVERVIEW:
#   Fetches (once) and recodes the German credit dataset, splits it into
#   stratified training and holdout sets, assigns stratified CV folds, runs a
#   Bayesian search over the LightGBM hyperparameters, re-runs CV at the best
#   configuration to collect out-of-fold predictions, fits the final model,
#   then selects a decision threshold on the holdout predictions and reports
#   the confusion matrix.
#
# INPUTS  :
#   - german.data : Space-delimited Statlog German credit file; downloaded
#                   to --data_path when absent.
#
# OUTPUTS :
#   - <output_dir>/cache/   : Cached search result and final CV result.
#   - <output_dir>/model/   : Trained LightGBM model and best parameters.
#   - <output_dir>/results/ : Trials, predictions and threshold curve.
#
# USAGE   :
#   python -m credit_tuner.main -o <output_dir> [options]
#
# CREATED : 2025-10-10
# UPDATED : 2025-10-18
#
# NOTE    :
#   - Requires Python >= 3.8, pandas, numpy, scikit-learn, lightgbm,
#     bayesian-optimization, joblib, requests.
#   - Cached artifacts are reused without any staleness check.
# =============================================================================

import argparse
import logging
import sys
import warnings
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.metrics import roc_auc_score

from credit_tuner import config
from credit_tuner.data_utils.dataset import load_dataset
from credit_tuner.data_utils.split import cv_split_func, train_test_split_func
from credit_tuner.model.evaluate import (
    confusion_report,
    format_confusion_matrix,
    get_metrices,
    select_threshold,
)
from credit_tuner.model.optimize import optimize
from credit_tuner.model.results import EvaluationResult, SearchResult
from credit_tuner.model.search_space import SearchSpace
from credit_tuner.model.train import (
    evaluate_configuration,
    lgb_LGBMClassifier,
    make_cv_lgm,
)
from credit_tuner.utils.io import cached, save_data, save_json, save_model
from credit_tuner.utils.logger import init_logger


# =============================================================================
# Function: parse_args
# =============================================================================
def parse_args(argv=None):
    """
    Parse command line arguments for data, splitting and tuning options.

    Returns
    -------
    argparse.Namespace : Parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(
        prog=f"{config.NAME}",
        formatter_class=argparse.RawTextHelpFormatter,
        description=f"{config.MODEL_DESCRIPTION}",
    )

    # Input and output parameters
    parser.add_argument(
        "-o",
        "--output_dir",
        type=str,
        metavar="PATH",
        help="Output directory to save results and model",
        required=True,
    )
    parser.add_argument(
        "--data_url",
        type=str,
        default=config.DATA_URL,
        help="Network location of the raw dataset",
    )
    parser.add_argument(
        "--data_path",
        type=str,
        metavar="PATH",
        default=config.DATA_PATH,
        help=f"Local copy of the dataset, fetched if absent (default: {config.DATA_PATH})",
    )
    parser.add_argument(
        "--cache_dir",
        type=str,
        metavar="PATH",
        help="Directory of cached artifacts (default: <output_dir>/cache)",
    )

    # Splitting options
    parser.add_argument(
        "--test_frac",
        type=float,
        default=config.test_frac,
        help=f"Fraction of data for the holdout set (default: {config.test_frac})",
    )
    parser.add_argument(
        "--cv_folds",
        type=int,
        default=config.cv_folds,
        help=f"Number of stratified CV folds (default: {config.cv_folds})",
    )

    # Boosting options
    parser.add_argument(
        "--max_boost_round",
        type=int,
        default=config.max_boost_round,
        help=f"Maximum number of boosting rounds (default: {config.max_boost_round})",
    )
    parser.add_argument(
        "--early_stopping_rounds",
        type=int,
        default=config.early_stopping_rounds,
        help=f"Early-stopping patience in rounds (default: {config.early_stopping_rounds})",
    )

    # Bayesian optimization options
    parser.add_argument(
        "--init_points",
        type=int,
        default=config.init_points,
        help=f"Random configurations before GP guidance (default: {config.init_points})",
    )
    parser.add_argument(
        "--n_iter",
        type=int,
        default=config.n_iter,
        help=f"GP-guided iterations (default: {config.n_iter})",
    )
    parser.add_argument(
        "--kappa",
        type=float,
        default=config.kappa,
        help=f"UCB exploration parameter (default: {config.kappa})",
    )

    # Seed for reproducibility
    parser.add_argument(
        "--seed",
        type=int,
        default=config.random_seed,
        help=f"Random seed for splits, folds, LightGBM and the optimizer (default: {config.random_seed})",
    )

    return parser.parse_args(argv)


# =============================================================================
# Function: run_search
# =============================================================================
def run_search(cache_path, evaluator, search_space, init_points, n_iter, kappa, random_state):
    """
    Return the cached search result, running the Bayesian search if absent.
    """
    return cached(
        cache_path,
        lambda: optimize(
            evaluator,
            search_space,
            init_points=init_points,
            n_iter=n_iter,
            kappa=kappa,
            random_state=random_state,
        ),
        expected_type=SearchResult,
    )


# =============================================================================
# Function: run_final_cv
# =============================================================================
def run_final_cv(
    cache_path,
    params,
    train_x,
    train_y,
    cv_split,
    search_space,
    max_boost_round,
    early_stopping_rounds,
    seed,
):
    """
    Return the cached final CV result, cross-validating `params` if absent.

    The result carries out-of-fold predictions for every training record.
    """
    return cached(
        cache_path,
        lambda: evaluate_configuration(
            params,
            train_x,
            train_y,
            cv_split,
            search_space,
            max_boost_round,
            early_stopping_rounds,
            seed=seed,
            return_predictions=True,
        ),
        expected_type=EvaluationResult,
    )


# =============================================================================
# Function: main
# =============================================================================
def main(argv=None):
    """
    Main workflow:
    1. Parse command-line arguments
    2. Prepare output directories and logging
    3. Load and recode data
    4. Split data into train/holdout and assign CV folds
    5. Optimize hyperparameters using Bayesian optimization (cached)
    6. Cross-validate the best configuration (cached)
    7. Train final model and predict the holdout set
    8. Select the decision threshold and report the confusion matrix
    """
    args = parse_args(argv)

    # LightGBM and bayes_opt emit noisy warnings during the search
    warnings.filterwarnings("ignore")

    output_dir = Path(args.output_dir)
    cache_dir = Path(args.cache_dir) if args.cache_dir else output_dir / "cache"
    seed = args.seed

    # Create required output directories
    output_dir.mkdir(parents=True, exist_ok=True)
    cache_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "model").mkdir(exist_ok=True)
    (output_dir / "results").mkdir(exist_ok=True)

    # Initialize logging
    init_logger(output_dir)
    logging.info("-" * 60)
    logging.info(f"> Data path                   : {args.data_path}")
    logging.info(f"> Output directory            : {output_dir}")
    logging.info(f"> Cache directory             : {cache_dir}")
    logging.info(f"> Seed                        : {seed}")
    logging.info(f"> Holdout fraction            : {args.test_frac}")
    logging.info(f"> CV folds                    : {args.cv_folds}")
    logging.info(f"> Max boosting rounds         : {args.max_boost_round}")
    logging.info(f"> Early stopping rounds       : {args.early_stopping_rounds}")
    logging.info(f"> Initial points / iterations : {args.init_points} / {args.n_iter}")
    logging.info(f"> UCB kappa                   : {args.kappa}")
    logging.info("-" * 60)

    try:
        # ------------------------------
        # Load and recode data
        # ------------------------------
        logging.info("##### Data Processing #####")
        all_data = load_dataset(args.data_url, args.data_path)

        # ------------------------------
        # Train/Test split and CV folds
        # ------------------------------
        logging.info("##### Train/Test Split #####")
        train_x, train_y, test_x, test_y = train_test_split_func(
            all_data, config.LABEL, test_size=args.test_frac, random_state=seed
        )
        logging.info(f"> Training records: {len(train_x)}, holdout records: {len(test_x)}")
        cv_split = cv_split_func(train_x, train_y, fold=args.cv_folds, random_state=seed)

        # ------------------------------
        # Bayesian Optimization
        # ------------------------------
        logging.info("##### Bayesian Optimization #####")
        search_space = SearchSpace.from_bounds(config.PARAM_BOUNDS)
        cv_lgm = make_cv_lgm(
            train_x,
            train_y,
            cv_split,
            search_space,
            args.max_boost_round,
            args.early_stopping_rounds,
            seed=seed,
        )
        search_result = run_search(
            cache_dir / config.SEARCH_RESULT_FILE,
            cv_lgm,
            search_space,
            args.init_points,
            args.n_iter,
            args.kappa,
            seed,
        )
        best_params = search_result.best_params
        save_data(search_result.to_frame(), output_dir / "results" / "trials.csv")
        save_json(best_params, output_dir / "model" / "best_params.json")
        logging.info(f"> Best hyperparameters: {best_params}")
        logging.info(f"> Best CV AUC: {round(search_result.best.score, 4)}")

        # ------------------------------
        # Evaluate on CV
        # ------------------------------
        logging.info("##### Train & Evaluate CV #####")
        final_cv = run_final_cv(
            cache_dir / config.FINAL_CV_FILE,
            best_params,
            train_x,
            train_y,
            cv_split,
            search_space,
            args.max_boost_round,
            args.early_stopping_rounds,
            seed,
        )
        logging.info(f"> CV AUC: {round(final_cv.score, 4)} at round {final_cv.best_round}")
        train_pred = pd.DataFrame({config.LABEL: train_y, "pred_prob": final_cv.prediction_array()})
        save_data(train_pred, output_dir / "results" / "train_set_pred.csv")

        # ------------------------------
        # Train final model on full training set
        # ------------------------------
        logging.info("##### Train Final Model #####")
        final_model = lgb_LGBMClassifier(best_params, final_cv.best_round, seed=seed)
        final_model.fit(train_x, train_y)
        save_model(final_model, output_dir / "model" / "model.dat")

        # ------------------------------
        # Predict, select threshold and evaluate on the holdout set
        # ------------------------------
        logging.info("##### Test Set Prediction #####")
        pred_prob = final_model.predict_proba(test_x)[:, 1]
        auc_test = roc_auc_score(test_y, pred_prob)
        logging.info(f"> Test set AUC        : {round(auc_test, 4)}")

        threshold, metric_curve = select_threshold(pred_prob, test_y, config.THRESHOLDS)
        save_data(
            pd.DataFrame(metric_curve, columns=["threshold", "auc"]),
            output_dir / "results" / "threshold_curve.csv",
        )
        logging.info(f"> Selected threshold: {threshold}")

        y_pred = np.where(pred_prob >= threshold, 1, 0)
        report = confusion_report(test_y, y_pred)
        logging.info(f"> Confusion matrix (threshold {threshold}):\n{format_confusion_matrix(report)}")

        sns_test = get_metrices(test_y, y_pred, metric="sns")
        spe_test = get_metrices(test_y, y_pred, metric="spe")
        bacc_test = get_metrices(test_y, y_pred, metric="balanced_accuracy")
        logging.info(f"> Test set Sensitivity       : {round(sns_test, 4)}")
        logging.info(f"> Test set Specificity       : {round(spe_test, 4)}")
        logging.info(f"> Test set Balanced Accuracy : {round(bacc_test, 4)}")

        test_pred = test_x.copy()
        test_pred[config.LABEL] = test_y
        test_pred["pred_prob"] = pred_prob
        test_pred["pred_label"] = y_pred
        test_pred["cutoff"] = threshold
        save_data(test_pred, output_dir / "results" / "test_set_pred.csv")
    except Exception:
        logging.exception("##### Workflow aborted #####")
        raise

    logging.info(f"##### Workflow completed! Results saved to: {output_dir} #####")


# Entry point
if __name__ == "__main__":
    main(sys.argv[1:])
