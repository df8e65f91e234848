"""
Tests for the Model Evaluator and the final classifier builder.

Integration tests fit small LightGBM models on synthetic data; unit tests
patch `lgb.cv` to pin down round selection and failure handling.
"""

# Standard Imports
from unittest.mock import patch

# Third-Party Imports
import lightgbm as lgb
import numpy as np
import pytest
from lightgbm.basic import LightGBMError

# Internal Imports
from credit_tuner.model.train import (
    evaluate_configuration,
    lgb_LGBMClassifier,
    lgb_params,
    make_cv_lgm,
)
from credit_tuner.utils.errors import ConfigurationInvalid, TrainingDivergence

PARAMS = {"learning_rate": 0.1, "max_depth": 3, "num_leaves": 8}


# CROSS-VALIDATED EVALUATION
@pytest.mark.integration
def test_evaluate_configuration_scores_synthetic_data(classification_data, folds, small_space):
    x, y = classification_data

    result = evaluate_configuration(
        PARAMS, x, y, folds, small_space, max_boost_round=50, early_stopping_rounds=10, seed=1
    )

    assert 0.5 < result.score <= 1.0
    assert 1 <= result.best_round <= 50
    assert result.score == max(result.metric_curve)
    assert result.predictions is None


@pytest.mark.integration
def test_evaluate_configuration_returns_out_of_fold_predictions(
    classification_data, folds, small_space
):
    x, y = classification_data

    result = evaluate_configuration(
        PARAMS,
        x,
        y,
        folds,
        small_space,
        max_boost_round=30,
        early_stopping_rounds=10,
        seed=1,
        return_predictions=True,
    )

    preds = result.prediction_array()
    assert preds.shape == (len(x),)
    assert np.all((preds > 0) & (preds < 1))


@pytest.mark.integration
def test_make_cv_lgm_binds_data(classification_data, folds, small_space):
    x, y = classification_data
    cv_lgm = make_cv_lgm(x, y, folds, small_space, max_boost_round=20, early_stopping_rounds=5)

    first = cv_lgm(PARAMS)
    second = cv_lgm(dict(PARAMS))

    assert first.score == pytest.approx(second.score)
    assert first.best_round == second.best_round


@pytest.mark.unit
def test_out_of_bounds_configuration_is_rejected_before_training(
    classification_data, folds, small_space
):
    x, y = classification_data

    with patch("credit_tuner.model.train.lgb.cv") as mock_cv:
        with pytest.raises(ConfigurationInvalid):
            evaluate_configuration(
                {"learning_rate": 0.1, "max_depth": 20, "num_leaves": 8},
                x,
                y,
                folds,
                small_space,
                max_boost_round=10,
                early_stopping_rounds=5,
            )

    mock_cv.assert_not_called()


@pytest.mark.unit
def test_whole_number_floats_reach_lightgbm_as_ints(classification_data, folds, small_space):
    x, y = classification_data
    curves = {"valid auc-mean": [0.6, 0.7]}

    with patch("credit_tuner.model.train.lgb.cv", return_value=curves) as mock_cv:
        evaluate_configuration(
            {"learning_rate": 0.1, "max_depth": 3.0, "num_leaves": 8.0},
            x,
            y,
            folds,
            small_space,
            max_boost_round=2,
            early_stopping_rounds=2,
        )

    passed = mock_cv.call_args[0][0]
    assert passed["max_depth"] == 3 and isinstance(passed["max_depth"], int)
    assert passed["num_leaves"] == 8 and isinstance(passed["num_leaves"], int)


@pytest.mark.integration
def test_whole_number_floats_evaluate_without_divergence(classification_data, folds, small_space):
    x, y = classification_data

    result = evaluate_configuration(
        {"learning_rate": 0.1, "max_depth": 3.0, "num_leaves": 8.0},
        x,
        y,
        folds,
        small_space,
        max_boost_round=20,
        early_stopping_rounds=5,
        seed=1,
    )

    assert 0.5 < result.score <= 1.0


# ROUND SELECTION AND FAILURES
@pytest.mark.unit
def test_best_round_is_first_maximum_of_mean_auc(classification_data, folds, small_space):
    x, y = classification_data
    curves = {"valid auc-mean": [0.6, 0.7, 0.7, 0.65], "valid auc-stdv": [0.0] * 4}

    with patch("credit_tuner.model.train.lgb.cv", return_value=curves):
        result = evaluate_configuration(
            PARAMS, x, y, folds, small_space, max_boost_round=4, early_stopping_rounds=2
        )

    assert result.best_round == 2
    assert result.score == 0.7
    assert result.metric_curve == (0.6, 0.7, 0.7, 0.65)


@pytest.mark.unit
def test_non_finite_auc_raises_training_divergence(classification_data, folds, small_space):
    x, y = classification_data
    curves = {"valid auc-mean": [0.6, float("nan")]}

    with patch("credit_tuner.model.train.lgb.cv", return_value=curves):
        with pytest.raises(TrainingDivergence, match="Non-finite"):
            evaluate_configuration(
                PARAMS, x, y, folds, small_space, max_boost_round=2, early_stopping_rounds=2
            )


@pytest.mark.unit
def test_lightgbm_error_raises_training_divergence(classification_data, folds, small_space):
    x, y = classification_data

    with patch("credit_tuner.model.train.lgb.cv", side_effect=LightGBMError("boom")):
        with pytest.raises(TrainingDivergence) as exc_info:
            evaluate_configuration(
                PARAMS, x, y, folds, small_space, max_boost_round=2, early_stopping_rounds=2
            )

    assert isinstance(exc_info.value.__cause__, LightGBMError)


# FINAL MODEL
@pytest.mark.unit
def test_lgb_params_merges_fixed_parameters():
    params = lgb_params(PARAMS, seed=5)

    assert params["objective"] == "binary"
    assert params["metric"] == "auc"
    assert params["seed"] == 5
    assert params["max_depth"] == 3


@pytest.mark.integration
def test_lgb_LGBMClassifier_fits_with_best_round(classification_data):
    x, y = classification_data

    model = lgb_LGBMClassifier(PARAMS, n_estimators=15, seed=3)
    model.fit(x, y)

    assert isinstance(model, lgb.LGBMClassifier)
    assert model.n_estimators == 15
    assert model.predict_proba(x).shape == (len(x), 2)
