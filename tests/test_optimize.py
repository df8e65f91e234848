"""
Tests for the Optimization Driver.

A cheap quadratic evaluator stands in for LightGBM so that the real
`bayes_opt` optimizer can run many iterations quickly.
"""

# Standard Imports
import logging
from unittest.mock import MagicMock

# Third-Party Imports
import pytest

# Internal Imports
from credit_tuner.model.optimize import optimize
from credit_tuner.model.results import EvaluationResult, SearchResult, SearchTrial
from credit_tuner.model.search_space import ParamBound, SearchSpace
from credit_tuner.utils.errors import (
    ConfigurationInvalid,
    EmptySearchSpace,
    EvaluatorError,
)


# TRIAL ACCOUNTING
@pytest.mark.unit
def test_zero_iterations_returns_only_initial_trials(small_space, quadratic_evaluator):
    result = optimize(quadratic_evaluator, small_space, init_points=4, n_iter=0, random_state=1)

    assert len(result.trials) == 4
    assert [t.index for t in result.trials] == [0, 1, 2, 3]
    assert result.best in result.trials


@pytest.mark.unit
def test_iterations_are_appended_after_initial_sample(small_space, quadratic_evaluator):
    result = optimize(quadratic_evaluator, small_space, init_points=3, n_iter=4, random_state=1)

    assert len(result.trials) == 7


@pytest.mark.unit
def test_best_trial_dominates_every_trial(small_space, quadratic_evaluator):
    result = optimize(quadratic_evaluator, small_space, init_points=3, n_iter=5, random_state=2)

    assert all(result.best.score >= t.score for t in result.trials)
    assert result.best_params == result.best.params


@pytest.mark.unit
def test_max_depth_stays_inside_bounds(small_space, quadratic_evaluator):
    result = optimize(quadratic_evaluator, small_space, init_points=5, n_iter=10, random_state=3)

    for trial in result.trials:
        assert 1 <= trial.params["max_depth"] <= 15
        assert isinstance(trial.params["max_depth"], int)


@pytest.mark.unit
def test_ties_resolve_to_first_trial(small_space):
    def constant(params):
        return EvaluationResult(score=0.75, best_round=1)

    result = optimize(constant, small_space, init_points=3, n_iter=2, random_state=0)

    assert result.best.index == 0


@pytest.mark.unit
def test_search_result_best_is_first_maximum():
    trials = tuple(
        SearchTrial(index=i, params={"max_depth": d}, result=EvaluationResult(score=s, best_round=1))
        for i, (d, s) in enumerate([(3, 0.7), (5, 0.8), (7, 0.8), (9, 0.6)])
    )

    assert SearchResult(trials).best.index == 1


@pytest.mark.unit
def test_trial_params_are_copied():
    params = {"max_depth": 3}
    trial = SearchTrial(index=0, params=params, result=EvaluationResult(score=0.5, best_round=1))

    params["max_depth"] = 9

    assert trial.params == {"max_depth": 3}


# FAILURES
@pytest.mark.unit
def test_malformed_space_fails_before_any_evaluation():
    evaluator = MagicMock()
    space = SearchSpace((ParamBound("max_depth", 15, 1, True),))

    with pytest.raises(EmptySearchSpace):
        optimize(evaluator, space, init_points=2, n_iter=2)

    evaluator.assert_not_called()


@pytest.mark.unit
def test_invalid_counts_are_rejected(small_space, quadratic_evaluator):
    with pytest.raises(ValueError, match="init_points"):
        optimize(quadratic_evaluator, small_space, init_points=0, n_iter=2)

    with pytest.raises(ValueError, match="n_iter"):
        optimize(quadratic_evaluator, small_space, init_points=1, n_iter=-1)


@pytest.mark.unit
def test_evaluator_error_aborts_search(small_space, quadratic_evaluator):
    calls = []

    def failing(params):
        calls.append(params)
        if len(calls) == 3:
            raise ConfigurationInvalid("bad configuration")
        return quadratic_evaluator(params)

    with pytest.raises(ConfigurationInvalid):
        optimize(failing, small_space, init_points=2, n_iter=5, random_state=0)

    assert len(calls) == 3


@pytest.mark.unit
def test_failed_trial_is_numbered_like_trial_index(small_space, quadratic_evaluator, caplog):
    calls = []

    def failing(params):
        calls.append(params)
        if len(calls) == 3:
            raise RuntimeError("worker lost")
        return quadratic_evaluator(params)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(EvaluatorError, match="trial 2") as exc_info:
            optimize(failing, small_space, init_points=4, n_iter=0, random_state=0)

    assert exc_info.value.details["trial"] == 2
    assert "Trial 2 failed" in caplog.text


@pytest.mark.unit
def test_unexpected_exception_is_wrapped(small_space):
    def broken(params):
        raise RuntimeError("worker lost")

    with pytest.raises(EvaluatorError, match="trial 0") as exc_info:
        optimize(broken, small_space, init_points=2, n_iter=0)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
