"""Tests for minvar_anneal.problem module."""

import numpy as np
import pytest

from minvar_anneal.exceptions import InvalidDimensionError
from minvar_anneal.problem import (
    AllocationVector,
    ProblemSpec,
    create_problem,
    equal_weights,
    portfolio_return,
    portfolio_variance,
    validate_problem,
)


class TestCreateProblem:
    def test_stores_float_arrays(self, two_asset_problem: ProblemSpec) -> None:
        assert two_asset_problem.expected_returns.dtype == np.float64
        assert two_asset_problem.covariance.shape == (2, 2)
        assert two_asset_problem.target_return == pytest.approx(0.12)
        assert two_asset_problem.n_assets == 2

    def test_default_initial_weights_are_equal(self) -> None:
        problem = create_problem(
            expected_returns=[0.1, 0.2, 0.3, 0.4],
            covariance=np.eye(4),
            target_return=0.2,
        )
        np.testing.assert_allclose(problem.initial_weights, [0.25] * 4)

    def test_arrays_are_read_only(self, two_asset_problem: ProblemSpec) -> None:
        with pytest.raises(ValueError, match="read-only"):
            two_asset_problem.covariance[0, 0] = 1.0
        with pytest.raises(ValueError, match="read-only"):
            two_asset_problem.initial_weights[0] = 1.0

    def test_does_not_alias_caller_arrays(self) -> None:
        returns = np.array([0.1, 0.2])
        problem = create_problem(
            expected_returns=returns,
            covariance=np.eye(2),
            target_return=0.1,
        )
        returns[0] = 99.0
        assert problem.expected_returns[0] == pytest.approx(0.1)

    def test_is_frozen(self, two_asset_problem: ProblemSpec) -> None:
        with pytest.raises(AttributeError):
            two_asset_problem.target_return = 0.5  # type: ignore[misc]

    def test_covariance_mismatch_raises(self) -> None:
        with pytest.raises(InvalidDimensionError, match="covariance shape"):
            create_problem(
                expected_returns=[0.1, 0.2, 0.3],
                covariance=np.eye(2),
                target_return=0.1,
            )

    def test_initial_weights_mismatch_raises(self) -> None:
        with pytest.raises(InvalidDimensionError, match="initial_weights shape") as info:
            create_problem(
                expected_returns=[0.1, 0.2],
                covariance=np.eye(2),
                target_return=0.1,
                initial_weights=[1.0, 0.0, 0.0],
            )
        assert info.value.expected == 2
        assert info.value.actual == 3

    def test_scalar_covariance_raises(self) -> None:
        with pytest.raises(InvalidDimensionError, match="covariance shape") as info:
            create_problem(
                expected_returns=[0.1, 0.2],
                covariance=5.0,
                target_return=0.1,
            )
        assert info.value.expected == 2
        assert info.value.actual == 0

    def test_empty_returns_raise(self) -> None:
        with pytest.raises(InvalidDimensionError, match="non-empty vector"):
            create_problem(expected_returns=[], covariance=[], target_return=0.1)

    def test_dimension_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            create_problem(
                expected_returns=[0.1],
                covariance=np.eye(2),
                target_return=0.1,
            )


class TestValidateProblem:
    def test_accepts_consistent_problem(self, two_asset_problem: ProblemSpec) -> None:
        validate_problem(two_asset_problem)

    def test_rejects_directly_built_mismatch(self) -> None:
        problem = ProblemSpec(
            expected_returns=np.array([0.1, 0.2]),
            covariance=np.eye(2),
            target_return=0.1,
            initial_weights=AllocationVector(np.array([1.0])),
        )
        with pytest.raises(InvalidDimensionError):
            validate_problem(problem)

    def test_rejects_matrix_returns(self) -> None:
        problem = ProblemSpec(
            expected_returns=np.ones((2, 2)),
            covariance=np.eye(2),
            target_return=0.1,
            initial_weights=AllocationVector(np.array([0.5, 0.5])),
        )
        with pytest.raises(InvalidDimensionError, match="non-empty vector"):
            validate_problem(problem)


class TestEqualWeights:
    def test_sums_to_one(self) -> None:
        assert float(np.sum(equal_weights(7))) == pytest.approx(1.0)

    def test_non_positive_count_raises(self) -> None:
        with pytest.raises(ValueError, match="n_assets must be positive"):
            equal_weights(0)


class TestPortfolioMetrics:
    def test_variance(self, two_asset_problem: ProblemSpec) -> None:
        variance = portfolio_variance(
            weights=[0.5, 0.5], covariance=two_asset_problem.covariance
        )
        assert variance == pytest.approx(0.0325)

    def test_return(self, two_asset_problem: ProblemSpec) -> None:
        expected = portfolio_return(
            weights=[0.5, 0.5], expected_returns=two_asset_problem.expected_returns
        )
        assert expected == pytest.approx(0.15)
