"""Tests for minvar_anneal.solver_runner module."""

import numpy as np
import pytest

from minvar_anneal.annealing import AnnealingResult
from minvar_anneal.config import AnnealingConfig
from minvar_anneal.convex import ConvexSolution
from minvar_anneal.exceptions import InvalidDimensionError
from minvar_anneal.solver_runner import (
    SolverComparison,
    run_annealing_pipeline,
    run_comparison_pipeline,
    run_convex_pipeline,
)

RETURNS = [0.10, 0.20]
COVARIANCE = [[0.04, 0.0], [0.0, 0.09]]


class TestRunAnnealingPipeline:
    def test_produces_result(self, fast_config: AnnealingConfig) -> None:
        result = run_annealing_pipeline(
            expected_returns=RETURNS,
            covariance=COVARIANCE,
            target_return=0.12,
            initial_weights=[0.5, 0.5],
            config=fast_config,
            seed=42,
        )
        assert isinstance(result, AnnealingResult)
        assert np.all(result.weights >= 0.0)

    def test_forwards_accept_callback(self, fast_config: AnnealingConfig) -> None:
        scores: list[float] = []
        run_annealing_pipeline(
            expected_returns=RETURNS,
            covariance=COVARIANCE,
            target_return=0.12,
            config=fast_config,
            seed=42,
            on_accept=lambda _weights, score: scores.append(score),
        )
        assert scores

    def test_dimension_mismatch_raises(self) -> None:
        with pytest.raises(InvalidDimensionError):
            run_annealing_pipeline(
                expected_returns=RETURNS,
                covariance=np.eye(3),
                target_return=0.12,
            )


class TestRunConvexPipeline:
    def test_produces_solution(self) -> None:
        solution = run_convex_pipeline(
            expected_returns=RETURNS,
            covariance=COVARIANCE,
            target_return=0.12,
        )
        assert isinstance(solution, ConvexSolution)
        assert float(np.sum(solution.weights)) == pytest.approx(1.0, abs=1e-4)


class TestRunComparisonPipeline:
    def test_distance_matches_weights(self, fast_config: AnnealingConfig) -> None:
        comparison = run_comparison_pipeline(
            expected_returns=RETURNS,
            covariance=COVARIANCE,
            target_return=0.12,
            initial_weights=[0.5, 0.5],
            config=fast_config,
            seed=7,
        )
        assert isinstance(comparison, SolverComparison)
        expected = float(
            np.sum(np.abs(comparison.annealing.weights - comparison.convex.weights))
        )
        assert comparison.weight_distance == pytest.approx(expected)
        assert comparison.weight_distance >= 0.0

    def test_reproducible_with_seed(self, fast_config: AnnealingConfig) -> None:
        kwargs = {
            "expected_returns": RETURNS,
            "covariance": COVARIANCE,
            "target_return": 0.12,
            "config": fast_config,
            "seed": 99,
        }
        first = run_comparison_pipeline(**kwargs)
        second = run_comparison_pipeline(**kwargs)
        np.testing.assert_array_equal(first.annealing.weights, second.annealing.weights)
