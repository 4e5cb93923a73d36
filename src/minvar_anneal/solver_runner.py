"""High-level pipelines that build a problem and run the solvers on it."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from minvar_anneal.annealing import (
    AcceptCallback,
    AnnealingResult,
    run_simulated_annealing,
)
from minvar_anneal.config import DEFAULT_ANNEALING_CONFIG, AnnealingConfig
from minvar_anneal.convex import ConvexSolution, solve_convex_qp
from minvar_anneal.problem import create_problem

__all__ = [
    "SolverComparison",
    "run_annealing_pipeline",
    "run_comparison_pipeline",
    "run_convex_pipeline",
]


@dataclass(frozen=True, slots=True)
class SolverComparison:
    """Annealing and convex solutions of the same problem.

    Attributes:
        annealing: Result of the simulated annealing search.
        convex: Optimum reported by the convex solver.
        weight_distance: L1 distance between the two allocations.
    """

    annealing: AnnealingResult
    convex: ConvexSolution
    weight_distance: float


def run_annealing_pipeline(
    *,
    expected_returns: ArrayLike,
    covariance: ArrayLike,
    target_return: float,
    initial_weights: ArrayLike | None = None,
    config: AnnealingConfig = DEFAULT_ANNEALING_CONFIG,
    seed: int | np.random.Generator | None = None,
    on_accept: AcceptCallback | None = None,
) -> AnnealingResult:
    """Run create_problem -> run_simulated_annealing.

    Args:
        expected_returns: Expected return per asset.
        covariance: Asset covariance matrix.
        target_return: Minimum portfolio return.
        initial_weights: Starting allocation. Defaults to equal weights.
        config: Annealing hyperparameters.
        seed: Seed or generator for reproducibility.
        on_accept: Called with every accepted allocation and its score.

    Returns:
        Best allocation found during the annealing process.
    """
    problem = create_problem(
        expected_returns=expected_returns,
        covariance=covariance,
        target_return=target_return,
        initial_weights=initial_weights,
    )
    return run_simulated_annealing(problem, config, seed=seed, on_accept=on_accept)


def run_convex_pipeline(
    *,
    expected_returns: ArrayLike,
    covariance: ArrayLike,
    target_return: float,
    initial_weights: ArrayLike | None = None,
    bounds: ArrayLike | None = None,
    solver: str | None = None,
) -> ConvexSolution:
    """Run create_problem -> solve_convex_qp.

    Args:
        expected_returns: Expected return per asset.
        covariance: Asset covariance matrix.
        target_return: Minimum portfolio return.
        initial_weights: Warm start. Defaults to equal weights.
        bounds: Per-asset `(lower, upper)` rows. Defaults to `[0, 1]`.
        solver: cvxpy solver name.

    Returns:
        Optimal allocation reported by the convex solver.
    """
    problem = create_problem(
        expected_returns=expected_returns,
        covariance=covariance,
        target_return=target_return,
        initial_weights=initial_weights,
    )
    return solve_convex_qp(problem, bounds=bounds, solver=solver)


def run_comparison_pipeline(
    *,
    expected_returns: ArrayLike,
    covariance: ArrayLike,
    target_return: float,
    initial_weights: ArrayLike | None = None,
    config: AnnealingConfig = DEFAULT_ANNEALING_CONFIG,
    bounds: ArrayLike | None = None,
    solver: str | None = None,
    seed: int | np.random.Generator | None = None,
) -> SolverComparison:
    """Solve one problem with both paths and measure how far apart they land.

    The convex path enforces the constraints exactly, so it serves as the
    reference for the penalized annealing result.

    Args:
        expected_returns: Expected return per asset.
        covariance: Asset covariance matrix.
        target_return: Minimum portfolio return.
        initial_weights: Shared starting allocation.
        config: Annealing hyperparameters.
        bounds: Box bounds for the convex path.
        solver: cvxpy solver name.
        seed: Seed or generator for the annealing search.

    Returns:
        Both solutions and the L1 distance between their weights.
    """
    problem = create_problem(
        expected_returns=expected_returns,
        covariance=covariance,
        target_return=target_return,
        initial_weights=initial_weights,
    )
    annealing = run_simulated_annealing(problem, config, seed=seed)
    convex = solve_convex_qp(problem, bounds=bounds, solver=solver)
    return SolverComparison(
        annealing=annealing,
        convex=convex,
        weight_distance=float(np.sum(np.abs(annealing.weights - convex.weights))),
    )
