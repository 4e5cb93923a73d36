"""Convex quadratic-programming path through cvxpy."""

import logging
from dataclasses import dataclass

import cvxpy as cp
import numpy as np
from numpy.typing import ArrayLike, NDArray

from minvar_anneal.exceptions import (
    ConvexSolverError,
    InvalidDimensionError,
    SolverInfeasibleError,
)
from minvar_anneal.problem import (
    AllocationVector,
    ProblemSpec,
    portfolio_return,
    validate_problem,
)

__all__ = [
    "ConvexSolution",
    "long_only_bounds",
    "solve_convex_qp",
]

logger = logging.getLogger(__name__)

_SOLVED = frozenset({cp.OPTIMAL, cp.OPTIMAL_INACCURATE})


@dataclass(frozen=True, slots=True)
class ConvexSolution:
    """Optimum reported by the convex solver.

    Attributes:
        weights: Optimal allocation.
        objective_value: Portfolio variance at the optimum.
        expected_return: Portfolio return `gᵗ·w` at the optimum.
        status: Solver termination status.
    """

    weights: AllocationVector
    objective_value: float
    expected_return: float
    status: str


def long_only_bounds(n_assets: int) -> NDArray[np.float64]:
    """Return `[0, 1]` box bounds for every asset, shape `(n_assets, 2)`."""
    return np.tile(np.array([0.0, 1.0]), (n_assets, 1))


def _as_bounds(bounds: ArrayLike | None, n_assets: int) -> NDArray[np.float64]:
    if bounds is None:
        return long_only_bounds(n_assets)
    box = np.asarray(bounds, dtype=np.float64)
    if box.shape != (n_assets, 2):
        msg = f"bounds shape {box.shape} does not match ({n_assets}, 2)"
        actual = box.shape[0] if box.ndim else 0
        raise InvalidDimensionError(msg, expected=n_assets, actual=actual)
    return box


def solve_convex_qp(
    problem: ProblemSpec,
    *,
    bounds: ArrayLike | None = None,
    initial_point: ArrayLike | None = None,
    solver: str | None = None,
) -> ConvexSolution:
    r"""Solve the minimum-variance problem as a convex QP.

    $$\min_w w^T \Sigma w$$ subject to

    - $g^T w \ge R$ (minimum return),
    - $\mathbf{1}^T w = 1$ (fully invested), and
    - $l_i \le w_i \le u_i$ (box bounds).

    Args:
        problem: Problem to solve.
        bounds: Per-asset `(lower, upper)` rows, shape `(n, 2)`. Defaults
            to long-only `[0, 1]`.
        initial_point: Warm start. Defaults to the problem's initial
            weights.
        solver: cvxpy solver name. `None` lets cvxpy choose.

    Returns:
        The optimal allocation and its variance.

    Raises:
        InvalidDimensionError: If bounds or the initial point do not match
            the asset count.
        SolverInfeasibleError: If the solver finds no feasible optimum.
        ConvexSolverError: If the solver fails to run.
    """
    validate_problem(problem)
    n = problem.n_assets
    box = _as_bounds(bounds, n)
    start = np.asarray(
        problem.initial_weights if initial_point is None else initial_point,
        dtype=np.float64,
    )
    if start.shape != (n,):
        msg = f"initial_point shape {start.shape} does not match {n} assets"
        raise InvalidDimensionError(msg, expected=n, actual=int(start.size))

    w = cp.Variable(n)
    w.value = start
    objective = cp.Minimize(cp.quad_form(w, cp.psd_wrap(problem.covariance)))
    constraints = [
        cp.matmul(problem.expected_returns, w) >= problem.target_return,
        cp.sum(w) == 1.0,
        w >= box[:, 0],
        w <= box[:, 1],
    ]
    qp = cp.Problem(objective, constraints)

    try:
        qp.solve(solver=solver, warm_start=True)
    except cp.SolverError as e:
        msg = f"convex solver failed: {e}"
        raise ConvexSolverError(msg) from e

    status = str(qp.status)
    if qp.status not in _SOLVED or w.value is None:
        msg = f"convex solver found no feasible optimum (status: {status})"
        raise SolverInfeasibleError(msg, status=status)

    weights = AllocationVector(np.asarray(w.value, dtype=np.float64))
    logger.info(
        "Convex QP solved with status %s: variance %.6g", status, float(qp.value)
    )
    return ConvexSolution(
        weights=weights,
        objective_value=float(qp.value),
        expected_return=portfolio_return(
            weights=weights, expected_returns=problem.expected_returns
        ),
        status=status,
    )
