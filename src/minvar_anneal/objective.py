"""Penalized minimum-variance objective with a logarithmic barrier."""

import math
from typing import Final

import numpy as np
from numpy.typing import NDArray

from minvar_anneal.exceptions import NonFiniteScoreError

__all__ = [
    "LOG_SENTINEL",
    "barrier_term",
    "constraint_penalty_term",
    "penalized_objective",
    "safe_log",
    "variance_term",
]

LOG_SENTINEL: Final = -1.0e10


def safe_log(x: float) -> float:
    """Natural log of `x`, or `LOG_SENTINEL` when `x <= 0`."""
    if x <= 0.0:
        return LOG_SENTINEL
    return math.log(x)


def _safe_log_sum(weights: NDArray[np.float64]) -> float:
    positive = weights > 0.0
    logs = np.log(np.where(positive, weights, 1.0))
    return float(np.sum(np.where(positive, logs, LOG_SENTINEL)))


def variance_term(
    *,
    weights: NDArray[np.float64],
    covariance: NDArray[np.float64],
) -> float:
    """Portfolio variance `wᵗ·S·w`."""
    return float(weights @ covariance @ weights)


def constraint_penalty_term(
    *,
    weights: NDArray[np.float64],
    expected_returns: NDArray[np.float64],
    target_return: float,
    penalty_weight: float,
) -> float:
    """Quadratic penalty on the budget and return equality constraints.

    Computes `(1/(2·rho))·[(sum(w) - 1)² + (gᵗ·w - R)²]`.
    """
    budget_gap = float(np.sum(weights)) - 1.0
    return_gap = float(np.dot(expected_returns, weights)) - target_return
    return (budget_gap * budget_gap + return_gap * return_gap) / (2.0 * penalty_weight)


def barrier_term(
    *,
    weights: NDArray[np.float64],
    barrier_weight: float,
) -> float:
    """Logarithmic barrier `-(1/mu)·Σ safe_log(w_i)` against leaving w ≥ 0.

    Non-positive entries contribute `LOG_SENTINEL` instead of `-inf`, so
    the barrier stays finite (and very large) outside the domain.
    """
    return -_safe_log_sum(weights) / barrier_weight


def penalized_objective(
    *,
    weights: NDArray[np.float64],
    expected_returns: NDArray[np.float64],
    covariance: NDArray[np.float64],
    target_return: float,
    barrier_weight: float,
    penalty_weight: float,
    use_barrier: bool = True,
) -> float:
    """Score an allocation; lower is better.

    The score is the sum of `variance_term`, `constraint_penalty_term`
    and, when `use_barrier` is set, `barrier_term`.

    Args:
        weights: Allocation to score, shape `(n,)`.
        expected_returns: Expected return per asset, shape `(n,)`.
        covariance: Covariance matrix, shape `(n, n)`.
        target_return: Return the allocation should reach.
        barrier_weight: Barrier parameter `mu`; the barrier is scaled by
            `1/mu`.
        penalty_weight: Penalty parameter `rho`; the equality penalty is
            scaled by `1/(2·rho)`.
        use_barrier: Include the logarithmic barrier term.

    Returns:
        Finite penalized score.

    Raises:
        NonFiniteScoreError: If the score is NaN or infinite, or a
            penalty weight is zero, negative or NaN.
    """
    # weights that grew to inf only switch their term off
    if not (barrier_weight > 0.0 and penalty_weight > 0.0):
        msg = (
            f"penalty weights must be positive, got"
            f" mu={barrier_weight!r}, rho={penalty_weight!r}"
        )
        raise NonFiniteScoreError(msg)

    score = variance_term(weights=weights, covariance=covariance)
    score += constraint_penalty_term(
        weights=weights,
        expected_returns=expected_returns,
        target_return=target_return,
        penalty_weight=penalty_weight,
    )
    if use_barrier:
        score += barrier_term(weights=weights, barrier_weight=barrier_weight)

    if not math.isfinite(score):
        msg = f"objective is not finite ({score!r}) for weights {weights.tolist()}"
        raise NonFiniteScoreError(msg)
    return score
