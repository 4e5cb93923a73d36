"""Problem definition for long-only minimum-variance allocation."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import NewType

import numpy as np
from numpy.typing import ArrayLike, NDArray

from minvar_anneal.exceptions import InvalidDimensionError

__all__ = [
    "AllocationVector",
    "ProblemSpec",
    "create_problem",
    "equal_weights",
    "portfolio_return",
    "portfolio_variance",
    "validate_problem",
]

AllocationVector = NewType("AllocationVector", NDArray[np.float64])


@dataclass(frozen=True, slots=True)
class ProblemSpec:
    """Inputs of a minimum-variance allocation problem.

    Attributes:
        expected_returns: Expected return per asset, shape `(n,)`.
        covariance: Symmetric positive semi-definite covariance matrix,
            shape `(n, n)`.
        target_return: Minimum portfolio return the allocation must reach.
        initial_weights: Starting allocation for iterative solvers,
            shape `(n,)`.
    """

    expected_returns: NDArray[np.float64]
    covariance: NDArray[np.float64]
    target_return: float
    initial_weights: AllocationVector

    @property
    def n_assets(self) -> int:
        """Number of assets in the problem."""
        return int(self.expected_returns.shape[0])


def _read_only(values: ArrayLike) -> NDArray[np.float64]:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


def equal_weights(n_assets: int) -> AllocationVector:
    """Return the `1/n` allocation over `n_assets` assets."""
    if n_assets < 1:
        msg = f"n_assets must be positive, got {n_assets}"
        raise ValueError(msg)
    return AllocationVector(np.full(n_assets, 1.0 / n_assets))


def validate_problem(problem: ProblemSpec) -> None:
    """Check that every input agrees on the number of assets.

    Args:
        problem: Problem to validate.

    Raises:
        InvalidDimensionError: If the return vector is not 1-D, the
            covariance matrix is not square with a matching side, or the
            initial allocation has a different length.
    """
    returns = problem.expected_returns
    if returns.ndim != 1 or returns.shape[0] == 0:
        msg = f"expected_returns must be a non-empty vector, got shape {returns.shape}"
        raise InvalidDimensionError(msg)

    n = returns.shape[0]
    if problem.covariance.shape != (n, n):
        msg = (
            f"covariance shape {problem.covariance.shape} does not"
            f" match {n} expected returns"
        )
        actual = problem.covariance.shape[0] if problem.covariance.ndim else 0
        raise InvalidDimensionError(msg, expected=n, actual=actual)

    if problem.initial_weights.shape != (n,):
        msg = (
            f"initial_weights shape {problem.initial_weights.shape} does not"
            f" match {n} expected returns"
        )
        raise InvalidDimensionError(
            msg, expected=n, actual=int(problem.initial_weights.size)
        )


def create_problem(
    *,
    expected_returns: ArrayLike,
    covariance: ArrayLike,
    target_return: float,
    initial_weights: ArrayLike | None = None,
) -> ProblemSpec:
    """Build a validated, read-only `ProblemSpec`.

    Args:
        expected_returns: Expected return per asset.
        covariance: Asset covariance matrix.
        target_return: Minimum portfolio return.
        initial_weights: Starting allocation. Defaults to equal weights.

    Returns:
        A problem whose arrays are float64 copies flagged non-writeable.

    Raises:
        InvalidDimensionError: If the inputs disagree on the asset count.
    """
    returns = _read_only(expected_returns)
    if initial_weights is None:
        n = returns.shape[0] if returns.ndim == 1 else 0
        initial_weights = equal_weights(n) if n else np.empty(0)

    problem = ProblemSpec(
        expected_returns=returns,
        covariance=_read_only(covariance),
        target_return=float(target_return),
        initial_weights=AllocationVector(_read_only(initial_weights)),
    )
    validate_problem(problem)
    return problem


def portfolio_variance(
    *,
    weights: NDArray[np.float64] | Sequence[float],
    covariance: NDArray[np.float64],
) -> float:
    """Return `wᵗ·S·w`."""
    w = np.asarray(weights, dtype=np.float64)
    return float(w @ covariance @ w)


def portfolio_return(
    *,
    weights: NDArray[np.float64] | Sequence[float],
    expected_returns: NDArray[np.float64],
) -> float:
    """Return `gᵗ·w`."""
    return float(np.dot(expected_returns, np.asarray(weights, dtype=np.float64)))
