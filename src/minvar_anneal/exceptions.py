"""Error types raised by the minimum-variance solvers."""

__all__ = [
    "ConvexSolverError",
    "InvalidDimensionError",
    "MinVarAnnealError",
    "NonFiniteScoreError",
    "SolverInfeasibleError",
]


class MinVarAnnealError(Exception):
    """Base exception for all minvar_anneal errors."""


class InvalidDimensionError(MinVarAnnealError, ValueError):
    """Raised when asset counts disagree between problem inputs.

    Examples:
    - Expected-return vector of length 3 with a 2x2 covariance matrix
    - Initial allocation with a different number of assets
    - Bounds array whose row count does not match the asset count
    """

    def __init__(
        self, message: str, expected: int | None = None, actual: int | None = None
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NonFiniteScoreError(MinVarAnnealError, ArithmeticError):
    """Raised when the penalized objective evaluates to NaN or infinity.

    A finite allocation must always produce a finite score, so this signals
    malformed inputs (e.g. a covariance matrix holding NaN) or a penalty
    weight that has underflowed to zero.
    """


class ConvexSolverError(MinVarAnnealError, RuntimeError):
    """Raised when the external convex solver fails to run to completion."""

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


class SolverInfeasibleError(ConvexSolverError):
    """Raised when the convex solver terminates without a feasible optimum."""
