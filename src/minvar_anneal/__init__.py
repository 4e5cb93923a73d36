"""Minimum-variance portfolio allocation by penalized simulated annealing."""

from minvar_anneal.annealing import (
    AcceptCallback,
    AnnealingResult,
    OuterIterationRecord,
    PenaltyState,
    SearchState,
    SearchStatus,
    adapt_inner_iterations,
    cool_temperature,
    grow_penalties,
    metropolis_accept,
    propose_candidate,
    run_simulated_annealing,
    update_best,
)
from minvar_anneal.config import DEFAULT_ANNEALING_CONFIG, AnnealingConfig
from minvar_anneal.convex import ConvexSolution, long_only_bounds, solve_convex_qp
from minvar_anneal.exceptions import (
    ConvexSolverError,
    InvalidDimensionError,
    MinVarAnnealError,
    NonFiniteScoreError,
    SolverInfeasibleError,
)
from minvar_anneal.objective import (
    LOG_SENTINEL,
    barrier_term,
    constraint_penalty_term,
    penalized_objective,
    safe_log,
    variance_term,
)
from minvar_anneal.problem import (
    AllocationVector,
    ProblemSpec,
    create_problem,
    equal_weights,
    portfolio_return,
    portfolio_variance,
    validate_problem,
)
from minvar_anneal.solver_runner import (
    SolverComparison,
    run_annealing_pipeline,
    run_comparison_pipeline,
    run_convex_pipeline,
)

__all__ = [
    "DEFAULT_ANNEALING_CONFIG",
    "LOG_SENTINEL",
    "AcceptCallback",
    "AllocationVector",
    "AnnealingConfig",
    "AnnealingResult",
    "ConvexSolution",
    "ConvexSolverError",
    "InvalidDimensionError",
    "MinVarAnnealError",
    "NonFiniteScoreError",
    "OuterIterationRecord",
    "PenaltyState",
    "ProblemSpec",
    "SearchState",
    "SearchStatus",
    "SolverComparison",
    "SolverInfeasibleError",
    "adapt_inner_iterations",
    "barrier_term",
    "constraint_penalty_term",
    "cool_temperature",
    "create_problem",
    "equal_weights",
    "grow_penalties",
    "long_only_bounds",
    "metropolis_accept",
    "penalized_objective",
    "portfolio_return",
    "portfolio_variance",
    "propose_candidate",
    "run_annealing_pipeline",
    "run_comparison_pipeline",
    "run_convex_pipeline",
    "run_simulated_annealing",
    "safe_log",
    "solve_convex_qp",
    "update_best",
    "validate_problem",
    "variance_term",
]
