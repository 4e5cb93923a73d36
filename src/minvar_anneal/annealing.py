"""Penalized simulated annealing for long-only minimum-variance allocation."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Final

import numpy as np

from minvar_anneal.config import DEFAULT_ANNEALING_CONFIG, AnnealingConfig
from minvar_anneal.objective import penalized_objective
from minvar_anneal.problem import (
    AllocationVector,
    ProblemSpec,
    portfolio_return,
    portfolio_variance,
    validate_problem,
)

__all__ = [
    "AcceptCallback",
    "AnnealingResult",
    "OuterIterationRecord",
    "PenaltyState",
    "SearchState",
    "SearchStatus",
    "adapt_inner_iterations",
    "cool_temperature",
    "grow_penalties",
    "metropolis_accept",
    "propose_candidate",
    "run_simulated_annealing",
    "update_best",
]

logger = logging.getLogger(__name__)

HIGH_ACCEPTANCE: Final = 0.8
LOW_ACCEPTANCE: Final = 0.2
SHRINK_FACTOR: Final = 0.75
GROW_FACTOR: Final = 1.5

AcceptCallback = Callable[[AllocationVector, float], None]


class SearchStatus(Enum):
    """Lifecycle of one annealing run."""

    RUNNING = "running"
    CONVERGED = "converged"


@dataclass(frozen=True, slots=True)
class PenaltyState:
    """Barrier weight `mu` and equality-penalty weight `rho`."""

    barrier_weight: float
    penalty_weight: float


@dataclass(slots=True)
class SearchState:
    """Mutable state of a single annealing run.

    Attributes:
        current_weights: Allocation the chain currently sits on.
        current_score: Penalized score of `current_weights`, as evaluated
            when it was accepted.
        best_weights: Lowest-scoring allocation seen so far.
        best_score: Score of `best_weights`.
        temperature: Current temperature `T`.
        inner_iterations: Candidates to draw at the current level (`KL`).
        accepted_count: Moves accepted at the current level.
        status: `RUNNING` until the stopping test passes.
    """

    current_weights: AllocationVector
    current_score: float
    best_weights: AllocationVector
    best_score: float
    temperature: float
    inner_iterations: int
    accepted_count: int = 0
    status: SearchStatus = SearchStatus.RUNNING


@dataclass(frozen=True, slots=True)
class OuterIterationRecord:
    """Summary of one temperature level.

    Attributes:
        temperature: Temperature the level ran at.
        inner_iterations: Candidates drawn at this level.
        accepted: Candidates accepted at this level.
        fraction_accepted: `accepted / inner_iterations`.
        next_inner_iterations: Level length chosen for the next level.
        barrier_weight: `mu` in force during the level.
        penalty_weight: `rho` in force during the level.
        best_score: Best score after the level.
    """

    temperature: float
    inner_iterations: int
    accepted: int
    fraction_accepted: float
    next_inner_iterations: int
    barrier_weight: float
    penalty_weight: float
    best_score: float


@dataclass(frozen=True, slots=True)
class AnnealingResult:
    """Best allocation found by `run_simulated_annealing`.

    Attributes:
        weights: Best allocation across the whole run.
        objective_value: Penalized score of `weights`.
        expected_return: Portfolio return `gᵗ·w` of `weights`.
        variance: Portfolio variance `wᵗ·S·w` of `weights`.
        outer_iterations: Number of temperature levels run.
        final_temperature: Temperature of the last level.
        stopped_by_cap: `True` when `max_outer_iterations` ended the run
            before the temperature reached its final value.
        history: Per-level records, in order.
        status: Terminal search status.
    """

    weights: AllocationVector
    objective_value: float
    expected_return: float
    variance: float
    outer_iterations: int
    final_temperature: float
    stopped_by_cap: bool = False
    history: tuple[OuterIterationRecord, ...] = ()
    status: SearchStatus = SearchStatus.CONVERGED


def propose_candidate(
    *,
    weights: AllocationVector,
    step_size: float,
    rng: np.random.Generator,
) -> AllocationVector:
    """Perturb every weight with Gaussian noise and clip negatives to zero.

    The clip projects onto the non-negative orthant only. The budget is
    left to the penalty term, so the candidate is never renormalized.

    Args:
        weights: Current allocation.
        step_size: Standard deviation `beta` of the per-asset noise.
        rng: Source of the standard normal draws.

    Returns:
        New allocation with every entry >= 0.
    """
    candidate = weights + step_size * rng.standard_normal(weights.shape[0])
    return AllocationVector(np.maximum(candidate, 0.0))


def metropolis_accept(
    *,
    current_score: float,
    candidate_score: float,
    temperature: float,
    rng: np.random.Generator,
) -> bool:
    """Decide whether the chain moves to a candidate.

    Strict improvements are always accepted without drawing. Otherwise one
    uniform draw is compared with `exp((current - candidate) / T)`.

    Args:
        current_score: Score of the current allocation.
        candidate_score: Score of the proposed allocation.
        temperature: Current temperature.
        rng: Source of the uniform draw.

    Returns:
        `True` if the candidate is accepted.
    """
    if candidate_score < current_score:
        return True
    if temperature <= 0.0:
        return False
    # exponent <= 0 here; math.exp underflows to 0.0 rather than raising
    probability = math.exp((current_score - candidate_score) / temperature)
    return bool(rng.random() < probability)


def update_best(state: SearchState) -> bool:
    """Promote the current allocation to best if its score is strictly lower.

    Returns:
        `True` if the best allocation changed.
    """
    if state.current_score < state.best_score:
        state.best_weights = state.current_weights
        state.best_score = state.current_score
        return True
    return False


def adapt_inner_iterations(
    *,
    inner_iterations: int,
    fraction_accepted: float,
) -> int:
    """Shorten levels that accept too freely, lengthen levels that stall.

    Args:
        inner_iterations: Length of the level just run.
        fraction_accepted: Share of accepted candidates in that level.

    Returns:
        `ceil(0.75·KL)` above 80% acceptance, `ceil(1.5·KL)` below 20%,
        otherwise `KL`; never below 1.
    """
    if fraction_accepted > HIGH_ACCEPTANCE:
        inner_iterations = math.ceil(SHRINK_FACTOR * inner_iterations)
    elif fraction_accepted < LOW_ACCEPTANCE:
        inner_iterations = math.ceil(GROW_FACTOR * inner_iterations)
    return max(inner_iterations, 1)


def grow_penalties(
    penalty: PenaltyState,
    *,
    penalty_growth: float,
) -> PenaltyState:
    """Apply `mu := mu·(tau·mu)` and `rho := rho·(tau·rho)`."""
    mu = penalty.barrier_weight
    rho = penalty.penalty_weight
    return PenaltyState(
        barrier_weight=mu * (penalty_growth * mu),
        penalty_weight=rho * (penalty_growth * rho),
    )


def cool_temperature(
    temperature: float,
    *,
    cooling_rate: float,
) -> float:
    """Apply `T := T·(alpha·T)`."""
    return temperature * (cooling_rate * temperature)


def run_simulated_annealing(
    problem: ProblemSpec,
    config: AnnealingConfig = DEFAULT_ANNEALING_CONFIG,
    *,
    seed: int | np.random.Generator | None = None,
    on_accept: AcceptCallback | None = None,
) -> AnnealingResult:
    """Minimize portfolio variance with penalized simulated annealing.

    Each temperature level draws `KL` candidates with `propose_candidate`,
    scores them with `penalized_objective` under the level's penalty
    weights, applies `metropolis_accept` and tracks the best allocation.
    Between levels the level length, the penalty weights and the
    temperature are updated; the run stops after the first level whose
    temperature is at or below `config.final_temperature`.

    Scores are never re-evaluated when the penalty weights change, so the
    best score compares values computed under different weights.

    Args:
        problem: Problem to solve. Its arrays are only read.
        config: Annealing hyperparameters.
        seed: Seed or generator for the random stream. Identical seeds and
            inputs reproduce the same sequence of accepted allocations.
        on_accept: Called with every accepted allocation and its score.

    Returns:
        Best allocation found across the whole run.

    Raises:
        InvalidDimensionError: If the problem inputs disagree on the asset
            count. Raised before any iteration.
        NonFiniteScoreError: If the objective evaluates to NaN or
            infinity.
    """
    validate_problem(problem)
    rng = np.random.default_rng(seed)
    penalty = PenaltyState(
        barrier_weight=config.initial_barrier_weight,
        penalty_weight=config.initial_penalty_weight,
    )
    score = partial(
        penalized_objective,
        expected_returns=problem.expected_returns,
        covariance=problem.covariance,
        target_return=problem.target_return,
        use_barrier=config.use_barrier,
    )

    start = AllocationVector(np.array(problem.initial_weights, dtype=np.float64))
    start_score = score(
        weights=start,
        barrier_weight=penalty.barrier_weight,
        penalty_weight=penalty.penalty_weight,
    )
    state = SearchState(
        current_weights=start,
        current_score=start_score,
        best_weights=start,
        best_score=start_score,
        temperature=config.initial_temperature,
        inner_iterations=config.inner_iterations,
    )
    history: list[OuterIterationRecord] = []
    stopped_by_cap = False

    while state.status is SearchStatus.RUNNING:
        state.accepted_count = 0
        level_score = partial(
            score,
            barrier_weight=penalty.barrier_weight,
            penalty_weight=penalty.penalty_weight,
        )

        for _ in range(state.inner_iterations):
            candidate = propose_candidate(
                weights=state.current_weights,
                step_size=config.step_size,
                rng=rng,
            )
            candidate_score = level_score(weights=candidate)
            if metropolis_accept(
                current_score=state.current_score,
                candidate_score=candidate_score,
                temperature=state.temperature,
                rng=rng,
            ):
                state.current_weights = candidate
                state.current_score = candidate_score
                state.accepted_count += 1
                if on_accept is not None:
                    on_accept(candidate, candidate_score)
            update_best(state)

        fraction_accepted = state.accepted_count / state.inner_iterations
        next_inner_iterations = adapt_inner_iterations(
            inner_iterations=state.inner_iterations,
            fraction_accepted=fraction_accepted,
        )
        history.append(
            OuterIterationRecord(
                temperature=state.temperature,
                inner_iterations=state.inner_iterations,
                accepted=state.accepted_count,
                fraction_accepted=fraction_accepted,
                next_inner_iterations=next_inner_iterations,
                barrier_weight=penalty.barrier_weight,
                penalty_weight=penalty.penalty_weight,
                best_score=state.best_score,
            )
        )
        logger.debug(
            "level %d: T=%.6g KL=%d accepted=%.1f%% mu=%.6g rho=%.6g best=%.6g",
            len(history),
            state.temperature,
            state.inner_iterations,
            100.0 * fraction_accepted,
            penalty.barrier_weight,
            penalty.penalty_weight,
            state.best_score,
        )

        state.inner_iterations = next_inner_iterations
        penalty = grow_penalties(penalty, penalty_growth=config.penalty_growth)

        if state.temperature <= config.final_temperature:
            state.status = SearchStatus.CONVERGED
        elif (
            config.max_outer_iterations is not None
            and len(history) >= config.max_outer_iterations
        ):
            logger.warning(
                "Annealing stopped at T=%.6g after %d levels (cap reached)",
                state.temperature,
                len(history),
            )
            stopped_by_cap = True
            state.status = SearchStatus.CONVERGED
        else:
            state.temperature = cool_temperature(
                state.temperature, cooling_rate=config.cooling_rate
            )

    best_weights = AllocationVector(state.best_weights.copy())
    logger.info(
        "Annealing finished after %d levels: best score %.6g",
        len(history),
        state.best_score,
    )
    return AnnealingResult(
        weights=best_weights,
        objective_value=state.best_score,
        expected_return=portfolio_return(
            weights=best_weights, expected_returns=problem.expected_returns
        ),
        variance=portfolio_variance(
            weights=best_weights, covariance=problem.covariance
        ),
        outer_iterations=len(history),
        final_temperature=state.temperature,
        stopped_by_cap=stopped_by_cap,
        history=tuple(history),
        status=state.status,
    )
