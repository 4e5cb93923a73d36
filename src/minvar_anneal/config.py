"""Simulated annealing configuration."""

from dataclasses import asdict, dataclass
from typing import Any

__all__ = [
    "DEFAULT_ANNEALING_CONFIG",
    "AnnealingConfig",
]


@dataclass(frozen=True, slots=True)
class AnnealingConfig:
    """Hyperparameters of the penalized simulated annealing search.

    Attributes:
        inner_iterations: Initial number of candidates per temperature
            level (`K`). Adapted between levels.
        initial_temperature: Starting temperature `T0`.
        final_temperature: Stopping temperature `T1`; the search stops
            after the first level run at `T <= T1`.
        cooling_rate: Cooling parameter `alpha`. Temperature is updated as
            `T := T·(alpha·T)`, so `alpha·T0` must stay below 1.
        step_size: Scale `beta` of the Gaussian proposal noise.
        penalty_growth: Penalty parameter `tau`, applied as
            `mu := mu·(tau·mu)` and `rho := rho·(tau·rho)`.
        initial_barrier_weight: Starting barrier parameter `mu0`.
        initial_penalty_weight: Starting equality-penalty parameter `rho0`.
        use_barrier: Include the logarithmic barrier in the objective.
        max_outer_iterations: Optional cap on temperature levels. `None`
            runs until `T <= T1`.
    """

    inner_iterations: int = 10_000
    initial_temperature: float = 1.0
    final_temperature: float = 0.1
    cooling_rate: float = 0.99
    step_size: float = 0.01
    penalty_growth: float = 0.99
    initial_barrier_weight: float = 1.0
    initial_penalty_weight: float = 1.0
    use_barrier: bool = True
    max_outer_iterations: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.inner_iterations < 1:
            msg = f"inner_iterations must be at least 1, got {self.inner_iterations}"
            raise ValueError(msg)
        positive = {
            "initial_temperature": self.initial_temperature,
            "final_temperature": self.final_temperature,
            "cooling_rate": self.cooling_rate,
            "step_size": self.step_size,
            "penalty_growth": self.penalty_growth,
            "initial_barrier_weight": self.initial_barrier_weight,
            "initial_penalty_weight": self.initial_penalty_weight,
        }
        for name, value in positive.items():
            if not value > 0:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)
        # T := T·(alpha·T) only decreases while alpha·T < 1
        if self.cooling_rate * self.initial_temperature >= 1.0:
            msg = (
                "cooling_rate * initial_temperature must be below 1 for the"
                f" temperature to decrease, got {self.cooling_rate * self.initial_temperature}"
            )
            raise ValueError(msg)
        if self.max_outer_iterations is not None and self.max_outer_iterations < 1:
            msg = f"max_outer_iterations must be at least 1, got {self.max_outer_iterations}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnnealingConfig":
        """Create config from dictionary, rejecting unknown keys."""
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            msg = f"unknown config field(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        return cls(**data)


DEFAULT_ANNEALING_CONFIG = AnnealingConfig()
