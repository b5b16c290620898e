import numbers
import dataclasses
from dataclasses import dataclass

from ..exceptions import ConfigurationError
from .algorithm_config import AlgorithmConfig

@dataclass(frozen=True)
class GenerationConfig:
    """
    Configuration for the counterfactual search.

    Immutable so a single instance can be shared by any number of searches.
    """
    # Optimization
    step_size: float = 0.1
    penalty_weight: float = 0.1
    convergence_tolerance: float = 1e-5
    max_iterations: int = 1000

    # Decision rule
    decision_threshold: float = AlgorithmConfig.default_decision_threshold
    crossentropy_truncation: float = AlgorithmConfig.default_crossentropy_truncation

    # Objective selection (names from the loss / penalty registries)
    loss: str = "crossentropy"
    penalty: str = "squared_distance"

    # Generation Control
    progress_bar: bool = False

    def __post_init__(self):
        if not self.step_size > 0:
            raise ConfigurationError(f"step_size must be positive, got {self.step_size}")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, numbers.Integral):
            raise ConfigurationError(
                f"max_iterations must be an integer, got {self.max_iterations!r}"
            )
        if self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if not self.penalty_weight >= 0:
            raise ConfigurationError(
                f"penalty_weight must be non-negative, got {self.penalty_weight}"
            )
        if not self.convergence_tolerance > 0:
            raise ConfigurationError(
                f"convergence_tolerance must be positive, got {self.convergence_tolerance}"
            )
        if not 0.0 < self.decision_threshold < 1.0:
            raise ConfigurationError(
                f"decision_threshold must lie in (0, 1), got {self.decision_threshold}"
            )
        if not self.crossentropy_truncation > 0:
            raise ConfigurationError(
                f"crossentropy_truncation must be positive, got {self.crossentropy_truncation}"
            )

    def replace(self, **changes) -> "GenerationConfig":
        """Returns a copy with the given fields changed (re-validated)."""
        return dataclasses.replace(self, **changes)
