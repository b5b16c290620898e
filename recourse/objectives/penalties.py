import torch
import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Type, Union

from ..exceptions import ConfigurationError

class Penalty(ABC):
    """Differentiable cost of moving a candidate away from the original input."""

    name: str = "penalty"

    @abstractmethod
    def value(self, x: np.ndarray, x_orig: np.ndarray) -> float:
        pass

    @abstractmethod
    def grad(self, x: np.ndarray, x_orig: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def torch_value(self, x: torch.Tensor, x_orig: torch.Tensor) -> torch.Tensor:
        pass

    def __repr__(self):
        return f"{type(self).__name__}()"

class SquaredDistancePenalty(Penalty):
    """||x - x_orig||^2"""

    name = "squared_distance"

    def value(self, x, x_orig):
        diff = np.asarray(x, dtype=np.float64) - x_orig
        return float(diff @ diff)

    def grad(self, x, x_orig):
        return 2.0 * (np.asarray(x, dtype=np.float64) - x_orig)

    def torch_value(self, x, x_orig):
        return torch.sum((x - x_orig) ** 2)

class WeightedSquaredDistancePenalty(Penalty):
    """
    sum_d c_d (x_d - x_orig_d)^2 with non-negative per-feature costs c_d.

    A large cost makes a feature expensive to change; a zero cost leaves
    it free.
    """

    name = "weighted_squared_distance"

    def __init__(self, feature_weights):
        c = np.array(feature_weights, dtype=np.float64).reshape(-1)
        if np.any(c < 0):
            raise ConfigurationError("feature_weights must be non-negative")
        c.setflags(write=False)
        self.feature_weights = c

    def _weights_for(self, x):
        if self.feature_weights.shape[0] != np.shape(x)[0]:
            raise ConfigurationError(
                f"Penalty has {self.feature_weights.shape[0]} feature weights "
                f"but the candidate has {np.shape(x)[0]} features"
            )
        return self.feature_weights

    def value(self, x, x_orig):
        c = self._weights_for(x)
        diff = np.asarray(x, dtype=np.float64) - x_orig
        return float(np.sum(c * diff ** 2))

    def grad(self, x, x_orig):
        c = self._weights_for(x)
        return 2.0 * c * (np.asarray(x, dtype=np.float64) - x_orig)

    def torch_value(self, x, x_orig):
        c = torch.as_tensor(self._weights_for(x).copy(), dtype=x.dtype)
        return torch.sum(c * (x - x_orig) ** 2)

    def __repr__(self):
        return f"WeightedSquaredDistancePenalty(feature_weights={self.feature_weights.tolist()})"

PENALTIES: Dict[str, Type[Penalty]] = {
    SquaredDistancePenalty.name: SquaredDistancePenalty,
}

def get_penalty(penalty: Union[str, Penalty]) -> Penalty:
    """
    Resolves a penalty name from PENALTIES, or passes a Penalty instance through.
    Penalties that need arguments (e.g. feature weights) are passed as instances.
    """
    if isinstance(penalty, Penalty):
        return penalty
    if penalty not in PENALTIES:
        raise ConfigurationError(
            f"Unknown penalty: {penalty!r}. Available: {sorted(PENALTIES)}"
        )
    return PENALTIES[penalty]()
