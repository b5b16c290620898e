"""
Loss functions for counterfactual search.

Every loss is written with respect to the classifier's logit ``a = w.x + b``
and the target label ``t`` in {0, 1}. The gradient the generator needs is
taken with respect to the feature vector ``x``, which for a linear model is
always ``dloss/da * w``.
"""
import torch
import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Type, Union

from ..configs import AlgorithmConfig
from ..exceptions import ConfigurationError
from ..utils.helpers import truncated_sigmoid, truncated_sigmoid_torch, margin_target

class Loss(ABC):
    """Differentiable objective on the logit."""

    name: str = "loss"

    @abstractmethod
    def value(self, a: float, t: float) -> float:
        pass

    @abstractmethod
    def grad_wrt_features(self, x: np.ndarray, w: np.ndarray, a: float, t: float) -> np.ndarray:
        pass

    @abstractmethod
    def torch_value(self, a: torch.Tensor, t: float) -> torch.Tensor:
        """Same value as `value`, written with torch ops for autodiff."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}()"

class HingeLoss(Loss):
    """
    Hinge loss max(0, 1 - t'a) with t' = 2t - 1.

    For t = 1 this is max(0, t' - a). The subgradient at the kink
    (t'a == 1) is the zero vector.
    """

    name = "hinge"

    def value(self, a, t):
        return float(max(0.0, 1.0 - margin_target(t) * a))

    def grad_wrt_features(self, x, w, a, t):
        t_margin = margin_target(t)
        if t_margin * a < 1.0:
            return -t_margin * np.asarray(w, dtype=np.float64)
        return np.zeros_like(w, dtype=np.float64)

    def torch_value(self, a, t):
        return torch.relu(1.0 - margin_target(t) * a)

class CrossEntropyLoss(Loss):
    """Binary cross-entropy on the truncated logistic transform of the logit."""

    name = "crossentropy"

    def __init__(self, truncation: float = AlgorithmConfig.default_crossentropy_truncation):
        self.truncation = truncation

    def value(self, a, t):
        p = truncated_sigmoid(a, self.truncation)
        return float(-(t * np.log(p) + (1 - t) * np.log(1 - p)))

    def grad_wrt_features(self, x, w, a, t):
        p = truncated_sigmoid(a, self.truncation)
        return (p - t) * np.asarray(w, dtype=np.float64)

    def torch_value(self, a, t):
        p = truncated_sigmoid_torch(a, self.truncation)
        return -(t * torch.log(p) + (1 - t) * torch.log(1 - p))

    def __repr__(self):
        return f"CrossEntropyLoss(truncation={self.truncation})"

class SquaredErrorLoss(Loss):
    """Squared distance between the target label and the logit."""

    name = "mse"

    def value(self, a, t):
        return float((t - a) ** 2)

    def grad_wrt_features(self, x, w, a, t):
        return 2.0 * (a - t) * np.asarray(w, dtype=np.float64)

    def torch_value(self, a, t):
        return (t - a) ** 2

LOSSES: Dict[str, Type[Loss]] = {
    HingeLoss.name: HingeLoss,
    CrossEntropyLoss.name: CrossEntropyLoss,
    SquaredErrorLoss.name: SquaredErrorLoss,
}

def get_loss(loss: Union[str, Loss], truncation: float = AlgorithmConfig.default_crossentropy_truncation) -> Loss:
    """
    Resolves a loss name from LOSSES, or passes a Loss instance through.
    `truncation` only applies to the cross-entropy loss.
    """
    if isinstance(loss, Loss):
        return loss
    if loss not in LOSSES:
        raise ConfigurationError(f"Unknown loss: {loss!r}. Available: {sorted(LOSSES)}")
    if loss == CrossEntropyLoss.name:
        return CrossEntropyLoss(truncation=truncation)
    return LOSSES[loss]()
