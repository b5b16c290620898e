import torch
import torch.nn as nn
import numpy as np
from abc import ABC, abstractmethod
from typing import Union

from ..configs import AlgorithmConfig
from ..exceptions import DimensionMismatchError
from ..utils.helpers import truncated_sigmoid, as_feature_vector

class ScoringModel(ABC):
    """
    Abstract base class for scoring models.

    A scoring model is a frozen, read-only collaborator of the generator:
    it exposes its weights and computes logits, probabilities and labels
    for a candidate feature vector.
    """

    @property
    @abstractmethod
    def weights(self) -> np.ndarray:
        pass

    @property
    @abstractmethod
    def bias(self) -> float:
        pass

    @abstractmethod
    def logit(self, x) -> float:
        pass

    @abstractmethod
    def probability(self, x) -> float:
        pass

    @property
    def n_features(self) -> int:
        return self.weights.shape[0]

    def predicted_label(self, x, threshold: float = AlgorithmConfig.default_decision_threshold) -> int:
        """Label 1 if probability(x) is above the threshold, else 0."""
        return int(self.probability(x) > threshold)

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Returns [P(y=0), P(y=1)] for each row of X."""
        X = np.atleast_2d(np.asarray(X, dtype=np.float64))
        probs_1 = np.array([self.probability(row) for row in X])
        return np.stack([1 - probs_1, probs_1], axis=1)

class LogisticModel(ScoringModel):
    """
    Linear decision function a = w.x + b with a truncated logistic link.
    """

    def __init__(
        self,
        weights,
        bias: float = 0.0,
        truncation: float = AlgorithmConfig.sigmoid_threshold
    ):
        w = as_feature_vector(weights).reshape(-1)
        if w.size == 0:
            raise ValueError("weights must contain at least one element")
        w.setflags(write=False)
        self._weights = w
        self._bias = float(np.asarray(bias, dtype=np.float64).reshape(-1)[0])
        self.truncation = truncation

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def bias(self) -> float:
        return self._bias

    def _check(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1 or x.shape[0] != self._weights.shape[0]:
            raise DimensionMismatchError(self._weights.shape[0], x.shape)
        return x

    def logit(self, x) -> float:
        x = self._check(x)
        return float(self._weights @ x + self._bias)

    def probability(self, x) -> float:
        return float(truncated_sigmoid(self.logit(x), self.truncation))

    def __repr__(self):
        return f"LogisticModel(weights={self._weights.tolist()}, bias={self._bias})"

def _from_linear(layer: nn.Linear) -> LogisticModel:
    if layer.out_features != 1:
        raise ValueError(
            f"Expected a single-output linear layer, got out_features={layer.out_features}"
        )
    weight = layer.weight.detach().cpu().double().view(-1).numpy()
    bias = layer.bias.detach().cpu().double().item() if layer.bias is not None else 0.0
    return LogisticModel(weight, bias)

def from_torch(model: nn.Module) -> LogisticModel:
    """
    Converts a PyTorch linear model into a LogisticModel.
    Accepts nn.Linear(D, 1) or an nn.Sequential whose only parametric layer is one.
    """
    # Handle DataParallel or DistributedDataParallel
    if isinstance(model, (nn.DataParallel, nn.parallel.DistributedDataParallel)):
        model = model.module

    if isinstance(model, nn.Linear):
        return _from_linear(model)

    linears = [m for m in model.modules() if isinstance(m, nn.Linear)]
    others = [
        m for m in model.modules()
        if m is not model and not isinstance(m, nn.Linear) and any(True for _ in m.parameters(recurse=False))
    ]
    if len(linears) != 1 or others:
        raise NotImplementedError(
            "Only linear PyTorch models (a single nn.Linear layer) are supported."
        )
    return _from_linear(linears[0])

def from_sklearn(model) -> LogisticModel:
    """Converts a fitted binary sklearn linear classifier into a LogisticModel."""
    from sklearn.linear_model import LogisticRegression

    if not isinstance(model, LogisticRegression):
        raise NotImplementedError("Only LogisticRegression is currently supported for Sklearn backend.")
    if not hasattr(model, "coef_"):
        raise ValueError("LogisticRegression must be fitted before it can be explained.")
    if model.coef_.shape[0] != 1:
        raise ValueError(
            f"Only binary LogisticRegression is supported, got {model.coef_.shape[0]} classes"
        )
    return LogisticModel(model.coef_[0], model.intercept_[0])

def load_model(model, backend: str = 'auto') -> ScoringModel:
    if isinstance(model, ScoringModel):
        return model
    if backend == 'auto':
        if isinstance(model, nn.Module):
            return from_torch(model)
        else:
            return from_sklearn(model)
    elif backend == 'pytorch':
        return from_torch(model)
    elif backend == 'sklearn':
        return from_sklearn(model)
    else:
        raise ValueError(f"Unknown backend: {backend}")
