"""
Automatic-differentiation counterparts of the closed-form objectives.

The closed forms in ``losses`` and ``penalties`` are what the generator uses
by default. The wrappers here compute the same gradients with torch.autograd
and can be passed to the generator in their place.
"""
import torch
import numpy as np

from .losses import Loss
from .penalties import Penalty

def _leaf(x) -> torch.Tensor:
    return torch.tensor(np.asarray(x, dtype=np.float64), dtype=torch.float64, requires_grad=True)

class AutodiffLoss(Loss):
    """Wraps a Loss and differentiates its torch_value through the linear logit."""

    def __init__(self, loss: Loss):
        self.loss = loss
        self.name = f"autodiff_{loss.name}"

    def value(self, a, t):
        return self.loss.value(a, t)

    def grad_wrt_features(self, x, w, a, t):
        x_t = _leaf(x)
        w_t = torch.tensor(np.array(w, dtype=np.float64))
        # Recover the bias so the graph reproduces the caller's logit exactly
        bias = float(a) - float(np.dot(w, x))
        a_t = torch.dot(w_t, x_t) + bias
        self.loss.torch_value(a_t, float(t)).backward()
        return x_t.grad.numpy().copy()

    def torch_value(self, a, t):
        return self.loss.torch_value(a, t)

    def __repr__(self):
        return f"AutodiffLoss({self.loss!r})"

class AutodiffPenalty(Penalty):
    """Wraps a Penalty and differentiates its torch_value."""

    def __init__(self, penalty: Penalty):
        self.penalty = penalty
        self.name = f"autodiff_{penalty.name}"

    def value(self, x, x_orig):
        return self.penalty.value(x, x_orig)

    def grad(self, x, x_orig):
        x_t = _leaf(x)
        x_orig_t = torch.tensor(np.array(x_orig, dtype=np.float64))
        self.penalty.torch_value(x_t, x_orig_t).backward()
        return x_t.grad.numpy().copy()

    def torch_value(self, x, x_orig):
        return self.penalty.torch_value(x, x_orig)

    def __repr__(self):
        return f"AutodiffPenalty({self.penalty!r})"
