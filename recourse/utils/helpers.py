import torch
import numpy as np
from typing import Union

def truncated_sigmoid(a: Union[float, np.ndarray], bound: float) -> Union[float, np.ndarray]:
    """
    Logistic transform with the input clamped to [-bound, bound].

    Clamping keeps exp() away from overflow/underflow, so the result never
    reaches exactly 0 or 1.
    """
    a = np.clip(a, -bound, bound)
    p = np.exp(a)
    return p / (1.0 + p)

def truncated_sigmoid_torch(a: torch.Tensor, bound: float) -> torch.Tensor:
    """
    Torch version of truncated_sigmoid.
    The clamp is straight-through: the value is clamped but the gradient
    flows as if it were not, so autograd matches the closed-form gradients
    outside the bound too.
    """
    a = a + (torch.clamp(a, -bound, bound) - a).detach()
    p = torch.exp(a)
    return p / (1.0 + p)

def margin_target(t: float) -> float:
    """Maps a {0, 1} label to its {-1, +1} encoding."""
    return 2.0 * t - 1.0

def as_feature_vector(x) -> np.ndarray:
    """Copies list / Series / ndarray input into a float64 numpy vector."""
    if hasattr(x, "values") and not isinstance(x, np.ndarray):
        x = x.values
    return np.array(x, dtype=np.float64)
