from .config import load_config
from .helpers import truncated_sigmoid, truncated_sigmoid_torch, margin_target, as_feature_vector

__all__ = [
    "load_config",
    "truncated_sigmoid",
    "truncated_sigmoid_torch",
    "margin_target",
    "as_feature_vector",
]
