from .losses import Loss, HingeLoss, CrossEntropyLoss, SquaredErrorLoss, LOSSES, get_loss
from .penalties import (
    Penalty,
    SquaredDistancePenalty,
    WeightedSquaredDistancePenalty,
    PENALTIES,
    get_penalty,
)
from .autodiff import AutodiffLoss, AutodiffPenalty

__all__ = [
    "Loss",
    "HingeLoss",
    "CrossEntropyLoss",
    "SquaredErrorLoss",
    "LOSSES",
    "get_loss",
    "Penalty",
    "SquaredDistancePenalty",
    "WeightedSquaredDistancePenalty",
    "PENALTIES",
    "get_penalty",
    "AutodiffLoss",
    "AutodiffPenalty",
]
