"""recourse: gradient-based counterfactual explanations for linear classifiers."""

from .exceptions import RecourseError, ConfigurationError, DimensionMismatchError
from .configs import AlgorithmConfig, GenerationConfig
from .models import ScoringModel, LogisticModel, load_model
from .objectives import (
    Loss,
    HingeLoss,
    CrossEntropyLoss,
    SquaredErrorLoss,
    Penalty,
    SquaredDistancePenalty,
    WeightedSquaredDistancePenalty,
    AutodiffLoss,
    AutodiffPenalty,
    get_loss,
    get_penalty,
)
from .generators import GenericGenerator, CounterfactualResult, SearchState, generate
from .explainer import Explainer
from .utils import load_config

__version__ = "0.1.0"
