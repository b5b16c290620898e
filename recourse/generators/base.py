import numbers
import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Union

from ..configs import GenerationConfig
from ..exceptions import ConfigurationError
from ..models.wrappers import ScoringModel
from ..objectives import Loss, Penalty, get_loss, get_penalty
from ..utils.helpers import as_feature_vector
from .result import CounterfactualResult

class RecourseGenerator(ABC):
    """
    Base class for counterfactual generators.
    Resolves the configured loss and penalty and validates search arguments.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        loss: Optional[Union[str, Loss]] = None,
        penalty: Optional[Union[str, Penalty]] = None
    ):
        self.config = config if config is not None else GenerationConfig()
        if not isinstance(self.config, GenerationConfig):
            raise ConfigurationError(
                f"config must be a GenerationConfig, got {type(self.config).__name__}"
            )
        self.loss = get_loss(
            loss if loss is not None else self.config.loss,
            truncation=self.config.crossentropy_truncation
        )
        self.penalty = get_penalty(penalty if penalty is not None else self.config.penalty)

    @staticmethod
    def _check_target(target_label) -> int:
        if (
            isinstance(target_label, bool)
            or not isinstance(target_label, numbers.Integral)
            or target_label not in (0, 1)
        ):
            raise ConfigurationError(f"target_label must be 0 or 1, got {target_label!r}")
        return int(target_label)

    def _prepare_input(self, model: ScoringModel, original_input) -> np.ndarray:
        x_orig = as_feature_vector(original_input)
        # First model evaluation; raises DimensionMismatchError on bad shape
        model.logit(x_orig)
        return x_orig

    @abstractmethod
    def generate(self, model: ScoringModel, original_input, target_label: int, **kwargs) -> CounterfactualResult:
        pass

    def __repr__(self):
        return f"{type(self).__name__}(config={self.config}, loss={self.loss!r}, penalty={self.penalty!r})"
