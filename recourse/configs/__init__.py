from .algorithm_config import AlgorithmConfig
from .generation_config import GenerationConfig

__all__ = ["AlgorithmConfig", "GenerationConfig"]
