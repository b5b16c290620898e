from .wrappers import ScoringModel, LogisticModel, from_torch, from_sklearn, load_model

__all__ = ["ScoringModel", "LogisticModel", "from_torch", "from_sklearn", "load_model"]
