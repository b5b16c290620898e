from .base import RecourseGenerator
from .generic import GenericGenerator, generate
from .result import CounterfactualResult, SearchState

__all__ = [
    "RecourseGenerator",
    "GenericGenerator",
    "generate",
    "CounterfactualResult",
    "SearchState",
]
