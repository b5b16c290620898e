class RecourseError(ValueError):
    """Base class for errors raised by recourse."""


class ConfigurationError(RecourseError):
    """Invalid generator configuration or search arguments."""


class DimensionMismatchError(RecourseError):
    """Candidate vector does not match the model's weight vector."""

    def __init__(self, expected: int, got):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Feature vector has shape {got}, expected a 1-D vector of length {expected}"
        )
