from dataclasses import dataclass

@dataclass
class AlgorithmConfig:
    """
    Configuration for numerical stability and internal constants.
    """
    # Logit clamp used by LogisticModel.probability.
    # sigma(20) = 1 - 2e-9, so probabilities stay strictly inside (0, 1)
    sigmoid_threshold: float = 20.0

    # Logit clamp used inside the cross-entropy loss
    default_crossentropy_truncation: float = 8.0

    # Default decision threshold for predicted labels
    default_decision_threshold: float = 0.5

