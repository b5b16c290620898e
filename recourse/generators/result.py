import enum
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import List, Optional

class SearchState(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"

@dataclass(frozen=True)
class CounterfactualResult:
    """
    Outcome of one counterfactual search.

    Attributes:
        path: Array of shape (iterations + 1, D). Row 0 is the original
            input, the last row is the final candidate.
        probabilities: Predicted probability of class 1 for every row of path.
        losses: Loss value for every row of path.
        penalties: Penalty value for every row of path (unweighted).
        iterations: Number of update steps taken.
        converged: True if the search ended in the CONVERGED state.
        state: Terminal state of the search.
        final_probability: Predicted probability of class 1 at the final candidate.
        target_label: Label the search was steering towards.
    """
    path: np.ndarray
    probabilities: np.ndarray
    losses: np.ndarray
    penalties: np.ndarray
    iterations: int
    converged: bool
    state: SearchState
    final_probability: float
    target_label: int

    @property
    def original(self) -> np.ndarray:
        return self.path[0]

    @property
    def counterfactual(self) -> np.ndarray:
        return self.path[-1]

    def distance(self, ord: Optional[float] = 2) -> float:
        """Norm of the change from the original input to the counterfactual."""
        return float(np.linalg.norm(self.counterfactual - self.original, ord=ord))

    def to_frame(self, feature_names: Optional[List[str]] = None) -> pd.DataFrame:
        """The optimization path as a DataFrame, one row per iteration."""
        if feature_names is None:
            feature_names = [f"x{i}" for i in range(self.path.shape[1])]
        df = pd.DataFrame(self.path, columns=feature_names)
        df.insert(0, 'iteration', np.arange(len(df)))
        df['probability'] = self.probabilities
        df['loss'] = self.losses
        df['penalty'] = self.penalties
        return df
