import logging
from typing import Optional, Union, List, Any
import pandas as pd
import numpy as np

from .models import load_model
from .configs import GenerationConfig
from .generators import GenericGenerator, CounterfactualResult
from .objectives import Loss, Penalty

logger = logging.getLogger(__name__)

class Explainer:
    """
    Main entry point for recourse.
    """

    def __init__(
        self,
        model: Any,
        config: Optional[GenerationConfig] = None,
        loss: Optional[Union[str, Loss]] = None,
        penalty: Optional[Union[str, Penalty]] = None,
        backend: str = 'auto',
        feature_names: Optional[List[str]] = None
    ):
        """
        Initialize the Explainer.

        Args:
            model: A ScoringModel, fitted sklearn LogisticRegression or linear PyTorch module
            config: Generator configuration (defaults to GenerationConfig())
            loss: Loss name or instance overriding config.loss
            penalty: Penalty name or instance overriding config.penalty
            backend: Backend type ('auto', 'pytorch', 'sklearn')
            feature_names: Column names used for DataFrame output
        """
        self.model = load_model(model, backend=backend)
        self.generator = GenericGenerator(config=config, loss=loss, penalty=penalty)
        if feature_names is not None and len(feature_names) != self.model.n_features:
            raise ValueError(
                f"Got {len(feature_names)} feature names for a model with {self.model.n_features} features"
            )
        self.feature_names = feature_names

    @property
    def config(self) -> GenerationConfig:
        return self.generator.config

    def explain(self, query_instance, target_class: int = 1) -> CounterfactualResult:
        """Runs a single search and returns the full result, path included."""
        return self.generator.generate(self.model, query_instance, target_class)

    def _to_frame(self, query_instances) -> pd.DataFrame:
        if isinstance(query_instances, pd.DataFrame):
            return query_instances
        if isinstance(query_instances, pd.Series):
            return query_instances.to_frame().T
        arr = np.asarray(query_instances, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        return pd.DataFrame(arr, columns=self._column_names(arr.shape[1]))

    def _column_names(self, n: int) -> List[str]:
        if self.feature_names is not None:
            return list(self.feature_names)
        return [f"x{i}" for i in range(n)]

    def generate_counterfactuals(
        self,
        query_instances: Union[pd.DataFrame, pd.Series, np.ndarray, List],
        target_class: int = 1
    ) -> pd.DataFrame:
        """
        Runs one independent search per query row.

        Returns:
            DataFrame with the final candidate of every search plus
            'original_index', 'converged', 'iterations' and 'probability' columns.
        """
        df = self._to_frame(query_instances)
        columns = list(df.columns)

        rows = []
        for idx, row in df.iterrows():
            result = self.explain(row.values, target_class=target_class)
            record = dict(zip(columns, result.counterfactual))
            record['original_index'] = idx
            record['converged'] = result.converged
            record['iterations'] = result.iterations
            record['probability'] = result.final_probability
            rows.append(record)

        n_converged = sum(r['converged'] for r in rows)
        logger.info("Generated %d counterfactuals (%d converged)", len(rows), n_converged)

        if not rows:
            return pd.DataFrame()

        return pd.DataFrame(rows, columns=columns + ['original_index', 'converged', 'iterations', 'probability'])
