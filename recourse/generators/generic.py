import logging
import warnings
import numpy as np
from typing import Callable, Optional, Union

from tqdm import tqdm

from ..configs import GenerationConfig
from ..models.wrappers import ScoringModel
from ..objectives import Loss, Penalty
from .base import RecourseGenerator
from .result import CounterfactualResult, SearchState

logger = logging.getLogger(__name__)

class GenericGenerator(RecourseGenerator):
    """
    Gradient-descent counterfactual generator.

    Moves the candidate along the negative gradient of
    loss(logit(x), target) + penalty_weight * penalty(x, x_orig)
    until the model assigns the target label and the predicted probability
    has settled, or the iteration budget is spent.
    """

    def _next_state(
        self,
        model: ScoringModel,
        candidate: np.ndarray,
        prob: float,
        prev_prob: float,
        iteration: int,
        target_label: int
    ) -> SearchState:
        # Success needs the target label and a settled probability
        label = model.predicted_label(candidate, threshold=self.config.decision_threshold)
        if label == target_label and abs(prob - prev_prob) < self.config.convergence_tolerance:
            return SearchState.CONVERGED
        if iteration >= self.config.max_iterations:
            return SearchState.EXHAUSTED
        return SearchState.RUNNING

    def generate(
        self,
        model: ScoringModel,
        original_input,
        target_label: int,
        callback: Optional[Callable[[int, np.ndarray, float], None]] = None
    ) -> CounterfactualResult:
        """
        Search for a counterfactual of `original_input` with label `target_label`.

        Args:
            model: Frozen scoring model.
            original_input: Feature vector to explain (list, Series or ndarray).
            target_label: Desired label, 0 or 1.
            callback: Optional observer called after every update with
                (iteration, candidate, probability). It cannot alter the search.

        Returns:
            CounterfactualResult. Non-convergence is reported through
            `converged=False`, not raised.
        """
        target = self._check_target(target_label)
        x_orig = self._prepare_input(model, original_input)

        cfg = self.config
        w = model.weights

        candidate = x_orig.copy()
        prob = model.probability(candidate)
        path = [candidate.copy()]
        probs = [prob]
        losses = [self.loss.value(model.logit(candidate), target)]
        penalties = [self.penalty.value(candidate, x_orig)]

        state = SearchState.RUNNING
        iteration = 0

        logger.debug(
            "Starting search: target=%d, p0=%.6f, loss=%r, penalty=%r",
            target, prob, self.loss, self.penalty
        )

        iterator = range(cfg.max_iterations)
        if cfg.progress_bar:
            iterator = tqdm(iterator, desc="Generating recourse", leave=True)

        for _ in iterator:
            a = model.logit(candidate)
            loss_grad = self.loss.grad_wrt_features(candidate, w, a, target)
            penalty_grad = self.penalty.grad(candidate, x_orig)

            candidate = candidate - cfg.step_size * (loss_grad + cfg.penalty_weight * penalty_grad)
            iteration += 1

            prev_prob = prob
            prob = model.probability(candidate)
            path.append(candidate.copy())
            probs.append(prob)
            losses.append(self.loss.value(model.logit(candidate), target))
            penalties.append(self.penalty.value(candidate, x_orig))

            state = self._next_state(model, candidate, prob, prev_prob, iteration, target)

            logger.debug("iter %d: p=%.6f, loss=%.6f, state=%s", iteration, prob, losses[-1], state.value)

            if cfg.progress_bar:
                iterator.set_postfix({'Prob': f"{prob:.3f}", 'Loss': f"{losses[-1]:.4f}"})

            if callback is not None:
                callback(iteration, candidate.copy(), prob)

            if state is not SearchState.RUNNING:
                break

        if cfg.progress_bar:
            iterator.close()

        converged = state is SearchState.CONVERGED
        if converged:
            logger.info("Converged after %d iterations (p=%.4f)", iteration, prob)
        else:
            warnings.warn(
                f"Counterfactual search did not converge within {cfg.max_iterations} iterations "
                f"(p={prob:.4f}, target={target}). Try to increase max_iterations or step_size",
                UserWarning
            )

        path_arr = np.vstack(path)
        probs_arr = np.asarray(probs, dtype=np.float64)
        losses_arr = np.asarray(losses, dtype=np.float64)
        penalties_arr = np.asarray(penalties, dtype=np.float64)
        for arr in (path_arr, probs_arr, losses_arr, penalties_arr):
            arr.setflags(write=False)

        return CounterfactualResult(
            path=path_arr,
            probabilities=probs_arr,
            losses=losses_arr,
            penalties=penalties_arr,
            iterations=iteration,
            converged=converged,
            state=state,
            final_probability=prob,
            target_label=target
        )

def generate(
    model: ScoringModel,
    original_input,
    target_label: int,
    config: Optional[GenerationConfig] = None,
    loss: Optional[Union[str, Loss]] = None,
    penalty: Optional[Union[str, Penalty]] = None,
    callback: Optional[Callable[[int, np.ndarray, float], None]] = None
) -> CounterfactualResult:
    """Runs one search with a GenericGenerator built from `config`."""
    generator = GenericGenerator(config=config, loss=loss, penalty=penalty)
    return generator.generate(model, original_input, target_label, callback=callback)
