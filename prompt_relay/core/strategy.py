"""
Interchangeable prompt similarity strategies.

The multi-metric strategy is the canonical one. The exact-match and positional
overlap strategies reproduce older, coarser comparisons and are kept so the
capture pipeline can be switched back to them through configuration.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod

from hydra.utils import instantiate as hydra_instantiate
from omegaconf import DictConfig, OmegaConf

from prompt_relay.core.scorer import (DEFAULT_PRECISION, DEFAULT_WEIGHTS,
                                      score_breakdown)

logger = logging.getLogger(__name__)


class SimilarityStrategy(ABC):
    """
    Abstract base class for prompt similarity strategies.
    Every strategy maps a pair of prompts to a score in [0, 1].
    """

    name: str = "base"

    @abstractmethod
    def score(self, prompt_a: str | None, prompt_b: str | None) -> float:
        """
        Compare two prompts.

        Args:
            prompt_a: First prompt
            prompt_b: Second prompt

        Returns:
            Score between 0 and 1 (1 being most similar)
        """
        pass

    def is_duplicate(self, prompt_a: str | None, prompt_b: str | None, threshold: float) -> bool:
        """Check if two prompts score at or above ``threshold``"""
        return self.score(prompt_a, prompt_b) >= threshold

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MultiMetricStrategy(SimilarityStrategy):
    """Weighted Jaccard, cosine and structural similarity (canonical)"""

    name = "multi_metric"

    def __init__(self, weights: dict[str, float] | None = None, precision: int = DEFAULT_PRECISION):
        if weights is None:
            weights = DEFAULT_WEIGHTS
        elif isinstance(weights, DictConfig):
            weights = OmegaConf.to_container(weights)
        weights = dict(weights)

        if set(weights) != set(DEFAULT_WEIGHTS):
            raise ValueError(f"Weights must be given for exactly {sorted(DEFAULT_WEIGHTS)}, got {sorted(weights)}")
        if any(value < 0 for value in weights.values()):
            raise ValueError(f"Weights must be non-negative: {weights}")
        if not math.isclose(sum(weights.values()), 1.0, abs_tol=1e-9):
            raise ValueError(f"Weights must sum to 1, got {sum(weights.values())}")

        self.weights = weights
        self.precision = precision

    def score(self, prompt_a: str | None, prompt_b: str | None) -> float:
        return score_breakdown(prompt_a, prompt_b, weights=self.weights, precision=self.precision).score

    def __repr__(self) -> str:
        return f"MultiMetricStrategy(weights={self.weights}, precision={self.precision})"


class ExactMatchStrategy(SimilarityStrategy):
    """
    1.0 when both prompts are equal after trimming surrounding whitespace, else 0.0.

    Unlike the multi-metric strategy, two empty or whitespace-only prompts
    count as identical. Set ``empty_prompts_match=False`` to score them 0.0
    and line up with ``similarity``.
    """

    name = "exact_match"

    def __init__(self, empty_prompts_match: bool = True):
        self.empty_prompts_match = empty_prompts_match

    def score(self, prompt_a: str | None, prompt_b: str | None) -> float:
        trimmed_a = (prompt_a or "").strip()
        trimmed_b = (prompt_b or "").strip()
        if not trimmed_a and not trimmed_b:
            return 1.0 if self.empty_prompts_match else 0.0
        return 1.0 if trimmed_a == trimmed_b else 0.0

    def __repr__(self) -> str:
        return f"ExactMatchStrategy(empty_prompts_match={self.empty_prompts_match})"


class PositionalOverlapStrategy(SimilarityStrategy):
    """Share of aligned character positions holding the same character"""

    name = "positional_overlap"

    def score(self, prompt_a: str | None, prompt_b: str | None) -> float:
        if not prompt_a or not prompt_b:
            return 0.0
        matches = sum(1 for char_a, char_b in zip(prompt_a, prompt_b) if char_a == char_b)
        return matches / max(len(prompt_a), len(prompt_b))


def build_strategy(cfg) -> SimilarityStrategy:
    """
    Instantiate the strategy selected in the config.

    Accepts either the full config (reads ``cfg.similarity.strategy``) or the
    strategy node itself.
    """
    node = cfg.similarity.strategy if "similarity" in cfg else cfg
    strategy = hydra_instantiate(node)
    if not isinstance(strategy, SimilarityStrategy):
        raise ValueError(f"Configured target is not a SimilarityStrategy: {type(strategy).__name__}")
    logger.debug(f"Using similarity strategy {strategy!r}")
    return strategy
