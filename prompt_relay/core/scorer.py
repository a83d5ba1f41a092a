"""
Prompt similarity scoring.

Combines lexical set overlap, term-frequency cosine and formatting structure
into one score in [0, 1]. Used to spot near-identical prompts before they are
written to the capture log.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, Field

from prompt_relay.core.structure import structural_similarity
from prompt_relay.utils.similarity import (cosine_similarity,
                                           jaccard_similarity,
                                           normalize_prompt)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "jaccard": 0.3,
    "cosine": 0.4,
    "structural": 0.3,
})
DEFAULT_PRECISION = 3


class InvalidPromptError(TypeError):
    """Raised when a prompt is neither a string nor None."""


class SimilarityBreakdown(BaseModel):
    """Unrounded sub-scores of one comparison and the final rounded score."""
    jaccard: float = Field(0.0, description="Token set overlap")
    cosine: float = Field(0.0, description="Term-frequency cosine")
    structural: float = Field(0.0, description="Formatting shape similarity")
    score: float = Field(0.0, description="Weighted, rounded score")

    def __str__(self) -> str:
        return (
            f"score={self.score:.3f} (jaccard={self.jaccard:.3f}, "
            f"cosine={self.cosine:.3f}, structural={self.structural:.3f})"
        )


def round_half_up(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """Round a non-negative value half away from zero."""
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def _check_prompt(prompt) -> None:
    if prompt is not None and not isinstance(prompt, str):
        raise InvalidPromptError(f"Prompt must be a string or None, got {type(prompt).__name__}")


def score_breakdown(
    prompt_a: str | None,
    prompt_b: str | None,
    weights: Mapping[str, float] = DEFAULT_WEIGHTS,
    precision: int = DEFAULT_PRECISION,
) -> SimilarityBreakdown:
    """
    Score two prompts and keep the individual metrics.

    Args:
        prompt_a: First raw prompt (empty or None scores 0)
        prompt_b: Second raw prompt (empty or None scores 0)
        weights: Weight per metric, keyed jaccard/cosine/structural
        precision: Decimal places kept on the final score

    Returns:
        SimilarityBreakdown with unrounded sub-scores and the rounded score
    """
    _check_prompt(prompt_a)
    _check_prompt(prompt_b)
    if not prompt_a or not prompt_b:
        return SimilarityBreakdown()

    words_a = normalize_prompt(prompt_a)
    words_b = normalize_prompt(prompt_b)

    jaccard = jaccard_similarity(words_a, words_b)
    cosine = cosine_similarity(words_a, words_b)
    structural = structural_similarity(prompt_a, prompt_b)

    combined = (
        jaccard * weights["jaccard"]
        + cosine * weights["cosine"]
        + structural * weights["structural"]
    )
    breakdown = SimilarityBreakdown(
        jaccard=jaccard,
        cosine=cosine,
        structural=structural,
        score=min(1.0, round_half_up(combined, precision)),
    )
    logger.debug(f"Prompt similarity: {breakdown}")
    return breakdown


def similarity(prompt_a: str | None, prompt_b: str | None) -> float:
    """
    Similarity score between two prompts, from 0 (unrelated) to 1 (same).

    Returns 0 when either prompt is empty or None.
    """
    return score_breakdown(prompt_a, prompt_b).score
