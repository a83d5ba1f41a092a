"""
Core prompt similarity engine.
"""

from .patterns import FORMAT_PATTERNS, FormatPattern
from .scorer import (InvalidPromptError, SimilarityBreakdown, score_breakdown,
                     similarity)
from .strategy import (ExactMatchStrategy, MultiMetricStrategy,
                       PositionalOverlapStrategy, SimilarityStrategy,
                       build_strategy)
from .structure import FormatSignature, structural_similarity

__all__ = [
    "similarity",
    "score_breakdown",
    "SimilarityBreakdown",
    "InvalidPromptError",
    "structural_similarity",
    "FormatSignature",
    "FormatPattern",
    "FORMAT_PATTERNS",
    "SimilarityStrategy",
    "MultiMetricStrategy",
    "ExactMatchStrategy",
    "PositionalOverlapStrategy",
    "build_strategy",
]
