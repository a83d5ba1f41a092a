"""
Lexical similarity utilities for comparing captured prompts.
"""
import re

import numpy as np

# Closed list of English function words ignored by the lexical metrics.
STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "from", "as", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "shall", "this", "that",
    "these", "those", "your", "you", "all", "any", "each", "few", "more",
    "most", "other", "some", "such", "only", "own", "same", "so", "than",
    "too", "very", "just", "now",
})

MIN_TOKEN_LENGTH = 3

_PUNCTUATION_RE = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_prompt(prompt: str) -> list[str]:
    """
    Turn a raw prompt into its ordered sequence of meaningful tokens.

    Lower-cases, replaces punctuation with spaces, collapses whitespace and
    drops short tokens and stop words. Duplicates are kept.
    """
    text = _PUNCTUATION_RE.sub(" ", prompt.lower())
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return [
        word for word in text.split(" ")
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOP_WORDS
    ]


def jaccard_similarity(words_a: list[str], words_b: list[str]) -> float:
    """Intersection over union of two token sequences viewed as sets."""
    set_a = set(words_a)
    set_b = set(words_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def term_frequency_vectors(words_a: list[str], words_b: list[str]) -> tuple[np.ndarray, np.ndarray]:
    """Build aligned count vectors over the shared vocabulary of both sequences."""
    vocabulary = sorted(set(words_a) | set(words_b))
    index = {word: i for i, word in enumerate(vocabulary)}
    vector_a = np.zeros(len(vocabulary))
    vector_b = np.zeros(len(vocabulary))
    for word in words_a:
        vector_a[index[word]] += 1
    for word in words_b:
        vector_b[index[word]] += 1
    return vector_a, vector_b


def cosine_similarity(words_a: list[str], words_b: list[str]) -> float:
    """Cosine of the angle between the term-frequency vectors of two sequences."""
    vector_a, vector_b = term_frequency_vectors(words_a, words_b)
    magnitude_a = np.linalg.norm(vector_a)
    magnitude_b = np.linalg.norm(vector_b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    # float rounding can push parallel vectors a hair above 1
    return min(1.0, float(np.dot(vector_a, vector_b) / (magnitude_a * magnitude_b)))
