from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from prompt_relay.core.patterns import FORMAT_PATTERNS, FormatPattern


class FormatSignature(BaseModel):
    """
    Formatting fingerprint of one raw prompt.

    Holds how often each formatting cue occurs plus the raw character length.
    Two signatures are compared by ``structural_similarity``.

    Example:
        signature = FormatSignature.of("## Task\\n- **Extract** the [name]")
        signature.counts["bullet"]  # 1
        signature.length            # 32
    """
    model_config = ConfigDict(frozen=True)

    counts: dict[str, int] = Field(description="Occurrences per pattern id")
    length: int = Field(description="Raw character length of the prompt")

    @classmethod
    def of(cls, prompt: str, patterns: tuple[FormatPattern, ...] = FORMAT_PATTERNS) -> FormatSignature:
        """Compute the signature of ``prompt``."""
        return cls(
            counts={pattern.id: pattern.count(prompt) for pattern in patterns},
            length=len(prompt),
        )

    @computed_field
    @property
    def total_matches(self) -> int:
        """Sum of all pattern occurrences."""
        return sum(self.counts.values())


def count_ratio(count_a: int, count_b: int) -> float:
    """1 for equal counts, falling towards 0 as they diverge. Two zeros are equal."""
    largest = max(count_a, count_b)
    if largest == 0:
        return 1.0
    return 1 - abs(count_a - count_b) / largest


def length_ratio(length_a: int, length_b: int) -> float:
    """Shorter over longer length. Two empty prompts are equally long."""
    longest = max(length_a, length_b)
    if longest == 0:
        return 1.0
    return min(length_a, length_b) / longest


def compare_signatures(
    signature_a: FormatSignature,
    signature_b: FormatSignature,
    patterns: tuple[FormatPattern, ...] = FORMAT_PATTERNS,
) -> float:
    """Mean of the per-pattern count ratios and the length ratio."""
    terms = [
        count_ratio(signature_a.counts[pattern.id], signature_b.counts[pattern.id])
        for pattern in patterns
    ]
    terms.append(length_ratio(signature_a.length, signature_b.length))
    return sum(terms) / len(terms)


def structural_similarity(prompt_a: str, prompt_b: str) -> float:
    """
    Similarity of the formatting shape of two raw (non-normalized) prompts.

    Args:
        prompt_a: First prompt, as sent by the caller
        prompt_b: Second prompt, as sent by the caller

    Returns:
        Unrounded score in [0, 1]. Safe to call on empty prompts.
    """
    return compare_signatures(FormatSignature.of(prompt_a), FormatSignature.of(prompt_b))
