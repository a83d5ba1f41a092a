"""
Formatting cues used as a proxy for the shape of a prompt template.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass


def count_delimited(text: str, opener: str, closer: str, single_line: bool = False) -> int:
    """
    Count non-overlapping ``opener ... closer`` spans, shortest match first.

    Gives the same count as the lazy regex ``\\{[\\s\\S]*?\\}`` (or ``\\[.*?\\]``
    with ``single_line``) but in one left-to-right pass.
    """
    count = 0
    end = -1
    position = text.find(opener)
    while position != -1:
        # the first closer after an earlier opener is also the first after this one
        if end <= position:
            end = text.find(closer, position + 1)
            if end == -1:
                break
        if single_line:
            newline = text.find("\n", position + 1, end)
            if newline != -1:
                # no opener before this newline can reach a closer on its own line
                position = text.find(opener, newline + 1)
                continue
        count += 1
        position = text.find(opener, end + 1)
    return count


@dataclass(frozen=True)
class FormatPattern:
    """
    A named formatting cue and the regex that finds it in raw prompt text.

    ``counter`` replaces the regex scan for cues whose lazy regex backtracks
    quadratically on unbalanced input; it must return the regex's count.
    """
    id: str
    regex: re.Pattern
    counter: Callable[[str], int] | None = None

    def count(self, text: str) -> int:
        """Number of non-overlapping occurrences in ``text``."""
        if self.counter is not None:
            return self.counter(text)
        return sum(1 for _ in self.regex.finditer(text))


FORMAT_PATTERNS: tuple[FormatPattern, ...] = (
    FormatPattern("bold", re.compile(r"\*\*.*?\*\*")),
    FormatPattern("header", re.compile(r"##.*$", re.MULTILINE)),
    FormatPattern("bullet", re.compile(r"^-", re.MULTILINE)),
    FormatPattern(
        "brace",
        re.compile(r"\{[\s\S]*?\}"),
        counter=lambda text: count_delimited(text, "{", "}"),
    ),
    FormatPattern(
        "bracket",
        re.compile(r"\[.*?\]"),
        counter=lambda text: count_delimited(text, "[", "]", single_line=True),
    ),
    # imperative extraction verbs
    FormatPattern("verb", re.compile(r"extract|analyze|identify", re.IGNORECASE)),
    FormatPattern("format", re.compile(r"format|structure|template", re.IGNORECASE)),
)

PATTERN_IDS: tuple[str, ...] = tuple(pattern.id for pattern in FORMAT_PATTERNS)
