"""
Unit tests for formatting patterns and structural similarity.
"""

import unittest

from prompt_relay.core.patterns import (FORMAT_PATTERNS, PATTERN_IDS,
                                        count_delimited)
from prompt_relay.core.structure import (FormatSignature, count_ratio,
                                         length_ratio, structural_similarity)


class TestFormatPatterns(unittest.TestCase):
    """Test the pattern table"""

    def test_pattern_order(self):
        self.assertEqual(
            PATTERN_IDS,
            ("bold", "header", "bullet", "brace", "bracket", "verb", "format"),
        )

    def test_patterns_are_frozen(self):
        with self.assertRaises(AttributeError):
            FORMAT_PATTERNS[0].id = "changed"

    def test_counts(self):
        """Test each matcher on a small sample"""
        text = (
            "## Task\n"
            "## Output\n"
            "- **Extract** the [name] and [ticker]\n"
            "- Analyze, then IDENTIFY risks\n"
            "Use this template: {\"a\": 1} {\"b\": {\"c\": 2}}\n"
            "Keep the format and structure."
        )
        counts = {pattern.id: pattern.count(text) for pattern in FORMAT_PATTERNS}
        self.assertEqual(counts, {
            "bold": 1,
            "header": 2,
            "bullet": 2,
            "brace": 2,
            "bracket": 2,
            "verb": 3,
            "format": 3,
        })

    def test_bullet_must_start_line(self):
        pattern = dict(zip(PATTERN_IDS, FORMAT_PATTERNS))["bullet"]
        self.assertEqual(pattern.count("a - b\n  - c\n-d"), 1)

    def test_brace_spans_lines(self):
        pattern = dict(zip(PATTERN_IDS, FORMAT_PATTERNS))["brace"]
        self.assertEqual(pattern.count("{\n  \"name\": 1\n}"), 1)

    def test_delimited_counters_match_regex(self):
        """Test the brace and bracket scans count like their regexes"""
        samples = [
            "",
            "{}",
            "[]",
            "{{{ }",
            "{ } } {",
            "{\"a\": {\"b\": 1}} {x",
            "[a] [b\n] [c] [[d]]",
            "[open\n[closed] ] [",
            "[[[\n]]]\n[x]",
            "- [Risk 1]\n- [Risk 2]\n{\n  \"k\": [1, 2]\n}\n[",
        ]
        for pattern in FORMAT_PATTERNS:
            if pattern.counter is None:
                continue
            for text in samples:
                with self.subTest(pattern=pattern.id, text=text):
                    expected = sum(1 for _ in pattern.regex.finditer(text))
                    self.assertEqual(pattern.count(text), expected)

    def test_unbalanced_delimiters_scan_linearly(self):
        """Test long runs of unclosed openers are counted without backtracking"""
        self.assertEqual(count_delimited("{" * 200_000, "{", "}"), 0)
        self.assertEqual(count_delimited("[" * 200_000 + "\n]", "[", "]", single_line=True), 0)
        self.assertEqual(count_delimited("{" * 200_000 + "}", "{", "}"), 1)
        self.assertEqual(count_delimited("[\n" * 100_000 + "]", "[", "]", single_line=True), 0)
        self.assertEqual(structural_similarity("{" * 100_000, "{" * 100_000), 1.0)


class TestFormatSignature(unittest.TestCase):
    """Test FormatSignature functionality"""

    def test_signature_of_prompt(self):
        signature = FormatSignature.of("## Task\n- **Extract** the [name]")
        self.assertEqual(signature.counts, {
            "bold": 1,
            "header": 1,
            "bullet": 1,
            "brace": 0,
            "bracket": 1,
            "verb": 1,
            "format": 0,
        })
        self.assertEqual(signature.length, 32)
        self.assertEqual(signature.total_matches, 5)

    def test_empty_prompt(self):
        signature = FormatSignature.of("")
        self.assertEqual(signature.length, 0)
        self.assertEqual(signature.total_matches, 0)


class TestStructuralSimilarity(unittest.TestCase):
    """Test structural_similarity functionality"""

    def test_count_ratio(self):
        self.assertEqual(count_ratio(0, 0), 1.0)
        self.assertEqual(count_ratio(2, 4), 0.5)
        self.assertEqual(count_ratio(0, 3), 0.0)

    def test_length_ratio(self):
        self.assertEqual(length_ratio(5, 10), 0.5)
        self.assertEqual(length_ratio(0, 0), 1.0)
        self.assertEqual(length_ratio(0, 4), 0.0)

    def test_identical_prompts(self):
        prompt = "## Report\n- **Identify** the format of [doc]"
        self.assertEqual(structural_similarity(prompt, prompt), 1.0)

    def test_two_empty_prompts(self):
        """Test the standalone guard for two empty prompts"""
        self.assertEqual(structural_similarity("", ""), 1.0)

    def test_single_differing_pattern(self):
        """Test one missing cue plus a length difference"""
        score = structural_similarity("hello", "**hello**")
        self.assertAlmostEqual(score, (6 + 5 / 9) / 8)

    def test_symmetric(self):
        prompt_a = "- one\n- two\n**bold** text"
        prompt_b = "## Heading\n{\"x\": [1]}"
        self.assertEqual(structural_similarity(prompt_a, prompt_b), structural_similarity(prompt_b, prompt_a))


if __name__ == '__main__':
    unittest.main()
