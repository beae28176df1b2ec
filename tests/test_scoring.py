"""Unit tests for dictation accuracy scoring.

WHY: The accuracy number is the only feedback the learner gets. It must
ignore case and punctuation, reward correct words regardless of order,
never double-count, and penalize padding the attempt with extra words.

HOW: Tests cover normalize_text() and each scoring rule in evaluation
order: empty attempt, exact match, bag matching, extra-word penalty,
rounding, and clamping.

RULES:
- Rounding is half-up: 97.5 → 98
"""

import pytest

from dictation_practice.core.scoring import normalize_text, score


class TestNormalizeText:
    """normalize_text() lowercases, strips punctuation, collapses spaces."""

    def test_lowercases(self):
        assert normalize_text("HeLLo") == "hello"

    def test_strips_punctuation(self):
        assert normalize_text("Hello, world! It's") == "hello world its"

    def test_collapses_and_trims_whitespace(self):
        assert normalize_text("  a \t b\n\nc  ") == "a b c"

    def test_keeps_digits_and_underscores(self):
        assert normalize_text("R2_D2 is 3ft.") == "r2_d2 is 3ft"

    def test_punctuation_only_becomes_empty(self):
        assert normalize_text("?!...") == ""


class TestEmptyAndExact:
    """Rules 1 and 2: empty attempt and exact match."""

    def test_empty_attempt_scores_zero(self):
        assert score("hello world", "") == 0

    def test_whitespace_attempt_scores_zero(self):
        assert score("hello world", "   ") == 0

    def test_punctuation_attempt_scores_zero(self):
        assert score("hello world", "?!") == 0

    def test_identical_text_scores_100(self):
        assert score("The quick brown fox.", "The quick brown fox.") == 100

    def test_case_and_punctuation_are_ignored(self):
        assert score("Hello, World!", "hello world") == 100

    def test_empty_reference_with_attempt_scores_zero(self):
        assert score("", "anything") == 0


class TestWordMatching:
    """Rule 3/4: order-independent matching with single-use attempt words."""

    def test_partial_match(self):
        # 2 of 4 reference words.
        assert score("one two three four", "one two") == 50

    def test_order_does_not_matter(self):
        assert score("one two three four", "four three two one") == 100

    def test_attempt_word_is_used_once(self):
        # "the" appears twice in the reference but once in the attempt.
        assert score("the cat the dog", "the cat dog") == 75

    def test_repeated_attempt_words_do_not_inflate(self):
        # 3 matched ("a", "a", "b") out of 4; no extra words.
        assert score("a a b c", "a a b b") == 75

    def test_no_matches(self):
        assert score("hello world", "goodbye moon") == 0

    def test_misspelled_word_does_not_match(self):
        assert score("coffee matters", "cofee matters") == 50


class TestExtraWordPenalty:
    """Rules 5/6: extra attempt words cost 10 points per reference length."""

    def test_quick_brown_fox_example(self):
        # base 100, penalty 1/4*10 = 2.5 → 97.5 rounds half-up to 98
        assert score("The quick brown fox", "the quick brown fox jumps") == 98

    def test_extra_words_score_below_100(self):
        result = score("a b c", "a b c d e")
        assert result < 100
        # penalty 2/3*10 = 6.67 → 93.33 → 93
        assert result == 93

    def test_penalty_is_clamped_at_zero(self):
        attempt = " ".join(["x"] * 50)
        assert score("hello", attempt) == 0

    def test_no_penalty_when_attempt_is_shorter(self):
        assert score("a b c d", "a b c") == 75

    @pytest.mark.parametrize("reference,attempt,expected", [
        ("a b", "a b c", 95),
        ("a b c d e f g h", "a b c d e f g h i", 99),
        ("one", "one two three", 80),
    ])
    def test_penalty_values(self, reference, attempt, expected):
        assert score(reference, attempt) == expected


class TestScoreRange:
    """Scores are integers within [0, 100]."""

    @pytest.mark.parametrize("reference,attempt", [
        ("hello world", "hello"),
        ("a", "a a a a a a a a a a a a"),
        ("It's a test.", "its a test"),
        ("x y z", "z"),
    ])
    def test_range(self, reference, attempt):
        result = score(reference, attempt)
        assert isinstance(result, int)
        assert 0 <= result <= 100
