"""Word-level accuracy scoring for a dictation attempt.

WHY: After typing what they heard, the learner needs a single number that
says how close they got. Exact string comparison is too harsh (case and
punctuation are not what is being practised) and character edit distance
rewards near-miss spellings of the wrong word.

HOW: Both strings are normalized (lowercase, punctuation stripped,
whitespace collapsed). An exact match scores 100. Otherwise each
reference word claims the first unclaimed equal attempt word; the share
of claimed reference words is the base score, and words typed beyond the
reference length cost a small penalty.

RULES:
- Empty attempt (after normalization) → 0
- Identical normalized strings → 100
- Matching is order-independent, and each attempt word is used at most once
- Earlier reference words get first pick of duplicate attempt words
- penalty = extra_words / reference_words * 10
- Final score is rounded half-up and clamped at 0
- A reference that normalizes to nothing scores 0 for any attempt
"""

from __future__ import annotations

import math
import re
from typing import List

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

# Percentage points lost per extra word, relative to the reference length.
_EXTRA_WORD_PENALTY = 10.0


def normalize_text(text: str) -> str:
    """Lowercase, strip punctuation, and collapse whitespace.

    >>> normalize_text("  Hello,   World! ")
    'hello world'
    """
    text = _NON_WORD_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _count_matches(reference_words: List[str], attempt_words: List[str]) -> int:
    used = [False] * len(attempt_words)
    matched = 0
    for ref_word in reference_words:
        for i, attempt_word in enumerate(attempt_words):
            if not used[i] and attempt_word == ref_word:
                used[i] = True
                matched += 1
                break
    return matched


def score(reference: str, attempt: str) -> int:
    """Score a dictation attempt against the reference text.

    Args:
        reference: The segment's real caption text.
        attempt: What the learner typed.

    Returns:
        Integer accuracy percentage in [0, 100].
    """
    reference_norm = normalize_text(reference)
    attempt_norm = normalize_text(attempt)

    if not attempt_norm:
        return 0
    if attempt_norm == reference_norm:
        return 100
    if not reference_norm:
        return 0

    reference_words = reference_norm.split(" ")
    attempt_words = attempt_norm.split(" ")

    matched = _count_matches(reference_words, attempt_words)
    base = matched / len(reference_words) * 100

    extra = max(0, len(attempt_words) - len(reference_words))
    penalty = extra / len(reference_words) * _EXTRA_WORD_PENALTY

    return _round_half_up(max(0.0, base - penalty))
