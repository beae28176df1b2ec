"""Caption normalization: deduplication, short-segment merge, progressive-reveal
removal, and indexing.

WHY: Auto-generated captions are unusable for dictation as delivered. The
same line is often emitted several times in a row, long sentences are
chopped into sub-second fragments, and the caption engine re-emits a
growing sentence fragment by fragment ("hello", "hello world", ...). The
learner needs one clean segment per phrase with timing that covers what
is actually spoken.

HOW: Three single-pass folds, each producing a fresh list of new RawCue
records, followed by indexing:
  1. deduplicate — collapse consecutive identical texts, extending timing
  2. merge_short_segments — fold entries under 0.8s into the previous one
  3. remove_progressive_reveals — drop entries the next entry extends
  4. index_segments — assign 0-based positions
normalize_cues() chains all four and rejects an empty result.

RULES:
- Input order is trusted; nothing is ever re-sorted
- Every merge compares only against the last emitted output entry
- Merged duration is (last absorbed end) - (entry start), never a sum
- The short-segment threshold applies to the incoming entry's own
  duration; a merged result is not re-checked
- Progressive-reveal removal never moves timing onto the survivor
- Text comparisons are exact and case-sensitive
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List

from dictation_practice.config import MIN_SEGMENT_DURATION_S
from dictation_practice.core.ir import RawCue, Segment

logger = logging.getLogger(__name__)


class NoSubtitlesError(ValueError):
    """Raised when normalization leaves no segments to practise.

    WHY: A caption track made entirely of noise normalizes to nothing.
    Callers treat this the same as a missing caption track.
    """


def deduplicate(cues: Iterable[RawCue]) -> List[RawCue]:
    """Collapse consecutive cues with identical text into one.

    HOW: When the current cue's text equals the last output entry's text,
    the last entry is replaced by one whose end time is the current cue's
    end time. Any gap between the two spans is absorbed.

    RULES:
    - Only the immediately preceding output entry is compared
    - Non-consecutive repeats of the same text are kept as distinct entries
    - Equality is exact: case-sensitive, no trimming
    """
    output: List[RawCue] = []
    for cue in cues:
        if output and output[-1].text == cue.text:
            prev = output[-1]
            output[-1] = replace(prev, duration=cue.end - prev.start)
        else:
            output.append(replace(cue))
    return output


def merge_short_segments(
    cues: Iterable[RawCue],
    min_duration: float = MIN_SEGMENT_DURATION_S,
) -> List[RawCue]:
    """Fold entries shorter than ``min_duration`` into the previous entry.

    HOW: A short entry's text is appended to the last output entry with a
    single space, and that entry's duration is stretched to end where the
    short entry ends. A run of short entries all land in the same growing
    entry because each one merges into whatever is currently last.

    RULES:
    - The threshold is checked against the incoming entry, not the result
    - A leading short entry has no merge target and is kept as-is
    - The join is always exactly one space, with no trimming on either side
    """
    output: List[RawCue] = []
    for cue in cues:
        if cue.duration < min_duration and output:
            prev = output[-1]
            output[-1] = RawCue(
                text=prev.text + " " + cue.text,
                start=prev.start,
                duration=cue.end - prev.start,
            )
        else:
            output.append(replace(cue))
    return output


def remove_progressive_reveals(cues: Iterable[RawCue]) -> List[RawCue]:
    """Drop entries whose text the following entry repeats and extends.

    HOW: An entry is dropped when the next entry's text starts with the
    entry's text plus a single space. The survivor keeps its own start and
    duration, so it slightly undercounts the on-screen time of the phrase.

    RULES:
    - The last entry is always kept
    - Chains collapse naturally: "a", "a b", "a b c" leaves only "a b c"
    """
    items = list(cues)
    output: List[RawCue] = []
    for position, cue in enumerate(items):
        if position + 1 < len(items) and items[position + 1].text.startswith(cue.text + " "):
            continue
        output.append(replace(cue))
    return output


def index_segments(cues: Iterable[RawCue]) -> List[Segment]:
    """Assign each cue its 0-based position in the final sequence."""
    return [
        Segment(text=cue.text, start=cue.start, duration=cue.duration, index=index)
        for index, cue in enumerate(cues)
    ]


def normalize_cues(
    cues: Iterable[RawCue],
    min_duration: float = MIN_SEGMENT_DURATION_S,
) -> List[Segment]:
    """Run the full cleanup pipeline and return indexed practice segments.

    Args:
        cues: Raw caption cues in arrival order.
        min_duration: Short-segment merge threshold in seconds.

    Returns:
        Indexed segments, ready to be served to the learner.

    Raises:
        NoSubtitlesError: If no segments survive the cleanup passes.
    """
    raw = list(cues)
    logger.info("Normalizing %d raw cues", len(raw))

    deduplicated = deduplicate(raw)
    logger.info("After deduplication: %d cues", len(deduplicated))

    merged = merge_short_segments(deduplicated, min_duration=min_duration)
    logger.info("After merging short segments: %d cues", len(merged))

    cleaned = remove_progressive_reveals(merged)
    logger.info("After removing progressive reveals: %d cues", len(cleaned))

    segments = index_segments(cleaned)
    if not segments:
        raise NoSubtitlesError("No subtitles available after normalization")

    logger.info("Final segment count: %d", len(segments))
    return segments
