"""Practice session state and the fetch-and-normalize entry point.

WHY: Every surface needs the same two things: a way to turn a video ID
into practice segments, and the step-through state of a dictation drill
(which segment is current, whether its text has been revealed, how the
last attempt scored). Keeping both here lets the CLI and any future UI
share one implementation instead of re-deriving it.

HOW: load_practice_segments() chains the caption adapter and the core
pipeline. PracticeSession holds a segment list and a cursor; submit()
scores an attempt, reveals the text, and records the result per segment.

RULES:
- A session needs at least one segment (ValueError otherwise)
- next()/previous() clamp at the ends and reset the attempt state
- The loop window of a segment is [start, start + duration)
- Results are kept per segment index; resubmitting overwrites
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from dictation_practice.adapters.ytdlp_source import fetch_captions
from dictation_practice.config import YOUTUBE_WATCH_URL
from dictation_practice.core.ir import Segment
from dictation_practice.core.pipeline import normalize_cues
from dictation_practice.core.scoring import score


async def load_practice_segments(video_id: str) -> List[Segment]:
    """Fetch a video's captions and normalize them into practice segments.

    Raises:
        CaptionSourceError: If the caption track cannot be obtained.
        NoSubtitlesError: If nothing survives normalization.
    """
    cues = await fetch_captions(video_id)
    return normalize_cues(cues)


@dataclass
class SessionSummary:
    """Aggregate results of a practice session."""

    total_segments: int
    attempted: int
    mean_accuracy: Optional[float]


class PracticeSession:
    """Cursor over a segment list with per-segment dictation results.

    WHY: Mirrors the practice page flow: listen to the current segment on
    loop, type, submit to reveal the text and see the accuracy, move on.
    """

    def __init__(self, video_id: str, segments: Sequence[Segment]) -> None:
        if not segments:
            raise ValueError("A practice session needs at least one segment")
        self.video_id = video_id
        self.segments: List[Segment] = list(segments)
        self.position = 0
        self.is_revealed = False
        self.accuracy: Optional[int] = None
        self._results: Dict[int, int] = {}

    @property
    def current(self) -> Segment:
        return self.segments[self.position]

    @property
    def is_first(self) -> bool:
        return self.position == 0

    @property
    def is_last(self) -> bool:
        return self.position == len(self.segments) - 1

    def _reset_attempt(self) -> None:
        self.is_revealed = False
        self.accuracy = None

    def next(self) -> bool:
        """Advance to the next segment. Returns False at the last one."""
        if self.is_last:
            return False
        self.position += 1
        self._reset_attempt()
        return True

    def previous(self) -> bool:
        """Go back one segment. Returns False at the first one."""
        if self.is_first:
            return False
        self.position -= 1
        self._reset_attempt()
        return True

    def submit(self, attempt: str) -> int:
        """Score ``attempt`` against the current segment and reveal its text."""
        accuracy = score(self.current.text, attempt)
        self.accuracy = accuracy
        self.is_revealed = True
        self._results[self.current.index] = accuracy
        return accuracy

    def loop_window(self) -> Tuple[float, float]:
        """Playback window (start, end) in seconds for the current segment."""
        return self.current.start, self.current.end

    def watch_url(self) -> str:
        """YouTube link that starts playback at the current segment."""
        start = int(math.floor(self.current.start))
        return YOUTUBE_WATCH_URL.format(video_id=self.video_id) + "&t={}s".format(start)

    def summary(self) -> SessionSummary:
        scores = list(self._results.values())
        mean = sum(scores) / len(scores) if scores else None
        return SessionSummary(
            total_segments=len(self.segments),
            attempted=len(scores),
            mean_accuracy=mean,
        )
