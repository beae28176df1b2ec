"""Intermediate representation dataclasses for captions and practice segments.

WHY: The caption source yields a flat, noisy list of timestamped cues.
The practice surfaces (API, CLI session, export formatters) need a clean,
indexed list. Two small records make the before/after explicit and let
every pass of the pipeline be typed end to end.

HOW: Three dataclasses:
  RawCue        — one caption unit as delivered by the source (text, start, duration)
  Segment       — a finalized practice unit, RawCue plus its position index
  PracticeDeck  — a video ID with its segments, the unit exporters consume

RULES:
- RawCue and Segment are frozen; passes build new records with dataclasses.replace
- All times are float seconds
- Segment.index is assigned only after all cleanup passes, never carried over
- end is derived (start + duration), never stored
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class RawCue:
    """A single timestamped caption unit from a subtitle source.

    RULES:
    - text: caption text exactly as the source produced it (untrimmed)
    - start: offset in seconds, >= 0
    - duration: length in seconds, >= 0
    - Order in a sequence is arrival order, assumed but not guaranteed
      to be non-decreasing in start
    """

    text: str
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True)
class Segment:
    """A finalized, indexed practice unit shown for one dictation attempt.

    WHY: The learner steps through segments by position; the index is the
    stable handle used by the API response and the practice session.

    RULES:
    - index is the 0-based position in the final sequence
    - duration covers the whole span of any cues merged into it
    """

    text: str
    start: float
    duration: float
    index: int

    @property
    def end(self) -> float:
        return self.start + self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "start": self.start,
            "duration": self.duration,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Segment:
        """Parse a Segment from an API response dict."""
        return cls(
            text=data["text"],
            start=float(data["start"]),
            duration=float(data["duration"]),
            index=int(data["index"]),
        )


@dataclass
class PracticeDeck:
    """A video's complete list of practice segments.

    WHY: Export formatters need the video ID (for naming and links) along
    with the segments, the same way the API response bundles them.

    RULES:
    - segments are ordered by index, 0..N-1
    - count is derived, never stored
    """

    video_id: str
    segments: List[Segment]

    @property
    def count(self) -> int:
        return len(self.segments)
