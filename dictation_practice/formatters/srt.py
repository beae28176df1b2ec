"""SRT subtitle formatter for normalized practice segments.

WHY: The cleaned segments make a far better subtitle file than the raw
auto-caption track: no duplicated lines, no word-by-word re-emission.
Learners load it into a local player to review a video after practice.

HOW: One numbered SRT block per segment, timed from segment start to
segment end. Timestamps are rendered as ``HH:MM:SS,mmm``.

RULES:
- Block numbers are 1-based (segment.index + 1)
- Blocks are separated by a blank line; output ends with a newline
- Output suffix: "-segments.srt"
- Media type: "application/x-subrip"
"""

from typing import List

from dictation_practice.core.ir import PracticeDeck
from dictation_practice.formatters.base import BaseFormatter, FormatterOutput


def format_srt_timestamp(seconds: float) -> str:
    """Render seconds as an SRT timestamp, e.g. 3.5 → "00:00:03,500"."""
    total_ms = int(round(max(0.0, seconds) * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


class SRTFormatter(BaseFormatter):
    """Formatter that produces a single SRT file of practice segments."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(self, deck: PracticeDeck) -> List[FormatterOutput]:
        blocks = []
        for segment in deck.segments:
            blocks.append("{}\n{} --> {}\n{}".format(
                segment.index + 1,
                format_srt_timestamp(segment.start),
                format_srt_timestamp(segment.end),
                segment.text,
            ))

        content = "\n\n".join(blocks)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-segments.srt",
                content=content,
                media_type="application/x-subrip",
            )
        ]
