"""Plain text formatter: one timestamped practice segment per line.

WHY: A printable sheet of the segments is handy for checking answers or
practising offline with the video paused at each mark.

RULES:
- Line format: "[MM:SS] text" (hours shown as "[H:MM:SS]" past one hour)
- Output suffix: "-segments.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from dictation_practice.core.ir import PracticeDeck
from dictation_practice.formatters.base import BaseFormatter, FormatterOutput


def format_clock(seconds: float) -> str:
    whole = int(max(0.0, seconds))
    hours, rem = divmod(whole, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return "{}:{:02d}:{:02d}".format(hours, minutes, secs)
    return "{:02d}:{:02d}".format(minutes, secs)


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces a timestamped plain text segment list."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, deck: PracticeDeck) -> List[FormatterOutput]:
        lines = [
            "[{}] {}".format(format_clock(segment.start), segment.text)
            for segment in deck.segments
        ]
        content = "\n".join(lines)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-segments.txt",
                content=content,
                media_type="text/plain",
            )
        ]
