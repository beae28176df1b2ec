"""Export formatter interface and the file record each formatter returns.

WHY: The CLI writes exports to disk and the API streams them as
downloads. Both only need a display name and a way to render a
PracticeDeck into file content, so every export format implements the
same two members.

HOW: BaseFormatter declares ``name`` and ``format(deck)``. A formatter
returns FormatterOutput records: suffix, rendered text, MIME type.

RULES:
- ``format()`` returns a list; all current exports render a single file
- ``suffix`` starts with a hyphen and is appended to the video ID
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from dictation_practice.core.ir import PracticeDeck


@dataclass
class FormatterOutput:
    """A rendered export file.

    Attributes:
        suffix: Appended to the video ID to name the file,
                e.g. ``"-segments.srt"`` gives ``"DNgddXIq3zU-segments.srt"``.
        content: Rendered file text.
        media_type: Content type sent by the API, e.g. ``"text/plain"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Base class for practice deck exporters.

    New formats subclass this in formatters/ and add a key to
    FORMATTERS in formatters/__init__.py.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name listed by GET /formats, e.g. 'SRT Subtitles'."""

    @abstractmethod
    def format(self, deck: PracticeDeck) -> list[FormatterOutput]:
        """Render ``deck`` into export files.

        Args:
            deck: Video ID plus its normalized, indexed segments.

        Returns:
            FormatterOutput records, one per file.
        """
