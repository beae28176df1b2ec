"""Export formatter registry — pluggable format hub.

WHY: The CLI and API layers need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dictation_practice.formatters.plain_text import PlainTextFormatter
from dictation_practice.formatters.practice_deck import PracticeDeckFormatter
from dictation_practice.formatters.srt import SRTFormatter

if TYPE_CHECKING:
    from dictation_practice.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "practice_deck": PracticeDeckFormatter,
    "srt": SRTFormatter,
    "plain_text": PlainTextFormatter,
}
