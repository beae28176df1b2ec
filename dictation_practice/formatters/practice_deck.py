"""JSON practice deck formatter, validated against a packaged JSON schema.

WHY: A deck saved to disk can be reloaded later, shared, or fed to another
front-end without re-fetching captions. Its layout is exactly the body of
a successful ``GET /subtitles`` response so both sources are
interchangeable.

HOW: Serializes the deck as ``{"videoId", "count", "segments"}`` and
validates the dict with jsonschema before returning it.

RULES:
- Output suffix is "-segments.json"
- Schema validation is mandatory — raises on invalid output
- The schema is loaded once and cached at module level
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from dictation_practice.core.ir import PracticeDeck
from dictation_practice.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "practice_deck_schema.json"


def _load_schema() -> dict[str, Any]:
    """Load the practice deck JSON schema from disk."""
    with open(_SCHEMA_PATH) as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def deck_to_dict(deck: PracticeDeck) -> dict[str, Any]:
    return {
        "videoId": deck.video_id,
        "count": deck.count,
        "segments": [segment.to_dict() for segment in deck.segments],
    }


class PracticeDeckFormatter(BaseFormatter):
    """Formatter that produces the JSON practice deck."""

    @property
    def name(self) -> str:
        return "Practice Deck JSON"

    def format(self, deck: PracticeDeck) -> list[FormatterOutput]:
        """Convert the deck into schema-validated JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the practice deck schema.
        """
        output = deck_to_dict(deck)
        jsonschema.validate(instance=output, schema=_get_schema())

        return [
            FormatterOutput(
                suffix="-segments.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
