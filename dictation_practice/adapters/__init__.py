"""Adapter modules for obtaining raw caption cues from external sources.

WHY: The core pipeline only understands RawCue lists. Adapters bridge the
outside world (the yt-dlp process, WebVTT files) to that representation so
each side can evolve independently.

HOW: vtt_parser turns WebVTT text into RawCue objects; ytdlp_source runs
the external tool under strict limits and hands its track to the parser.

RULES:
- Adapters are the only place that touches processes or the filesystem
- Adapter failures surface as CaptionSourceError subclasses
- Parse anomalies are logged and skipped, never raised
"""

from dictation_practice.adapters.vtt_parser import parse_vtt
from dictation_practice.adapters.ytdlp_source import (
    CaptionFetchTimeoutError,
    CaptionOutputTooLargeError,
    CaptionsNotFoundError,
    CaptionSourceError,
    fetch_captions,
)

__all__ = [
    "CaptionFetchTimeoutError",
    "CaptionOutputTooLargeError",
    "CaptionSourceError",
    "CaptionsNotFoundError",
    "fetch_captions",
    "parse_vtt",
]
