"""WebVTT caption track parser producing RawCue lists.

WHY: yt-dlp saves YouTube's caption track as a WebVTT file. Auto-generated
tracks are full of karaoke-style markup: per-word timing tags
(``<00:00:01.234><c> word</c>``), styling directives, and cues that
repeat the previous line above the growing current line. The pipeline
needs plain text with start/duration per cue.

HOW: A short line pass prepares the track, then webvtt-py parses it into
captions. The preparation drops the whitespace-only lines yt-dlp writes
inside cues, skips cues whose timing line is malformed (with a warning),
rewrites valid timing lines in canonical form, and escapes a stray
``-->`` inside cue text. For each caption, if any line carried inline
timing tags only the last such line is kept (it is the most complete);
otherwise all lines are joined with a single space. Markup is then
stripped, entities unescaped and whitespace collapsed.

RULES:
- Timing line: ``HH:MM:SS.mmm --> HH:MM:SS.mmm`` (hours optional), any
  trailing cue settings are ignored
- Only a truly empty line ends a cue; whitespace-only lines are ignored
- A valid timing line inside a cue starts a new cue; any other line
  containing ``-->`` inside a cue is cue text
- Headers, NOTE/STYLE/REGION blocks and cue identifiers are left to webvtt-py
- Inline ``align:``/``position:`` directives are stripped from text
- Cues with empty cleaned text are dropped
- A malformed timing line or an end before start skips that cue only,
  with a warning; parsing never fails for the whole file
"""

from __future__ import annotations

import html
import logging
import re
from typing import List, Optional, Tuple

import webvtt
from webvtt.errors import MalformedFileError

from dictation_practice.core.ir import RawCue

logger = logging.getLogger(__name__)

_TIMESTAMP = r"(?:\d+:)?\d{1,2}:\d{2}[.,]\d{3}"

_ARROW = "-->"
_TIMING_RE = re.compile(r"^\s*({ts})\s*-->\s*({ts})(?:\s+.*)?$".format(ts=_TIMESTAMP))

_INLINE_TIMING_RE = re.compile(r"<{ts}>".format(ts=_TIMESTAMP))
_TAG_RE = re.compile(r"<[^>]*>")
_DIRECTIVE_RE = re.compile(r"\b(?:align|position):\S*")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_timestamp(value: str) -> float:
    """Convert ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` to seconds.

    Raises:
        ValueError: If the value is not a timestamp.
    """
    parts = value.replace(",", ".").split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
    elif len(parts) == 2:
        hours = "0"
        minutes, seconds = parts
    else:
        raise ValueError("Invalid timestamp: {!r}".format(value))
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def format_timestamp(seconds: float) -> str:
    """Render seconds as a WebVTT timestamp, e.g. 3.5 → "00:00:03.500"."""
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d}.{:03d}".format(hours, minutes, secs, millis)


def _parse_timing_line(line: str) -> Optional[Tuple[float, float]]:
    match = _TIMING_RE.match(line)
    if match is None:
        return None
    return parse_timestamp(match.group(1)), parse_timestamp(match.group(2))


def clean_text(text: str) -> str:
    """Strip inline tags and directives, unescape entities, collapse whitespace."""
    text = _INLINE_TIMING_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _DIRECTIVE_RE.sub("", text)
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _build_cue_text(lines: List[str]) -> str:
    karaoke = [line for line in lines if _INLINE_TIMING_RE.search(line)]
    if karaoke:
        return clean_text(karaoke[-1])
    return clean_text(" ".join(lines))


def _prepare_track(content: str) -> str:
    """Normalize a track so webvtt-py sees only well-formed cue blocks."""
    prepared: List[str] = []
    in_cue = False
    skipping = False

    for line_no, line in enumerate(content.lstrip("\ufeff").splitlines(), start=1):
        if not line:
            prepared.append(line)
            in_cue = skipping = False
            continue
        if not line.strip():
            # Whitespace-only lines do not end a cue.
            continue

        if _ARROW in line:
            parsed = _parse_timing_line(line)
            if parsed is None and in_cue:
                prepared.append(line.replace(_ARROW, "--&gt;"))
                continue
            if in_cue:
                prepared.append("")
            in_cue = False
            if parsed is None:
                logger.warning("Skipping cue with malformed timing on line %d: %r", line_no, line)
                skipping = True
                continue
            start, end = parsed
            if end < start:
                logger.warning("Skipping cue ending before it starts on line %d: %r", line_no, line)
                skipping = True
                continue
            if skipping:
                prepared.append("")
            skipping = False
            in_cue = True
            prepared.append("{} --> {}".format(format_timestamp(start), format_timestamp(end)))
            continue

        if not skipping:
            prepared.append(line)

    return "\n".join(prepared) + "\n"


def parse_vtt(content: str) -> List[RawCue]:
    """Parse WebVTT content into RawCue objects in file order.

    Args:
        content: The full text of a .vtt file.

    Returns:
        One RawCue per cue with non-empty text.
    """
    if not content.strip():
        return []
    try:
        captions = webvtt.from_string(_prepare_track(content))
    except MalformedFileError as exc:
        logger.warning("Caption track is not valid WebVTT: %s", exc)
        return []

    cues: List[RawCue] = []
    for caption in captions:
        text = _build_cue_text(list(caption.lines))
        if not text:
            continue
        start = parse_timestamp(caption.start)
        end = parse_timestamp(caption.end)
        cues.append(RawCue(text=text, start=start, duration=max(0.0, end - start)))

    logger.info("Parsed %d cues from WebVTT track", len(cues))
    return cues
