"""YouTube video ID extraction and validation.

WHY: Learners paste whatever they have: a watch URL, a youtu.be share
link, an embed URL, or a bare ID. Everything downstream (yt-dlp, the
player link, export filenames) needs the bare 11-character ID, and a
malformed one must be rejected before any external process is started.

RULES:
- An ID is exactly 11 characters of [A-Za-z0-9_-]
- Recognized URL forms: youtube.com/watch?v=, youtu.be/, youtube.com/embed/
- A bare string is accepted only if it is itself a valid ID
"""

from __future__ import annotations

import re
from typing import Optional

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

_URL_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([A-Za-z0-9_-]{11})")


class InvalidVideoIdError(ValueError):
    """Raised when no valid video ID can be extracted from user input.

    WHY: Input validation errors are reported immediately, before any
    caption fetch is attempted.
    """


def is_valid_video_id(value: str) -> bool:
    return bool(_VIDEO_ID_RE.match(value))


def extract_video_id(url_or_id: str) -> Optional[str]:
    """Return the video ID in ``url_or_id``, or None if there is none.

    >>> extract_video_id("https://youtu.be/DNgddXIq3zU")
    'DNgddXIq3zU'
    """
    url_or_id = url_or_id.strip()
    match = _URL_RE.search(url_or_id)
    if match:
        return match.group(1)
    if is_valid_video_id(url_or_id):
        return url_or_id
    return None


def require_video_id(url_or_id: str) -> str:
    """Like extract_video_id(), but raise InvalidVideoIdError on failure."""
    video_id = extract_video_id(url_or_id)
    if video_id is None:
        raise InvalidVideoIdError(
            "Could not find a YouTube video ID in {!r}".format(url_or_id)
        )
    return video_id
