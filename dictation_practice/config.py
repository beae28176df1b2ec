"""Configuration constants, caption-fetch limits, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Pipeline thresholds, subprocess limits, and
service URLs are plain module-level values, not buried in logic, so
both humans and coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with sensible defaults.
load_float_env() and load_int_env() give a clear error when an override
is not a number.

RULES:
- MIN_SEGMENT_DURATION_S is the short-segment merge threshold (0.8s)
- CAPTION_FETCH_TIMEOUT_S bounds the yt-dlp subprocess (30s)
- CAPTION_MAX_OUTPUT_BYTES bounds subprocess output and the track file (10 MiB)
- Only English captions are requested (SUBTITLE_LANGUAGE)
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def load_float_env(name: str, default: float) -> float:
    """Read a float from the environment, falling back to ``default``.

    RULES:
    - Missing or blank variable → default
    - Non-numeric value → ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            "Environment variable {} must be a number, got {!r}".format(name, raw)
        ) from None


def load_int_env(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to ``default``."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "Environment variable {} must be an integer, got {!r}".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Normalization pipeline
# ---------------------------------------------------------------------------

MIN_SEGMENT_DURATION_S = load_float_env("MIN_SEGMENT_DURATION_S", 0.8)
"""Segments shorter than this are merged into the preceding segment."""

# ---------------------------------------------------------------------------
# Caption source (yt-dlp subprocess)
# ---------------------------------------------------------------------------

YTDLP_BINARY = os.getenv("YTDLP_BINARY", "yt-dlp")
SUBTITLE_LANGUAGE = os.getenv("SUBTITLE_LANGUAGE", "en")
CAPTION_FETCH_TIMEOUT_S = load_float_env("CAPTION_FETCH_TIMEOUT_S", 30.0)
CAPTION_MAX_OUTPUT_BYTES = load_int_env("CAPTION_MAX_OUTPUT_BYTES", 10 * 1024 * 1024)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# ---------------------------------------------------------------------------
# HTTP service
# ---------------------------------------------------------------------------

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = load_int_env("API_PORT", 8000)
DICTATION_API_URL = os.getenv("DICTATION_API_URL", "http://localhost:8000")
