"""Caption source adapter: fetch a video's English WebVTT track with yt-dlp.

WHY: YouTube does not offer a stable public caption API. The yt-dlp
command-line tool knows how to locate both uploaded and auto-generated
caption tracks and save them as WebVTT without downloading the video.
Running it as an external process keeps its large, fast-moving codebase
out of our import graph, but an external process is untrusted: it can
hang, spew output, or write huge files.

HOW: fetch_captions() creates a temp directory unique to the request,
runs yt-dlp into it with asyncio.create_subprocess_exec, and drains its
stdout/stderr through a shared byte budget. The whole run is bounded by
asyncio.wait_for. The resulting .vtt file is size-checked, read, and
parsed into RawCue objects. The temp directory is removed on every path.

RULES:
- Timeout (default 30s) and output ceiling (default 10 MiB) both kill the
  process and raise a CaptionSourceError subclass
- The tool runs in its own session; a kill targets its whole process group
- Both pipes are always read to EOF, even past the ceiling, and reaping a
  killed process is itself bounded by _REAP_TIMEOUT_S
- The temp directory name is random and request-scoped
- No retries; a failed fetch is reported once
- A non-zero exit code, a missing track file, or a track with no cues
  raises CaptionsNotFoundError
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import tempfile
from pathlib import Path
from typing import List, Optional

from dictation_practice.adapters.vtt_parser import parse_vtt
from dictation_practice.config import (
    CAPTION_FETCH_TIMEOUT_S,
    CAPTION_MAX_OUTPUT_BYTES,
    SUBTITLE_LANGUAGE,
    YOUTUBE_WATCH_URL,
    YTDLP_BINARY,
)
from dictation_practice.core.ir import RawCue

logger = logging.getLogger(__name__)

_READ_CHUNK_BYTES = 64 * 1024
_STDERR_TAIL_CHARS = 500
_REAP_TIMEOUT_S = 5.0


class CaptionSourceError(Exception):
    """Raised when captions cannot be obtained from the external tool.

    WHY: Callers need one exception type to map every source failure to
    the same "no captions found" response, while tests and logs can still
    tell the specific cause apart through the subclasses.
    """


class CaptionFetchTimeoutError(CaptionSourceError):
    """Raised when yt-dlp does not finish within the configured timeout."""


class CaptionOutputTooLargeError(CaptionSourceError):
    """Raised when yt-dlp output or the caption file exceeds the byte ceiling."""


class CaptionsNotFoundError(CaptionSourceError):
    """Raised when the video has no usable English caption track."""


class _OutputBudget:
    """Byte allowance shared by every stream read from one process."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.used = 0

    @property
    def exceeded(self) -> bool:
        return self.used > self.limit

    def consume(self, size: int) -> None:
        self.used += size


def _terminate(process) -> None:
    """Kill the tool and every process it started."""
    try:
        process.kill()
    except ProcessLookupError:
        pass
    if os.name == "posix":
        # The tool runs in its own session, so its pid is the group id.
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass


async def _drain(stream: Optional[asyncio.StreamReader], budget: _OutputBudget, process) -> bytes:
    """Read ``stream`` to EOF, keeping data only while the budget allows.

    Once the budget is exceeded the process group is killed and the rest
    of the stream is read and discarded, so the pipe always reaches EOF.
    """
    if stream is None:
        return b""
    chunks: List[bytes] = []
    while True:
        chunk = await stream.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        if budget.exceeded:
            continue
        budget.consume(len(chunk))
        if budget.exceeded:
            logger.warning("Caption tool output exceeded %d bytes, killing it", budget.limit)
            _terminate(process)
            continue
        chunks.append(chunk)
    return b"".join(chunks)


async def _discard(stream: Optional[asyncio.StreamReader]) -> None:
    if stream is None:
        return
    while await stream.read(_READ_CHUNK_BYTES):
        pass


async def _communicate_bounded(process, max_output_bytes: int) -> bytes:
    """Wait for the process while enforcing the output budget.

    Returns:
        The captured stderr, for error reporting.

    Raises:
        CaptionOutputTooLargeError: The combined output went over the limit.
    """
    budget = _OutputBudget(max_output_bytes)
    _stdout, stderr, _code = await asyncio.gather(
        _drain(process.stdout, budget, process),
        _drain(process.stderr, budget, process),
        process.wait(),
    )
    if budget.exceeded:
        raise CaptionOutputTooLargeError(
            "Caption tool output exceeded {} bytes".format(budget.limit)
        )
    return stderr


async def _kill(process) -> None:
    """Kill the process group and reap it, draining pipes so wait() can finish."""
    _terminate(process)
    try:
        await asyncio.wait_for(
            asyncio.gather(_discard(process.stdout), _discard(process.stderr), process.wait()),
            timeout=_REAP_TIMEOUT_S,
        )
    except asyncio.TimeoutError:
        logger.warning("Caption tool (pid %s) did not exit after being killed", process.pid)


def build_command(
    video_id: str,
    output_dir: Path,
    binary: str = YTDLP_BINARY,
    language: str = SUBTITLE_LANGUAGE,
) -> List[str]:
    """Build the yt-dlp argument list for a subtitles-only download."""
    return [
        binary,
        "--skip-download",
        "--write-subs",
        "--write-auto-subs",
        "--sub-langs", language,
        "--sub-format", "vtt",
        "--no-playlist",
        "--no-progress",
        "--output", str(output_dir / "%(id)s.%(ext)s"),
        YOUTUBE_WATCH_URL.format(video_id=video_id),
    ]


def find_track_file(output_dir: Path, language: str = SUBTITLE_LANGUAGE) -> Optional[Path]:
    """Return the downloaded .vtt file, preferring the exact language tag."""
    tracks = sorted(output_dir.glob("*.vtt"))
    if not tracks:
        return None
    for track in tracks:
        if track.name.endswith(".{}.vtt".format(language)):
            return track
    return tracks[0]


def _read_track(track: Path, max_output_bytes: int) -> str:
    size = track.stat().st_size
    if size > max_output_bytes:
        raise CaptionOutputTooLargeError(
            "Caption file is {} bytes, limit is {}".format(size, max_output_bytes)
        )
    return track.read_text(encoding="utf-8", errors="replace")


async def fetch_captions(
    video_id: str,
    binary: str = YTDLP_BINARY,
    language: str = SUBTITLE_LANGUAGE,
    timeout_s: float = CAPTION_FETCH_TIMEOUT_S,
    max_output_bytes: int = CAPTION_MAX_OUTPUT_BYTES,
) -> List[RawCue]:
    """Fetch and parse the English caption track of a video.

    Args:
        video_id: A validated 11-character YouTube video ID.
        binary: yt-dlp executable name or path.
        language: Caption language code passed to --sub-langs.
        timeout_s: Wall-clock limit for the whole subprocess run.
        max_output_bytes: Ceiling for process output and the track file.

    Returns:
        Raw cues in file order.

    Raises:
        CaptionFetchTimeoutError: The tool did not finish in time.
        CaptionOutputTooLargeError: Output or track file over the ceiling.
        CaptionsNotFoundError: Tool failed or no caption cues were found.
        CaptionSourceError: The tool could not be started.
    """
    with tempfile.TemporaryDirectory(prefix="dictation_{}_".format(video_id)) as tmp:
        output_dir = Path(tmp)
        command = build_command(video_id, output_dir, binary=binary, language=language)
        logger.info("Fetching captions for video %s", video_id)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError:
            raise CaptionSourceError(
                "Caption tool '{}' is not installed or not on PATH".format(binary)
            ) from None

        try:
            stderr = await asyncio.wait_for(
                _communicate_bounded(process, max_output_bytes),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError:
            await _kill(process)
            raise CaptionFetchTimeoutError(
                "Caption fetch for {} timed out after {:.0f}s".format(video_id, timeout_s)
            ) from None
        except CaptionOutputTooLargeError:
            await _kill(process)
            raise

        if process.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace").strip()[-_STDERR_TAIL_CHARS:]
            logger.warning(
                "Caption tool exited with code %s for %s: %s",
                process.returncode, video_id, tail,
            )
            raise CaptionsNotFoundError(
                "Caption tool exited with code {}".format(process.returncode)
            )

        track = find_track_file(output_dir, language=language)
        if track is None:
            raise CaptionsNotFoundError(
                "No '{}' caption track found for {}".format(language, video_id)
            )

        cues = parse_vtt(_read_track(track, max_output_bytes))

    if not cues:
        raise CaptionsNotFoundError("Caption track for {} has no cues".format(video_id))

    logger.info("Fetched %d raw cues for video %s", len(cues), video_id)
    return cues
