"""Command-line interface for Dictation Practice.

WHY: Learners and maintainers need a quick way to fetch a video's
practice segments, save them in an export format, or run a dictation
drill straight from the terminal. The CLI wires together video ID
extraction, caption fetching (locally or via a running API server),
normalization, export formatters, and the practice session.

HOW: Uses argparse to accept a URL or video ID, --formats/--output-dir
for exports, --practice for an interactive drill, and --server to fetch
through the HTTP API. Runs the async fetch via asyncio.run(). Status
messages go to stderr; segment listings and drill prompts go to stdout.

RULES:
- Positional argument: YouTube URL or 11-character video ID
- The ID is validated before any fetch
- --formats: comma-separated formatter keys; files are saved as
  {video_id}{suffix}, numeric suffix for conflicts (-segments-2.srt)
- Without --formats or --practice, segments are printed to stdout
- Exit code 1 on any error (message on stderr), 130 on Ctrl-C
- Python 3.9.6 compatible — no match/case, no X | Y unions
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

import httpx

from dictation_practice.adapters.ytdlp_source import CaptionSourceError
from dictation_practice.api.client import DictationAPIError, DictationClient
from dictation_practice.core.ir import PracticeDeck, Segment
from dictation_practice.core.pipeline import NoSubtitlesError
from dictation_practice.core.video_id import InvalidVideoIdError, require_video_id
from dictation_practice.formatters import FORMATTERS
from dictation_practice.formatters.plain_text import PlainTextFormatter, format_clock
from dictation_practice.practice import PracticeSession, load_practice_segments

# Drill commands typed at the attempt prompt.
_CMD_NEXT = ":n"
_CMD_PREVIOUS = ":p"
_CMD_QUIT = ":q"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. DNgddXIq3zU-segments.srt)
    - Conflict: counter inserted before the extension, starting at 2
      (e.g. DNgddXIq3zU-segments-2.srt)
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def save_exports(deck: PracticeDeck, format_keys: List[str], output_dir: Path) -> List[Path]:
    """Run each requested formatter and write its files to ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(deck):
            path = _resolve_output_path(deck.video_id, output.suffix, output_dir)
            path.write_text(output.content, encoding="utf-8")
            saved.append(path)
    return saved


def parse_format_keys(raw: Optional[str]) -> List[str]:
    """Split and validate a --formats value.

    Raises:
        ValueError: If a key is not a registered formatter.
    """
    if not raw:
        return []
    keys = [k.strip() for k in raw.split(",") if k.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValueError("Unknown format '{}'. Available: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


async def fetch_segments(video_id: str, server_url: Optional[str] = None) -> List[Segment]:
    """Fetch practice segments locally, or from a running API server."""
    if server_url:
        async with DictationClient(base_url=server_url) as client:
            return await client.fetch_segments(video_id)
    return await load_practice_segments(video_id)


def _describe_segment(session: PracticeSession) -> str:
    start, end = session.loop_window()
    return "Segment {}/{}  [{} - {}]  {}".format(
        session.position + 1,
        len(session.segments),
        format_clock(start),
        format_clock(end),
        session.watch_url(),
    )


def run_practice(
    session: PracticeSession,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Run an interactive dictation drill until the learner quits.

    HOW: Shows the current segment's loop window and link, reads one line.
    A blank line repeats the segment info; ``:n``/``:p`` navigate; ``:q``
    (or end of input) quits. Any other text is scored, and the real text
    is revealed with the accuracy.
    """
    write("Type what you hear. Blank line = replay info, :n next, :p previous, :q quit.")
    write(_describe_segment(session))

    while True:
        try:
            line = read_line("> ")
        except EOFError:
            break

        command = line.strip()
        if command == _CMD_QUIT:
            break
        if command == "":
            write(_describe_segment(session))
            continue
        if command == _CMD_NEXT:
            if not session.next():
                write("Already at the last segment.")
            write(_describe_segment(session))
            continue
        if command == _CMD_PREVIOUS:
            if not session.previous():
                write("Already at the first segment.")
            write(_describe_segment(session))
            continue

        accuracy = session.submit(line)
        write("Accuracy: {}%".format(accuracy))
        write("Answer:   {}".format(session.current.text))

    summary = session.summary()
    if summary.attempted:
        write("Practised {} of {} segments, mean accuracy {:.0f}%.".format(
            summary.attempted, summary.total_segments, summary.mean_accuracy,
        ))
    else:
        write("No segments attempted.")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="dictation_practice",
        description="Fetch a YouTube video's English captions as clean dictation "
                    "segments, export them, or practise dictation in the terminal.",
    )

    parser.add_argument(
        "video",
        help="YouTube video URL or 11-character video ID.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of export formats. "
             "Available: {}.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory to save exported files (default: current directory).",
    )

    parser.add_argument(
        "--practice",
        action="store_true",
        help="Start an interactive dictation drill after fetching.",
    )

    parser.add_argument(
        "--server",
        default=None,
        metavar="URL",
        help="Fetch segments through a running API server instead of locally.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline progress to stderr.",
    )

    return parser


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command line and return the process exit code."""
    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    try:
        video_id = require_video_id(args.video)
        format_keys = parse_format_keys(args.formats)

        _status("Fetching captions for {}...".format(video_id))
        segments = asyncio.run(fetch_segments(video_id, args.server))
        _status("Got {} practice segments.".format(len(segments)))
    except (CaptionSourceError, NoSubtitlesError):
        _status("Error: No English subtitles found for this video")
        return 1
    except (InvalidVideoIdError, ValueError) as e:
        _status("Error: {}".format(e))
        return 1
    except DictationAPIError as e:
        _status("Error: {}".format(e.details))
        return 1
    except httpx.HTTPError as e:
        _status("Error: could not reach API server: {}".format(e))
        return 1

    deck = PracticeDeck(video_id=video_id, segments=segments)

    if format_keys:
        try:
            saved = save_exports(deck, format_keys, Path(args.output_dir))
        except OSError as e:
            _status("Error: could not save exports: {}".format(e))
            return 1
        _status("Saved {} file(s):".format(len(saved)))
        for path in saved:
            _status("  {}".format(path))

    if args.practice:
        try:
            run_practice(PracticeSession(video_id, segments))
        except KeyboardInterrupt:
            _status("\nCancelled by user.")
            return 130
    elif not format_keys:
        sys.stdout.write(PlainTextFormatter().format(deck)[0].content)

    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        code = run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
