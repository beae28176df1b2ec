"""FastAPI application serving practice segments, scoring, and exports.

WHY: The browser front-end (and the CLI's --server mode) needs an HTTP
API to turn a video ID into practice segments and to score attempts.
FastAPI provides automatic OpenAPI documentation and request validation.

HOW: One FastAPI app exposes five endpoints grouped by tags. GET
/subtitles validates the identifier, runs the caption adapter and the
normalization pipeline, and returns the indexed segments. Every failure
is rendered through one APIError handler as ErrorResponse.

RULES:
- Missing or invalid identifiers are rejected before any external call
- Any caption source failure or an empty pipeline result → 404 no_captions
- Error responses always carry ``error`` and ``details``
- No partial result is ever returned as success
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import Annotated, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from dictation_practice import __version__
from dictation_practice.adapters.ytdlp_source import CaptionSourceError
from dictation_practice.config import API_HOST, API_PORT
from dictation_practice.core.ir import PracticeDeck, Segment
from dictation_practice.core.pipeline import NoSubtitlesError
from dictation_practice.core.scoring import score
from dictation_practice.core.video_id import extract_video_id
from dictation_practice.formatters import FORMATTERS
from dictation_practice.practice import load_practice_segments
from dictation_practice.server.models import (
    ErrorCode,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    ScoreRequest,
    ScoreResponse,
    SegmentModel,
    SubtitlesResponse,
)

logger = logging.getLogger(__name__)

NO_CAPTIONS_DETAILS = "No English subtitles found for this video"

# Placeholder ID used to probe formatter suffixes for /formats.
_PROBE_VIDEO_ID = "00000000000"


class APIError(Exception):
    """Raised inside endpoints to produce an ErrorResponse.

    RULES:
    - status_code is the HTTP status to send
    - error is a stable ErrorCode, details is free text
    """

    def __init__(self, status_code: int, error: ErrorCode, details: str) -> None:
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__("{}: {}".format(error.value, details))


app = FastAPI(
    title="Dictation Practice API",
    description=(
        "Turns a YouTube video's English captions into clean, indexed "
        "dictation segments and scores typed attempts against them."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(APIError)
async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    body = ErrorResponse(error=exc.error, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_video_id(raw: Optional[str]) -> str:
    """Validate the identifier query value and return a bare video ID."""
    if raw is None or not raw.strip():
        raise APIError(400, ErrorCode.missing_identifier, "Missing videoId parameter")
    video_id = extract_video_id(raw)
    if video_id is None:
        raise APIError(
            400,
            ErrorCode.invalid_identifier,
            "'{}' is not a YouTube video ID or URL".format(raw.strip()),
        )
    return video_id


async def _load_segments_or_404(video_id: str) -> List[Segment]:
    """Run the fetch + normalize pipeline, mapping every failure to no_captions."""
    try:
        return await load_practice_segments(video_id)
    except (CaptionSourceError, NoSubtitlesError) as exc:
        logger.warning("No captions for %s: %s", video_id, exc)
        raise APIError(404, ErrorCode.no_captions, NO_CAPTIONS_DETAILS) from exc
    except Exception as exc:
        logger.exception("Caption pipeline failed for %s", video_id)
        raise APIError(404, ErrorCode.no_captions, NO_CAPTIONS_DETAILS) from exc


# ---------------------------------------------------------------------------
# Endpoints: Subtitles
# ---------------------------------------------------------------------------


@app.get(
    "/subtitles",
    response_model=SubtitlesResponse,
    tags=["subtitles"],
    summary="Fetch practice segments for a video",
    description=(
        "Fetches the video's English captions, removes duplicated lines, "
        "merges sub-second fragments, drops progressive-reveal fragments, "
        "and returns the indexed segments."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid video identifier"},
        404: {"model": ErrorResponse, "description": "No English captions available"},
    },
)
async def get_subtitles(
    videoId: Annotated[
        Optional[str],
        Query(description="YouTube video ID or URL."),
    ] = None,
) -> SubtitlesResponse:
    video_id = _resolve_video_id(videoId)
    logger.info("Fetching subtitles for video: %s", video_id)
    segments = await _load_segments_or_404(video_id)

    return SubtitlesResponse(
        videoId=video_id,
        subtitles=[SegmentModel(**segment.to_dict()) for segment in segments],
        count=len(segments),
    )


@app.get(
    "/subtitles/{video_id}/export/{format_key}",
    tags=["subtitles"],
    summary="Download practice segments in an export format",
    description="Renders the normalized segments with one of the formats listed by GET /formats.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid video ID or unknown format"},
        404: {"model": ErrorResponse, "description": "No English captions available"},
    },
)
async def export_subtitles(video_id: str, format_key: str) -> Response:
    if format_key not in FORMATTERS:
        available = ", ".join(sorted(FORMATTERS.keys()))
        raise APIError(
            400,
            ErrorCode.unknown_format,
            "Unknown export format '{}'. Available: {}".format(format_key, available),
        )
    video_id = _resolve_video_id(video_id)
    segments = await _load_segments_or_404(video_id)

    output = FORMATTERS[format_key]().format(PracticeDeck(video_id=video_id, segments=segments))[0]
    filename = "{}{}".format(video_id, output.suffix)
    return Response(
        content=output.content,
        media_type=output.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Scoring
# ---------------------------------------------------------------------------


@app.post(
    "/score",
    response_model=ScoreResponse,
    tags=["scoring"],
    summary="Score a dictation attempt",
    description=(
        "Compares the attempt with the reference word by word, ignoring "
        "case and punctuation, and returns an accuracy percentage."
    ),
)
async def score_attempt(request: ScoreRequest) -> ScoreResponse:
    return ScoreResponse(accuracy=score(request.reference, request.attempt))


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available export formats",
)
async def list_formats() -> List[FormatInfo]:
    probe = PracticeDeck(video_id=_PROBE_VIDEO_ID, segments=[])
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        outputs = formatter.format(probe)
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=outputs[0].suffix if outputs else "",
        ))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api() -> None:
    """Entry point for the dictation-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)
