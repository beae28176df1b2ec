"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint has its own response model. Field names use the
camelCase the browser front-end already expects (``videoId``). All
models include Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Every error response uses ErrorResponse: a stable machine-readable
  ``error`` code plus a human-readable ``details`` string
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable failure reasons returned in ErrorResponse.error."""

    missing_identifier = "missing_identifier"
    invalid_identifier = "invalid_identifier"
    no_captions = "no_captions"
    unknown_format = "unknown_format"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ScoreRequest(BaseModel):
    """A dictation attempt to be scored against its reference text."""

    reference: str = Field(description="The segment's real caption text.")
    attempt: str = Field(description="What the learner typed.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SegmentModel(BaseModel):
    """One normalized, indexed practice segment."""

    text: str = Field(description="Caption text to be dictated.")
    start: float = Field(description="Segment start offset in seconds.")
    duration: float = Field(description="Segment duration in seconds.")
    index: int = Field(description="0-based position in the segment list.")


class SubtitlesResponse(BaseModel):
    """Practice segments for a video.

    RULES:
    - count always equals len(subtitles)
    - subtitles are ordered by index, 0..count-1
    """

    videoId: str = Field(description="YouTube video ID the segments belong to.")
    subtitles: List[SegmentModel] = Field(description="Ordered practice segments.")
    count: int = Field(description="Number of segments.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "videoId": "DNgddXIq3zU",
                "subtitles": [
                    {"text": "hello world", "start": 0.0, "duration": 2.0, "index": 0},
                ],
                "count": 1,
            }
        ]
    }}


class ScoreResponse(BaseModel):
    """Accuracy of a dictation attempt."""

    accuracy: int = Field(description="Accuracy percentage, 0-100.")


class FormatInfo(BaseModel):
    """Description of an available export format."""

    key: str = Field(description="Format identifier used in API paths.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-segments.srt').")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: ErrorCode = Field(description="Machine-readable failure reason.")
    details: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
