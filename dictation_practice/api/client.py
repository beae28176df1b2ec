"""Async HTTP client for the Dictation Practice API.

WHY: The CLI's --server mode and any other Python consumer need to fetch
practice segments and score attempts from a running API instance without
knowing HTTP details or the error envelope format.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. DictationClient is an
async context manager — enter it to get a connected client, exit to
close the connection pool. Error responses are unwrapped into
DictationAPIError with the server's ``error`` code and ``details``.

RULES:
- Always use the async context manager (async with DictationClient() as client:)
- base_url defaults to DICTATION_API_URL from config
- Non-2xx responses raise DictationAPIError
- A custom transport can be injected for tests
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from dictation_practice.config import DICTATION_API_URL
from dictation_practice.core.ir import Segment


class DictationAPIError(Exception):
    """Raised when the API returns an error response.

    RULES:
    - status_code is always set
    - error is the server's machine-readable code ("unknown" if the body
      was not an ErrorResponse)
    - details is the human-readable text
    """

    def __init__(self, status_code: int, error: str, details: str) -> None:
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(f"Dictation API error {status_code} ({error}): {details}")


class DictationClient:
    """Async client for the Dictation Practice HTTP API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or DICTATION_API_URL).rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> DictationClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout_s, connect=10.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "DictationClient must be used as an async context manager: "
                "async with DictationClient() as client: ..."
            )
        return self._client

    @staticmethod
    def _raise_for_error(resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            body = resp.json()
            error = str(body.get("error", "unknown"))
            details = str(body.get("details", resp.text))
        except (ValueError, AttributeError):
            error, details = "unknown", resp.text
        raise DictationAPIError(resp.status_code, error, details)

    async def fetch_segments(self, video_id: str) -> List[Segment]:
        """Fetch the normalized practice segments for a video ID or URL."""
        client = self._ensure_client()
        resp = await client.get("/subtitles", params={"videoId": video_id})
        self._raise_for_error(resp)
        data = resp.json()
        return [Segment.from_dict(item) for item in data["subtitles"]]

    async def score(self, reference: str, attempt: str) -> int:
        """Score an attempt on the server."""
        client = self._ensure_client()
        resp = await client.post("/score", json={"reference": reference, "attempt": attempt})
        self._raise_for_error(resp)
        return int(resp.json()["accuracy"])

    async def health(self) -> Dict[str, Any]:
        client = self._ensure_client()
        resp = await client.get("/health")
        self._raise_for_error(resp)
        return resp.json()
