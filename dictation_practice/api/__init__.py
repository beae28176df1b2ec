"""Dictation API client package — async HTTP interface to a running server.

WHY: Python callers (the CLI's --server mode, scripts) should not hand-roll
requests against the HTTP API or parse its error envelope themselves.

RULES:
- All HTTP calls to the service go through DictationClient
"""

from dictation_practice.api.client import DictationAPIError, DictationClient

__all__ = ["DictationAPIError", "DictationClient"]
