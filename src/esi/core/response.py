"""
ESI Result

Outcome of one executed request and the mapping from an HTTP response to
that outcome. Shared by the sync and async engines.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from .errors import DecodeError, ESIError, HttpStatusError, UpstreamError


@dataclass
class ESIResult:
    """
    Either decoded data plus the response headers, or an error.

    Callers that prefer exceptions use unwrap().
    """

    data: Any = None
    """Parsed JSON response body."""

    headers: httpx.Headers = field(default_factory=httpx.Headers)
    """HTTP response headers (case-insensitive). Empty on results from run()."""

    status_code: Optional[int] = None
    """HTTP status code, None when no response was received."""

    error: Optional[ESIError] = None

    @classmethod
    def failure(cls, error: ESIError, status_code: Optional[int] = None) -> ESIResult:
        return cls(error=error, status_code=status_code or error.status_code)

    @property
    def ok(self) -> bool:
        return self.error is None

    def without_headers(self) -> ESIResult:
        """Copy of this result with the response headers dropped."""
        return dataclasses.replace(self, headers=httpx.Headers())

    def unwrap(self) -> Any:
        """Return the decoded data, raising the error if the request failed."""
        if self.error is not None:
            raise self.error
        return self.data


def interpret_response(response: httpx.Response) -> ESIResult:
    """
    Map an HTTP response to an ESIResult.

    - 2xx: decoded JSON body (204 decodes to None)
    - 404: the body's `error` field when present, otherwise "HTTP 404"
    - anything else: "HTTP <code>"
    """
    code = response.status_code

    if 200 <= code <= 299:
        if code == 204:
            return ESIResult(data=None, headers=response.headers, status_code=code)
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            error = DecodeError(f"Invalid JSON response: {e}", status_code=code)
            error.__cause__ = e
            return ESIResult.failure(error, status_code=code)
        return ESIResult(data=data, headers=response.headers, status_code=code)

    if code == 404:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        if isinstance(body, dict) and "error" in body:
            return ESIResult.failure(
                UpstreamError(str(body["error"]), status_code=404, response=body)
            )

    return ESIResult.failure(HttpStatusError(code))
