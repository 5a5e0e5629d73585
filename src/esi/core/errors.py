"""
ESI Error Taxonomy

Every failure of a request is one of the classes below. The engines hand
them back as values inside an ESIResult; they are only raised by
ESIResult.unwrap() and by streams, which have no other way to report a
failure mid-iteration.
"""

from typing import Any, Optional, Sequence


class ESIError(Exception):
    """Base class for ESI request errors."""

    error_type = "esi_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response = response or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        result: dict[str, Any] = {"error": self.error_type, "message": self.message}
        if self.status_code:
            result["status_code"] = self.status_code
        return result


class ValidationError(ESIError):
    """One or more required options were not supplied."""

    error_type = "validation_error"

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(format_missing(self.missing))


class DecodeError(ESIError):
    """The response body was not valid JSON."""

    error_type = "decode_error"


class UpstreamError(ESIError):
    """ESI answered 404 with an explanatory `error` field."""

    error_type = "upstream_error"


class HttpStatusError(ESIError):
    """Unhandled HTTP status code."""

    error_type = "http_error"

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}", status_code=status_code)


class RequestTimeoutError(ESIError):
    """The request exceeded the receive timeout."""

    error_type = "timeout"

    def __init__(self, message: str = "timeout") -> None:
        super().__init__(message)


class NetworkError(ESIError):
    """Transport failure other than a timeout (DNS, refused connection, ...)."""

    error_type = "network_error"


def format_missing(missing: Sequence[str]) -> str:
    """Render the missing option names with singular/plural phrasing."""
    if len(missing) == 1:
        return f"missing option `{missing[0]}`"
    detail = ", ".join(f"`{name}`" for name in missing)
    return f"missing options {detail}"
