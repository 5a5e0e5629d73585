"""
ESI HTTP Client

Request engine for EVE Online ESI. Validates a Request, serializes its
options, performs exactly one HTTP call per execution and decodes the
response. Paginated requests are streamed lazily, one page at a time.

Uses httpx for connection pooling and keep-alive support. There is no retry
logic: every failure is returned (or, from a stream, raised) to the caller.
"""

from collections.abc import Iterator
from typing import Any, Optional

import httpx

from .config import get_settings
from .constants import REQUEST_TIMEOUT
from .errors import NetworkError, RequestTimeoutError
from .logging import get_logger
from .pagination import PageCursor, single_result_items
from .request import Request
from .response import ESIResult, interpret_response

logger = get_logger(__name__)


class ESIClient:
    """
    Synchronous request engine.

    Usage:
        with ESIClient() as client:
            result = client.run(request)
            if result.ok:
                print(result.data)

            for killmail in client.stream(paginated_request):
                ...
    """

    def __init__(self, base_url: Optional[str] = None) -> None:
        """
        Initialize ESI client.

        Args:
            base_url: Prefix for every request path (default: ESI_BASE_URL
                      setting, https://esi.evetech.net/latest)
        """
        self.base_url: str = (base_url or get_settings().base_url).rstrip("/")
        self.timeout: float = REQUEST_TIMEOUT

        # Lazy-initialized httpx client for connection pooling
        self._http_client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client (lazy initialization)."""
        if self._http_client is None:
            self._http_client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._http_client

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "ESIClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def build_url(self, request: Request, query: str = "") -> str:
        """Full URL: base URL, interpolated path, encoded query string."""
        return f"{self.base_url}{request.path}{query}"

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(self, request: Request) -> ESIResult:
        """
        Validate and perform one request.

        Returns:
            ESIResult carrying decoded data and response headers, or the
            error. Validation failures perform no I/O.
        """
        error = request.validate()
        if error is not None:
            logger.debug("Rejected %s %s: %s", request.verb.value, request.path, error.message)
            return ESIResult.failure(error)

        encoded = request.encode_options()
        url = self.build_url(request, encoded.query)
        logger.debug("%s %s", request.verb.value, url)

        try:
            response = self._get_client().request(
                request.verb.value,
                url,
                content=encoded.body or None,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", request.verb.value, url)
            error = RequestTimeoutError()
            error.__cause__ = e
            return ESIResult.failure(error)
        except httpx.RequestError as e:
            return ESIResult.failure(NetworkError(f"Network error: {e}"))

        result = interpret_response(response)
        if not result.ok:
            logger.debug("%s %s failed: %s", request.verb.value, url, result.error)
        return result

    def run(self, request: Request) -> ESIResult:
        """
        Run a request once.

        Callers read `.data` / `.error` or call `.unwrap()`. Response headers
        stay with execute() and the paginator.
        """
        return self.execute(request).without_headers()

    # =========================================================================
    # Streaming
    # =========================================================================

    def stream(self, request: Request) -> Iterator[Any]:
        """
        Lazily yield the request's results.

        Paginated requests (schema declares `page`) are fetched page by page
        as the consumer advances, until an empty page, a non-list body, or
        the X-Pages count is reached. Other requests are executed once.

        Raises:
            ESIError: From the iterator when any fetched page fails.
        """
        if not request.is_paginated:
            yield from single_result_items(self.execute(request))
            return

        cursor = PageCursor.start(request)
        while cursor.has_next:
            result = self.execute(cursor.request_for(request))
            yield from cursor.consume(result)
