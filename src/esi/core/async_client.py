"""
ESI Async HTTP Client

Async request engine for EVE Online ESI using httpx.AsyncClient.
Same contract as ESIClient: execute()/run() return an ESIResult and
stream() yields results page by page, raising on a failed page.

Each call is an independent suspension point; a single stream still
fetches its pages strictly in order.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Optional

import httpx

from .config import get_settings
from .constants import REQUEST_TIMEOUT
from .errors import ESIError, NetworkError, RequestTimeoutError
from .logging import get_logger
from .pagination import PageCursor, single_result_items
from .request import Request
from .response import ESIResult, interpret_response

logger = get_logger(__name__)


class AsyncESIClient:
    """
    Async request engine.

    Must be used as an async context manager to ensure proper connection
    pooling.

    Usage:
        async with AsyncESIClient() as client:
            war = (await client.run(request)).unwrap()

            async for killmail in client.stream(paginated_request):
                ...
    """

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url: str = (base_url or get_settings().base_url).rstrip("/")
        self.timeout: float = REQUEST_TIMEOUT
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncESIClient:
        """Enter async context and create httpx client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        )
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """Exit async context and close httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def aclose(self) -> None:
        """Close the httpx client (same as leaving the context)."""
        await self.__aexit__(None, None, None)

    def build_url(self, request: Request, query: str = "") -> str:
        return f"{self.base_url}{request.path}{query}"

    async def execute(self, request: Request) -> ESIResult:
        """
        Validate and perform one request.

        Raises:
            ESIError: If the client is used outside its context manager.
        """
        if not self._client:
            raise ESIError("Client not initialized. Use 'async with' context manager.")

        error = request.validate()
        if error is not None:
            logger.debug("Rejected %s %s: %s", request.verb.value, request.path, error.message)
            return ESIResult.failure(error)

        encoded = request.encode_options()
        url = self.build_url(request, encoded.query)
        logger.debug("%s %s", request.verb.value, url)

        try:
            response = await self._client.request(
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

    async def run(self, request: Request) -> ESIResult:
        """Run a request once; the result carries no response headers."""
        result = await self.execute(request)
        return result.without_headers()

    async def stream(self, request: Request) -> AsyncIterator[Any]:
        """
        Lazily yield the request's results, see ESIClient.stream().

        Raises:
            ESIError: From the iterator when any fetched page fails.
        """
        if not request.is_paginated:
            for item in single_result_items(await self.execute(request)):
                yield item
            return

        cursor = PageCursor.start(request)
        while cursor.has_next:
            result = await self.execute(cursor.request_for(request))
            for item in cursor.consume(result):
                yield item


async def create_async_client(base_url: Optional[str] = None) -> AsyncESIClient:
    """
    Create and enter an async ESI client context.

    For use outside an `async with` block. Remember to call aclose()
    when done.
    """
    client = AsyncESIClient(base_url=base_url)
    await client.__aenter__()
    return client
