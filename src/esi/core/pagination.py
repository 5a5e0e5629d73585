"""
ESI Pagination

Page-by-page state machine behind ESIClient.stream() and
AsyncESIClient.stream(). The engines own the I/O; PageCursor decides which
page to fetch next and what each response contributes to the stream.

States:
    fetch  - `page` is the next page to request, `page <= max_page`
    done   - empty page, non-list body, page ceiling reached, or failure
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .constants import MAX_PAGES_DEFAULT, MAX_PAGES_HEADER, PAGE_OPTION
from .logging import get_logger
from .request import Request
from .response import ESIResult

logger = get_logger(__name__)


def max_pages_from_headers(headers: Mapping[str, str]) -> int:
    """
    Read the total page count from response headers.

    Falls back to MAX_PAGES_DEFAULT when the header is missing or malformed.
    """
    value = headers.get(MAX_PAGES_HEADER)
    if value is None:
        # httpx.Headers is case-insensitive, plain dicts are not
        value = headers.get(MAX_PAGES_HEADER.lower())
    if value is None:
        return MAX_PAGES_DEFAULT
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed %s header: %r", MAX_PAGES_HEADER, value)
        return MAX_PAGES_DEFAULT


@dataclass
class PageCursor:
    """Position of an active stream over a paginated request."""

    page: int = 1
    max_page: int = MAX_PAGES_DEFAULT
    done: bool = False

    @classmethod
    def start(cls, request: Request) -> PageCursor:
        """Begin at the request's own `page` option, or page 1 when unset or None."""
        page = request.opts.get(PAGE_OPTION)
        return cls(page=1 if page is None else int(page))

    @property
    def has_next(self) -> bool:
        return not self.done and self.page <= self.max_page

    def request_for(self, request: Request) -> Request:
        return request.options({PAGE_OPTION: self.page})

    def consume(self, result: ESIResult) -> list[Any]:
        """
        Apply one page's result and return the elements it contributes.

        Raises:
            ESIError: The page failed; the cursor is finished.
        """
        if result.error is not None:
            self.done = True
            raise result.error

        data = result.data
        if not isinstance(data, list):
            # Singular resource behind a paginated endpoint
            self.done = True
            return [data]

        if not data:
            self.done = True
            return []

        self.page += 1
        self.max_page = max_pages_from_headers(result.headers)
        logger.debug("Fetched %d items, next page %d of %d", len(data), self.page, self.max_page)
        return data


def single_result_items(result: ESIResult) -> list[Any]:
    """
    Elements contributed by a non-paginated request: a list is emitted
    element-wise, None emits nothing, any other value is emitted once.
    """
    data = result.unwrap()
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]
