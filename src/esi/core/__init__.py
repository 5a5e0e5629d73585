"""
ESI Core Module

Shared infrastructure: the request descriptor, the sync and async request
engines, pagination, errors, configuration and logging.
"""

from .async_client import AsyncESIClient, create_async_client
from .client import ESIClient
from .constants import ESI_BASE_URL, MAX_PAGES_DEFAULT, MAX_PAGES_HEADER, REQUEST_TIMEOUT
from .errors import (
    DecodeError,
    ESIError,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    UpstreamError,
    ValidationError,
)
from .pagination import PageCursor, max_pages_from_headers
from .request import Datasource, EncodedOptions, Location, Request, Requirement, Verb
from .response import ESIResult

__all__ = [
    # Engines
    "ESIClient",
    "AsyncESIClient",
    "create_async_client",
    "ESIResult",
    # Descriptor
    "Request",
    "Verb",
    "Location",
    "Requirement",
    "Datasource",
    "EncodedOptions",
    # Pagination
    "PageCursor",
    "max_pages_from_headers",
    # Errors
    "ESIError",
    "ValidationError",
    "DecodeError",
    "UpstreamError",
    "HttpStatusError",
    "RequestTimeoutError",
    "NetworkError",
    # Constants
    "ESI_BASE_URL",
    "MAX_PAGES_DEFAULT",
    "MAX_PAGES_HEADER",
    "REQUEST_TIMEOUT",
]
