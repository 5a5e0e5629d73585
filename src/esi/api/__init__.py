"""
ESI API Surface

Endpoint metadata consumed by the core request engine.
"""

from ..core.constants import ESI_SWAGGER_VERSION
from .endpoints import COMMON_OPTIONS, ENDPOINTS, Endpoint, get_endpoint, list_endpoints


def version() -> str:
    """Version of the ESI swagger document the endpoint table was generated from."""
    return ESI_SWAGGER_VERSION


__all__ = [
    "COMMON_OPTIONS",
    "ENDPOINTS",
    "Endpoint",
    "get_endpoint",
    "list_endpoints",
    "version",
]
