"""
ESI Test Suite - Shared Fixtures and Configuration
"""

import os

import pytest

from esi.core.request import Location, Request, Requirement


_ENV_VARS = ("ESI_LOG_LEVEL", "ESI_DEBUG", "ESI_LOG_JSON", "ESI_BASE_URL")


# =============================================================================
# Request Fixtures
# =============================================================================


@pytest.fixture
def wars_request() -> Request:
    """GET /wars/ with an optional query option."""
    return Request(
        verb="get",
        path="/wars/",
        opts_schema={
            "datasource": (Location.QUERY, Requirement.OPTIONAL),
            "max_war_id": (Location.QUERY, Requirement.OPTIONAL),
        },
    )


@pytest.fixture
def killmails_request() -> Request:
    """Paginated GET /wars/615/killmails/."""
    return Request(
        verb="get",
        path="/wars/615/killmails/",
        opts_schema={"page": (Location.QUERY, Requirement.OPTIONAL)},
    )


@pytest.fixture
def names_request() -> Request:
    """POST /universe/names/ with a required body option."""
    return Request(
        verb="post",
        path="/universe/names/",
        opts_schema={
            "ids": (Location.BODY, Requirement.REQUIRED),
            "datasource": (Location.QUERY, Requirement.OPTIONAL),
        },
    )


@pytest.fixture
def mock_war_response() -> dict:
    """Return sample war details."""
    return {
        "id": 615,
        "declared": "2004-05-02T00:30:00Z",
        "mutual": False,
        "open_for_allies": False,
        "aggressor": {"corporation_id": 1000127, "isk_destroyed": 0, "ships_killed": 0},
        "defender": {"corporation_id": 98000001, "isk_destroyed": 0, "ships_killed": 0},
    }


@pytest.fixture
def killmail_page():
    """Factory for pages of killmail references: killmail_page(start, count)."""

    def build(start: int, count: int) -> list[dict]:
        return [
            {"killmail_id": killmail_id, "killmail_hash": f"hash{killmail_id}"}
            for killmail_id in range(start, start + count)
        ]

    return build


# =============================================================================
# Singleton Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons(monkeypatch):
    """
    Reset settings and logging between tests.

    Clears ESI_* variables so a developer's environment cannot leak into
    tests, and restores logger propagation so caplog sees records.
    """
    for name in _ENV_VARS:
        if name in os.environ:
            monkeypatch.delenv(name)

    from esi.core.config import reset_settings
    from esi.core.logging import reset_logging

    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()
