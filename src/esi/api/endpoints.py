"""
ESI Endpoint Table

Static endpoint metadata (verb, path template, option schema) generated
from the ESI swagger description. Each entry builds a Request; the core
engine does the rest.

Usage:
    from esi.api import get_endpoint

    request = get_endpoint("war_killmails").request(615, page=2)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from string import Formatter
from typing import Any, Mapping

from ..core.constants import DATASOURCE_OPTION, PAGE_OPTION, USER_AGENT_OPTION
from ..core.request import Location, OptionSpec, Request, Requirement, Verb

_OPTIONAL_QUERY: OptionSpec = (Location.QUERY, Requirement.OPTIONAL)

# Declared by every ESI operation
COMMON_OPTIONS: dict[str, OptionSpec] = {
    DATASOURCE_OPTION: _OPTIONAL_QUERY,
    USER_AGENT_OPTION: _OPTIONAL_QUERY,
}


@dataclass(frozen=True)
class Endpoint:
    """One ESI operation."""

    name: str
    operation_id: str
    verb: Verb
    path: str
    """Path template with `{placeholder}` segments, e.g. /wars/{war_id}/"""
    opts_schema: Mapping[str, OptionSpec] = field(default_factory=dict)
    summary: str = ""

    @property
    def path_params(self) -> tuple[str, ...]:
        """Placeholder names in template order."""
        return tuple(name for _, name, _, _ in Formatter().parse(self.path) if name)

    @property
    def is_paginated(self) -> bool:
        return PAGE_OPTION in self.opts_schema

    def request(self, *path_args: Any, **opts: Any) -> Request:
        """
        Build a Request with the path interpolated and `opts` attached.

        Raises:
            TypeError: Wrong number of path arguments.
        """
        params = self.path_params
        if len(path_args) != len(params):
            raise TypeError(
                f"{self.name}() takes {len(params)} path argument(s) "
                f"({', '.join(params) or 'none'}), got {len(path_args)}"
            )
        path = self.path.format(**dict(zip(params, path_args)))
        return Request(verb=self.verb, path=path, opts_schema=dict(self.opts_schema)).options(opts)


def _endpoint(
    name: str,
    operation_id: str,
    verb: Verb,
    path: str,
    summary: str,
    **options: OptionSpec,
) -> Endpoint:
    return Endpoint(
        name=name,
        operation_id=operation_id,
        verb=verb,
        path=path,
        opts_schema={**COMMON_OPTIONS, **options},
        summary=summary,
    )


# =============================================================================
# Wars
# =============================================================================

ENDPOINTS: dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        _endpoint(
            "wars",
            "get_wars",
            Verb.GET,
            "/wars/",
            "Return a list of wars",
            max_war_id=_OPTIONAL_QUERY,
        ),
        _endpoint(
            "war",
            "get_wars_war_id",
            Verb.GET,
            "/wars/{war_id}/",
            "Return details about a war",
        ),
        _endpoint(
            "war_killmails",
            "get_wars_war_id_killmails",
            Verb.GET,
            "/wars/{war_id}/killmails/",
            "Return a list of kills related to a war",
            page=_OPTIONAL_QUERY,
        ),
    )
}


def get_endpoint(name: str) -> Endpoint:
    """
    Look up an endpoint by name.

    Raises:
        KeyError: Unknown endpoint, message lists the available names.
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        available = ", ".join(sorted(ENDPOINTS))
        raise KeyError(f"Unknown endpoint '{name}'. Available: {available}") from None


def list_endpoints() -> list[str]:
    """Endpoint names in table order."""
    return list(ENDPOINTS)
