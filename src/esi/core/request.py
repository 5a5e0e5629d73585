"""
ESI Request Descriptor

An immutable value describing one API call: verb, interpolated path, the
endpoint's option schema and the option values supplied so far.

Usage:
    from esi.core.request import Location, Request, Requirement

    req = Request(
        verb="get",
        path="/wars/",
        opts_schema={"max_war_id": (Location.QUERY, Requirement.OPTIONAL)},
    )
    wars = req.options(max_war_id=5).run().unwrap()
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional
from urllib.parse import urlencode

from .constants import PAGE_OPTION
from .errors import ValidationError

if TYPE_CHECKING:
    from .client import ESIClient
    from .response import ESIResult


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Location(str, Enum):
    BODY = "body"
    QUERY = "query"


class Requirement(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"


class Datasource(str, Enum):
    """Server population selectable with the reserved `datasource` option."""

    TRANQUILITY = "tranquility"
    SINGULARITY = "singularity"


OptionSpec = tuple[Location, Requirement]


@dataclass(frozen=True)
class EncodedOptions:
    """Wire form of a request's options."""

    query: str = ""
    body: str = ""


def _normalize_schema(schema: Mapping[str, Any]) -> dict[str, OptionSpec]:
    return {
        str(name): (Location(location), Requirement(requirement))
        for name, (location, requirement) in schema.items()
    }


def _query_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(frozen=True)
class Request:
    """
    Immutable description of one ESI call.

    `opts_schema` maps option name to (location, requirement) and is fixed at
    construction. `opts` is an open map: any key may be supplied, but only
    keys declared in the schema are serialized.

    Requests compare by value but are not hashable: option values may be
    lists or dicts.
    """

    verb: Verb
    path: str
    opts_schema: Mapping[str, OptionSpec] = field(default_factory=dict)
    opts: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        verb = self.verb if isinstance(self.verb, Verb) else Verb(str(self.verb).upper())
        schema = _normalize_schema(self.opts_schema)

        body_options = [name for name, (loc, _) in schema.items() if loc is Location.BODY]
        if len(body_options) > 1:
            raise ValueError(
                f"at most one body option is supported, {self.path} declares {body_options}"
            )

        object.__setattr__(self, "verb", verb)
        object.__setattr__(self, "opts_schema", MappingProxyType(schema))
        object.__setattr__(self, "opts", MappingProxyType(dict(self.opts)))

    # =========================================================================
    # Option Merge
    # =========================================================================

    def options(self, opts: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Request:
        """
        Return a new request with `opts` and `kwargs` merged over the current
        options. The last value wins on key collision; self is not modified.

        Reserved options accepted on every request:
            datasource: Datasource.TRANQUILITY (default server) or SINGULARITY
            user_agent: Client identifier
        """
        merged = dict(opts or {})
        merged.update(kwargs)
        if not merged:
            return self
        return dataclasses.replace(self, opts={**self.opts, **merged})

    @property
    def is_paginated(self) -> bool:
        """True when the endpoint declares a `page` option."""
        return PAGE_OPTION in self.opts_schema

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> Optional[ValidationError]:
        """
        Check that every required option has been supplied.

        Returns:
            None when the request is ready, otherwise a ValidationError naming
            the missing options in schema order.
        """
        missing = [
            name
            for name, (_, requirement) in self.opts_schema.items()
            if requirement is Requirement.REQUIRED and name not in self.opts
        ]
        if missing:
            return ValidationError(missing)
        return None

    # =========================================================================
    # Serialization
    # =========================================================================

    def opts_by_location(self) -> dict[str, dict[str, Any]]:
        """Split supplied options into body and query buckets by schema location."""
        buckets: dict[str, dict[str, Any]] = {Location.BODY.value: {}, Location.QUERY.value: {}}
        for key, value in self.opts.items():
            spec = self.opts_schema.get(key)
            if spec is None:
                continue
            buckets[spec[0].value][key] = value
        return buckets

    def encode_options(self) -> EncodedOptions:
        """
        Encode options for the wire.

        The query string carries a leading '?' when non-empty. The body is
        the JSON encoding of the body option's value, not of the wrapping key.
        """
        buckets = self.opts_by_location()
        query = buckets[Location.QUERY.value]
        body = buckets[Location.BODY.value]

        pairs = {key: _query_value(value) for key, value in query.items() if value is not None}
        encoded_query = ""
        if pairs:
            encoded_query = "?" + urlencode(pairs, doseq=True)

        encoded_body = ""
        if body:
            # Construction guarantees a single body option
            encoded_body = json.dumps(
                next(iter(body.values())), separators=(",", ":"), default=_json_default
            )

        return EncodedOptions(query=encoded_query, body=encoded_body)

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self, client: Optional[ESIClient] = None) -> ESIResult:
        """Execute the request once. Opens a default client when none is given."""
        from .client import ESIClient

        if client is not None:
            return client.run(self)
        with ESIClient() as default_client:
            return default_client.run(self)

    def stream(self, client: Optional[ESIClient] = None) -> Iterator[Any]:
        """
        Lazily iterate the request's results, fetching pages on demand.

        Raises the ESIError of any failed page from the iterator.
        """
        from .client import ESIClient

        if client is not None:
            yield from client.stream(self)
            return
        with ESIClient() as default_client:
            yield from default_client.stream(self)

