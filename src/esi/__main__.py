#!/usr/bin/env python3
"""
ESI CLI Entry Point

Run endpoint table entries from the command line and print JSON.
Run with: python -m esi <command> [args]
"""

import argparse
import itertools
import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from .api import get_endpoint, list_endpoints, version
from .core import ESIClient, ESIError
from .core.logging import get_logger

logger = get_logger(__name__)


def get_utc_timestamp() -> str:
    """ISO format timestamp like "2026-01-15T12:30:00Z"."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def output_json(data: Any, indent: int = 2) -> None:
    """Print JSON output to stdout."""
    print(json.dumps(data, indent=indent))


def output_error(message: str, **kwargs: Any) -> dict:
    """Build an error document."""
    error_data = {
        "error": kwargs.pop("error_type", "error"),
        "message": message,
        "query_timestamp": get_utc_timestamp(),
    }
    error_data.update(kwargs)
    return error_data


def parse_value(raw: str) -> Any:
    """Interpret a CLI value as JSON when it parses, otherwise as a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_option(raw: str) -> tuple[str, Any]:
    """Parse `key=value` into an option pair."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{raw}'")
    return key, parse_value(value)


def positive_int(raw: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{raw}'") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


# =============================================================================
# Commands
# =============================================================================


def cmd_endpoints(args: argparse.Namespace) -> dict:
    """List the endpoint table."""
    endpoints = []
    for name in list_endpoints():
        endpoint = get_endpoint(name)
        endpoints.append(
            {
                "name": endpoint.name,
                "operation_id": endpoint.operation_id,
                "verb": endpoint.verb.value,
                "path": endpoint.path,
                "paginated": endpoint.is_paginated,
                "options": {
                    option: {"in": location.value, "requirement": requirement.value}
                    for option, (location, requirement) in endpoint.opts_schema.items()
                },
                "summary": endpoint.summary,
            }
        )
    return {"esi_version": version(), "endpoints": endpoints}


def cmd_call(args: argparse.Namespace) -> dict:
    """Run or stream one endpoint."""
    try:
        endpoint = get_endpoint(args.endpoint)
    except KeyError as e:
        return output_error(e.args[0], error_type="unknown_endpoint")

    try:
        request = endpoint.request(*[parse_value(arg) for arg in args.path_args])
    except TypeError as e:
        return output_error(str(e), error_type="usage_error")
    request = request.options(dict(args.option or []))

    with ESIClient(base_url=args.base_url) as client:
        if args.stream:
            try:
                items = list(itertools.islice(client.stream(request), args.limit))
            except ESIError as e:
                return output_error(e.message, error_type=e.error_type, endpoint=endpoint.name)
            return {"endpoint": endpoint.name, "count": len(items), "items": items}

        result = client.run(request)

    if result.error is not None:
        return output_error(
            result.error.message, error_type=result.error.error_type, endpoint=endpoint.name
        )
    return {"endpoint": endpoint.name, "data": result.data}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="esi",
        description="ESI request engine - EVE Online API access",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    endpoints_parser = subparsers.add_parser("endpoints", help="List known endpoints")
    endpoints_parser.set_defaults(func=cmd_endpoints)

    call_parser = subparsers.add_parser("call", help="Run an endpoint")
    call_parser.add_argument("endpoint", help="Endpoint name (see 'endpoints')")
    call_parser.add_argument("path_args", nargs="*", help="Path parameters in template order")
    call_parser.add_argument(
        "-o",
        "--option",
        action="append",
        type=parse_option,
        metavar="KEY=VALUE",
        help="Request option, value parsed as JSON when possible (repeatable)",
    )
    call_parser.add_argument(
        "--stream", action="store_true", help="Stream results, following pages"
    )
    call_parser.add_argument(
        "--limit", type=positive_int, default=None, help="Stop streaming after N items"
    )
    call_parser.add_argument("--base-url", default=None, help="Override the API base URL")
    call_parser.set_defaults(func=cmd_call)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        result = args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    output_json(result)
    if "error" in result:
        logger.debug("Command %s failed: %s", args.command, result["message"])
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
