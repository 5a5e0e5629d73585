"""
ESI - EVE Online ESI API Interface

Builds, runs and pages through ESI requests.

Usage as library:
    from esi import ESIClient
    from esi.api import get_endpoint

    wars = get_endpoint("wars").request(max_war_id=500)
    print(wars.run().unwrap())

    with ESIClient() as client:
        for killmail in client.stream(get_endpoint("war_killmails").request(615)):
            print(killmail["killmail_id"])

Usage as CLI:
    python -m esi endpoints
    python -m esi call war_killmails 615 --stream --limit 10

Package structure:
    esi/
    ├── core/           # Request descriptor, engines, pagination, errors
    └── api/            # Endpoint table (verb, path, option schema)
"""

__version__ = "0.1.2"

from .core import (
    AsyncESIClient,
    Datasource,
    ESIClient,
    ESIError,
    ESIResult,
    Location,
    Request,
    Requirement,
    Verb,
)

__all__ = [
    "__version__",
    "ESIClient",
    "AsyncESIClient",
    "ESIResult",
    "ESIError",
    "Request",
    "Verb",
    "Location",
    "Requirement",
    "Datasource",
]
