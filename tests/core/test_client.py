"""
Tests for esi.core.client

Tests the synchronous request engine with mocked network responses.
Uses pytest-httpx for httpx mocking.
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from esi.core.client import ESIClient
from esi.core.errors import (
    DecodeError,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    UpstreamError,
    ValidationError,
)
from esi.core.request import Location, Request, Requirement

ESI = "https://esi.evetech.net/latest"


class TestESIClientInit:
    """Tests for ESIClient initialization."""

    def test_default_init(self):
        client = ESIClient()

        assert client.base_url == ESI
        assert client.timeout == 30.0
        assert client._http_client is None  # Lazy initialization

    def test_custom_base_url(self):
        client = ESIClient(base_url="http://localhost:8080/latest/")

        assert client.base_url == "http://localhost:8080/latest"

    def test_base_url_from_settings(self, monkeypatch):
        monkeypatch.setenv("ESI_BASE_URL", "http://mirror.example/latest")

        assert ESIClient().base_url == "http://mirror.example/latest"

    def test_build_url(self, wars_request):
        client = ESIClient()

        assert client.build_url(wars_request, "?max_war_id=5") == f"{ESI}/wars/?max_war_id=5"


class TestESIClientLifecycle:
    """Tests for ESIClient lifecycle management."""

    def test_lazy_client_initialization(self):
        client = ESIClient()

        http_client = client._get_client()

        assert http_client is client._get_client()
        assert http_client.follow_redirects is True
        assert http_client.timeout.read == 30.0
        client.close()

    def test_context_manager(self):
        with ESIClient() as client:
            _ = client._get_client()
            assert client._http_client is not None

        assert client._http_client is None

    def test_close_when_not_initialized(self):
        client = ESIClient()

        client.close()

        assert client._http_client is None


@pytest.mark.httpx
class TestESIClientRun:
    """Tests for single request execution."""

    def test_get_success(self, httpx_mock, wars_request):
        httpx_mock.add_response(url=f"{ESI}/wars/?max_war_id=5", json=[615, 614, 613])

        with ESIClient() as client:
            result = client.run(wars_request.options(max_war_id=5))

        assert result.ok
        assert result.data == [615, 614, 613]

    def test_get_without_options(self, httpx_mock, wars_request):
        httpx_mock.add_response(url=f"{ESI}/wars/", json=[615])

        with ESIClient() as client:
            result = client.run(wars_request)

        assert result.unwrap() == [615]
        request = httpx_mock.get_requests()[0]
        assert request.method == "GET"
        assert request.content == b""

    def test_verb_and_body_sent(self, httpx_mock, names_request):
        httpx_mock.add_response(
            url=f"{ESI}/universe/names/?datasource=tranquility",
            method="POST",
            match_content=b"[95465499,30000142]",
            json=[{"category": "character", "id": 95465499, "name": "CCP Bartender"}],
        )

        with ESIClient() as client:
            result = client.run(
                names_request.options(ids=[95465499, 30000142], datasource="tranquility")
            )

        assert result.data[0]["name"] == "CCP Bartender"

    def test_no_custom_headers(self, httpx_mock, wars_request):
        httpx_mock.add_response(url=f"{ESI}/wars/", json=[])

        with ESIClient() as client:
            client.run(wars_request)

        headers = httpx_mock.get_requests()[0].headers
        assert "authorization" not in headers
        assert "content-type" not in headers

    def test_headers_returned(self, httpx_mock, killmails_request):
        httpx_mock.add_response(
            url=f"{ESI}/wars/615/killmails/?page=1",
            json=[{"killmail_id": 1}],
            headers={"X-Pages": "4"},
        )

        with ESIClient() as client:
            result = client.execute(killmails_request.options(page=1))

        assert result.headers["x-pages"] == "4"

    def test_run_hides_headers(self, httpx_mock, mock_war_response):
        httpx_mock.add_response(
            url=f"{ESI}/wars/615/", json=mock_war_response, headers={"X-Pages": "4"}
        )

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/615/"))

        assert result.data == mock_war_response
        assert "x-pages" not in result.headers
        assert len(result.headers) == 0

    def test_validation_failure_performs_no_io(self, httpx_mock, names_request):
        with ESIClient() as client:
            result = client.run(names_request)

        assert isinstance(result.error, ValidationError)
        assert result.error.message == "missing option `ids`"
        assert httpx_mock.get_requests() == []

    def test_404_upstream_error(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{ESI}/wars/999999999/", status_code=404, json={"error": "war not found"}
        )
        request = Request(verb="get", path="/wars/999999999/")

        with ESIClient() as client:
            result = client.run(request)

        assert isinstance(result.error, UpstreamError)
        assert result.error.message == "war not found"

    def test_404_unparseable(self, httpx_mock):
        httpx_mock.add_response(url=f"{ESI}/wars/1/", status_code=404, text="Not Found")

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/1/"))

        assert isinstance(result.error, HttpStatusError)
        assert result.error.message == "HTTP 404"

    def test_server_error(self, httpx_mock):
        httpx_mock.add_response(url=f"{ESI}/wars/1/", status_code=502)

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/1/"))

        assert isinstance(result.error, HttpStatusError)
        assert result.error.status_code == 502
        assert result.error.message == "HTTP 502"
        assert len(httpx_mock.get_requests()) == 1  # no retry

    def test_invalid_json(self, httpx_mock):
        httpx_mock.add_response(url=f"{ESI}/wars/1/", text="{not json")

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/1/"))

        assert isinstance(result.error, DecodeError)

    def test_timeout(self, httpx_mock):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=f"{ESI}/wars/1/")

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/1/"))

        assert isinstance(result.error, RequestTimeoutError)
        assert result.error.message == "timeout"
        assert isinstance(result.error.__cause__, httpx.ReadTimeout)

    def test_network_error(self, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("Network unreachable"), url=f"{ESI}/wars/1/")

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/1/"))

        assert isinstance(result.error, NetworkError)
        assert "Network error" in result.error.message

    def test_redirect_followed(self, httpx_mock, mock_war_response):
        httpx_mock.add_response(
            url=f"{ESI}/wars/615/",
            status_code=302,
            headers={"Location": f"{ESI}/v1/wars/615/"},
        )
        httpx_mock.add_response(url=f"{ESI}/v1/wars/615/", json=mock_war_response)

        with ESIClient() as client:
            result = client.run(Request(verb="get", path="/wars/615/"))

        assert result.data["id"] == 615

    def test_request_run_with_client(self, httpx_mock, mock_war_response):
        httpx_mock.add_response(url=f"{ESI}/wars/615/", json=mock_war_response)

        with ESIClient() as client:
            result = Request(verb="get", path="/wars/615/").run(client)

        assert result.unwrap() == mock_war_response

    def test_request_run_default_client(self, httpx_mock, mock_war_response):
        httpx_mock.add_response(url=f"{ESI}/wars/615/", json=mock_war_response)

        result = Request(verb="get", path="/wars/615/").run()

        assert result.unwrap()["id"] == 615

    def test_logs_request(self, httpx_mock, wars_request, caplog):
        httpx_mock.add_response(url=f"{ESI}/wars/?max_war_id=5", json=[])

        with caplog.at_level(logging.DEBUG, logger="esi"):
            with ESIClient() as client:
                client.run(wars_request.options(max_war_id=5))

        assert f"GET {ESI}/wars/?max_war_id=5" in caplog.text


@pytest.mark.httpx
class TestESIClientBody:
    """Tests for body encoding on the wire."""

    def test_put_body_is_value_json(self, httpx_mock):
        request = Request(
            verb="put",
            path="/fleets/1/",
            opts_schema={"new_settings": (Location.BODY, Requirement.REQUIRED)},
        ).options(new_settings={"motd": "fly safe"})
        httpx_mock.add_response(url=f"{ESI}/fleets/1/", method="PUT", status_code=204)

        with ESIClient() as client:
            result = client.run(request)

        assert result.ok
        assert result.data is None
        sent = httpx_mock.get_requests()[0]
        assert json.loads(sent.content) == {"motd": "fly safe"}

    def test_delete_without_body(self, httpx_mock):
        httpx_mock.add_response(url=f"{ESI}/fleets/1/members/2/", method="DELETE", status_code=204)

        with ESIClient() as client:
            result = client.run(Request(verb="delete", path="/fleets/1/members/2/"))

        assert result.ok
        assert httpx_mock.get_requests()[0].content == b""
