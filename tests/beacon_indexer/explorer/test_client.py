"""Tests for the explorer API client."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from beacon_indexer.explorer import ChainClient
from beacon_indexer.types import FetchError
from tests.beacon_indexer.helpers import run_async

BASE_URL = "https://explorer.test/api/v1"


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    api_key: str | None = None,
) -> ChainClient:
    return ChainClient(
        base_url=BASE_URL,
        timeout=5.0,
        api_key=api_key,
        transport=httpx.MockTransport(handler),
    )


class TestFetchLatestSlotNumber:
    """Tests for GET /slot/latest."""

    def test_returns_data_slot(self) -> None:
        """The slot number is taken from the response envelope."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "OK", "data": {"slot": 8_123_456}})

        slot = run_async(_client(handler).fetch_latest_slot_number())

        assert slot == 8_123_456
        assert str(seen[0].url) == f"{BASE_URL}/slot/latest"
        assert seen[0].headers["accept"] == "application/json"

    def test_sends_api_key(self) -> None:
        """A configured key travels as the apikey query parameter."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"slot": 1}})

        run_async(_client(handler, api_key="secret").fetch_latest_slot_number())

        assert seen[0].url.params["apikey"] == "secret"

    def test_omits_api_key_when_unset(self) -> None:
        """No key means no query parameter."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"slot": 1}})

        run_async(_client(handler).fetch_latest_slot_number())

        assert "apikey" not in seen[0].url.params

    def test_trailing_slash_in_base_url(self) -> None:
        """A trailing slash on the base URL does not double up."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"slot": 1}})

        client = ChainClient(
            base_url=BASE_URL + "/",
            transport=httpx.MockTransport(handler),
        )
        run_async(client.fetch_latest_slot_number())

        assert seen[0].url.path == "/api/v1/slot/latest"


class TestFetchSlotAttestations:
    """Tests for GET /slot/{n}/attestations."""

    def test_returns_committees(self) -> None:
        """Each entry of data becomes one committee attestation."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "data": [
                        {"aggregationbits": "0xff", "validators": [1, 2], "target_epoch": 7},
                        {"aggregationbits": "0x0f", "validators": [3], "target_epoch": 7},
                    ],
                },
            )

        attestations = run_async(_client(handler).fetch_slot_attestations(250))

        assert seen[0].url.path == "/api/v1/slot/250/attestations"
        assert [a.aggregationbits for a in attestations] == ["0xff", "0x0f"]
        assert [a.committee_size for a in attestations] == [2, 1]

    def test_empty_slot(self) -> None:
        """A missed block has no attestations."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": []})

        assert run_async(_client(handler).fetch_slot_attestations(3)) == []


class TestFetchErrors:
    """Every failure surfaces as FetchError."""

    def test_non_success_status(self) -> None:
        """Rate limiting and server errors carry their status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="Too Many Requests")

        with pytest.raises(FetchError) as exc_info:
            run_async(_client(handler).fetch_slot_attestations(1))

        assert exc_info.value.status_code == 429
        assert exc_info.value.url == f"{BASE_URL}/slot/1/attestations"

    def test_network_error(self) -> None:
        """Transport failures have no status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            run_async(_client(handler).fetch_latest_slot_number())

        assert exc_info.value.status_code is None
        assert "network error" in exc_info.value.message

    def test_invalid_json(self) -> None:
        """A body that is not JSON is rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(FetchError, match="invalid JSON"):
            run_async(_client(handler).fetch_latest_slot_number())

    def test_unexpected_shape(self) -> None:
        """JSON without the expected envelope is rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": {"epoch": 3}})

        with pytest.raises(FetchError, match="unexpected response shape"):
            run_async(_client(handler).fetch_latest_slot_number())

    def test_malformed_committee(self) -> None:
        """A committee missing its bitfield fails the whole slot."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [{"validators": [1], "target_epoch": 0}]})

        with pytest.raises(FetchError):
            run_async(_client(handler).fetch_slot_attestations(1))
