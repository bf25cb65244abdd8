"""Tests for the shared HTTP adapter plumbing."""

import json

import httpx
import pytest

from bridge_aggregator.core.errors import ErrorCategory, ProviderHTTPError, ProviderResponseError
from bridge_aggregator.providers.base import HttpBridgeAdapter, cleaned, int_amount, seconds, sum_amounts


class EchoAdapter(HttpBridgeAdapter):
    provider = "echo"
    default_base_urls = ["https://primary.test", "https://backup.test"]
    supported_chains = frozenset({"ethereum", "base", "solana"})

    async def fetch_routes(self, request):
        return []


class TestSupportsChainPair:

    def test_pairs(self):
        adapter = EchoAdapter()

        assert adapter.supports_chain_pair("ethereum", "base")
        assert adapter.supports_chain_pair("eth", 8453)
        assert not adapter.supports_chain_pair("ethereum", "ethereum")
        assert not adapter.supports_chain_pair("ethereum", "polygon")
        assert not adapter.supports_chain_pair("atlantis", "base")

    def test_base_url_override(self):
        adapter = EchoAdapter(base_url="https://custom.test/")
        assert adapter.base_urls == ["https://custom.test"]


class TestRequest:

    @pytest.mark.asyncio
    async def test_returns_json_payload(self, mock_http):
        transport = mock_http(lambda request: httpx.Response(200, json={"ok": True}))

        payload = await EchoAdapter()._get_json("GET", "/quote", params={"a": "1"})

        assert payload == {"ok": True}
        assert transport.requests[0].url.host == "primary.test"
        assert transport.requests[0].url.params["a"] == "1"

    @pytest.mark.asyncio
    async def test_falls_back_on_404(self, mock_http):
        def handler(request):
            if request.url.host == "primary.test":
                return httpx.Response(404)
            return httpx.Response(200, json={"host": "backup"})

        transport = mock_http(handler)

        payload = await EchoAdapter()._get_json("GET", "/quote")

        assert payload == {"host": "backup"}
        assert [r.url.host for r in transport.requests] == ["primary.test", "backup.test"]

    @pytest.mark.asyncio
    async def test_404_on_last_host_raises(self, mock_http):
        mock_http(lambda request: httpx.Response(404))

        with pytest.raises(ProviderHTTPError) as exc_info:
            await EchoAdapter()._get_json("GET", "/quote")

        assert exc_info.value.code == "HTTP_404"
        assert exc_info.value.provider == "echo"

    @pytest.mark.asyncio
    async def test_server_error_does_not_fall_back(self, mock_http):
        transport = mock_http(lambda request: httpx.Response(429))

        with pytest.raises(ProviderHTTPError) as exc_info:
            await EchoAdapter()._get_json("GET", "/quote")

        assert exc_info.value.category == ErrorCategory.RATE_LIMIT
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_fall_back_then_raise(self, mock_http):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = mock_http(handler)

        with pytest.raises(httpx.ConnectError):
            await EchoAdapter()._get_json("GET", "/quote")

        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_non_json_body(self, mock_http):
        mock_http(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(ProviderResponseError):
            await EchoAdapter()._get_json("GET", "/quote")

    @pytest.mark.asyncio
    async def test_non_object_body(self, mock_http):
        mock_http(lambda request: httpx.Response(200, json=[1, 2, 3]))

        with pytest.raises(ProviderResponseError, match="list"):
            await EchoAdapter()._get_json("GET", "/quote")


class TestHelpers:

    def test_cleaned_drops_none(self):
        assert cleaned({"a": 1, "b": None, "c": ""}) == {"a": 1, "c": ""}

    def test_int_amount(self):
        assert int_amount("42") == 42
        assert int_amount(7) == 7
        assert int_amount(None) is None
        assert int_amount(True) is None
        assert int_amount("1.5") is None

    def test_sum_amounts_skips_missing(self):
        assert sum_amounts(["10", None, "oops", 5]) == "15"
        assert sum_amounts([]) == "0"

    def test_seconds(self):
        assert seconds("12") == 12.0
        assert seconds(None) == 0.0
        assert seconds("soon", default=5) == 5

    def test_seconds_rejects_non_finite(self):
        payload = json.loads('{"timeEstimate": Infinity, "duration": NaN}')

        assert seconds(payload["timeEstimate"]) == 0.0
        assert seconds(payload["duration"], default=30) == 30
        assert seconds("-inf") == 0.0
