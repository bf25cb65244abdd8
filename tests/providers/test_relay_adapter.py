"""Tests for the Relay bridge adapter."""

import json

import httpx
import pytest

from bridge_aggregator.core.bridge.constants import NATIVE_PLACEHOLDER, SOLANA_NATIVE_MINT
from bridge_aggregator.core.bridge.models import RouteRequest
from bridge_aggregator.core.errors import AdapterError
from bridge_aggregator.providers.relay import RelayAdapter

USER = "0x50ac5CFcc81BB0872e85255D7079F8a529345D16"


RELAY_QUOTE = {
    "steps": [
        {
            "id": "deposit",
            "requestId": "0xreq",
            "items": [{"data": {"to": "0xrelay", "value": "1000000000000000"}}],
        }
    ],
    "fees": {
        "gas": {"amount": "21000000000000", "amountUsd": "0.07"},
        "relayer": {"amount": "12000000000000", "amountUsd": "0.04"},
        "app": {"amount": "3000", "amountUsd": "0"},
    },
    "details": {
        "operation": "bridge",
        "timeEstimate": 12,
        "currencyIn": {"currency": {"address": NATIVE_PLACEHOLDER}, "amount": "1000000000000000"},
        "currencyOut": {"currency": {"address": NATIVE_PLACEHOLDER}, "amount": "987000000000000"},
    },
}


@pytest.fixture
def route_request() -> RouteRequest:
    return RouteRequest(
        source_chain="ethereum",
        target_chain="base",
        amount="1000000000000000",
        user_address=USER,
    )


class TestBuildQuotePayload:

    def test_native_to_native(self, route_request):
        payload = RelayAdapter().build_quote_payload(route_request)

        assert payload["originChainId"] == 1
        assert payload["destinationChainId"] == 8453
        assert payload["originCurrency"] == NATIVE_PLACEHOLDER
        assert payload["destinationCurrency"] == NATIVE_PLACEHOLDER
        assert payload["recipient"] == USER
        assert payload["tradeType"] == "EXACT_INPUT"
        assert "slippageTolerance" not in payload

    def test_native_to_solana(self):
        request = RouteRequest(
            source_chain="base",
            target_chain="solana",
            amount="5",
            user_address=USER,
            recipient_address="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
            slippage_bps=50,
        )
        payload = RelayAdapter().build_quote_payload(request)

        assert payload["destinationChainId"] == 792703809
        assert payload["destinationCurrency"] == SOLANA_NATIVE_MINT
        assert payload["recipient"] == request.recipient_address
        assert payload["slippageTolerance"] == "50"

    def test_extra_overrides(self):
        request = RouteRequest(
            source_chain="ethereum",
            target_chain="base",
            amount="5",
            user_address=USER,
            extra={"relay": {"useExternalLiquidity": True}},
        )
        assert RelayAdapter().build_quote_payload(request)["useExternalLiquidity"] is True

    def test_missing_amount(self):
        with pytest.raises(AdapterError) as exc_info:
            RelayAdapter().build_quote_payload(RouteRequest(source_chain="ethereum", target_chain="base"))

        assert exc_info.value.code == "MISSING_PARAMETER"


class TestParseQuote:

    def test_route_fields(self, route_request):
        route = RelayAdapter().parse_quote(RELAY_QUOTE, route_request)

        assert route.id == "relay-0xreq"
        assert route.provider == "relay"
        assert route.fee == "12000000003000"
        assert route.estimated_time == 12
        assert route.hops is None
        assert route.metadata["tokenIn"] == NATIVE_PLACEHOLDER
        assert route.metadata["amountOut"] == "987000000000000"
        assert route.metadata["gasFee"] == "21000000000000"
        assert route.metadata["feesUsd"]["relayer"] == "0.04"

    def test_no_steps(self, route_request):
        assert RelayAdapter().parse_quote({"steps": []}, route_request) is None


class TestFetchRoutes:

    @pytest.mark.asyncio
    async def test_posts_quote(self, mock_http, route_request):
        transport = mock_http(lambda request: httpx.Response(200, json=RELAY_QUOTE))

        routes = await RelayAdapter().fetch_routes(route_request)

        assert len(routes) == 1
        sent = transport.requests[0]
        assert sent.method == "POST"
        assert sent.url.path == "/quote"
        assert json.loads(sent.content)["user"] == USER

    @pytest.mark.asyncio
    async def test_empty_quote(self, mock_http, route_request):
        mock_http(lambda request: httpx.Response(200, json={"steps": []}))

        assert await RelayAdapter().fetch_routes(route_request) == []

    def test_supports_solana(self):
        adapter = RelayAdapter()

        assert adapter.supports_chain_pair("ethereum", "solana")
        assert not adapter.supports_chain_pair("base", "base")
