"""Route adapter for Relay's public bridge API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.bridge.constants import CHAIN_METADATA, native_token, numeric_chain_id
from ..core.bridge.models import BridgeRoute, RouteRequest
from ..core.errors import AdapterError, ErrorCategory
from .base import HttpBridgeAdapter, cleaned, seconds, sum_amounts

# Fee buckets denominated in the input currency; gas is paid in the origin native token.
INPUT_CURRENCY_FEES = ("relayer", "app")


class RelayAdapter(HttpBridgeAdapter):
    """Thin wrapper around https://api.relay.link endpoints."""

    provider = "relay"
    default_base_urls = ["https://api.relay.link"]
    supported_chains = frozenset(CHAIN_METADATA)

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        referrer: str = "bridge-aggregator",
    ) -> None:
        super().__init__(
            base_url=base_url or settings.relay_base_url,
            timeout_s=timeout_s or settings.provider_http_timeout_seconds,
        )
        self.referrer = referrer

    def _headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
        }

    def build_quote_payload(self, request: RouteRequest) -> Dict[str, Any]:
        if not request.amount or not request.user_address:
            raise AdapterError(
                "Relay quotes need an amount and a user address",
                provider=self.provider,
                code="MISSING_PARAMETER",
                category=ErrorCategory.UNSUPPORTED,
            )
        origin_currency = request.token or native_token(request.source_chain)
        if request.target_token:
            destination_currency = request.target_token
        elif request.token is None or request.token == native_token(request.source_chain):
            destination_currency = native_token(request.target_chain)
        else:
            destination_currency = request.token

        payload = {
            "user": request.user_address,
            "originChainId": numeric_chain_id(request.source_chain),
            "destinationChainId": numeric_chain_id(request.target_chain),
            "originCurrency": origin_currency,
            "destinationCurrency": destination_currency,
            "recipient": request.recipient_address or request.user_address,
            "tradeType": "EXACT_INPUT",
            "amount": str(request.amount),
            "referrer": self.referrer,
            "slippageTolerance": str(request.slippage_bps) if request.slippage_bps is not None else None,
        }
        payload.update(request.extra.get("relay", {}))
        return cleaned(payload)

    async def quote(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Request a bridge quote from Relay (``POST /quote``)."""

        return await self._get_json("POST", "/quote", json=payload)

    async def fetch_routes(self, request: RouteRequest) -> List[BridgeRoute]:
        quote = await self.quote(self.build_quote_payload(request))
        route = self.parse_quote(quote, request)
        return [route] if route else []

    def parse_quote(self, quote: Dict[str, Any], request: RouteRequest) -> Optional[BridgeRoute]:
        steps = quote.get("steps") or []
        if not steps:
            return None

        fees = quote.get("fees") or {}
        details = quote.get("details") or {}
        currency_in = details.get("currencyIn") or {}
        currency_out = details.get("currencyOut") or {}

        fee = sum_amounts(
            (fees.get(bucket) or {}).get("amount") for bucket in INPUT_CURRENCY_FEES
        )
        request_id = steps[0].get("requestId") or quote.get("requestId")

        metadata: Dict[str, Any] = {
            "tokenIn": (currency_in.get("currency") or {}).get("address"),
            "tokenOut": (currency_out.get("currency") or {}).get("address"),
            "amountIn": currency_in.get("amount"),
            "amountOut": currency_out.get("amount"),
            "gasFee": (fees.get("gas") or {}).get("amount"),
            "feesUsd": {
                bucket: data.get("amountUsd")
                for bucket, data in fees.items()
                if isinstance(data, dict) and data.get("amountUsd") is not None
            },
            "operation": details.get("operation"),
            "requestId": request_id,
            "steps": len(steps),
        }

        return BridgeRoute(
            id=f"relay-{request_id}" if request_id else None,
            provider=self.provider,
            source_chain=request.source_chain,
            target_chain=request.target_chain,
            fee=fee,
            estimated_time=seconds(details.get("timeEstimate")),
            metadata={k: v for k, v in metadata.items() if v is not None},
        )
