"""Route adapter for the LI.FI (Jumper) quote API.

LI.FI quotes break a transfer into ``includedSteps`` (swaps, bridge legs,
fee collection). Every step becomes an explicit hop so the normalizer keeps the
multi-hop breakdown instead of synthesizing one.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.bridge.constants import (
    CHAIN_METADATA,
    NATIVE_TOKEN,
    NUMERIC_CHAIN_TO_ID,
    native_token,
    numeric_chain_id,
    resolve_chain,
)
from ..core.bridge.models import BridgeRoute, Hop, RouteRequest
from ..core.errors import AdapterError, ErrorCategory, ProviderHTTPError
from .base import HttpBridgeAdapter, cleaned, seconds, sum_amounts

# LI.FI uses its own identifier for Solana.
LIFI_SOLANA_CHAIN_ID = 1151111081099710


def lifi_chain_id(chain: Any) -> Optional[int]:
    if resolve_chain(chain) == "solana":
        return LIFI_SOLANA_CHAIN_ID
    return numeric_chain_id(chain)


def chain_from_lifi(value: Any, fallback: str) -> str:
    if value == LIFI_SOLANA_CHAIN_ID:
        return "solana"
    if isinstance(value, int):
        return NUMERIC_CHAIN_TO_ID.get(value, fallback)
    return fallback


class LifiAdapter(HttpBridgeAdapter):
    """Thin client for ``GET /v1/quote`` on https://li.quest."""

    provider = "lifi"
    default_base_urls = ["https://li.quest"]
    supported_chains = frozenset(CHAIN_METADATA)

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        integrator: Optional[str] = None,
    ) -> None:
        super().__init__(
            base_url=base_url or settings.lifi_base_url,
            timeout_s=timeout_s or settings.provider_http_timeout_seconds,
        )
        self.api_key = api_key or settings.lifi_api_key
        self.integrator = integrator or settings.lifi_integrator

    def _headers(self) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-lifi-api-key"] = self.api_key
        return headers

    def build_quote_params(self, request: RouteRequest) -> Dict[str, Any]:
        if not request.amount or not request.user_address:
            raise AdapterError(
                "LI.FI quotes need an amount and a user address",
                provider=self.provider,
                code="MISSING_PARAMETER",
                category=ErrorCategory.UNSUPPORTED,
            )
        from_token = request.token or native_token(request.source_chain)
        to_token = request.target_token or (
            native_token(request.target_chain)
            if from_token == native_token(request.source_chain)
            else from_token
        )
        params = {
            "fromChain": lifi_chain_id(request.source_chain),
            "toChain": lifi_chain_id(request.target_chain),
            "fromToken": from_token,
            "toToken": to_token,
            "fromAmount": str(request.amount),
            "fromAddress": request.user_address,
            "toAddress": request.recipient_address or request.user_address,
            "slippage": request.slippage_bps / 10000 if request.slippage_bps is not None else None,
            "integrator": self.integrator,
        }
        params.update(request.extra.get("lifi", {}))
        return cleaned(params)

    async def quote(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._get_json("GET", "/v1/quote", params=params)

    async def fetch_routes(self, request: RouteRequest) -> List[BridgeRoute]:
        try:
            data = await self.quote(self.build_quote_params(request))
        except ProviderHTTPError as exc:
            # LI.FI answers 404 when no tool can serve the transfer.
            if exc.status_code == 404:
                return []
            raise
        return [self.parse_quote(data, request)]

    def parse_quote(self, data: Dict[str, Any], request: RouteRequest) -> BridgeRoute:
        action = data.get("action") or {}
        estimate = data.get("estimate") or {}
        tool = data.get("tool") or (data.get("toolDetails") or {}).get("name")

        hops = [
            self._to_hop(step, request)
            for step in data.get("includedSteps") or []
            if isinstance(step, dict)
        ]

        metadata: Dict[str, Any] = {
            "tokenIn": (action.get("fromToken") or {}).get("address"),
            "tokenOut": (action.get("toToken") or {}).get("address"),
            "amountIn": estimate.get("fromAmount") or action.get("fromAmount"),
            "amountOut": estimate.get("toAmount"),
            "amountOutMin": estimate.get("toAmountMin"),
            "gasFee": sum_amounts(cost.get("amount") for cost in estimate.get("gasCosts") or []),
            "tool": tool,
            "quoteType": data.get("type"),
        }

        return BridgeRoute(
            id=f"lifi-{data['id']}" if data.get("id") else None,
            provider=self.provider,
            source_chain=request.source_chain,
            target_chain=request.target_chain,
            fee=sum_amounts(cost.get("amount") for cost in estimate.get("feeCosts") or []),
            estimated_time=seconds(estimate.get("executionDuration")),
            hops=hops or None,
            metadata={k: v for k, v in metadata.items() if v is not None},
        )

    def _to_hop(self, step: Dict[str, Any], request: RouteRequest) -> Hop:
        action = step.get("action") or {}
        estimate = step.get("estimate") or {}
        return Hop(
            source_chain=chain_from_lifi(action.get("fromChainId"), request.source_chain),
            destination_chain=chain_from_lifi(action.get("toChainId"), request.target_chain),
            token_in=(action.get("fromToken") or {}).get("address") or NATIVE_TOKEN,
            token_out=(action.get("toToken") or {}).get("address") or NATIVE_TOKEN,
            fee=sum_amounts(cost.get("amount") for cost in estimate.get("feeCosts") or []),
            estimated_time=seconds(estimate.get("executionDuration")),
            adapter=self.provider,
            metadata={
                "stepId": step.get("id"),
                "type": step.get("type"),
                "tool": step.get("tool"),
            },
        )
