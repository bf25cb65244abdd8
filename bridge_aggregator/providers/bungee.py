import os
from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.bridge.constants import EVM_CHAINS, native_token, numeric_chain_id
from ..core.bridge.models import BridgeRoute, RouteRequest
from ..core.errors import AdapterError, ErrorCategory, ProviderResponseError
from .base import HttpBridgeAdapter, cleaned, int_amount, seconds


class BungeeAdapter(HttpBridgeAdapter):
    """Route adapter for the Bungee (Socket) public API surface."""

    provider = 'bungee'
    default_base_urls = [
        'https://public-backend.bungee.exchange',
        'https://api.socket.tech',
    ]
    supported_chains = frozenset(EVM_CHAINS)

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout_s: Optional[int] = None):
        super().__init__(
            base_url=base_url or settings.bungee_base_url or os.environ.get('BUNGEE_BASE_URL', ''),
            timeout_s=timeout_s or settings.provider_http_timeout_seconds,
        )
        # Try explicit args → settings → environment
        self.api_key = (
            api_key
            or settings.bungee_api_key
            or os.environ.get('BUNGEE_API_KEY', '')
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Accept': 'application/json',
        }
        if self.api_key:
            headers['API-KEY'] = self.api_key
        return headers

    def build_quote_params(self, request: RouteRequest) -> Dict[str, Any]:
        if not request.amount or not request.user_address:
            raise AdapterError(
                'Bungee quotes need an amount and a user address',
                provider=self.provider,
                code='MISSING_PARAMETER',
                category=ErrorCategory.UNSUPPORTED,
            )
        input_token = request.token or native_token(request.source_chain)
        output_token = request.target_token or (
            native_token(request.target_chain)
            if input_token == native_token(request.source_chain)
            else input_token
        )
        params = {
            'originChainId': str(numeric_chain_id(request.source_chain)),
            'destinationChainId': str(numeric_chain_id(request.target_chain)),
            'inputToken': input_token,
            'outputToken': output_token,
            'inputAmount': str(request.amount),
            'userAddress': request.user_address,
            'receiverAddress': request.recipient_address or request.user_address,
            'slippage': f'{request.slippage_bps / 100:g}' if request.slippage_bps is not None else None,
        }
        params.update(request.extra.get('bungee', {}))
        return cleaned(params)

    async def quote(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Fetch a bridge/auto-route quote via the public v1 API."""

        return await self._get_json('GET', '/api/v1/bungee/quote', params=cleaned(params))

    async def fetch_routes(self, request: RouteRequest) -> List[BridgeRoute]:
        params = self.build_quote_params(request)
        data = await self.quote(params)
        if data.get('success') is False:
            message = data.get('message') or data.get('error') or 'Bungee quote failed'
            raise ProviderResponseError(str(message), provider=self.provider)

        result = data.get('result') or {}
        candidates: List[Dict[str, Any]] = []
        if isinstance(result.get('autoRoute'), dict):
            candidates.append({**result['autoRoute'], '_kind': 'auto'})
        for manual in result.get('manualRoutes') or []:
            if isinstance(manual, dict):
                candidates.append({**manual, '_kind': 'manual'})

        input_amount = int_amount((result.get('input') or {}).get('amount')) or int_amount(params['inputAmount'])
        routes = []
        for candidate in candidates:
            route = self._to_route(candidate, request, params, input_amount)
            if route is not None:
                routes.append(route)
        return routes

    def _to_route(
        self,
        candidate: Dict[str, Any],
        request: RouteRequest,
        params: Dict[str, Any],
        input_amount: Optional[int],
    ) -> Optional[BridgeRoute]:
        output = candidate.get('output') or {}
        output_amount = int_amount(output.get('amount'))
        if output_amount is None:
            return None

        details = candidate.get('routeDetails') or {}
        route_fee = int_amount((details.get('routeFee') or {}).get('amount'))
        if route_fee is None:
            # Without an explicit bridge fee, charge the input/output spread.
            route_fee = max(0, input_amount - output_amount) if input_amount is not None else None

        quote_id = candidate.get('quoteId') or candidate.get('requestHash')
        metadata: Dict[str, Any] = {
            'tokenIn': params['inputToken'],
            'tokenOut': (output.get('token') or {}).get('address') or params['outputToken'],
            'amountIn': str(input_amount) if input_amount is not None else None,
            'amountOut': str(output_amount),
            'routeName': details.get('name'),
            'routeKind': candidate['_kind'],
            'quoteId': candidate.get('quoteId'),
            'requestHash': candidate.get('requestHash'),
            'gasFee': (candidate.get('gasFee') or {}).get('gasAmount'),
        }
        return BridgeRoute(
            id=f'bungee-{quote_id}' if quote_id else None,
            provider=self.provider,
            source_chain=request.source_chain,
            target_chain=request.target_chain,
            # An unknown fee is passed through unparsed; the normalizer skips it.
            fee=str(route_fee) if route_fee is not None else '',
            estimated_time=seconds(candidate.get('estimatedTime')),
            metadata={k: v for k, v in metadata.items() if v is not None},
        )
