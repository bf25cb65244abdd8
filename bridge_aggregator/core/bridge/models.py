"""Typed models used by the bridge route aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import ChainId


@dataclass(frozen=True)
class RouteRequest:
    """Cross-chain transfer query; immutable for the duration of a call."""

    source_chain: ChainId
    target_chain: ChainId
    token: Optional[str] = None
    amount: Optional[str] = None
    user_address: Optional[str] = None
    recipient_address: Optional[str] = None
    target_token: Optional[str] = None
    slippage_bps: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Hop:
    """One leg of a bridge route between two chains."""

    source_chain: ChainId
    destination_chain: ChainId
    token_in: str
    token_out: str
    fee: str
    estimated_time: float
    adapter: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BridgeRoute:
    """Provider-native route as returned by an adapter."""

    provider: str
    source_chain: ChainId
    target_chain: ChainId
    fee: str
    estimated_time: float
    id: Optional[str] = None
    hops: Optional[List[Hop]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NormalizedRoute:
    """Canonical multi-hop route shared by every provider."""

    id: str
    source_chain: ChainId
    destination_chain: ChainId
    token_in: str
    token_out: str
    total_fees: str
    estimated_time: float
    hops: List[Hop]
    adapter: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def hop_count(self) -> int:
        return len(self.hops)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceChain": self.source_chain,
            "destinationChain": self.destination_chain,
            "tokenIn": self.token_in,
            "tokenOut": self.token_out,
            "totalFees": self.total_fees,
            "estimatedTime": self.estimated_time,
            "hops": [
                {
                    "sourceChain": hop.source_chain,
                    "destinationChain": hop.destination_chain,
                    "tokenIn": hop.token_in,
                    "tokenOut": hop.token_out,
                    "fee": hop.fee,
                    "estimatedTime": hop.estimated_time,
                    "adapter": hop.adapter,
                    "metadata": hop.metadata,
                }
                for hop in self.hops
            ],
            "adapter": self.adapter,
            "metadata": self.metadata,
        }


@dataclass
class BridgeError:
    """Per-adapter failure record; collected, never fatal."""

    provider: str
    error: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "error": self.error, "code": self.code}


@dataclass
class AggregatedRoutes:
    """Result envelope returned by ``BridgeAggregator.get_routes``."""

    routes: List[NormalizedRoute]
    timestamp: int
    providers_queried: int
    providers_responded: int
    errors: List[BridgeError] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        """True when some eligible providers failed or had no viable route."""
        return self.providers_responded < self.providers_queried

    @property
    def best_route(self) -> Optional[NormalizedRoute]:
        return self.routes[0] if self.routes else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "routes": [route.to_dict() for route in self.routes],
            "timestamp": self.timestamp,
            "providersQueried": self.providers_queried,
            "providersResponded": self.providers_responded,
            "errors": [error.to_dict() for error in self.errors],
        }
