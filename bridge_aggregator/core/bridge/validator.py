"""Pre-flight checks for bridge execution requests and candidate routes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eth_utils import is_hex_address

from .constants import CHAIN_COMPATIBILITY, CHAIN_METADATA, ChainId, resolve_chain
from .models import NormalizedRoute
from .normalizer import parse_fee

_SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

MAX_SLIPPAGE_BPS = 5000
HIGH_SLIPPAGE_BPS = 300
SLOW_ROUTE_SECONDS = 3600


@dataclass(frozen=True)
class BridgeExecutionRequest:
    """What the user intends to execute once a route is picked."""

    source_chain: ChainId
    target_chain: ChainId
    token: str
    amount: str
    user_address: str
    recipient_address: Optional[str] = None
    slippage_bps: Optional[int] = None


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


def is_valid_address(address: Optional[str], chain: ChainId) -> bool:
    if not address:
        return False
    details = CHAIN_METADATA.get(chain) or {}
    if details.get("chain_type") == "solana":
        return bool(_SOLANA_ADDRESS_RE.match(address))
    return address.startswith("0x") and is_hex_address(address)


class BridgeValidator:
    """Business-rule checks shared by the aggregator and its callers."""

    def __init__(self, compatibility: Optional[Dict[ChainId, List[ChainId]]] = None) -> None:
        self._compatibility = compatibility if compatibility is not None else CHAIN_COMPATIBILITY

    def get_compatible_chains(self, source_chain: Any) -> Optional[List[ChainId]]:
        """Reachable destinations for ``source_chain``; ``None`` when unknown."""
        slug = resolve_chain(source_chain)
        if slug is None or slug not in self._compatibility:
            return None
        return list(self._compatibility[slug])

    def is_supported_pair(self, source_chain: Any, target_chain: Any) -> bool:
        compatible = self.get_compatible_chains(source_chain)
        target = resolve_chain(target_chain)
        return bool(compatible) and target in compatible

    def validate_execution_request(self, request: BridgeExecutionRequest) -> ValidationResult:
        result = ValidationResult()

        source = resolve_chain(request.source_chain)
        target = resolve_chain(request.target_chain)
        if source is None:
            result.add_error(f"Unsupported source chain: {request.source_chain}")
        if target is None:
            result.add_error(f"Unsupported target chain: {request.target_chain}")
        if source is not None and source == target:
            result.add_error("Source and target chain must differ")
        elif source is not None and target is not None and not self.is_supported_pair(source, target):
            result.add_error(f"No bridge path from {source} to {target}")

        if not request.token:
            result.add_error("Token is required")

        try:
            amount = parse_fee(request.amount)
        except ValueError:
            result.add_error(f"Amount must be an integer in the token's smallest unit: {request.amount!r}")
        else:
            if amount <= 0:
                result.add_error("Amount must be greater than zero")

        if source is not None and not is_valid_address(request.user_address, source):
            result.add_error(f"Invalid sender address for {source}: {request.user_address!r}")
        if request.recipient_address is not None and target is not None:
            if not is_valid_address(request.recipient_address, target):
                result.add_error(f"Invalid recipient address for {target}: {request.recipient_address!r}")
        elif target is not None and source is not None:
            source_type = CHAIN_METADATA[source]["chain_type"]
            target_type = CHAIN_METADATA[target]["chain_type"]
            if source_type != target_type:
                result.add_error(f"A recipient address is required when bridging from {source} to {target}")

        if request.slippage_bps is not None:
            if request.slippage_bps < 0 or request.slippage_bps > MAX_SLIPPAGE_BPS:
                result.add_error(f"Slippage must be between 0 and {MAX_SLIPPAGE_BPS} bps")
            elif request.slippage_bps > HIGH_SLIPPAGE_BPS:
                result.add_warning(f"Slippage of {request.slippage_bps} bps is unusually high")

        return result

    def validate_route(self, route: NormalizedRoute, request: BridgeExecutionRequest) -> ValidationResult:
        result = ValidationResult()

        source = resolve_chain(request.source_chain)
        target = resolve_chain(request.target_chain)
        if resolve_chain(route.source_chain) != source:
            result.add_error(f"Route starts on {route.source_chain}, request starts on {request.source_chain}")
        if resolve_chain(route.destination_chain) != target:
            result.add_error(f"Route ends on {route.destination_chain}, request ends on {request.target_chain}")

        if not route.hops:
            result.add_error("Route has no hops")
            return result

        for position, (current, following) in enumerate(zip(route.hops, route.hops[1:])):
            if resolve_chain(current.destination_chain) != resolve_chain(following.source_chain):
                result.add_error(
                    f"Hop {position} ends on {current.destination_chain} "
                    f"but hop {position + 1} starts on {following.source_chain}"
                )

        try:
            total_fees = parse_fee(route.total_fees)
            amount = parse_fee(request.amount)
        except ValueError:
            result.add_warning("Could not compare route fees with the transfer amount")
        else:
            if total_fees < 0:
                result.add_error("Route reports negative fees")
            elif total_fees >= amount:
                result.add_warning("Route fees meet or exceed the transfer amount")

        if route.metadata.get("feesPartial"):
            result.add_warning("Route fee total excludes at least one unparsed hop fee")
        if route.estimated_time > SLOW_ROUTE_SECONDS:
            result.add_warning(f"Route is estimated to take {route.estimated_time / 60:.0f} minutes")

        return result
