"""Conversion of provider-native routes into the canonical multi-hop schema.

Fee amounts are integer strings in the token's smallest unit and are summed
with Python ints; floats are never involved. A hop whose fee cannot be parsed
is left out of the route total instead of discarding the route.
"""

from __future__ import annotations

import re
import time
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .constants import NATIVE_TOKEN
from .models import BridgeRoute, Hop, NormalizedRoute

_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_fee(value: Any) -> int:
    """Parse an integer fee amount.

    Accepts ints and optionally signed decimal integer strings. Anything else
    (floats, hex, empty strings, ``None``) raises ``ValueError``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid fee amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.match(value):
        return int(value)
    raise ValueError(f"Invalid fee amount: {value!r}")


def sum_fees(values: Iterable[Any]) -> Tuple[int, List[int]]:
    """Sum fee amounts, skipping unparseable ones.

    Returns the total and the positions that were skipped.
    """
    total = 0
    skipped: List[int] = []
    for index, value in enumerate(values):
        try:
            total += parse_fee(value)
        except ValueError:
            skipped.append(index)
    return total, skipped


def fee_percentage(input_amount: Any, output_amount: Any) -> float:
    """Share of ``input_amount`` lost between input and output, in percent.

    Rounded down to two decimals and clamped to [0, 100]; 0 when either
    amount is unparseable or the input is zero.
    """
    try:
        amount_in = parse_fee(input_amount)
        amount_out = parse_fee(output_amount)
    except ValueError:
        return 0.0
    if amount_in == 0:
        return 0.0
    basis_points = ((amount_in - amount_out) * 10000) // amount_in
    return max(0.0, min(100.0, basis_points / 100))


def synthesize_hop(route: BridgeRoute) -> Hop:
    """Single implicit hop built from a route's top-level fields."""
    metadata = dict(route.metadata or {})
    return Hop(
        source_chain=route.source_chain,
        destination_chain=route.target_chain,
        token_in=metadata.get("tokenIn") or NATIVE_TOKEN,
        token_out=metadata.get("tokenOut") or NATIVE_TOKEN,
        fee=route.fee,
        estimated_time=route.estimated_time,
        adapter=route.provider,
        metadata=metadata,
    )


def normalize_route(
    route: BridgeRoute,
    index: int,
    *,
    now_ms: int,
    flag_partial_fees: bool = False,
) -> NormalizedRoute:
    hops = list(route.hops) if route.hops else [synthesize_hop(route)]

    total_fees, skipped = sum_fees(hop.fee for hop in hops)
    estimated_time = sum(hop.estimated_time for hop in hops)

    metadata = {**(route.metadata or {}), "normalized": True}
    if flag_partial_fees and skipped:
        metadata["feesPartial"] = True
        metadata["unparsedFeeHops"] = skipped

    return NormalizedRoute(
        id=route.id or f"route-{now_ms}-{index}",
        source_chain=route.source_chain,
        destination_chain=route.target_chain,
        token_in=hops[0].token_in,
        token_out=hops[-1].token_out,
        total_fees=str(total_fees),
        estimated_time=estimated_time,
        hops=hops,
        adapter=route.provider,
        metadata=metadata,
    )


def normalize_routes(
    routes: Sequence[BridgeRoute],
    *,
    now_ms: Optional[int] = None,
    flag_partial_fees: bool = False,
) -> List[NormalizedRoute]:
    """Normalize a batch of raw routes.

    Synthesized ids combine ``now_ms`` with the route position, so they are
    unique within one batch.
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return [
        normalize_route(route, index, now_ms=stamp, flag_partial_fees=flag_partial_fees)
        for index, route in enumerate(routes)
    ]
