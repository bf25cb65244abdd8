"""Deterministic ordering of normalized routes.

Routes are ordered by, in priority:

1. lowest ``total_fees`` (integer comparison; an unparseable fee on either
   side ties on this criterion)
2. lowest ``estimated_time``
3. fewest hops
4. ``id``, so identical routes still come out in a reproducible order
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List

from .models import NormalizedRoute
from .normalizer import parse_fee


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_routes(a: NormalizedRoute, b: NormalizedRoute) -> int:
    try:
        fee_diff = parse_fee(a.total_fees) - parse_fee(b.total_fees)
        if fee_diff != 0:
            return _sign(fee_diff)
    except ValueError:
        pass

    # inf - inf and NaN differences sign to 0 and fall through to the next criterion
    time_order = _sign(a.estimated_time - b.estimated_time)
    if time_order:
        return time_order

    hop_diff = len(a.hops) - len(b.hops)
    if hop_diff != 0:
        return _sign(hop_diff)

    if a.id == b.id:
        return 0
    return -1 if a.id < b.id else 1


route_sort_key = cmp_to_key(compare_routes)


def sort_routes(routes: Iterable[NormalizedRoute]) -> List[NormalizedRoute]:
    """Return a new, stably sorted list; the input is left untouched."""
    return sorted(routes, key=route_sort_key)
