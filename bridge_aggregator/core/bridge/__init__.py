"""Bridge route aggregation components."""

from typing import TYPE_CHECKING

from .models import AggregatedRoutes, BridgeError, BridgeRoute, Hop, NormalizedRoute, RouteRequest
from .normalizer import normalize_routes
from .sorting import sort_routes
from .validator import BridgeExecutionRequest, BridgeValidator, ValidationResult

if TYPE_CHECKING:  # pragma: no cover
    from .aggregator import AggregatorConfig, BridgeAggregator

__all__ = [
    "AggregatedRoutes",
    "AggregatorConfig",
    "BridgeAggregator",
    "BridgeError",
    "BridgeExecutionRequest",
    "BridgeRoute",
    "BridgeValidator",
    "Hop",
    "NormalizedRoute",
    "RouteRequest",
    "ValidationResult",
    "normalize_routes",
    "sort_routes",
]


def __getattr__(name: str):  # pragma: no cover - simple thunk
    # Deferred: the aggregator imports the provider adapters, which import these models.
    if name in ("BridgeAggregator", "AggregatorConfig"):
        from . import aggregator as _aggregator

        return getattr(_aggregator, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
