"""Multi-provider bridge route aggregation."""

from .core.bridge import (
    AggregatedRoutes,
    BridgeError,
    BridgeExecutionRequest,
    BridgeRoute,
    BridgeValidator,
    Hop,
    NormalizedRoute,
    RouteRequest,
    ValidationResult,
)
from .core.bridge.aggregator import AggregatorConfig, BridgeAggregator

__version__ = "0.1.0"
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
    "__version__",
]
