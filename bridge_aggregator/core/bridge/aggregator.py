"""BridgeAggregator fans a route request out to every eligible bridge adapter."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...config import Settings, settings as default_settings
from ...providers import BridgeAdapter, build_default_adapters
from ..errors import AdapterTimeoutError, ProviderResponseError, classify_error, error_code, error_message
from .constants import ChainId
from .models import AggregatedRoutes, BridgeError, BridgeRoute, NormalizedRoute, RouteRequest
from .normalizer import normalize_routes
from .sorting import sort_routes
from .validator import BridgeExecutionRequest, BridgeValidator, ValidationResult

DEFAULT_TIMEOUT_MS = 15000


@dataclass
class AggregatorConfig:
    """Aggregator construction options.

    ``providers`` toggles the default adapters by name (missing names are
    enabled). ``adapters`` replaces the default set entirely.
    """

    providers: Dict[str, bool] = field(default_factory=dict)
    api_keys: Dict[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    adapters: Optional[List[BridgeAdapter]] = None
    flag_partial_fees: bool = False
    http_timeout_s: Optional[int] = None

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "AggregatorConfig":
        source = config or default_settings
        return cls(
            providers=source.provider_toggles,
            api_keys=source.provider_api_keys,
            timeout_ms=source.aggregator_timeout_ms,
            flag_partial_fees=source.flag_partial_fees,
            http_timeout_s=source.provider_http_timeout_seconds,
        )


class BridgeAggregator:
    """Collects, normalizes and ranks routes from multiple bridge providers.

    Adapter failures (timeouts, transport errors, malformed payloads) never
    fail a call: they are reported in ``AggregatedRoutes.errors``. Only
    internal errors from normalization or sorting propagate.

    The registry is read, not locked, during ``get_routes``; add or remove
    adapters between calls.
    """

    def __init__(
        self,
        config: Optional[AggregatorConfig] = None,
        *,
        validator: Optional[BridgeValidator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or AggregatorConfig()
        if config.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {config.timeout_ms}")

        self._logger = logger or logging.getLogger(__name__)
        self._timeout_ms = config.timeout_ms
        self._flag_partial_fees = config.flag_partial_fees
        self._validator = validator or BridgeValidator()

        if config.adapters is not None:
            self._adapters: List[BridgeAdapter] = list(config.adapters)
        else:
            self._adapters = build_default_adapters(
                config.providers,
                config.api_keys,
                timeout_s=config.http_timeout_s,
            )

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    async def get_routes(self, request: RouteRequest) -> AggregatedRoutes:
        """Fetch routes from every adapter that serves the chain pair."""

        started = time.monotonic()
        eligible = [
            adapter
            for adapter in self._adapters
            if adapter.supports_chain_pair(request.source_chain, request.target_chain)
        ]

        if not eligible:
            self._logger.info(
                "No adapters support %s -> %s", request.source_chain, request.target_chain
            )
            return AggregatedRoutes(
                routes=[],
                timestamp=_now_ms(),
                providers_queried=0,
                providers_responded=0,
            )

        results = await asyncio.gather(
            *(self._fetch_with_timeout(adapter, request) for adapter in eligible),
            return_exceptions=True,
        )

        raw_routes: List[BridgeRoute] = []
        errors: List[BridgeError] = []
        providers_responded = 0

        for adapter, result in zip(eligible, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    # CancelledError / KeyboardInterrupt are not adapter failures
                    raise result
                errors.append(
                    BridgeError(
                        provider=adapter.provider,
                        error=error_message(result),
                        code=error_code(result),
                    )
                )
                continue
            if result:
                raw_routes.extend(result)
                providers_responded += 1

        normalized = normalize_routes(raw_routes, flag_partial_fees=self._flag_partial_fees)
        ordered = sort_routes(normalized)

        self._logger.info(
            "Aggregated %d routes for %s -> %s (queried=%d responded=%d failed=%d) in %.0fms",
            len(ordered),
            request.source_chain,
            request.target_chain,
            len(eligible),
            providers_responded,
            len(errors),
            (time.monotonic() - started) * 1000,
        )

        return AggregatedRoutes(
            routes=ordered,
            timestamp=_now_ms(),
            providers_queried=len(eligible),
            providers_responded=providers_responded,
            errors=errors,
        )

    async def _fetch_with_timeout(
        self,
        adapter: BridgeAdapter,
        request: RouteRequest,
    ) -> List[BridgeRoute]:
        started = time.monotonic()
        # Only an unfinished task means the deadline passed; a TimeoutError from the adapter is its own failure.
        task = asyncio.ensure_future(adapter.fetch_routes(request))
        try:
            _, pending = await asyncio.wait({task}, timeout=self._timeout_ms / 1000)
        finally:
            if not task.done():
                task.cancel()

        if pending:
            await asyncio.gather(task, return_exceptions=True)
            self._logger.warning(
                "Adapter %s timed out after %dms", adapter.provider, self._timeout_ms
            )
            raise AdapterTimeoutError(provider=adapter.provider, timeout_ms=self._timeout_ms)

        try:
            routes = task.result()
        except Exception as exc:
            self._logger.warning(
                "Adapter %s failed after %.0fms [%s/%s]: %s",
                adapter.provider,
                (time.monotonic() - started) * 1000,
                classify_error(exc).value,
                error_code(exc),
                exc,
            )
            raise

        if not isinstance(routes, list) or not all(isinstance(route, BridgeRoute) for route in routes):
            raise ProviderResponseError(
                f"{adapter.provider} returned {type(routes).__name__} instead of a route list",
                provider=adapter.provider,
            )
        self._logger.debug(
            "Adapter %s returned %d routes in %.0fms",
            adapter.provider,
            len(routes),
            (time.monotonic() - started) * 1000,
        )
        return routes

    # ---------------------------
    # Registry
    # ---------------------------
    def get_adapters(self) -> List[BridgeAdapter]:
        return list(self._adapters)

    def add_adapter(self, adapter: BridgeAdapter) -> None:
        self._adapters.append(adapter)

    def remove_adapter(self, provider: str) -> None:
        self._adapters = [adapter for adapter in self._adapters if adapter.provider != provider]

    # ---------------------------
    # Validation pass-through
    # ---------------------------
    def validate_request(self, request: BridgeExecutionRequest) -> ValidationResult:
        return self._validator.validate_execution_request(request)

    def validate_route(self, route: NormalizedRoute, request: BridgeExecutionRequest) -> ValidationResult:
        return self._validator.validate_route(route, request)

    def get_compatible_chains(self, source_chain: Any) -> List[ChainId]:
        return self._validator.get_compatible_chains(source_chain) or []


def _now_ms() -> int:
    return int(time.time() * 1000)
