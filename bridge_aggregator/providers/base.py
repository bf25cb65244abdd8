from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import httpx

from ..core.bridge.constants import ChainId, resolve_chain
from ..core.bridge.models import BridgeRoute, RouteRequest
from ..core.errors import ProviderHTTPError, ProviderResponseError


class BridgeAdapter(ABC):
    """Route discovery capability exposed by every bridge provider."""

    provider: str

    @abstractmethod
    def supports_chain_pair(self, source: ChainId, target: ChainId) -> bool:
        """Pure capability check; no I/O."""

    @abstractmethod
    async def fetch_routes(self, request: RouteRequest) -> List[BridgeRoute]:
        """Fetch candidate routes; raise on provider or transport failure."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider!r})"


class HttpBridgeAdapter(BridgeAdapter):
    """Shared httpx plumbing for adapters backed by a public HTTP API."""

    default_base_urls: List[str] = []
    supported_chains: frozenset = frozenset()

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout_s: int = 20,
    ) -> None:
        if base_url:
            self.base_urls: List[str] = [base_url.rstrip("/")]
        else:
            self.base_urls = list(self.default_base_urls)
        self.timeout_s = timeout_s

    def supports_chain_pair(self, source: ChainId, target: ChainId) -> bool:
        source_slug = resolve_chain(source)
        target_slug = resolve_chain(target)
        if source_slug is None or target_slug is None or source_slug == target_slug:
            return False
        return source_slug in self.supported_chains and target_slug in self.supported_chains

    def _headers(self) -> Dict[str, str]:
        return {"accept": "application/json"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        merged_headers = {**self._headers(), **(headers or {})}
        last_error: Optional[Exception] = None

        for index, base_url in enumerate(self.base_urls):
            try:
                async with httpx.AsyncClient(base_url=base_url, timeout=self.timeout_s) as client:
                    response = await client.request(method, path, headers=merged_headers, **kwargs)
                    response.raise_for_status()
                    return response
            except httpx.HTTPStatusError as exc:
                # Some hosts omit certain routes; fall back when another base URL is left.
                if exc.response.status_code in (404, 405) and index < len(self.base_urls) - 1:
                    last_error = exc
                    continue
                raise ProviderHTTPError(
                    f"{self.provider} returned HTTP {exc.response.status_code}",
                    provider=self.provider,
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.RequestError as exc:
                last_error = exc
                continue

        if last_error is not None:
            raise last_error
        raise RuntimeError(f"All {self.provider} hosts failed without providing an error response")

    async def _get_json(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = await self._request(method, path, **kwargs)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderResponseError(
                f"{self.provider} returned a non-JSON body",
                provider=self.provider,
            ) from exc
        if not isinstance(payload, dict):
            raise ProviderResponseError(
                f"{self.provider} returned an unexpected payload type: {type(payload).__name__}",
                provider=self.provider,
            )
        return payload


def cleaned(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def int_amount(value: Any) -> Optional[int]:
    """Integer amount from a provider field, or ``None`` when absent/invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def sum_amounts(values: Iterable[Any]) -> str:
    """Sum provider fee fields as integers, ignoring missing entries."""
    total = 0
    for value in values:
        amount = int_amount(value)
        if amount is not None:
            total += amount
    return str(total)


def seconds(value: Any, default: float = 0.0) -> float:
    """Duration in seconds; ``default`` for missing, invalid or non-finite values."""
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return default
    return duration if math.isfinite(duration) else default
