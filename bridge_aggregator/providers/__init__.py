from typing import Dict, List, Mapping, Optional, Type

from .base import BridgeAdapter, HttpBridgeAdapter
from .bungee import BungeeAdapter
from .lifi import LifiAdapter
from .relay import RelayAdapter

# Registry of known bridge providers, in default query order
ADAPTER_REGISTRY: Dict[str, Type[HttpBridgeAdapter]] = {
    "relay": RelayAdapter,
    "bungee": BungeeAdapter,
    "lifi": LifiAdapter,
}

# Providers that accept an API key through their constructor
API_KEY_PROVIDERS = {"bungee", "lifi"}


def build_default_adapters(
    providers: Optional[Mapping[str, bool]] = None,
    api_keys: Optional[Mapping[str, str]] = None,
    *,
    timeout_s: Optional[int] = None,
) -> List[BridgeAdapter]:
    """Instantiate every registered provider not explicitly disabled.

    Providers missing from ``providers`` are enabled; disabled ones are
    simply left out.
    """
    toggles = providers or {}
    keys = api_keys or {}
    adapters: List[BridgeAdapter] = []
    for name, adapter_cls in ADAPTER_REGISTRY.items():
        if toggles.get(name) is False:
            continue
        if name in API_KEY_PROVIDERS:
            adapters.append(adapter_cls(api_key=keys.get(name), timeout_s=timeout_s))
        else:
            adapters.append(adapter_cls(timeout_s=timeout_s))
    return adapters


__all__ = [
    "ADAPTER_REGISTRY",
    "BridgeAdapter",
    "BungeeAdapter",
    "HttpBridgeAdapter",
    "LifiAdapter",
    "RelayAdapter",
    "build_default_adapters",
]
