#!/usr/bin/env python3
"""Simple CLI for inspecting bridge routes locally"""

import argparse
import asyncio
import json
from typing import List, Optional

from .config import settings
from .core.bridge.aggregator import AggregatorConfig, BridgeAggregator
from .core.bridge.constants import CHAIN_METADATA, resolve_chain
from .core.bridge.models import AggregatedRoutes, RouteRequest
from .core.bridge.normalizer import fee_percentage
from .logging_config import setup_logging
from .providers import ADAPTER_REGISTRY


def _format_eta(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.0f}s"
    return f"~{seconds / 60:.0f} min"


def print_routes(result: AggregatedRoutes) -> None:
    """Pretty print an aggregation result"""
    status = "⚠️  partial" if result.is_partial else "✅ complete"
    print(f"\n🌉 Bridge Routes ({status})")
    print("=" * 60)
    print(f"Providers queried:   {result.providers_queried}")
    print(f"Providers responded: {result.providers_responded}")

    if not result.routes:
        print("\n❌ No routes available")
    else:
        print("\nRoutes (best first):")
        print("-" * 60)
        for i, route in enumerate(result.routes, 1):
            share = ""
            if "amountIn" in route.metadata and "amountOut" in route.metadata:
                share = f" ({fee_percentage(route.metadata['amountIn'], route.metadata['amountOut']):.2f}% spread)"
            print(
                f"{i:2d}. {route.adapter:<8} fee={route.total_fees:>22}{share} "
                f"eta={_format_eta(route.estimated_time):>8} hops={len(route.hops)}"
            )
            print(f"    {route.id}: {route.token_in} → {route.token_out}")

    if result.errors:
        print("\nProvider errors:")
        for error in result.errors:
            code = f" [{error.code}]" if error.code else ""
            print(f" - {error.provider}{code}: {error.error}")


async def cli_routes(args: argparse.Namespace) -> None:
    """CLI command to aggregate routes for a chain pair"""
    source = resolve_chain(args.source) or args.source
    target = resolve_chain(args.target) or args.target

    config = AggregatorConfig.from_settings()
    if args.timeout_ms is not None:
        config.timeout_ms = args.timeout_ms
    for name in args.disable or []:
        config.providers[name] = False

    aggregator = BridgeAggregator(config)
    request = RouteRequest(
        source_chain=source,
        target_chain=target,
        token=args.token,
        amount=args.amount,
        user_address=args.user,
        recipient_address=args.recipient,
    )

    if not args.json:
        print(f"🔍 Fetching routes {source} → {target}...")
    result = await aggregator.get_routes(request)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print_routes(result)


def cli_chains(source_chain: str) -> None:
    aggregator = BridgeAggregator(AggregatorConfig(adapters=[]))
    chains = aggregator.get_compatible_chains(source_chain)
    if not chains:
        print(f"❌ Unknown chain: {source_chain}")
        return
    print(f"Reachable from {source_chain}:")
    for chain in chains:
        print(f" - {chain} ({CHAIN_METADATA[chain]['name']})")


def cli_providers() -> None:
    toggles = settings.provider_toggles
    api_keys = {"bungee": settings.has_bungee_key, "lifi": settings.has_lifi_key}
    for name in ADAPTER_REGISTRY:
        state = "enabled" if toggles.get(name, True) else "disabled"
        key = ""
        if name in api_keys:
            key = "  🔑 api key" if api_keys[name] else "  (no api key)"
        print(f" - {name:<8} {state}{key}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bridge route aggregator CLI")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    routes_parser = subparsers.add_parser("routes", help="Aggregate bridge routes for a chain pair")
    routes_parser.add_argument("source", help="Source chain (slug, alias or chain id)")
    routes_parser.add_argument("target", help="Target chain (slug, alias or chain id)")
    routes_parser.add_argument("--token", help="Input token address (default: native)")
    routes_parser.add_argument("--amount", help="Amount in the token's smallest unit")
    routes_parser.add_argument("--user", help="Sender address")
    routes_parser.add_argument("--recipient", help="Recipient address (default: sender)")
    routes_parser.add_argument("--timeout-ms", type=int, help="Per-provider timeout in milliseconds")
    routes_parser.add_argument("--disable", action="append", choices=sorted(ADAPTER_REGISTRY), help="Skip a provider")
    routes_parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")

    chains_parser = subparsers.add_parser("chains", help="List chains reachable from a source chain")
    chains_parser.add_argument("source", help="Source chain")

    subparsers.add_parser("providers", help="List registered bridge providers")

    return parser


async def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)
    command = args.command.lower()

    if command == "routes":
        if args.timeout_ms is not None and args.timeout_ms <= 0:
            raise ValueError("Timeout must be positive")
        await cli_routes(args)

    elif command == "chains":
        cli_chains(args.source)

    elif command == "providers":
        cli_providers()

    else:
        print(f"❌ Unknown command: {command}")
        parser.print_help()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
