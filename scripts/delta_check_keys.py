"""
Command-line helper for verifying Delta API keys without the web service.

Only read-only endpoints are exposed; orders go through the dashboards.

Usage examples:
    python scripts/delta_check_keys.py profile
    python scripts/delta_check_keys.py history --product-id 27

Environment variables:
    DELTA_API_KEY
    DELTA_API_SECRET
    DELTA_BASE_URL (optional, defaults to the India production host)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence

from config import load_settings
from exchanges.base_client import ExchangeForwarder
from exchanges.delta.client import DeltaForwarder
from exchanges.delta.endpoints import BALANCE, OPEN_ORDERS, ORDER_HISTORY, POSITIONS, PROFILE, order_history_path
from exchanges.delta.errors import DeltaProxyError
from services.delta.credentials import resolve_credentials
from services.delta.proxy import execute

COMMANDS = {
    "profile": PROFILE,
    "balance": BALANCE,
    "positions": POSITIONS,
    "orders": OPEN_ORDERS,
    "history": ORDER_HISTORY,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delta API key checker")
    parser.add_argument("command", choices=sorted(COMMANDS), help="Read-only endpoint to call")
    parser.add_argument("--product-id", help="Product filter for the history command")
    return parser


async def run(args: argparse.Namespace, forwarder: ExchangeForwarder, settings=None) -> Any:
    settings = settings or load_settings()
    credentials = resolve_credentials(settings)
    endpoint = COMMANDS[args.command]
    path = order_history_path(args.product_id) if args.command == "history" else None
    return await execute(forwarder, credentials, endpoint, path=path)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    forwarder = DeltaForwarder(base_url=settings.base_url, timeout=settings.timeout_seconds)

    async def _invoke() -> Any:
        try:
            return await run(args, forwarder, settings)
        finally:
            await forwarder.aclose()

    try:
        response = asyncio.run(_invoke())
    except DeltaProxyError as exc:
        print(json.dumps(exc.to_envelope(), indent=2), file=sys.stderr)
        sys.exit(2 if exc.status_code == 400 else 1)

    print(json.dumps(response, indent=2))


if __name__ == "__main__":
    main()
