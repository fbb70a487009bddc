#!/usr/bin/env python3
"""Simple CLI for trying the launchpad locally"""

import argparse
import asyncio
import sys
from decimal import Decimal

import httpx

from launchpad.config import settings
from launchpad.core.amm import minimum_amount, price_impact_percent, swap_output
from launchpad.core.errors import LaunchpadError


def cli_quote(reserve_in: str, reserve_out: str, amount_in: str, slippage: str, fee_bps: int) -> int:
    """Offline constant-product quote"""
    try:
        output = swap_output(reserve_in, reserve_out, amount_in, fee_bps)
        impact = price_impact_percent(amount_in, reserve_in)
        floor = minimum_amount(output, slippage)
    except LaunchpadError as e:
        print(f"❌ {e.category.value}: {e.message}")
        return 1

    print("\n📈 Constant-product quote")
    print("=" * 50)
    print(f"Reserves:        {reserve_in} in / {reserve_out} out")
    print(f"Amount in:       {amount_in}")
    print(f"Fee:             {fee_bps} bps")
    print(f"Expected output: {output.quantize(Decimal('0.000001'))}")
    print(f"Price impact:    {impact.quantize(Decimal('0.0001'))}%")
    print(f"Minimum @ {slippage}%:  {floor}")
    return 0


async def cli_session(session_id: str, base_url: str) -> int:
    """Fetch a signing session from a running server"""
    print(f"🔍 Fetching session {session_id}...")
    async with httpx.AsyncClient() as client:
        response = await client.get(f"{base_url}/tx/{session_id}", timeout=30)
    if response.status_code == 404:
        print("❌ Session not found")
        return 1
    response.raise_for_status()
    data = response.json()

    print(f"\nSession: {data['id']} ({data['status']})")
    print(f"Chain:   {data['chain_type']} {data['chain_id']}")
    if data.get("metadata"):
        print("\nMetadata:")
        for entry in data["metadata"]:
            print(f" - {entry['key']}: {entry['value']}")
    print("\nTransactions:")
    for i, tx in enumerate(data.get("transactions", []), 1):
        print(f"{i:2d}. [{tx['transactionType']}] {tx['title']} -> {tx['receiver'] or '(contract creation)'}")
        if tx.get("value", "0") != "0":
            print(f"    value: {tx['value']} wei")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Launchpad DEX CLI")
    subparsers = parser.add_subparsers(dest="command")

    quote_parser = subparsers.add_parser("quote", help="Quote an exact-input swap offline")
    quote_parser.add_argument("reserve_in", help="Input-side reserve (base units)")
    quote_parser.add_argument("reserve_out", help="Output-side reserve (base units)")
    quote_parser.add_argument("amount_in", help="Exact input amount (base units)")
    quote_parser.add_argument("--slippage", default=str(settings.default_slippage_percent), help="Slippage percent")
    quote_parser.add_argument("--fee-bps", type=int, default=settings.swap_fee_bps, help="Pool fee in basis points")

    session_parser = subparsers.add_parser("session", help="Show a signing session")
    session_parser.add_argument("session_id", help="Session id")
    session_parser.add_argument("--base-url", default=f"http://localhost:{settings.port}", help="Server base URL")

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "quote":
        return cli_quote(args.reserve_in, args.reserve_out, args.amount_in, args.slippage, args.fee_bps)
    if args.command == "session":
        return asyncio.run(cli_session(args.session_id, args.base_url.rstrip("/")))

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
