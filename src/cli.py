"""Command-line entry point for the yield router."""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import get_settings
from src.api.handlers import ApiHandlers, ApiResponse
from src.data.cache.disk_cache import DiskCache
from src.data.clients.aave import AaveRateClient
from src.data.clients.gmx import build_pool_source
from src.data.resolver import AssetRateResolver
from src.engine.presets import preset_names
from src.engine.quote import QuoteConfig, QuoteEngine

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    "info": "cyan",
    "warning": "yellow",
    "danger": "bold red",
}


def build_handlers(offline: bool = False) -> ApiHandlers:
    """Handlers backed by live Aave/GMX feeds, or fallback tables when offline."""
    settings = get_settings()
    quote_engine = QuoteEngine(config=QuoteConfig.from_settings(settings))
    if offline:
        return ApiHandlers(resolver=AssetRateResolver(), quote_engine=quote_engine)

    resolver = AssetRateResolver(
        lending_client=AaveRateClient(settings),
        pool_source=build_pool_source(settings, cache=DiskCache(settings)),
    )
    return ApiHandlers(resolver=resolver, quote_engine=quote_engine)


def parse_alloc(values: Sequence[str]) -> List[dict]:
    """Parse ``asset=pct`` pairs into allocation lines."""
    lines = []
    for value in values:
        asset_id, sep, pct = value.partition("=")
        if not sep or not asset_id:
            raise argparse.ArgumentTypeError(f"Expected asset=pct, got {value!r}")
        lines.append({"assetId": asset_id.strip().lower(), "percentage": pct.strip()})
    return lines


def render_error(console: Console, response: ApiResponse) -> None:
    error = response.body["error"]
    console.print(Panel(Text(error["message"], style="red"), title=error["code"], border_style="red"))


def render_apy(console: Console, data: dict) -> None:
    table = Table(title=f"Blended APY (chain {data['chainId']})", header_style="bold")
    table.add_column("Asset")
    table.add_column("Aave %", justify="right")
    table.add_column("GMX %", justify="right")
    table.add_column("Gross %", justify="right")
    table.add_column("Net %", justify="right", style="green")

    for asset_id, row in data["assets"].items():
        table.add_row(
            asset_id.upper(),
            f"{row['aaveApy']:.2f}",
            f"{row['gmxApy']:.2f}",
            f"{row['grossApy']:.2f}",
            f"{row['netApy']:.2f}",
        )
    console.print(table)

    if data.get("presets"):
        presets = Table(title="Preset portfolios", header_style="bold")
        presets.add_column("Preset")
        presets.add_column("APY %", justify="right", style="green")
        for name, apy in data["presets"].items():
            presets.add_row(name, apy)
        console.print(presets)


def render_quote(console: Console, data: dict) -> None:
    quote = data["quote"]
    table = Table(title=f"Quote {quote['id']}", header_style="bold")
    table.add_column("Asset")
    table.add_column("Alloc %", justify="right")
    table.add_column("USD", justify="right")
    table.add_column("Units", justify="right")
    table.add_column("Aave %", justify="right")
    table.add_column("GMX %", justify="right")
    table.add_column("Blended %", justify="right", style="green")

    for line in quote["breakdown"]:
        table.add_row(
            line["assetId"].upper(),
            line["allocation"],
            line["usdAllocated"],
            line["estimatedAmount"],
            line["aaveApy"],
            line["gmxApy"],
            line["blendedApy"],
        )
    console.print(table)

    fees = quote["fees"]
    console.print(
        f"Estimated APY [green]{quote['estimatedApy']}%[/green]  "
        f"Monthly ${quote['estimatedMonthlyEarnings']}  "
        f"Borrow capacity ${quote['borrowCapacityUsd']}"
    )
    console.print(
        f"Fees (micro-USDC): bridge {fees['bridgeFee']}  swap {fees['swapFee']}  "
        f"protocol {fees['protocolFee']}  total {fees['totalFees']}"
    )


def render_borrow(console: Console, data: dict) -> None:
    sim = data["simulation"]
    table = Table(title="Borrow simulation", header_style="bold")
    table.add_column("Metric")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right")

    labels = [
        ("netApy", "Net APY %"),
        ("dailyEarnings", "Daily $"),
        ("monthlyEarnings", "Monthly $"),
        ("yearlyEarnings", "Yearly $"),
        ("borrowedUsd", "Borrowed $"),
        ("healthFactor", "Health factor"),
    ]
    for key, label in labels:
        table.add_row(label, sim["before"][key], sim["after"][key])
    console.print(table)

    for warning in sim["warnings"]:
        style = SEVERITY_STYLES.get(warning["severity"], "white")
        console.print(Text(f"[{warning['code']}] {warning['message']}", style=style))

    summary = data["summary"]
    console.print(Panel(f"{summary['subtext']}\n{summary['recommendation']}", title=summary["headline"]))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yield-router", description=__doc__)
    parser.add_argument("--json", action="store_true", help="Print raw response envelopes")
    parser.add_argument("--offline", action="store_true", help="Use fallback rate tables only")
    sub = parser.add_subparsers(dest="command", required=True)

    apy = sub.add_parser("apy", help="Blended APY per asset")
    apy.add_argument("--asset", help="Single asset id")

    quote = sub.add_parser("quote", help="Price a deposit")
    quote.add_argument("amount", help="Deposit amount in USD")
    group = quote.add_mutually_exclusive_group()
    group.add_argument("--preset", choices=preset_names())
    group.add_argument("--alloc", nargs="+", metavar="ASSET=PCT", default=[])
    quote.add_argument("--source-chain", type=int, default=None)

    borrow = sub.add_parser("borrow", help="Simulate borrowing against a position")
    borrow.add_argument("position_id")
    borrow.add_argument("amount_micro", help="Borrow amount in micro-USDC")

    return parser


async def run(args: argparse.Namespace) -> ApiResponse:
    handlers = build_handlers(offline=args.offline)
    try:
        if args.command == "apy":
            return await handlers.get_blended_apy({"assetId": args.asset})
        if args.command == "quote":
            return await handlers.get_quote({
                "amountUsdc": args.amount,
                "sourceChain": args.source_chain,
                "allocations": args.allocations,
                "preset": args.preset,
            })
        return await handlers.simulate_borrow({
            "positionId": args.position_id,
            "borrowAmountUsdc": args.amount_micro,
        })
    finally:
        await handlers.close()


RENDERERS = {
    "apy": render_apy,
    "quote": render_quote,
    "borrow": render_borrow,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "quote":
        try:
            args.allocations = parse_alloc(args.alloc)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))

    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))

    response = asyncio.run(run(args))

    console = Console()
    if args.json:
        console.print_json(json.dumps(response.body))
    elif response.success:
        RENDERERS[args.command](console, response.body["data"])
    else:
        render_error(console, response)
    return 0 if response.success else 1


if __name__ == "__main__":
    sys.exit(main())
