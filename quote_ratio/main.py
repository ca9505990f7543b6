from __future__ import annotations

import argparse
import asyncio
from typing import List, Optional

from quote_ratio.composition import build_analysis_settings, build_rpc_provider
from quote_ratio.config import analysis_section, get_config
from quote_ratio.core.exceptions import ProviderMisconfigured
from quote_ratio.core.log import LEVELS, set_level
from quote_ratio.extractor import load_extractor
from quote_ratio.pipeline.context import RunContext
from quote_ratio.pipeline.runner import run_analysis
from quote_ratio.report import ProgressReporter, render_report
from quote_ratio.venues import Venue


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="quote-ratio CLI")
    parser.add_argument("--log-level", type=str.lower, choices=LEVELS, default=None, help="Log level")
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Measure realized-over-quoted output for a venue")
    analyze.add_argument("target", choices=Venue.keys(), help="Venue to measure")
    analyze.add_argument("--rpc", type=str, default=None, help="RPC url (or SOLANA_RPC_URL)")
    analyze.add_argument("--address", type=str, default=None, help="Address whose history is walked")
    analyze.add_argument("--pages", type=int, default=None, help="Number of signature pages to fetch")
    analyze.add_argument("--page-size", type=int, default=None, help="Signatures per page (max 1000)")
    analyze.add_argument("--fetch-tx-delay", type=int, default=None, help="Delay in ms between pages")
    analyze.add_argument("--fetch-acc-delay", type=int, default=None, help="Delay in ms after account lookups")
    analyze.add_argument("--extractor", type=str, default=None, help="Swap extractor as module:function")
    return parser


def cmd_analyze(args: argparse.Namespace) -> RunContext:
    cfg = get_config(refresh=True)
    settings = build_analysis_settings(
        args.target,
        cfg,
        address=args.address,
        pages=args.pages,
        page_size=args.page_size,
        fetch_tx_delay_ms=args.fetch_tx_delay,
        fetch_acc_delay_ms=args.fetch_acc_delay,
    )
    extract = load_extractor(args.extractor or analysis_section(cfg).get("extractor"))
    provider = build_rpc_provider(cfg, rpc_url=args.rpc)
    reporter = ProgressReporter()

    async def _run() -> RunContext:
        async with provider:
            return await run_analysis(settings, provider, extract, observer=reporter)

    try:
        context = asyncio.run(_run())
    finally:
        reporter.finish()
    render_report(context, settings.venue.key, console=reporter.console)
    return context


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    if args.command == "analyze":
        try:
            cmd_analyze(args)
        except (ProviderMisconfigured, FileNotFoundError) as exc:
            parser.error(str(exc))


if __name__ == "__main__":
    main()
