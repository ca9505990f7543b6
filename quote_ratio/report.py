from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from quote_ratio.pipeline.context import RunContext

UNDEFINED = "undefined"


def format_ratio(ratio: Optional[float]) -> str:
    if ratio is None:
        return UNDEFINED
    return f"{ratio:.6f}"


def format_progress(context: RunContext) -> str:
    stats = context.stats
    return (
        f"Fetched {context.fetched}/{context.expected_total} txs, on tx {context.processed}, "
        f"output-over-quote ratio: {stats.sum_out_usd:.0f}/{stats.sum_exact_out_usd:.0f}: "
        f"{format_ratio(stats.ratio)}"
    )


class ProgressReporter:
    """Rewrites a single status line on every consumer step."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)
        self._dirty = False

    def on_progress(self, context: RunContext) -> None:
        # rich renderables drop carriage returns
        self.console.file.write(f"\r{format_progress(context)}")
        self.console.file.flush()
        self._dirty = True

    def finish(self) -> None:
        if self._dirty:
            self.console.print()
            self._dirty = False


def render_report(context: RunContext, target: str, console: Optional[Console] = None) -> Table:
    stats = context.stats
    table = Table(title=f"Result for target {target}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Pages fetched", str(context.pages_fetched))
    table.add_row("Transactions fetched", str(context.fetched))
    table.add_row("Transactions missing", str(context.missing))
    table.add_row("Transactions examined", str(context.processed))
    table.add_row("Skipped (failed)", str(context.skipped_failed))
    table.add_row("Skipped (not routed)", str(context.skipped_not_routed))
    table.add_row("Decode failures", str(context.decode_failures))
    table.add_row("Accepted swaps", str(context.accepted))
    table.add_row("Rejected swaps", str(context.rejected))
    table.add_row("Output USD", f"{stats.sum_out_usd:.2f}")
    table.add_row("Quoted output USD", f"{stats.sum_exact_out_usd:.2f}")
    table.add_row("Output-over-quote ratio", format_ratio(stats.ratio))
    (console or Console()).print(table)
    return table


__all__ = ["ProgressReporter", "UNDEFINED", "format_progress", "format_ratio", "render_report"]
