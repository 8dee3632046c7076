"""Rich console formatter for snapshot reports."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .generator import SnapshotReport


def _format_usd(value: float | None) -> str:
    if value is None:
        return "-"
    if value >= 1:
        return f"${value:,.4f}"
    return f"${value:.8g}"


def format_report_table(
    report: SnapshotReport, last_good_updated: bool, console: Console | None = None
) -> None:
    """Print the snapshot as a table.

    Args:
        report: The snapshot to format
        last_good_updated: Whether the run also replaced the last-good snapshot
        console: Target console (stdout by default)
    """
    console = console or Console()

    table = Table(title=f"Price snapshot {report.updated_at}", title_style="bold")
    table.add_column("Symbol", style="cyan", no_wrap=True)
    table.add_column("USD", justify="right")
    table.add_column("Fixed point (18)", justify="right", style="dim")
    table.add_column("Error", style="red")

    for symbol, result in report.prices.items():
        table.add_row(
            symbol,
            _format_usd(result.price_in_usd_float),
            result.price_in_fixed_point_18 or "-",
            result.error or "",
        )

    console.print(table)
    status = (
        "[green]last-good updated[/green]"
        if last_good_updated
        else "[yellow]last-good kept[/yellow]"
    )
    console.print(status)
