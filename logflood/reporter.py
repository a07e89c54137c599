from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from logflood.controller import RunResult
from logflood.domain.models import RunConfig
from logflood.utils.units import format_duration


def _format_mb(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def print_summary(
    result: RunResult,
    config: RunConfig,
    console: Optional[Console] = None,
) -> None:
    """
    Render a finished run as a rich table.

    Goes to stderr by default so the summary never mixes with records on stdout.
    """
    console = console or Console(stderr=True)

    duration = "unbounded" if config.duration is None else format_duration(config.duration)
    title = f"logflood run [dim]({config.run_id or 'no run id'})[/dim]"
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"Target {config.records_per_second:,} records/s for {duration}",
    )

    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Record Size (B)", justify="right", style="cyan")
    table.add_column("Written (MB)", justify="right", style="blue")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Rate (records/s)", justify="right", style="bold green")
    table.add_column("Dropped Ticks", justify="right", style="red")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    cpu = result.get("cpu_percent")
    table.add_row(
        f"{result.get('records', 0):,}",
        f"{config.record_size:,}",
        _format_mb(result.get("bytes_written")),
        f"{result.get('duration_seconds', 0.0):.2f}",
        f"{result.get('records_per_sec', 0.0):,.2f}",
        f"{result.get('dropped_ticks', 0):,}",
        _format_mb(result.get("peak_rss_bytes")),
        "N/A" if cpu is None else f"{cpu:.1f}",
    )

    console.print(table)


__all__ = ["print_summary"]
