"""Shared Rich UI helpers."""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

console = Console()
_LABEL_WIDTH = 9


def _label(name: str) -> str:
    return f"{name}:".ljust(_LABEL_WIDTH)


def format_line(name: str, msg: str) -> str:
    """Build one formatted output line."""
    return f"{_label(name)} {msg}"


def report(name: str, msg: str) -> None:
    console.print(format_line(name, msg))


def report_error(
    summary: str,
    *,
    cause: str | None = None,
    action: str | None = None,
) -> None:
    """Print a structured, user-facing error block."""
    report("error", f"[red]{summary}[/red]")
    if cause:
        report("cause", cause)
    if action:
        report("action", action)


def report_mode(mode: str, detail: str | None = None) -> None:
    if detail:
        report("mode", f"{mode} | {detail}")
    else:
        report("mode", mode)


def make_table(
    *,
    title: str | None = None,
    show_header: bool = True,
    header_style: str = "dim",
) -> Table:
    """Create a table with shared CLI defaults."""
    return Table(title=title, show_header=show_header, header_style=header_style)


def render_table(table: Table, *, gap_before: bool = False) -> None:
    if gap_before:
        console.print()
    console.print(table)


def report_progress(name: str) -> Progress:
    return Progress(
        TextColumn(_label(name)),
        BarColumn(bar_width=30),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def fmt_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:>6.1f}s"
    elif seconds < 3600:
        return f"{seconds / 60:>6.1f}m"
    return f"{seconds / 3600:>6.1f}h"
