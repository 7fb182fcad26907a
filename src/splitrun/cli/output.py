"""Rich terminal output for failure reports and run summaries.

Provides the progress bar, per-request failure blocks, the summary
table, run-error dumps, and a pure JSON mode for CI consumption.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

if TYPE_CHECKING:
    from splitrun.errors import RunError
    from splitrun.models.result import FailureReport, RunSummary


def create_run_progress(console: Console) -> Progress | None:
    """Create a progress bar for partition execution.

    Returns None if the console is not a terminal (CI/pipe mode).
    """
    if not console.is_terminal:
        return None

    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def render_report(report: FailureReport, console: Console) -> None:
    """Print a failure's path, then one line per failed assertion."""
    console.print(f"[bold]{escape(report.display_path)}[/bold]")
    for assertion in report.failures:
        message = assertion.error.message if assertion.error is not None else ""
        console.print(
            f"  [red]✗[/red] {escape(assertion.assertion)}: {escape(message)}"
        )


def render_summary(summary: RunSummary, console: Console) -> None:
    """Render a compact key-value summary table."""
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    if summary.passed:
        table.add_row("Result", "[bold green]✓ PASS[/bold green]")
    else:
        table.add_row("Result", "[bold red]✗ FAIL[/bold red]")

    table.add_row("Partitions", str(summary.partitions))
    table.add_row(
        "Requests",
        f"{summary.requests_executed - summary.requests_failed}/"
        f"{summary.requests_executed} passed",
    )
    if summary.assertions_failed > 0:
        table.add_row("Failed assertions", str(summary.assertions_failed))
    if summary.unresolved > 0:
        table.add_row(
            "Unresolved",
            f"{summary.unresolved} failing request(s) missing from the result tree",
        )

    console.print()
    console.print(table)


def render_run_error(error: RunError, console: Console) -> None:
    """Dump a run error and the chain of exceptions that caused it."""
    console.print(f"[bold red]Run error:[/bold red] {escape(str(error))}")
    cause = error.__cause__
    while cause is not None:
        console.print(f"  [dim]caused by {type(cause).__name__}: {escape(str(cause))}[/dim]")
        cause = cause.__cause__


def output_json(reports: list[FailureReport], summary: RunSummary) -> None:
    """Write reports and summary as pure JSON to stdout."""
    payload = {
        "summary": {**summary.model_dump(), "passed": summary.passed},
        "failures": [
            {
                "path": report.display_path,
                "request": report.request_name,
                "item_id": report.item_id,
                "assertions": [
                    a.model_dump(mode="json", exclude_none=True) for a in report.failures
                ],
            }
            for report in reports
        ],
    }
    sys.stdout.write(json.dumps(payload, indent=2))
    sys.stdout.write("\n")
