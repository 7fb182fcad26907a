"""splitrun run -- run a collection's top-level folders concurrently.

Loads and partitions the collection, runs every partition through the
configured runner, then prints failures in document order with their
full paths and exits with a code reflecting the outcome.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from splitrun.cli.output import (
    create_run_progress,
    output_json,
    render_report,
    render_run_error,
    render_summary,
)
from splitrun.errors import CollectionValidationError, RunError
from splitrun.execution.partitioner import partition
from splitrun.execution.pool import PartitionPool
from splitrun.loader.collection_loader import load_collection_file
from splitrun.loader.errors import ErrorFormatter
from splitrun.logging_utils import configure_logging
from splitrun.models.config import CONFIG_FILENAME, find_project_root, load_project_config
from splitrun.reporting.aggregation import aggregate, summarize
from splitrun.runners.registry import get_runner

console = Console(stderr=True)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_INVALID = 2
EXIT_RUN_ERROR = 3


def run(
    collection_path: str = typer.Argument(..., help="Path to the collection file"),
    runner: Optional[str] = typer.Option(None, "--runner", help="Runner name or dotted class path"),
    parallel: Optional[int] = typer.Option(None, "--parallel", help="Max concurrent partitions (0 = all)"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
    no_cancel: bool = typer.Option(False, "--no-cancel", help="Leave sibling partitions running after a failure"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Run every top-level folder concurrently and report failures in order."""
    asyncio.run(
        _run_async(
            collection_path,
            runner_name=runner,
            parallel=parallel,
            format_json=format_json,
            no_cancel=no_cancel,
            log_level=log_level,
        )
    )


async def _run_async(
    collection_path: str,
    *,
    runner_name: str | None,
    parallel: int | None,
    format_json: bool,
    no_cancel: bool,
    log_level: str | None,
) -> None:
    """Async implementation of the run command."""
    filepath = Path(collection_path)
    try:
        config = load_project_config(find_project_root(filepath))
    except (ValidationError, yaml.YAMLError, UnicodeDecodeError, OSError) as exc:
        console.print(f"[bold red]Invalid config:[/bold red] {CONFIG_FILENAME}")
        console.print(escape(str(exc)), highlight=False)
        raise typer.Exit(code=EXIT_INVALID)
    configure_logging(log_level or config.log_level, config.log_format)

    # 1. Load, validate, and partition before anything runs
    try:
        partitions = partition(load_collection_file(filepath))
    except FileNotFoundError:
        console.print(f"[bold red]Error:[/bold red] File not found: {collection_path}")
        raise typer.Exit(code=EXIT_INVALID)
    except CollectionValidationError as exc:
        console.print(f"[bold red]Invalid collection:[/bold red] {exc.message}")
        typer.echo(ErrorFormatter().format_error(exc, str(filepath)), err=True)
        raise typer.Exit(code=EXIT_INVALID)

    # 2. Resolve the runner once up front so configuration errors fail fast
    name = runner_name or config.runner
    options = config.newman.model_dump() if name == "newman" else {}
    try:
        get_runner(name, **options)
    except (ValueError, ImportError, TypeError) as exc:
        console.print(f"[bold red]Runner error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_INVALID)

    def runner_factory():
        return get_runner(name, **options)

    pool = PartitionPool(
        runner_factory,
        reporter=config.reporter,
        max_parallel=parallel if parallel is not None else config.max_parallel,
        cancel_on_failure=config.cancel_on_failure and not no_cancel,
    )

    # 3. Fan out
    try:
        progress = None if format_json else create_run_progress(console)
        if progress is not None:
            with progress:
                task = progress.add_task("Running partitions", total=len(partitions))

                def on_progress(completed: int, total: int) -> None:
                    progress.update(task, completed=completed)

                results = await pool.run_all(partitions, progress_callback=on_progress)
        else:
            results = await pool.run_all(partitions)
    except RunError as exc:
        render_run_error(exc, console)
        raise typer.Exit(code=EXIT_RUN_ERROR)

    # 4. Fan in, reorder, resolve
    reports = list(aggregate(results))
    summary = summarize(results, reports)

    if format_json:
        output_json(reports, summary)
    else:
        output_console = Console()
        for report in reports:
            render_report(report, output_console)
        render_summary(summary, output_console)

    if not summary.passed:
        raise typer.Exit(code=EXIT_FAIL)
