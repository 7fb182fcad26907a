"""splitrun validate CLI command for collection file validation.

Checks that each collection parses, matches the collection schema, and
has only folders at the top level, without running anything.
"""

from __future__ import annotations

from pathlib import Path

import typer

from splitrun.errors import CollectionValidationError
from splitrun.execution.partitioner import partition
from splitrun.loader.collection_loader import load_collection_file
from splitrun.loader.errors import ErrorFormatter


def validate(
    collections: list[str] = typer.Argument(..., help="Collection files to validate"),
    ci: bool = typer.Option(False, "--ci", help="CI-friendly concise output"),
) -> None:
    """Validate collection files without running them.

    Exits with code 0 if all are valid, 1 if any has errors.
    """
    formatter = ErrorFormatter(ci_mode=ci)
    valid_count = 0

    for name in collections:
        filepath = Path(name)
        if not filepath.exists():
            typer.echo(f"Error: File not found: {name}", err=True)
            raise typer.Exit(code=1)

        try:
            partitions = partition(load_collection_file(filepath))
        except CollectionValidationError as exc:
            typer.echo(formatter.format_error(exc, str(filepath)), err=not ci)
            continue

        valid_count += 1
        typer.echo(formatter.format_success(str(filepath), len(partitions)))

    typer.echo(f"\n{valid_count}/{len(collections)} collections valid")

    if valid_count < len(collections):
        raise typer.Exit(code=1)
