"""splitrun CLI entry point."""

import typer

from splitrun import __version__
from splitrun.cli.run_cmd import run
from splitrun.cli.validate_cmd import validate

app = typer.Typer(
    name="splitrun",
    help="Run a collection's top-level folders concurrently",
    no_args_is_help=True,
)

app.command()(run)
app.command()(validate)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"splitrun {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Run a collection's top-level folders concurrently."""
