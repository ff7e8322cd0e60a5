"""Promptline CLI entry point."""

from pathlib import Path
from typing import Optional

import typer

from promptline import __version__
from promptline.cli.cache_cmd import cache_prompt
from promptline.cli.connection_cmd import test_connection
from promptline.cli.state import CliState
from promptline.logging_config import setup_logging

app = typer.Typer(
    name="promptline",
    help="Langfuse prompt management and tracing",
    no_args_is_help=True,
)

# Register subcommands
app.command(name="cache-prompt")(cache_prompt)
app.command(name="test-connection")(test_connection)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"promptline {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to promptline.yaml (default: search upwards)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Langfuse prompt management and tracing."""
    setup_logging("DEBUG" if verbose else "WARNING")
    ctx.obj = CliState(config_path=config)
