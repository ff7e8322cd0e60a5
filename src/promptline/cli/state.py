"""Settings loading shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from pydantic import ValidationError

from promptline.models.config import Settings, find_project_root, load_settings


@dataclass
class CliState:
    """Options given to the top-level command."""

    config_path: Path | None = None


def load_cli_settings(ctx: typer.Context) -> tuple[Settings, Path]:
    """Load Settings for a command, exiting with code 1 on bad config.

    Returns:
        The settings and the project root relative paths resolve against.
    """
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()

    if state.config_path is not None:
        project_root = state.config_path.resolve().parent
        config_path = state.config_path
    else:
        project_root = find_project_root()
        config_path = None

    try:
        settings = load_settings(project_root, config_path=config_path)
    except FileNotFoundError as exc:
        typer.echo(f"Error: Config file not found: {exc.filename}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"Error: Invalid configuration:\n{exc}", err=True)
        raise typer.Exit(code=1)

    return settings, project_root
