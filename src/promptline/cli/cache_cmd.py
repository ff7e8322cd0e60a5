"""promptline cache-prompt -- copy prompts into fallback storage.

Fetches each named prompt from Langfuse (bypassing the cache) so that
it is saved to fallback storage, ready for when the API is down.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from promptline.cli.state import load_cli_settings
from promptline.errors import PromptlineError
from promptline.wiring import build_prompt_registry

console = Console()


def cache_prompt(
    ctx: typer.Context,
    prompts: Optional[list[str]] = typer.Option(
        None, "--prompt", "-p", help="Prompt name to cache (repeatable)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Re-fetch prompts already stored"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be cached"),
) -> None:
    """Cache Langfuse prompts in fallback storage."""
    if not prompts:
        console.print("No prompts specified. Use --prompt NAME (repeatable).")
        typer.echo(ctx.get_help())
        raise typer.Exit()

    settings, project_root = load_cli_settings(ctx)
    registry = build_prompt_registry(settings, project_root)

    cached = 0
    skipped = 0
    errors = 0

    try:
        for name in prompts:
            if not force and registry.has(name):
                console.print(f"[yellow]Skipped[/yellow] {name} (already in fallback storage)")
                skipped += 1
                continue

            if dry_run:
                console.print(f"Would cache {name}")
                cached += 1
                continue

            try:
                registry.get_raw(name, use_cache=False)
            except PromptlineError as exc:
                console.print(f"[red]Error[/red] {escape(name)}: {escape(str(exc))}")
                errors += 1
                continue

            console.print(f"[green]Cached[/green] {name}")
            cached += 1
    finally:
        registry.client.close()

    console.print(f"\nCached: {cached}, Skipped: {skipped}, Errors: {errors}")

    if errors > 0:
        raise typer.Exit(code=1)
