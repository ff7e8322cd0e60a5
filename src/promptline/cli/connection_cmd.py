"""promptline test-connection -- check Langfuse credentials.

Sends a small ``connection_test`` trace through the ingestion API and
reports whether Langfuse accepted it.
"""

from __future__ import annotations

import typer
from rich.console import Console

from promptline.cli.state import load_cli_settings
from promptline.wiring import build_trace_client

console = Console()


def test_connection(ctx: typer.Context) -> None:
    """Test the connection to Langfuse. Exits 0 on success, 1 on failure."""
    settings, _ = load_cli_settings(ctx)

    console.print(f"Testing connection to [bold]{settings.connection.host}[/bold]...")

    trace_client = build_trace_client(settings)
    try:
        ok = trace_client.test_connection()
    finally:
        trace_client.ingestion.close()

    if not ok:
        console.print("[red]Connection to Langfuse failed.[/red] Check your keys and host.")
        raise typer.Exit(code=1)

    console.print("[green]Connection to Langfuse successful.[/green]")
