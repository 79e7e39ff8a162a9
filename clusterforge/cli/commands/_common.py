"""Shared helpers for CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel

from clusterforge.assets.base import Asset
from clusterforge.core.asset_store import AssetStoreError
from clusterforge.core.orchestrator import Orchestrator
from clusterforge.models.state import GenerationResult

console = Console()


def report(title: str, result: GenerationResult, written: list) -> None:
    """Print a summary panel for one asset result."""
    lines = []
    for path in written:
        lines.append(f"[bold]Wrote:[/bold] {path}")
    if result.error is not None:
        lines.append(f"[bold red]Error:[/bold red] {result.error}")
        if result.has_state:
            lines.append("[yellow]Partial state was recovered and saved.[/yellow]")
    style = "green" if result.ok else "red"
    console.print()
    console.print(
        Panel(
            "\n".join(lines) or "[dim]No output.[/dim]",
            title=f"[bold]{title}[/bold]",
            border_style=style,
            padding=(1, 2),
        )
    )


def persist_or_exit(
    orchestrator: Orchestrator, asset: Asset, result: GenerationResult
) -> list:
    """Persist *result*, turning a store failure into exit code 1."""
    try:
        return orchestrator.persist(asset, result)
    except AssetStoreError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
