"""Main Typer application — imports and registers all CLI commands.

Entry point: ``clusterforge`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from clusterforge.cli.commands.cluster import cluster_cmd
from clusterforge.cli.commands.graph import graph_cmd
from clusterforge.cli.commands.keypair import keypair_cmd
from clusterforge.config import config

app = typer.Typer(
    name="clusterforge",
    help="Clusterforge: generate cluster assets (TLS key pairs, Terraform state).",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default from config)."
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="keypair", help="Generate an RSA key pair.")(keypair_cmd)
app.command(name="cluster", help="Launch a cluster with Terraform.")(cluster_cmd)
app.command(name="graph", help="Show the asset graph for a cluster.")(graph_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
