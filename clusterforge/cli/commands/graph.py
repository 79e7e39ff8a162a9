"""``clusterforge graph`` — show the resolution order for a cluster."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from clusterforge.cli.commands._common import console
from clusterforge.cli.commands.cluster import build_cluster
from clusterforge.core.asset_graph import AssetGraph


def graph_cmd(
    tfvars: Path = typer.Option(..., "--tfvars", help="Path to terraform.tfvars (JSON)."),
    kubeconfig: Path = typer.Option(..., "--kubeconfig", help="Path to the admin kubeconfig."),
) -> None:
    """Print every asset the cluster needs, parents first."""
    graph = AssetGraph([build_cluster(tfvars, kubeconfig)])

    table = Table(title="Asset Graph")
    table.add_column("#", justify="right")
    table.add_column("Asset", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Depends on")
    for i, asset in enumerate(graph.order):
        table.add_row(
            str(i),
            asset.name,
            asset.asset_id,
            ", ".join(graph.get_parents(asset.asset_id)) or "-",
        )
    console.print(table)
