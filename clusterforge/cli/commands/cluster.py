"""``clusterforge cluster`` — launch a cluster with Terraform."""

from __future__ import annotations

from pathlib import Path

import typer

from clusterforge.assets.static import FileAsset
from clusterforge.cli.commands._common import persist_or_exit, report
from clusterforge.cluster.cluster import Cluster
from clusterforge.cluster.templates import TemplateSource
from clusterforge.cluster.terraform import Terraform
from clusterforge.config import config
from clusterforge.core.orchestrator import Orchestrator


def build_cluster(
    tfvars: Path,
    kubeconfig: Path,
    *,
    templates: Path | None = None,
    terraform_binary: str | None = None,
) -> Cluster:
    """Wire a Cluster asset from files on disk."""
    return Cluster(
        FileAsset("tfvars", "terraform.tfvars", path=tfvars),
        FileAsset("kubeconfig", "auth/kubeconfig", path=kubeconfig),
        tool=Terraform(terraform_binary or config.terraform_binary),
        templates=TemplateSource(templates or config.template_dir),
    )


def cluster_cmd(
    tfvars: Path = typer.Option(..., "--tfvars", help="Path to terraform.tfvars (JSON)."),
    kubeconfig: Path = typer.Option(..., "--kubeconfig", help="Path to the admin kubeconfig."),
    templates: Path = typer.Option(
        None, "--templates", help="Template directory (default from config)."
    ),
    terraform_binary: str = typer.Option(
        None, "--terraform", help="Terraform executable (default from config)."
    ),
    asset_dir: Path = typer.Option(
        None, "--dir", help="Directory to save assets in (default from config)."
    ),
) -> None:
    """Run Terraform and save its state, even when apply fails part way."""
    asset = build_cluster(
        tfvars, kubeconfig, templates=templates, terraform_binary=terraform_binary
    )
    orchestrator = Orchestrator.for_directory(asset_dir or config.asset_dir)
    result = orchestrator.resolve(asset)
    written = persist_or_exit(orchestrator, asset, result)
    report(asset.name, result, written)
    if not result.ok:
        raise typer.Exit(code=1)
