"""``clusterforge keypair`` — generate and save an RSA key pair."""

from __future__ import annotations

from pathlib import Path

import typer

from clusterforge.cli.commands._common import persist_or_exit, report
from clusterforge.config import config
from clusterforge.core.orchestrator import Orchestrator
from clusterforge.tls.keypair import KeyPair


def keypair_cmd(
    private: str = typer.Option(..., "--private", help="File name of the private key."),
    public: str = typer.Option(..., "--public", help="File name of the public key."),
    asset_dir: Path = typer.Option(
        None, "--dir", help="Directory to save assets in (default from config)."
    ),
    bits: int = typer.Option(None, "--bits", help="RSA key size (minimum 2048)."),
) -> None:
    """Generate an RSA key pair and save both halves as PEM."""
    try:
        asset = KeyPair(private, public, key_bits=bits)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    orchestrator = Orchestrator.for_directory(asset_dir or config.asset_dir)
    result = orchestrator.resolve(asset)
    written = persist_or_exit(orchestrator, asset, result)
    report(asset.name, result, written)
    if not result.ok:
        raise typer.Exit(code=1)
