"""Integration test — the CLI drives a real subprocess and real templates.

A stand-in ``terraform`` script replaces the real binary; everything else
(workspace, template copy, state recovery, persistence) is the real code.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest
from typer.testing import CliRunner

from clusterforge.cli.app import app

pytestmark = pytest.mark.skipif(os.name == "nt", reason="needs a POSIX shell")

runner = CliRunner()

FAKE_TERRAFORM = """#!/bin/sh
case "$1" in
  init)
    [ -f main.tf ] && [ -f config.tf ] && [ -f terraform.tfvars ] || exit 3
    exit 0
    ;;
  apply)
    for arg in "$@"; do
      case "$arg" in
        -state=*) printf '%s' "$STATE_DATA" > "${arg#-state=}" ;;
      esac
    done
    exit "${APPLY_STATUS:-0}"
    ;;
esac
exit 2
"""


@pytest.fixture
def install_dir(tmp_path: Path) -> dict[str, Path]:
    templates = tmp_path / "templates"
    (templates / "fake").mkdir(parents=True)
    (templates / "fake" / "main.tf").write_text("# fake platform\n")
    (templates / "config.tf").write_text("# shared\n")

    binary = tmp_path / "terraform"
    binary.write_text(FAKE_TERRAFORM)
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR)

    tfvars = tmp_path / "terraform.tfvars"
    tfvars.write_text('{"platform":"fake","cluster_name":"it"}')
    kubeconfig = tmp_path / "kubeconfig"
    kubeconfig.write_text("apiVersion: v1\n")

    return {
        "templates": templates,
        "binary": binary,
        "tfvars": tfvars,
        "kubeconfig": kubeconfig,
        "out": tmp_path / "out",
    }


def _cluster_args(paths: dict[str, Path]) -> list[str]:
    return [
        "cluster",
        "--tfvars", str(paths["tfvars"]),
        "--kubeconfig", str(paths["kubeconfig"]),
        "--templates", str(paths["templates"]),
        "--terraform", str(paths["binary"]),
        "--dir", str(paths["out"]),
    ]


class TestClusterPipeline:
    def test_successful_apply(self, install_dir, monkeypatch):
        monkeypatch.setenv("STATE_DATA", "state-ok")
        result = runner.invoke(app, _cluster_args(install_dir))
        assert result.exit_code == 0, result.output
        assert (install_dir["out"] / "terraform.tfstate").read_text() == "state-ok"

    def test_failed_apply_still_saves_state(self, install_dir, monkeypatch):
        monkeypatch.setenv("STATE_DATA", "state-partial")
        monkeypatch.setenv("APPLY_STATUS", "1")
        result = runner.invoke(app, _cluster_args(install_dir))
        assert result.exit_code == 1
        assert (install_dir["out"] / "terraform.tfstate").read_text() == "state-partial"

    def test_missing_platform_template(self, install_dir, monkeypatch):
        install_dir["tfvars"].write_text('{"platform":"gcp"}')
        result = runner.invoke(app, _cluster_args(install_dir))
        assert result.exit_code == 1
        assert not (install_dir["out"] / "terraform.tfstate").exists()
