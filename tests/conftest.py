"""Shared test fixtures for Clusterforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from clusterforge.assets.base import Asset
from clusterforge.assets.static import FileAsset
from clusterforge.cluster.cluster import Cluster
from clusterforge.cluster.templates import SHARED_CONFIG_KEY, TemplateError
from clusterforge.cluster.terraform import STATE_FILE_NAME, TerraformError
from clusterforge.core.asset_store import AssetStore


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeTool:
    """In-memory ProvisioningTool that records what it was asked to do."""

    def __init__(
        self,
        *,
        init_fails: bool = False,
        apply_fails: bool = False,
        state_data: bytes | None = b"state-ok",
    ) -> None:
        self.init_fails = init_fails
        self.apply_fails = apply_fails
        self.state_data = state_data
        self.calls: list[str] = []
        self.workspaces: list[Path] = []
        self.files_at_init: list[str] = []

    def init(self, workspace: Path) -> None:
        workspace = Path(workspace)
        self.calls.append("init")
        self.workspaces.append(workspace)
        self.files_at_init = sorted(
            p.relative_to(workspace).as_posix()
            for p in workspace.rglob("*")
            if p.is_file()
        )
        if self.init_fails:
            raise TerraformError("init", "init failed", returncode=1)

    def apply(self, workspace: Path) -> Path:
        self.calls.append("apply")
        state_path = Path(workspace) / STATE_FILE_NAME
        if self.state_data is not None:
            state_path.write_bytes(self.state_data)
        if self.apply_fails:
            raise TerraformError(
                "apply", "apply failed", returncode=1, state_path=state_path
            )
        return state_path


class FakeTemplates:
    """TemplateUnpacker that writes a placeholder file per key."""

    def __init__(self, *, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.unpacked: list[tuple[Path, str]] = []

    def unpack(self, destination: Path, key: str) -> None:
        if key == self.fail_on:
            raise TemplateError(f"no template {key!r}")
        destination = Path(destination)
        self.unpacked.append((destination, key))
        if key == SHARED_CONFIG_KEY:
            destination.write_text("# shared config\n")
        else:
            destination.mkdir(parents=True, exist_ok=True)
            (destination / "main.tf").write_text(f"# {key}\n")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def scratch_dir(tmp_dir: Path) -> Path:
    """Directory the cluster asset creates its workspaces in."""
    path = tmp_dir / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def asset_store(tmp_dir: Path) -> AssetStore:
    """Provide a fresh AssetStore in a temp directory."""
    return AssetStore(tmp_dir / "assets")


@pytest.fixture
def make_tool() -> Callable[..., FakeTool]:
    """Factory fixture: build a FakeTool."""
    return FakeTool


@pytest.fixture
def make_templates() -> Callable[..., FakeTemplates]:
    """Factory fixture: build a FakeTemplates."""
    return FakeTemplates


@pytest.fixture
def tfvars_asset() -> FileAsset:
    """A variables-file asset targeting the ``fake`` platform."""
    return FileAsset("tfvars", "terraform.tfvars", data=b'{"platform":"fake"}')


@pytest.fixture
def kubeconfig_asset() -> FileAsset:
    """An admin kubeconfig asset; only used for ordering."""
    return FileAsset("kubeconfig", "auth/kubeconfig", data=b"apiVersion: v1\n")


@pytest.fixture
def make_cluster(
    tfvars_asset: FileAsset,
    kubeconfig_asset: FileAsset,
    scratch_dir: Path,
) -> Callable[..., tuple[Cluster, FakeTool, FakeTemplates]]:
    """Factory fixture: a Cluster wired to fakes.

    Keyword arguments are passed to FakeTool; ``templates`` and ``tfvars``
    override the template fake and the variables-file parent.
    """

    def _factory(
        templates: FakeTemplates | None = None,
        tfvars: Asset | None = None,
        **tool_kwargs: Any,
    ) -> tuple[Cluster, FakeTool, FakeTemplates]:
        tool = FakeTool(**tool_kwargs)
        templates = templates or FakeTemplates()
        cluster = Cluster(
            tfvars or tfvars_asset,
            kubeconfig_asset,
            tool=tool,
            templates=templates,
            tmp_dir=scratch_dir,
        )
        return cluster, tool, templates

    return _factory


@pytest.fixture
def parent_states(tfvars_asset: FileAsset, kubeconfig_asset: FileAsset) -> dict:
    """Resolved parent states for the default cluster wiring."""
    return {
        tfvars_asset.asset_id: tfvars_asset.generate({}),
        kubeconfig_asset.asset_id: kubeconfig_asset.generate({}),
    }
