"""Cluster asset — launches the cluster with Terraform.

Lifecycle of a single ``generate`` call:

    start -> staged -> initialized -> applied(ok|failed)
          -> state-read(ok|failed) -> done

Each call works in a fresh scratch workspace that is removed on every exit
path.  Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from clusterforge.assets.base import (
    ApplyError,
    Asset,
    InitializeError,
    MaterializationError,
    ParentStates,
    PreconditionError,
    StateReadError,
    WorkspaceError,
)
from clusterforge.cluster.templates import (
    SHARED_CONFIG_KEY,
    TemplateError,
    TemplateSource,
    TemplateUnpacker,
)
from clusterforge.cluster.terraform import (
    STATE_FILE_NAME,
    ProvisioningTool,
    Terraform,
    ToolError,
)
from clusterforge.cluster.variables import parse_variables
from clusterforge.config import config
from clusterforge.models.state import Content, State

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "clusterforge-install-"


@contextmanager
def workspace(prefix: str = WORKSPACE_PREFIX, tmp_dir: Path | None = None) -> Iterator[Path]:
    """Yield a fresh private directory and remove it on exit.

    A removal failure after a clean exit raises ``WorkspaceError``.  When the
    body is already raising, the removal failure is only logged.
    """
    try:
        path = Path(tempfile.mkdtemp(prefix=prefix, dir=tmp_dir))
    except OSError as exc:
        raise WorkspaceError(
            f"failed to create temp dir for terraform execution: {exc}"
        ) from exc

    try:
        yield path
    except BaseException:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            logger.error("Failed to remove workspace %s: %s", path, exc)
        raise
    else:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise WorkspaceError(f"failed to remove workspace {path}: {exc}") from exc


class Cluster(Asset):
    """Uses the terraform executable to launch a cluster.

    Dependencies, in order:

    0. *tfvars* — its first Content entry is the terraform.tfvars (JSON)
       document.  Required.
    1. *kubeconfig* — the admin kubeconfig.  Only orders this asset after
       the kubeconfig is generated; its state is never read.

    The resulting State holds one entry, ``terraform.tfstate``.
    """

    def __init__(
        self,
        tfvars: Asset,
        kubeconfig: Asset,
        *,
        tool: ProvisioningTool | None = None,
        templates: TemplateUnpacker | None = None,
        tmp_dir: Path | None = None,
    ) -> None:
        self._tfvars = tfvars
        self._kubeconfig = kubeconfig
        self.tool = tool or Terraform(config.terraform_binary)
        self.templates = templates or TemplateSource(config.template_dir)
        self.tmp_dir = tmp_dir if tmp_dir is not None else config.tmp_dir

    @property
    def tfvars(self) -> Asset:
        return self._tfvars

    @property
    def kubeconfig(self) -> Asset:
        return self._kubeconfig

    @property
    def asset_id(self) -> str:
        return "cluster"

    @property
    def name(self) -> str:
        return "Cluster"

    def dependencies(self) -> Sequence[Asset]:
        return (self.tfvars, self.kubeconfig)

    def generate(self, parents: ParentStates) -> State:
        """Launch the cluster and return the Terraform state.

        Raises ``ApplyError`` with ``partial_state`` set when apply failed
        but a state file could still be read.
        """
        tfvars_state = self.parent_state(parents, self.tfvars)
        if not tfvars_state.contents:
            raise PreconditionError(
                f"{self.name}: {self.tfvars.name} produced no content"
            )

        result: State | None = None
        try:
            with workspace(tmp_dir=self.tmp_dir) as tmp:
                result = self._provision(tmp, tfvars_state.contents[0])
        except WorkspaceError as exc:
            # Only reachable with a result when removal failed after success.
            if result is not None:
                exc.partial_state = result
            raise
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _provision(self, tmp: Path, tfvars: Content) -> State:
        # Copy the tfvars into the workspace terraform will run in.
        tfvars_path = tmp / Path(tfvars.name).name
        try:
            tfvars_path.write_bytes(tfvars.data)
            os.chmod(tfvars_path, 0o600)
        except OSError as exc:
            raise WorkspaceError(
                f"failed to write {tfvars.name} file to {tfvars_path}: {exc}"
            ) from exc

        variables = parse_variables(tfvars.data, source=tfvars.name)

        try:
            self.templates.unpack(tmp, variables.platform)
            self.templates.unpack(tmp / SHARED_CONFIG_KEY, SHARED_CONFIG_KEY)
        except TemplateError as exc:
            raise MaterializationError(
                f"failed to unpack templates for {variables.platform}: {exc}"
            ) from exc

        logger.info("Using Terraform to create cluster...")

        try:
            self.tool.init(tmp)
        except ToolError as exc:
            raise InitializeError(f"failed to initialize terraform: {exc}") from exc

        apply_error: ApplyError | None = None
        state_path = tmp / STATE_FILE_NAME
        try:
            state_path = Path(self.tool.apply(tmp))
        except Exception as exc:
            # A failed apply may still leave state behind; always try to read it.
            apply_error = ApplyError(f"failed to run terraform: {exc}")
            apply_error.__cause__ = exc
            if isinstance(exc, ToolError) and exc.state_path is not None:
                state_path = Path(exc.state_path)

        data: bytes | None = None
        read_error: OSError | None = None
        try:
            data = state_path.read_bytes()
        except OSError as exc:
            read_error = exc

        if read_error is not None:
            if apply_error is None:
                raise StateReadError(
                    f"failed to read terraform state {state_path}: {read_error}"
                ) from read_error
            logger.error("Failed to read tfstate (%r): %s", str(state_path), read_error)
            raise apply_error

        state = State(contents=(Content(name=STATE_FILE_NAME, data=data),))
        if apply_error is not None:
            apply_error.partial_state = state
            raise apply_error
        return state
