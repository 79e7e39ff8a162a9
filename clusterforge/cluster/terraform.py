"""Terraform bridge — runs the ``terraform`` executable in a workspace.

Two phases are exposed, matching how the cluster asset drives it:

    init(workspace)          -> None          (raises ToolError)
    apply(workspace)         -> state path    (raises ToolError)

A failed apply may still leave a state file behind describing whatever was
created before the failure; ``ToolError.state_path`` points at it.
``TerraformError`` is the subprocess flavour, adding return code and stderr.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "terraform.tfstate"

# Lines of stderr kept on the exception.
_STDERR_TAIL = 20


class ToolError(RuntimeError):
    """Raised by any ``ProvisioningTool`` when one of its phases fails.

    ``state_path`` points at a state file the failed phase may have left
    behind, or is ``None`` when the tool cannot tell.
    """

    def __init__(
        self, phase: str, message: str, *, state_path: Path | None = None
    ) -> None:
        super().__init__(message)
        self.phase = phase
        self.state_path = state_path


class TerraformError(ToolError):
    """Raised when a Terraform phase fails."""

    def __init__(
        self,
        phase: str,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        state_path: Path | None = None,
    ) -> None:
        super().__init__(phase, message, state_path=state_path)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        tail = "\n".join(self.stderr.strip().splitlines()[-_STDERR_TAIL:])
        return f"{text}\n{tail}" if tail else text


@runtime_checkable
class ProvisioningTool(Protocol):
    """Protocol for the external infrastructure tool.

    Both phases report failure by raising ``ToolError``.
    """

    def init(self, workspace: Path) -> None:
        ...

    def apply(self, workspace: Path) -> Path:
        """Apply the workspace and return the path of the state file.

        On failure, raise ``ToolError`` with ``state_path`` set so that
        the caller can still try to recover partial state.
        """
        ...


class Terraform:
    """Subprocess-backed ``ProvisioningTool``.

    Parameters
    ----------
    binary:
        Executable name or path.
    env:
        Extra environment variables layered over ``os.environ``.
    """

    def __init__(
        self,
        binary: str = "terraform",
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.binary = binary
        self.env = dict(env or {})

    def init(self, workspace: Path) -> None:
        self._run("init", workspace, ["init", "-input=false", "-no-color"])

    def apply(self, workspace: Path) -> Path:
        state_path = Path(workspace) / STATE_FILE_NAME
        try:
            self._run(
                "apply",
                workspace,
                [
                    "apply",
                    "-auto-approve",
                    "-input=false",
                    "-no-color",
                    f"-state={state_path}",
                ],
            )
        except TerraformError as exc:
            exc.state_path = state_path
            raise
        return state_path

    def _run(self, phase: str, workspace: Path, args: Sequence[str]) -> None:
        cmd = [self.binary, *args]
        env = {**os.environ, "TF_IN_AUTOMATION": "1", **self.env}
        logger.debug("Running %s in %s", " ".join(cmd), workspace)
        try:
            proc = subprocess.run(
                cmd,
                cwd=workspace,
                env=env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise TerraformError(
                phase, f"failed to execute {self.binary}: {exc}"
            ) from exc

        for line in proc.stdout.splitlines():
            logger.debug("terraform %s: %s", phase, line)
        if proc.returncode != 0:
            raise TerraformError(
                phase,
                f"terraform {phase} exited with status {proc.returncode}",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
