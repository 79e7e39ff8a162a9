"""Template unpacking — materializes bundled Terraform configuration on disk.

A template root holds one entry per key:

    <root>/aws/           platform module (directory, copied recursively)
    <root>/libvirt/
    <root>/config.tf      shared bootstrap configuration (single file)
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SHARED_CONFIG_KEY = "config.tf"


class TemplateError(RuntimeError):
    """Raised when a template key cannot be unpacked."""


@runtime_checkable
class TemplateUnpacker(Protocol):
    """Anything that can materialize a template key at a destination path."""

    def unpack(self, destination: Path, key: str) -> None:
        """Write the template named *key* to *destination*.

        Directory templates are merged into *destination*; file templates
        are written to *destination* itself.
        """
        ...


class TemplateSource:
    """Unpacks templates from a directory tree on disk.

    Parameters
    ----------
    root:
        Directory holding one entry per template key.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _resolve(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise TemplateError(f"invalid template key {key!r}")
        source = self.root / key
        if not source.exists():
            raise TemplateError(f"no template {key!r} under {self.root}")
        return source

    def unpack(self, destination: Path, key: str) -> None:
        source = self._resolve(key)
        destination = Path(destination)
        logger.debug("Unpacking template %s -> %s", source, destination)
        try:
            if source.is_dir():
                shutil.copytree(source, destination, dirs_exist_ok=True)
            else:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, destination)
        except OSError as exc:
            raise TemplateError(
                f"failed to unpack {key!r} to {destination}: {exc}"
            ) from exc
