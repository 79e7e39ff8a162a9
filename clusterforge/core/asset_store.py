"""On-disk asset store — writes generated State contents under a directory.

Storage layout::

    {base}/{content name}                 one file per Content entry
    {base}/.clusterforge/manifest.json    name, size, sha256 per asset

Content names are relative paths (``tls/admin.key``); anything resolving
outside ``base`` is rejected.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from clusterforge.assets.base import Asset
from clusterforge.core.hasher import content_address, manifest_hash
from clusterforge.models.state import Content, State

logger = logging.getLogger(__name__)

MANIFEST_PATH = Path(".clusterforge") / "manifest.json"


class AssetStoreError(RuntimeError):
    """Raised when a State cannot be written to the store."""


class AssetStore:
    """Persists asset outputs.

    Parameters
    ----------
    base_path:
        Root directory for generated assets.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base

    def _content_path(self, name: str) -> Path:
        path = (self._base / name).resolve()
        if not path.is_relative_to(self._base.resolve()):
            raise AssetStoreError(f"content name {name!r} escapes {self._base}")
        return path

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, asset: Asset, state: State) -> list[Path]:
        """Write every non-empty Content entry and update the manifest.

        Returns the paths written.  The existing manifest is read first so
        that an unreadable manifest fails the save before any file is written.
        """
        manifest = self.load_manifest()
        written: list[Path] = []
        entries: list[dict[str, Any]] = []
        for content in state.contents:
            if not content.data:
                logger.debug("Skipping empty content %s of %s", content.name, asset.name)
                continue
            written.append(self._write(content))
            entries.append(
                {
                    "name": content.name,
                    "size_bytes": len(content.data),
                    "content_address": content_address(content.data),
                }
            )

        self._record(manifest, asset, entries)
        logger.info("Saved %s: %d file(s) under %s", asset.name, len(written), self._base)
        return written

    def _write(self, content: Content) -> Path:
        path = self._content_path(content.name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content.data)
            os.chmod(path, 0o600)
        except OSError as exc:
            raise AssetStoreError(f"failed to write {content.name} to {path}: {exc}") from exc
        return path

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def load_manifest(self) -> dict[str, Any]:
        """Return the manifest, or an empty one if nothing was saved yet."""
        path = self._base / MANIFEST_PATH
        if not path.exists():
            return {"assets": {}}
        try:
            manifest = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise AssetStoreError(f"failed to read manifest {path}: {exc}") from exc
        if not isinstance(manifest, dict) or not isinstance(manifest.get("assets"), dict):
            raise AssetStoreError(f"malformed manifest {path}: missing \"assets\" table")
        return manifest

    def _record(
        self, manifest: dict[str, Any], asset: Asset, entries: list[dict[str, Any]]
    ) -> None:
        manifest["assets"][asset.asset_id] = {
            "name": asset.name,
            "contents": entries,
            "manifest_hash": manifest_hash(entries),
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        path = self._base / MANIFEST_PATH
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(manifest, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise AssetStoreError(f"failed to write manifest {path}: {exc}") from exc

    def load(self, name: str) -> bytes:
        """Read back a stored Content entry by name."""
        path = self._content_path(name)
        if not path.exists():
            raise FileNotFoundError(f"Asset content not found: {name}")
        return path.read_bytes()

    def verify(self, asset_id: str) -> bool:
        """Check that every file recorded for *asset_id* still matches its hash."""
        record = self.load_manifest()["assets"].get(asset_id)
        if record is None:
            return False
        for entry in record["contents"]:
            try:
                data = self.load(entry["name"])
            except FileNotFoundError:
                return False
            if content_address(data) != entry["content_address"]:
                return False
        return True
