"""Leaf asset that serves a single file's bytes.

Stands in for producers that live outside this package (variables files,
admin kubeconfigs) so that the graph can be wired from files on disk.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from clusterforge.assets.base import Asset, GenerationError, ParentStates
from clusterforge.models.state import Content, State


class FileAsset(Asset):
    """Leaf asset returning one Content entry named *file_name*.

    Exactly one of *data* or *path* must be given.  When *path* is given the
    file is read on every ``generate`` call.
    """

    def __init__(
        self,
        asset_id: str,
        file_name: str,
        *,
        data: bytes | None = None,
        path: Path | None = None,
    ) -> None:
        if (data is None) == (path is None):
            raise ValueError("exactly one of data or path is required")
        self._asset_id = asset_id
        self.file_name = file_name
        self._data = data
        self._path = Path(path) if path is not None else None

    @property
    def asset_id(self) -> str:
        return self._asset_id

    @property
    def name(self) -> str:
        return f"File ({self.file_name})"

    def dependencies(self) -> Sequence[Asset]:
        return ()

    def generate(self, parents: ParentStates) -> State:
        if self._path is None:
            data = self._data or b""
        else:
            try:
                data = self._path.read_bytes()
            except OSError as exc:
                raise GenerationError(
                    f"failed to read {self.file_name} from {self._path}: {exc}"
                ) from exc
        return State(contents=(Content(name=self.file_name, data=data),))
