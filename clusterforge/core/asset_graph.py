"""Asset dependency DAG, discovered from the roots.

The graph enforces:
- Asset ids are unique (they key the parent-state mapping).
- The dependency relation is acyclic.
- Parents come before children in ``order``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from clusterforge.assets.base import Asset


class CyclicDependencyError(ValueError):
    """Raised when the asset graph contains a cycle."""


class DuplicateAssetError(ValueError):
    """Raised when two distinct assets share an asset_id."""


class AssetGraph:
    """Directed acyclic graph of assets reachable from *roots*.

    Built once; the topology is static for a run.
    """

    def __init__(self, roots: Iterable[Asset]) -> None:
        self._assets: dict[str, Asset] = {}
        # Forward edges: asset_id -> list of parent asset_ids
        self._parents: dict[str, list[str]] = {}
        # Reverse edges: asset_id -> list of child asset_ids
        self._children: dict[str, list[str]] = {}

        self._discover(list(roots))
        self._order = self._topological_order()

    def _discover(self, roots: list[Asset]) -> None:
        queue = deque(roots)
        while queue:
            asset = queue.popleft()
            known = self._assets.get(asset.asset_id)
            if known is not None:
                if known is not asset:
                    raise DuplicateAssetError(
                        f"asset id {asset.asset_id!r} is used by both "
                        f"{known.name} and {asset.name}"
                    )
                continue

            self._assets[asset.asset_id] = asset
            self._children.setdefault(asset.asset_id, [])
            parents = list(asset.dependencies())
            self._parents[asset.asset_id] = [p.asset_id for p in parents]
            for parent in parents:
                self._children.setdefault(parent.asset_id, []).append(asset.asset_id)
                queue.append(parent)

    def _topological_order(self) -> list[str]:
        """Kahn's algorithm, ties broken by discovery order."""
        in_degree = {aid: len(set(p)) for aid, p in self._parents.items()}
        queue = deque(aid for aid in self._assets if in_degree[aid] == 0)
        result: list[str] = []

        while queue:
            node = queue.popleft()
            result.append(node)
            for child in dict.fromkeys(self._children.get(node, [])):
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    queue.append(child)

        if len(result) != len(self._assets):
            stuck = sorted(aid for aid, deg in in_degree.items() if deg > 0)
            raise CyclicDependencyError(
                f"Asset graph has a cycle through: {', '.join(stuck)}"
            )
        return result

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def get(self, asset_id: str) -> Asset:
        return self._assets[asset_id]

    @property
    def order(self) -> list[Asset]:
        """Every asset, parents before children."""
        return [self._assets[aid] for aid in self._order]

    def get_parents(self, asset_id: str) -> list[str]:
        """Return direct parent asset_ids, in declaration order."""
        return list(self._parents.get(asset_id, []))

    def ancestors(self, asset_id: str) -> list[Asset]:
        """*asset_id* and everything it depends on, in topological order."""
        needed: set[str] = set()
        stack = [asset_id]
        while stack:
            node = stack.pop()
            if node in needed:
                continue
            needed.add(node)
            stack.extend(self._parents.get(node, []))
        return [self._assets[aid] for aid in self._order if aid in needed]
