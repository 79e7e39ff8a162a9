"""Asset orchestrator — resolves a target asset and everything it needs.

The Orchestrator wires the AssetGraph and AssetStore together:

1. Walk the graph from the target and order it parents-first.
2. Generate each asset once per run (results are memoized by asset_id).
3. Hand each asset only its direct parents' states.
4. Stop at the first failure; dependents of a failed asset never run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from clusterforge.assets.base import Asset
from clusterforge.core.asset_graph import AssetGraph, DuplicateAssetError
from clusterforge.core.asset_store import AssetStore
from clusterforge.models.state import GenerationResult, State

logger = logging.getLogger(__name__)


class Orchestrator:
    """Central asset resolver.

    Parameters
    ----------
    store:
        Where ``persist`` writes outputs.  ``persist`` is unavailable if
        omitted.
    """

    def __init__(self, store: AssetStore | None = None) -> None:
        self.store = store
        self._results: dict[str, GenerationResult] = {}
        self._assets: dict[str, Asset] = {}

    @classmethod
    def for_directory(cls, path: Path) -> "Orchestrator":
        return cls(AssetStore(path))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, target: Asset) -> GenerationResult:
        """Generate *target*, generating its ancestors first as needed.

        Returns the target's result, or the first failed ancestor's result.
        Raises ``DuplicateAssetError`` if an asset reuses the id of a
        different asset resolved earlier in this run.
        """
        graph = AssetGraph([target])
        ancestors = graph.ancestors(target.asset_id)
        for asset in ancestors:
            known = self._assets.get(asset.asset_id)
            if known is not None and known is not asset:
                raise DuplicateAssetError(
                    f"asset id {asset.asset_id!r} is used by both "
                    f"{known.name} and {asset.name}"
                )

        for asset in ancestors:
            result = self._results.get(asset.asset_id)
            if result is None:
                result = self._generate(graph, asset)
                self._results[asset.asset_id] = result
                self._assets[asset.asset_id] = asset
            if not result.ok:
                if asset is not target:
                    logger.error(
                        "Cannot generate %s: dependency %s failed",
                        target.name,
                        asset.name,
                    )
                return result
        return self._results[target.asset_id]

    def _generate(self, graph: AssetGraph, asset: Asset) -> GenerationResult:
        parents: dict[str, State] = {}
        for parent_id in graph.get_parents(asset.asset_id):
            state = self._results[parent_id].state
            if state is not None:
                parents[parent_id] = state
        return asset.run_generate(parents)

    def result(self, asset: Asset) -> GenerationResult | None:
        """Return the memoized result for *asset*, if it was generated."""
        if self._assets.get(asset.asset_id) is not asset:
            return None
        return self._results.get(asset.asset_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self, asset: Asset, result: GenerationResult) -> list[Path]:
        """Write whatever state *result* carries, even for a failed run."""
        if self.store is None:
            raise RuntimeError("no asset store configured")
        if result.state is None:
            return []
        return self.store.save(asset, result.state)
