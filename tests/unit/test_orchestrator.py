"""Tests for the Orchestrator — memoized resolution, failure handling, persistence."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from clusterforge.assets.base import ApplyError, Asset, GenerationError, ParentStates
from clusterforge.assets.static import FileAsset
from clusterforge.cluster.cluster import Cluster
from clusterforge.cluster.terraform import STATE_FILE_NAME
from clusterforge.core.asset_graph import DuplicateAssetError
from clusterforge.core.orchestrator import Orchestrator
from clusterforge.models.state import Content, State
from clusterforge.tls.keypair import KeyPair


class _Counting(Asset):
    """Joins its parents' first contents and counts generate() calls."""

    def __init__(self, asset_id: str, deps: Sequence[Asset] = (), *, fail: bool = False) -> None:
        self._id = asset_id
        self.deps = list(deps)
        self.fail = fail
        self.calls = 0
        self.seen_parents: list[str] = []

    @property
    def asset_id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return f"Counting ({self._id})"

    def dependencies(self) -> Sequence[Asset]:
        return self.deps

    def generate(self, parents: ParentStates) -> State:
        self.calls += 1
        self.seen_parents = sorted(parents)
        if self.fail:
            raise GenerationError(f"{self._id} failed")
        data = b"+".join(self.parent_state(parents, d).contents[0].data for d in self.deps)
        return State(contents=(Content(name=self._id, data=data or self._id.encode()),))


class TestResolve:
    def test_generates_parents_first(self):
        leaf = _Counting("leaf")
        top = _Counting("top", [leaf])
        result = Orchestrator().resolve(top)
        assert result.ok
        assert result.state.contents[0].data == b"leaf"

    def test_each_asset_generated_once(self):
        leaf = _Counting("leaf")
        a = _Counting("a", [leaf])
        b = _Counting("b", [leaf])
        orchestrator = Orchestrator()
        orchestrator.resolve(a)
        orchestrator.resolve(b)
        assert leaf.calls == 1
        assert orchestrator.result(leaf).ok

    def test_only_direct_parents_passed(self):
        leaf = _Counting("leaf")
        mid = _Counting("mid", [leaf])
        top = _Counting("top", [mid])
        Orchestrator().resolve(top)
        assert top.seen_parents == ["mid"]

    def test_failed_parent_stops_dependents(self):
        leaf = _Counting("leaf", fail=True)
        top = _Counting("top", [leaf])
        result = Orchestrator().resolve(top)
        assert result.asset_id == "leaf"
        assert not result.ok
        assert top.calls == 0

    def test_unresolved_is_none(self):
        assert Orchestrator().result(_Counting("x")) is None

    def test_key_pairs_sharing_a_public_name_are_distinct(self):
        orchestrator = Orchestrator()
        first = orchestrator.resolve(KeyPair("a.key", "shared.pub"))
        second = orchestrator.resolve(KeyPair("b.key", "shared.pub"))
        assert first.state.names == ["tls/a.key", "tls/shared.pub"]
        assert second.state.names == ["tls/b.key", "tls/shared.pub"]

    def test_reused_id_across_resolves_rejected(self):
        orchestrator = Orchestrator()
        orchestrator.resolve(_Counting("same"))
        with pytest.raises(DuplicateAssetError):
            orchestrator.resolve(_Counting("same"))

    def test_result_ignores_other_asset_with_same_id(self):
        orchestrator = Orchestrator()
        orchestrator.resolve(_Counting("same"))
        assert orchestrator.result(_Counting("same")) is None


class TestClusterThroughOrchestrator:
    def test_success(self, make_cluster):
        cluster, tool, _ = make_cluster()
        result = Orchestrator().resolve(cluster)
        assert result.ok
        assert result.state.get(STATE_FILE_NAME).data == b"state-ok"
        assert tool.calls == ["init", "apply"]

    def test_partial_state_is_persisted(self, make_cluster, asset_store):
        cluster, _, _ = make_cluster(apply_fails=True, state_data=b"state-partial")
        orchestrator = Orchestrator(asset_store)
        result = orchestrator.resolve(cluster)
        assert isinstance(result.error, ApplyError)
        written = orchestrator.persist(cluster, result)
        assert len(written) == 1
        assert asset_store.load(STATE_FILE_NAME) == b"state-partial"

    def test_missing_tfvars_file(
        self, tmp_path, kubeconfig_asset, make_tool, make_templates, scratch_dir
    ):
        tool = make_tool()
        cluster = Cluster(
            FileAsset("tfvars", "terraform.tfvars", path=tmp_path / "none"),
            kubeconfig_asset,
            tool=tool,
            templates=make_templates(),
            tmp_dir=scratch_dir,
        )
        result = Orchestrator().resolve(cluster)
        assert result.asset_id == "tfvars"
        assert tool.calls == []


class TestPersist:
    def test_requires_store(self):
        leaf = _Counting("leaf")
        orchestrator = Orchestrator()
        with pytest.raises(RuntimeError):
            orchestrator.persist(leaf, orchestrator.resolve(leaf))

    def test_nothing_to_persist(self, asset_store):
        leaf = _Counting("leaf", fail=True)
        orchestrator = Orchestrator(asset_store)
        assert orchestrator.persist(leaf, orchestrator.resolve(leaf)) == []
