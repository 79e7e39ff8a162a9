"""Abstract asset contract with an enforced generation lifecycle.

Every node in the build graph inherits from ``Asset`` and implements
``name``, ``asset_id``, ``dependencies()`` and ``generate()``.  The
``run_generate()`` wrapper is **not overridable**; it turns whatever
``generate()`` does into a ``GenerationResult`` so the orchestrator never
has to tell "failed with partial output" apart from "failed" by hand:

    generate -> State                          => result(state)
    generate -> GenerationError(partial_state) => result(partial_state, error)
    generate -> any other exception            => result(error=GenerationError)
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Mapping, Sequence
from typing import final

from clusterforge.models.state import GenerationResult, State

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class GenerationError(RuntimeError):
    """Base class for every failure raised out of ``Asset.generate``.

    ``partial_state`` carries whatever output was recovered before the
    failure, or ``None`` when nothing usable was produced.
    """

    def __init__(self, message: str, *, partial_state: State | None = None) -> None:
        super().__init__(message)
        self.partial_state = partial_state


class PreconditionError(GenerationError):
    """A required parent's state is missing from the supplied mapping."""


class WorkspaceError(GenerationError):
    """Creating, writing into, or removing the scratch workspace failed."""


class VariablesParseError(GenerationError):
    """The variables document could not be parsed."""


class MaterializationError(GenerationError):
    """Unpacking templates or shared configuration failed."""


class ToolPhaseError(GenerationError):
    """The external provisioning tool failed in one of its phases."""


class InitializeError(ToolPhaseError):
    """The tool's initialize phase failed; apply was never attempted."""


class ApplyError(ToolPhaseError):
    """The tool's apply phase failed, possibly leaving partial infrastructure."""


class StateReadError(GenerationError):
    """The provisioning state file could not be read back after apply."""


class KeyGenerationError(GenerationError):
    """Generating or encoding key material failed."""


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


ParentStates = Mapping[str, State]


class Asset(abc.ABC):
    """Abstract base for every node in the asset graph.

    Subclasses **must** implement:
        * ``asset_id`` — stable identifier; the key under which this asset's
          state appears in a dependent's parent mapping.
        * ``name`` — human-readable name used in diagnostics.
        * ``dependencies()`` — parents that must be resolved first.
        * ``generate(parents)`` — the asset's core logic.

    Subclasses **must not** override ``run_generate()``.
    """

    @property
    @abc.abstractmethod
    def asset_id(self) -> str:
        """Stable identifier, unique within a graph."""
        ...

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-friendly name of the asset."""
        ...

    @abc.abstractmethod
    def dependencies(self) -> Sequence[Asset]:
        """Return the direct parents of this asset, in a fixed order."""
        ...

    @abc.abstractmethod
    def generate(self, parents: ParentStates) -> State:
        """Produce this asset's state from its parents' resolved states.

        Parameters
        ----------
        parents:
            Mapping of ``asset_id -> State`` for (at least) every asset
            returned by ``dependencies()``.  Read-only.

        Raises
        ------
        GenerationError:
            On any failure.  Subclasses attach ``partial_state`` when some
            output could still be recovered.
        """
        ...

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @final
    def parent_state(self, parents: ParentStates, parent: Asset) -> State:
        """Return *parent*'s state or raise ``PreconditionError``."""
        state = parents.get(parent.asset_id)
        if state is None:
            raise PreconditionError(
                f"{self.name}: failed to get {parent.name} from parents"
            )
        return state

    # ------------------------------------------------------------------
    # Lifecycle (not overridable)
    # ------------------------------------------------------------------

    @final
    def run_generate(self, parents: ParentStates) -> GenerationResult:
        """Run ``generate()`` and fold its outcome into a result.  **Do not override.**"""
        logger.info("Generating %s...", self.name)
        try:
            state = self.generate(parents)
        except GenerationError as exc:
            logger.error("%s [%s] generation failed: %s", self.name, self.asset_id, exc)
            return GenerationResult(
                asset_id=self.asset_id, state=exc.partial_state, error=exc
            )
        except Exception as exc:
            logger.error("%s [%s] generation failed: %s", self.name, self.asset_id, exc)
            error = GenerationError(f"{self.name}: {exc}")
            error.__cause__ = exc
            return GenerationResult(asset_id=self.asset_id, error=error)

        logger.debug(
            "%s [%s] produced %s",
            self.name,
            self.asset_id,
            ", ".join(state.names) or "no content",
        )
        return GenerationResult(asset_id=self.asset_id, state=state)

    # ------------------------------------------------------------------
    # Repr
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"<{type(self).__name__} asset_id={self.asset_id!r}>"
