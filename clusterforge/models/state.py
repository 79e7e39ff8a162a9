"""Asset output models — named byte blobs, all frozen (immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class Content(BaseModel):
    """A single named output blob produced by an asset."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes = b""


class State(BaseModel):
    """The ordered outputs of one ``generate`` call.

    Content names are unique within a State.  A State is a value: once
    returned by an asset it is never mutated.
    """

    model_config = ConfigDict(frozen=True)

    contents: tuple[Content, ...] = ()

    @model_validator(mode="after")
    def _unique_names(self) -> "State":
        seen: set[str] = set()
        for content in self.contents:
            if content.name in seen:
                raise ValueError(f"duplicate content name {content.name!r}")
            seen.add(content.name)
        return self

    def get(self, name: str) -> Content | None:
        """Return the Content called *name*, or ``None``."""
        for content in self.contents:
            if content.name == name:
                return content
        return None

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.contents]

    def __len__(self) -> int:
        return len(self.contents)


class GenerationResult(BaseModel):
    """Outcome of running an asset: optional state plus optional error.

    Both fields may be set at once.  That is how a provisioning run that
    failed part way reports the state it still managed to recover.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    asset_id: str
    state: State | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_state(self) -> bool:
        return self.state is not None and len(self.state) > 0
