"""Clusterforge data models — all Pydantic v2, all frozen (immutable)."""

from clusterforge.models.state import Content, GenerationResult, State

__all__ = [
    "Content",
    "State",
    "GenerationResult",
]
