"""Asset contract and generic assets."""

from clusterforge.assets.base import (
    ApplyError,
    Asset,
    GenerationError,
    InitializeError,
    KeyGenerationError,
    MaterializationError,
    ParentStates,
    PreconditionError,
    StateReadError,
    ToolPhaseError,
    VariablesParseError,
    WorkspaceError,
)
from clusterforge.assets.static import FileAsset

__all__ = [
    "Asset",
    "ParentStates",
    "FileAsset",
    # errors
    "GenerationError",
    "PreconditionError",
    "WorkspaceError",
    "VariablesParseError",
    "MaterializationError",
    "ToolPhaseError",
    "InitializeError",
    "ApplyError",
    "StateReadError",
    "KeyGenerationError",
]
