"""Variables document — the one field of terraform.tfvars this package reads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clusterforge.assets.base import VariablesParseError


class ClusterVariables(BaseModel):
    """Parsed terraform.tfvars (JSON).

    Only ``platform`` is interpreted; every other field is kept untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    # Used as a template key, so it must be a plain path segment.
    platform: str = Field(pattern=r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def parse_variables(data: bytes, *, source: str = "terraform.tfvars") -> ClusterVariables:
    """Parse a variables document or raise ``VariablesParseError``."""
    try:
        return ClusterVariables.model_validate_json(data)
    except ValidationError as exc:
        raise VariablesParseError(f"failed to parse {source} file: {exc}") from exc
