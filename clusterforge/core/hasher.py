"""Canonical hashing helpers for the asset store manifest."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(data: bytes) -> str:
    """Return the ``sha256:<hex>`` address of raw bytes."""
    return f"sha256:{sha256_hex(data)}"


def manifest_hash(entries: list[dict[str, Any]]) -> str:
    """SHA-256 of canonical(entries sorted by name)."""
    ordered = sorted(entries, key=lambda e: e["name"])
    return sha256_hex(canonical_json_bytes(ordered))
