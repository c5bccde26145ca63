"""
Deterministic hashing for connection signatures.

Manifesto:
    Two driver configurations that describe the same connection must produce
    the same pooling key, even when they are distinct dict instances built in
    different places:

    - **Deterministic:** Same inputs always produce the same hash
    - **Order-insensitive for mappings:** ``{"a": 1, "b": 2}`` == ``{"b": 2, "a": 1}``
    - **Identity for live objects:** A config that carries a live store or
      client object contributes that object's identity, so configs sharing one
      store collapse together while configs with distinct stores do not

Examples:
    >>> compute_hash("MemoryDriver", "users") == compute_hash("MemoryDriver", "users")
    True
    >>> config_signature({"host": "db", "port": 5432}) == config_signature({"port": 5432, "host": "db"})
    True

Tags:
    hashing, pooling, connection-signature, datagate

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from typing import Any


def compute_hash(*values: Any, length: int = 32) -> str:
    """
    Compute deterministic hash from values.

    Values are joined with ``|`` and hashed with SHA-256.

    Args:
        *values: Values to hash (converted to strings)
        length: Hex digest length (default 32 = 128 bits)

    Returns:
        Hex string of specified length
    """
    content = "|".join(str(v) for v in values)
    return hashlib.sha256(content.encode()).hexdigest()[:length]


def _identity(obj: Any) -> str:
    return f"<{type(obj).__name__}@{id(obj):x}>"


def config_signature(
    config: Mapping[str, Any] | None,
    *,
    exclude: Iterable[str] = (),
    length: int = 16,
) -> str:
    """
    Hash a configuration mapping into a stable connection signature.

    Keys listed in ``exclude`` are dropped first. Values that are not JSON
    serialisable contribute their object identity.

    Args:
        config: Driver configuration (``None`` is treated as empty)
        exclude: Keys that do not identify the connection
        length: Hex digest length

    Returns:
        Hex string of specified length
    """
    skipped = set(exclude)
    items = {k: v for k, v in (config or {}).items() if k not in skipped}
    canonical = json.dumps(items, sort_keys=True, default=_identity)
    return compute_hash(canonical, length=length)


__all__ = [
    "compute_hash",
    "config_signature",
]
