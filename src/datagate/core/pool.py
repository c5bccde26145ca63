"""
Keyed registry of data-access facades.

Manifesto:
    Host applications re-run their initialisation more often than they think:
    development servers hot-reload modules, test suites rebuild apps, request
    handlers construct "a database" on every call. Each of those must get the
    *same* facade (and therefore the same connection) back instead of opening
    another one.

    ``InstancePool`` is an explicit object the host creates once and passes to
    whatever needs pooled lookups. There is no hidden module-level instance;
    tests build a fresh pool per case and tear it down with ``dispose()``.

Architecture:
    ::

        PoolKey(driver="MemoryDriver", collection="users", connection="9f2c…")
              │            │                     │
              │            │                     └─ driver.pool_key(config)
              │            └─ collection_name | table_name | collection | table | "default"
              └─ driver class name

        get_or_create(key, factory, schema=None)
            miss → factory() → register → return new facade
            hit  → schema given? replace_schema(schema) → return same facade

        find_connection(key) → a pooled facade with the same driver + connection
                               but another collection (for driver.table())

Performance:
    - get_or_create(): O(1) dict lookup under an RLock
    - find_connection(): O(n) over pooled entries, only on a miss

Guardrails:
    ❌ DON'T: Expect entries to expire; nothing is evicted automatically
    ✅ DO: Call ``clear()`` / ``await dispose()`` at teardown

    ❌ DON'T: Share one pool across processes
    ✅ DO: One pool per process, injected where needed

Tags:
    pooling, registry, singleton-replacement, hot-reload, datagate

Doc-Types:
    - API Reference
    - Technical Design
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .drivers.base import resolve_collection_name
from .errors import ConfigError
from .hashing import config_signature
from .logging import get_logger
from .protocols import driver_kind

if TYPE_CHECKING:
    from .facade import DataGate
    from .schema import Schema, SchemaDefinition

logger = get_logger(__name__)


@dataclass(frozen=True)
class PoolKey:
    """Identity of a pooled facade."""

    driver: str
    collection: str
    connection: str

    def same_connection(self, other: PoolKey) -> bool:
        return self.driver == other.driver and self.connection == other.connection

    def __str__(self) -> str:
        return f"datagate:{self.driver}:{self.collection}:{self.connection}"


def build_pool_key(driver: Any, config: Mapping[str, Any] | None = None) -> PoolKey:
    """
    Compute the pool key for a driver (class or instance) and its config.

    For a driver class the connection part comes from its
    ``pool_key(config)`` when it has one, otherwise from a generic signature
    of the config. A ready-made driver instance already owns its connection
    and its collection, so the instance itself identifies the connection and
    its ``collection_name`` is the collection.

    Raises:
        ConfigError: ``config`` names a collection other than the instance's
    """
    if isinstance(driver, type):
        pool_key = getattr(driver, "pool_key", None)
        connection = pool_key(config) if callable(pool_key) else config_signature(config)
        collection = resolve_collection_name(config)
    else:
        connection = config_signature({"driver": driver})
        collection = resolve_collection_name(None, getattr(driver, "collection_name", None))
        requested = resolve_collection_name(config, collection)
        if requested != collection:
            raise ConfigError(
                f"Driver instance is bound to collection {collection!r}, config names {requested!r}"
            )

    return PoolKey(
        driver=driver_kind(driver),
        collection=collection,
        connection=connection,
    )



class InstancePool:
    """
    Process-wide (but explicitly owned) registry of facades by PoolKey.

    Lookup, factory call and registration happen under one re-entrant lock,
    so concurrent callers with the same key get the same facade and the
    factory runs once. A factory that raises leaves nothing registered.
    """

    def __init__(self) -> None:
        self._entries: dict[PoolKey, DataGate] = {}
        self._lock = threading.RLock()

    def get_or_create(
        self,
        key: PoolKey,
        factory: Callable[[], DataGate],
        schema: Schema | SchemaDefinition | None = None,
    ) -> DataGate:
        """
        Return the facade pooled under ``key``, building it on a miss.

        Args:
            key: Identity of the facade
            factory: Builds the facade on a miss (called at most once per key)
            schema: On a hit, replaces the pooled facade's schema

        Returns:
            The pooled facade
        """
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                logger.debug("pool_hit", key=str(key))
                if schema is not None:
                    existing.replace_schema(schema)
                    logger.debug("pool_schema_replaced", key=str(key))
                return existing

            logger.debug("pool_miss", key=str(key))
            created = factory()
            self._entries[key] = created
            return created

    def get(self, key: PoolKey) -> DataGate | None:
        with self._lock:
            return self._entries.get(key)

    def find_connection(self, key: PoolKey) -> DataGate | None:
        """A pooled facade on the same driver + connection as ``key``, if any."""
        with self._lock:
            for pooled_key, entry in self._entries.items():
                if pooled_key.same_connection(key):
                    return entry
        return None

    def keys(self) -> list[PoolKey]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        """Forget every entry without touching connections."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("pool_cleared", entries=count)

    async def dispose(self) -> None:
        """Disconnect every pooled facade, then clear the pool."""
        with self._lock:
            entries = list(self._entries.values())
        try:
            for entry in entries:
                await entry.disconnect()
        finally:
            self.clear()
            logger.info("pool_disposed", entries=len(entries))

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "PoolKey",
    "build_pool_key",
    "resolve_collection_name",
    "InstancePool",
]
