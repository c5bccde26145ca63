"""Driver base class.

Manifesto:
    All drivers share the same lifecycle, the same collection-name
    resolution and the same pooling-key derivation. The abstract base
    keeps those in one place so a new backend only implements storage.

Features:
    - Abstract async ``set()``, ``get()``, ``update()``, ``delete()``
    - ``get_one()``, ``exists()`` and ``count()`` derived from ``get()``
    - Capability flags with ``supports()``
    - ``from_config()`` / ``pool_key()`` shared by the facade and the pool
    - Async context-manager protocol for the connection lifecycle

Tags:
    datagate, driver, abstract-base, adapter-pattern

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from datagate.core.hashing import config_signature
from datagate.core.protocols import DatabaseKind, Driver, DriverCapability
from datagate.core.types import Query, Record

if TYPE_CHECKING:
    from datagate.core.schema import Schema

# Config keys that name the collection, in lookup order
COLLECTION_KEYS: tuple[str, ...] = ("collection_name", "table_name", "collection", "table")
DEFAULT_COLLECTION = "default"


def resolve_collection_name(
    config: Mapping[str, Any] | None,
    fallback: str | None = None,
) -> str:
    """First non-empty collection key in ``config``, else ``fallback``, else ``"default"``."""
    for key in COLLECTION_KEYS:
        value = (config or {}).get(key)
        if value:
            return str(value)
    return fallback or DEFAULT_COLLECTION


class BaseDriver(ABC):
    """
    Abstract base class for drivers.

    Subclasses declare ``capabilities`` and ``db_type`` and implement the
    storage methods. Capability methods they do not declare raise
    NotImplementedError.
    """

    capabilities: ClassVar[DriverCapability] = DriverCapability.NONE
    db_type: ClassVar[DatabaseKind] = DatabaseKind.NOSQL

    def __init__(self, collection_name: str = DEFAULT_COLLECTION):
        self._collection_name = collection_name or DEFAULT_COLLECTION
        self._connected = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> BaseDriver:
        """Build a driver from a config mapping, honouring every collection key."""
        options = {k: v for k, v in (config or {}).items() if k not in COLLECTION_KEYS}
        return cls(collection_name=resolve_collection_name(config), **options)

    @classmethod
    def pool_key(cls, config: Mapping[str, Any] | None = None) -> str:
        """Connection signature: equal for configs that share one connection."""
        return config_signature(config, exclude=COLLECTION_KEYS)

    @property
    def collection_name(self) -> str:
        """Collection or table this driver is bound to."""
        return self._collection_name

    def supports(self, capability: DriverCapability) -> bool:
        return capability in self.capabilities

    @property
    def is_connected(self) -> bool:
        """Whether ``connect()`` was called more recently than ``disconnect()``."""
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    @abstractmethod
    async def set(self, record: Record) -> Record:
        """Insert a record and return the stored copy."""
        ...

    @abstractmethod
    async def get(self, query: Query) -> list[Record]:
        """Return every record matching ``query``."""
        ...

    @abstractmethod
    async def update(self, query: Query, patch: Record) -> int:
        """Apply ``patch`` to every match; return the number touched."""
        ...

    @abstractmethod
    async def delete(self, query: Query) -> int:
        """Remove every match; return the number removed."""
        ...

    async def get_one(self, query: Query) -> Record | None:
        results = await self.get(query)
        return results[0] if results else None

    async def exists(self, query: Query) -> bool:
        return await self.get_one(query) is not None

    async def count(self, query: Query) -> int:
        return len(await self.get(query))

    def table(self, name: str) -> Driver:
        """Driver for another collection on the same connection."""
        raise NotImplementedError(f"{type(self).__name__} does not support table()")

    def set_schema(self, schema: Schema | None) -> None:
        """Hand the active schema to the backend."""
        raise NotImplementedError(f"{type(self).__name__} does not support set_schema()")

    async def __aenter__(self) -> BaseDriver:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(collection_name={self._collection_name!r})"


__all__ = [
    "COLLECTION_KEYS",
    "DEFAULT_COLLECTION",
    "resolve_collection_name",
    "BaseDriver",
]
