"""
DataGate facade -- a driver plus an active schema.

Manifesto:
    Application code talks to one object regardless of where records live.
    The facade validates writes against the active schema and passes
    everything else straight to the driver:

    - **Writes validated:** ``insert`` runs full validation, ``update`` partial
    - **Reads untouched:** filters go to the driver as given
    - **Backend errors untouched:** nothing is wrapped or retried
    - **Pool-aware:** ``DataGate.pooled()`` reuses facades by identity key

Architecture:
    ::

        DataGate(driver, config=..., schema=...)
            │
            ├── insert / insert_many ──► Schema.validate(r)  ──► driver.set
            ├── update ────────────────► Schema.validate(p, partial=True) ──► driver.update
            ├── get / get_one / get_by_id / exists / count / delete ──► driver
            ├── table(name) ───────────► DataGate(driver.table(name))   (TABLE)
            └── replace_schema(s) ─────► driver.set_schema(s)           (SCHEMA)

Examples:
    >>> gate = DataGate("memory", config={"collection_name": "users"},
    ...                 schema={"name": {"type": "string", "required": True}})
    >>> async with gate:
    ...     await gate.insert({"name": "Alice"})
    ...     await gate.count({"name": "Alice"})
    1

    Pooled (safe to call on every hot reload):

    >>> pool = InstancePool()
    >>> users = DataGate.pooled(pool, MemoryDriver, config={"table": "users"})
    >>> users is DataGate.pooled(pool, MemoryDriver, config={"table": "users"})
    True

Tags:
    datagate, facade, crud, validation, pooling

Doc-Types:
    - API Reference
    - Getting Started
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .drivers.base import BaseDriver
from .drivers.registry import driver_registry
from .errors import ConfigError
from .logging import get_logger
from .pool import InstancePool, build_pool_key
from .protocols import Driver, DriverCapability, driver_kind
from .schema import Schema, SchemaDefinition
from .types import Query, Record

if TYPE_CHECKING:
    from .config.settings import DataGateSettings

logger = get_logger(__name__)

DriverSpec = Driver | type[BaseDriver] | str


def _build_driver(driver: DriverSpec, config: Mapping[str, Any] | None) -> Driver:
    if isinstance(driver, str):
        return driver_registry.get(driver).from_config(config)
    if isinstance(driver, type):
        from_config = getattr(driver, "from_config", None)
        if from_config is None:
            raise ConfigError(f"Driver class {driver.__name__} has no from_config()")
        return from_config(config)
    if isinstance(driver, Driver):
        return driver
    raise ConfigError(f"Not a driver: {driver!r}")


class DataGate:
    """Caller-facing CRUD object over one driver and an optional schema."""

    def __init__(
        self,
        driver: DriverSpec,
        *,
        config: Mapping[str, Any] | None = None,
        schema: Schema | SchemaDefinition | None = None,
    ):
        self._driver = _build_driver(driver, config)
        self._schema: Schema | None = None
        self.replace_schema(schema)

    # ── Construction helpers ─────────────────────────────────────

    @classmethod
    def pooled(
        cls,
        pool: InstancePool,
        driver: DriverSpec,
        *,
        config: Mapping[str, Any] | None = None,
        schema: Schema | SchemaDefinition | None = None,
    ) -> DataGate:
        """
        Fetch the facade for ``driver`` + ``config`` from ``pool``, creating it once.

        A supplied schema replaces the pooled facade's schema on a hit. On a
        miss for a new collection of an already pooled connection, the new
        facade is built on ``driver.table(collection)`` to share it.
        """
        driver_cls = driver_registry.get(driver) if isinstance(driver, str) else driver
        key = build_pool_key(driver_cls, config)

        def factory() -> DataGate:
            sibling = pool.find_connection(key)
            if sibling is not None and sibling.driver.supports(DriverCapability.TABLE):
                return cls(sibling.driver.table(key.collection), schema=schema)
            return cls(driver_cls, config=config, schema=schema)

        return pool.get_or_create(key, factory, schema=schema)

    @classmethod
    def from_settings(
        cls,
        settings: DataGateSettings | None = None,
        *,
        schema: Schema | SchemaDefinition | None = None,
        pool: InstancePool | None = None,
    ) -> DataGate:
        """Facade for the configured default driver and collection."""
        from .config.settings import get_settings

        settings = settings or get_settings()
        config = {"collection_name": settings.default_collection}
        if pool is not None:
            return cls.pooled(pool, settings.default_driver, config=config, schema=schema)
        return cls(settings.default_driver, config=config, schema=schema)

    # ── State ────────────────────────────────────────────────────

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def schema(self) -> Schema | None:
        return self._schema

    @property
    def collection_name(self) -> str:
        return self._driver.collection_name

    @property
    def is_connected(self) -> bool | None:
        """Connection state, or None when the driver does not track it."""
        if not self._driver.supports(DriverCapability.CONNECTION_STATE):
            return None
        return self._driver.is_connected

    def replace_schema(self, schema: Schema | SchemaDefinition | None) -> None:
        """Swap the active schema and hand it to schema-aware drivers."""
        self._schema = Schema.coerce(schema)
        if self._schema is not None and self._driver.supports(DriverCapability.SCHEMA):
            self._driver.set_schema(self._schema)

    def table(self, name: str, schema: Schema | SchemaDefinition | None = None) -> DataGate:
        """Facade for collection ``name`` sharing this facade's connection."""
        if self._driver.supports(DriverCapability.TABLE):
            driver = self._driver.table(name)
        else:
            driver = self._driver
        return DataGate(driver, schema=schema if schema is not None else self._schema)

    # ── Lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        await self._driver.connect()
        logger.debug("driver_connected", driver=driver_kind(self._driver), collection=self.collection_name)

    async def disconnect(self) -> None:
        await self._driver.disconnect()
        logger.debug("driver_disconnected", driver=driver_kind(self._driver), collection=self.collection_name)

    async def __aenter__(self) -> DataGate:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    # ── CRUD ─────────────────────────────────────────────────────

    def _validate(self, record: Mapping[str, Any], partial: bool = False) -> Record:
        if self._schema is None:
            return dict(record)
        return self._schema.validate(record, partial=partial)

    async def insert(self, record: Mapping[str, Any]) -> Record:
        """Validate and insert one record; returns the stored record."""
        stored = await self._driver.set(self._validate(record))
        logger.debug("record_inserted", collection=self.collection_name, record_id=stored.get("_id"))
        return stored

    async def insert_many(self, records: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Validate every record first, then insert them in order."""
        validated = [self._validate(record) for record in records]
        return [await self._driver.set(record) for record in validated]

    async def get(self, query: Query | None = None) -> list[Record]:
        return await self._driver.get(query or {})

    async def get_one(self, query: Query | None = None) -> Record | None:
        return await self._driver.get_one(query or {})

    async def get_by_id(self, record_id: Any) -> Record | None:
        return await self._driver.get_one({"_id": record_id})

    async def update(self, query: Query, patch: Mapping[str, Any]) -> int:
        """Partially validate ``patch`` and apply it to every match."""
        count = await self._driver.update(query, self._validate(patch, partial=True))
        logger.debug("records_updated", collection=self.collection_name, count=count)
        return count

    async def delete(self, query: Query) -> int:
        count = await self._driver.delete(query)
        logger.debug("records_deleted", collection=self.collection_name, count=count)
        return count

    async def exists(self, query: Query | None = None) -> bool:
        return await self._driver.exists(query or {})

    async def count(self, query: Query | None = None) -> int:
        return await self._driver.count(query or {})

    def __repr__(self) -> str:
        return f"DataGate(driver={driver_kind(self._driver)}, collection={self.collection_name!r})"


__all__ = [
    "DataGate",
]
