"""
In-memory reference driver.

Manifesto:
    Tests and single-process tools need a backend that behaves like the real
    ones (generated ids, timestamps, collection isolation, shared connections)
    without any infrastructure. ``MemoryDriver`` is that backend, and the one
    place where the generic query matcher is used.

Architecture:
    ::

        MemoryStore  (one per "connection")
        ├── collections: {"users": [record, ...], "orders": [...]}
        └── id sequence: 1, 2, 3, ...   shared across collections

        MemoryDriver("users", store=s) ──┐
        driver.table("orders") ──────────┴──► same MemoryStore

        Every read/update/delete is a linear scan of the bound collection
        with ``matches(record, query)``. No operation awaits mid-scan, so a
        scan is atomic with respect to other coroutines.

Features:
    - ``_id`` from a shared sequence, ``_created_at`` / ``_updated_at`` UTC stamps
    - Records are deep-copied in and out; the store owns its records
    - ``table()`` shares the store and connection state
    - Optional self-enforcement of a schema pushed through ``set_schema()``

Examples:
    >>> driver = MemoryDriver("users")
    >>> await driver.set({"name": "Alice"})
    {'_id': 1, 'name': 'Alice', '_created_at': '2026-...'}
    >>> await driver.count({"name": "Alice"})
    1

Guardrails:
    ❌ DON'T: Use MemoryDriver for data that must survive the process
    ✅ DO: Use it for tests, prototypes and caches of derived data

Tags:
    datagate, driver, in-memory, testing, reference-backend

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar

from datagate.core.protocols import DatabaseKind, DriverCapability
from datagate.core.query import matches
from datagate.core.types import Query, Record

from .base import DEFAULT_COLLECTION, BaseDriver

if TYPE_CHECKING:
    from datagate.core.schema import Schema

ID_FIELD = "_id"
CREATED_FIELD = "_created_at"
UPDATED_FIELD = "_updated_at"


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


@dataclass
class MemoryStore:
    """Storage shared by every driver created from the same connection."""

    collections: dict[str, list[Record]] = field(default_factory=dict)
    _ids: Any = field(default_factory=lambda: itertools.count(1), repr=False)

    def records(self, collection: str) -> list[Record]:
        return self.collections.setdefault(collection, [])

    def next_id(self) -> int:
        return next(self._ids)


class MemoryDriver(BaseDriver):
    """In-memory driver bound to one collection of a MemoryStore."""

    capabilities: ClassVar[DriverCapability] = (
        DriverCapability.TABLE | DriverCapability.SCHEMA | DriverCapability.CONNECTION_STATE
    )
    db_type: ClassVar[DatabaseKind] = DatabaseKind.NOSQL

    def __init__(
        self,
        collection_name: str = DEFAULT_COLLECTION,
        *,
        store: MemoryStore | None = None,
        enforce_schema: bool = False,
    ):
        super().__init__(collection_name)
        self._store = store if store is not None else MemoryStore()
        self._enforce_schema = enforce_schema
        self._schema: Schema | None = None

    @property
    def store(self) -> MemoryStore:
        return self._store

    @property
    def schema(self) -> Schema | None:
        """Schema last handed over with ``set_schema()``."""
        return self._schema

    @property
    def _records(self) -> list[Record]:
        return self._store.records(self._collection_name)

    def table(self, name: str) -> MemoryDriver:
        """Driver for collection ``name`` on the same store."""
        driver = MemoryDriver(name, store=self._store, enforce_schema=self._enforce_schema)
        driver._connected = self._connected
        return driver

    def set_schema(self, schema: Schema | None) -> None:
        self._schema = schema

    def _check(self, record: Record, partial: bool) -> Record:
        if self._enforce_schema and self._schema is not None:
            return self._schema.validate(record, partial=partial)
        return record

    async def set(self, record: Record) -> Record:
        record = self._check(record, partial=False)
        stored = {
            ID_FIELD: self._store.next_id(),
            **copy.deepcopy(record),
            CREATED_FIELD: utcnow_iso(),
        }
        self._records.append(stored)
        return copy.deepcopy(stored)

    async def get(self, query: Query) -> list[Record]:
        return [copy.deepcopy(r) for r in self._records if matches(r, query)]

    async def get_one(self, query: Query) -> Record | None:
        for record in self._records:
            if matches(record, query):
                return copy.deepcopy(record)
        return None

    async def update(self, query: Query, patch: Record) -> int:
        patch = self._check(patch, partial=True)
        records = self._records
        count = 0
        for i, record in enumerate(records):
            if matches(record, query):
                records[i] = {
                    **record,
                    **copy.deepcopy(patch),
                    ID_FIELD: record[ID_FIELD],
                    UPDATED_FIELD: utcnow_iso(),
                }
                count += 1
        return count

    async def delete(self, query: Query) -> int:
        records = self._records
        kept = [r for r in records if not matches(r, query)]
        removed = len(records) - len(kept)
        # In place, so table() siblings keep seeing the same list
        records[:] = kept
        return removed

    async def exists(self, query: Query) -> bool:
        return any(matches(r, query) for r in self._records)

    async def count(self, query: Query) -> int:
        return sum(1 for r in self._records if matches(r, query))

    async def clear(self) -> None:
        """Remove every record in the bound collection."""
        self._records.clear()


__all__ = [
    "ID_FIELD",
    "CREATED_FIELD",
    "UPDATED_FIELD",
    "MemoryStore",
    "MemoryDriver",
]
