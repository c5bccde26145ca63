"""
Canonical driver contract for datagate.

Manifesto:
    Application code should depend on the *shape* of a storage backend, not
    on a vendor. Every driver, whether in-memory, SQL or document store,
    satisfies the same async CRUD contract, and advertises its optional
    features through an explicit capability flag instead of by the presence
    of a method:

    - **Decoupling:** The facade and pool depend on ``Driver``, never a class
    - **Typed capabilities:** ``driver.supports(DriverCapability.TABLE)``
    - **Testability:** Any object matching the protocol works

Architecture:
    ::

        Driver (Protocol)
        ├── connect() / disconnect()            idempotent lifecycle
        ├── set(record)          → record       insert, assigns _id + timestamp
        ├── get(query)           → [record]
        ├── get_one(query)       → record | None
        ├── update(query, patch) → int
        ├── delete(query)        → int
        ├── exists(query)        → bool
        ├── count(query)         → int
        │
        │   optional, gated by DriverCapability
        ├── is_connected         CONNECTION_STATE
        ├── table(name)          TABLE   new driver, same connection/storage
        └── set_schema(schema)   SCHEMA  backend enforces the schema itself

Guardrails:
    ❌ DON'T: ``if hasattr(driver, "table"): ...``
    ✅ DO: ``if driver.supports(DriverCapability.TABLE): ...``

Tags:
    protocol, driver, capabilities, async, datagate, contracts

Doc-Types:
    - API Reference
    - Architecture Decision Record
"""

from __future__ import annotations

from enum import Enum, Flag, auto
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .types import Query, Record

if TYPE_CHECKING:
    from .schema import Schema


class DriverCapability(Flag):
    """Optional features a driver may implement."""

    NONE = 0
    TABLE = auto()              # table(name) shares the connection
    SCHEMA = auto()             # set_schema(schema) is honoured
    CONNECTION_STATE = auto()   # is_connected reports real state


class DatabaseKind(str, Enum):
    """Broad family of the underlying store."""

    SQL = "sql"
    NOSQL = "nosql"


@runtime_checkable
class Driver(Protocol):
    """
    Async storage backend bound to one collection/table.

    Only the members guarded by a capability may raise NotImplementedError;
    everything else must work on every driver.
    """

    capabilities: DriverCapability
    db_type: DatabaseKind

    @property
    def collection_name(self) -> str:
        """Collection or table this driver reads and writes."""
        ...

    def supports(self, capability: DriverCapability) -> bool:
        """Whether every flag in ``capability`` is declared."""
        ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    @property
    def is_connected(self) -> bool: ...

    async def set(self, record: Record) -> Record: ...

    async def get(self, query: Query) -> list[Record]: ...

    async def get_one(self, query: Query) -> Record | None: ...

    async def update(self, query: Query, patch: Record) -> int: ...

    async def delete(self, query: Query) -> int: ...

    async def exists(self, query: Query) -> bool: ...

    async def count(self, query: Query) -> int: ...

    def table(self, name: str) -> Driver: ...

    def set_schema(self, schema: Schema | None) -> None: ...


def driver_kind(driver: Any) -> str:
    """Name identifying a driver's concrete class, for instances and classes alike."""
    cls = driver if isinstance(driver, type) else type(driver)
    return cls.__name__


__all__ = [
    "DriverCapability",
    "DatabaseKind",
    "Driver",
    "driver_kind",
]
