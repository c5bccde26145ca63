"""datagate core -- backend-agnostic, schema-validated data access.

Manifesto:
    Application code should read and write records the same way whether they
    live in memory, in a SQL database or in a document store. ``datagate.core``
    is the thin contract that makes that possible: one async driver protocol,
    one schema engine that validates records before any backend sees them,
    and one pool that hands back the same facade for the same connection.

    - **Protocol-first:** Driver is a protocol with explicit capability flags
    - **Validate before persisting:** Schema runs on every write path
    - **Explicit pooling:** InstancePool is an object you own, not a global

Architecture::

    Layer 1 -- Types & Errors
        types.py           TypeTag, MISSING, Record / Query aliases
        errors.py          DataGateError hierarchy (ValidationError, ...)
        protocols.py       Driver protocol, DriverCapability, DatabaseKind
        hashing.py         compute_hash(), config_signature()

    Layer 2 -- Validation & Matching
        type_rules.py      conforms(value, tag)
        schema.py          FieldRule, SchemaValidator, Schema
        query.py           matches(record, query)

    Layer 3 -- Drivers
        drivers/           BaseDriver, MemoryDriver, DriverRegistry

    Layer 4 -- Facade & Pool
        facade.py          DataGate
        pool.py            InstancePool, PoolKey, build_pool_key()

    Cross-cutting
        logging.py         structlog configuration
        config/            DataGateSettings (pydantic-settings)

Tags:
    datagate, core, package-overview

Doc-Types:
    package-overview, architecture-map, module-index
"""

from datagate.core.drivers import (
    BaseDriver,
    DriverRegistry,
    MemoryDriver,
    MemoryStore,
    driver_registry,
    get_driver,
)
from datagate.core.errors import (
    ConfigError,
    DataGateError,
    DriverNotFoundError,
    ErrorCategory,
    ErrorContext,
    RequiredFieldError,
    SchemaError,
    TypeMismatchError,
    ValidationError,
)
from datagate.core.facade import DataGate
from datagate.core.hashing import compute_hash, config_signature
from datagate.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from datagate.core.pool import InstancePool, PoolKey, build_pool_key, resolve_collection_name
from datagate.core.protocols import DatabaseKind, Driver, DriverCapability
from datagate.core.query import matches
from datagate.core.schema import FieldRule, Schema, SchemaDefinition, SchemaValidator
from datagate.core.type_rules import conforms
from datagate.core.types import MISSING, Query, Record, TypeTag

__all__ = [
    # Types
    "TypeTag",
    "MISSING",
    "Record",
    "Query",
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "DataGateError",
    "ValidationError",
    "RequiredFieldError",
    "TypeMismatchError",
    "SchemaError",
    "ConfigError",
    "DriverNotFoundError",
    # Validation & matching
    "conforms",
    "FieldRule",
    "SchemaDefinition",
    "SchemaValidator",
    "Schema",
    "matches",
    # Drivers
    "Driver",
    "DriverCapability",
    "DatabaseKind",
    "BaseDriver",
    "MemoryDriver",
    "MemoryStore",
    "DriverRegistry",
    "driver_registry",
    "get_driver",
    # Facade & pool
    "DataGate",
    "InstancePool",
    "PoolKey",
    "build_pool_key",
    "resolve_collection_name",
    # Hashing
    "compute_hash",
    "config_signature",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
