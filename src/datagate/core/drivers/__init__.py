"""Storage drivers -- one async CRUD contract, interchangeable backends.

Architecture::

    Driver (protocols.py)          Structural contract + DriverCapability flags
    BaseDriver (base.py)           Shared lifecycle, from_config(), pool_key()
        └── MemoryDriver           Reference backend over a shared MemoryStore

    DriverRegistry (registry.py)   name -> driver class, get_driver() factory

Modules
-------
base            Abstract BaseDriver + collection-name resolution
memory          MemoryDriver / MemoryStore
registry        DriverRegistry + get_driver() factory

Guardrails:
    ❌ ``hasattr(driver, "table")``
    ✅ ``driver.supports(DriverCapability.TABLE)``
    ❌ ``MemoryDriver(**config)`` when config may use ``table``/``collection``
    ✅ ``MemoryDriver.from_config(config)`` or ``get_driver("memory", **config)``
"""

from datagate.core.protocols import DatabaseKind, Driver, DriverCapability

from .base import COLLECTION_KEYS, DEFAULT_COLLECTION, BaseDriver, resolve_collection_name
from .memory import MemoryDriver, MemoryStore
from .registry import DriverRegistry, driver_registry, get_driver

__all__ = [
    # Protocols
    "Driver",
    "DriverCapability",
    "DatabaseKind",
    # Base class
    "BaseDriver",
    "COLLECTION_KEYS",
    "DEFAULT_COLLECTION",
    "resolve_collection_name",
    # Implementations
    "MemoryDriver",
    "MemoryStore",
    # Registry
    "DriverRegistry",
    "driver_registry",
    "get_driver",
]
