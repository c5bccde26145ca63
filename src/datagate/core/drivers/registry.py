"""Driver registry and factory.

Manifesto:
    Configuration files and environment variables name drivers as strings
    (``DATAGATE_DEFAULT_DRIVER=memory``). The registry maps those names to
    driver classes so consumers never hard-code a class, and third-party
    backends plug in with one ``register()`` call.

Features:
    - ``DriverRegistry`` with the in-memory driver pre-registered
    - ``register()`` / ``unregister()`` for custom backends
    - ``get_driver()`` factory: name + config → driver instance

Tags:
    datagate, driver, registry, factory

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from datagate.core.errors import DriverNotFoundError
from datagate.core.logging import get_logger

from .base import BaseDriver
from .memory import MemoryDriver

logger = get_logger(__name__)


class DriverRegistry:
    """
    Registry of driver classes by name.

    Pre-registered drivers:
    - ``memory``: :class:`MemoryDriver`
    """

    def __init__(self):
        self._drivers: dict[str, type[BaseDriver]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._drivers["memory"] = MemoryDriver

    def register(self, name: str, driver_class: type[BaseDriver]) -> None:
        """Register (or replace) a driver class under ``name``."""
        self._drivers[name.lower()] = driver_class
        logger.debug("driver_registered", name=name.lower(), cls=driver_class.__name__)

    def unregister(self, name: str) -> None:
        self._drivers.pop(name.lower(), None)

    def get(self, name: str) -> type[BaseDriver]:
        """Driver class registered under ``name``."""
        try:
            return self._drivers[name.lower()]
        except KeyError:
            raise DriverNotFoundError(name, self.list_drivers()) from None

    def create(self, name: str, **config: Any) -> BaseDriver:
        """Create a driver by name from keyword config."""
        return self.get(name).from_config(config)

    def list_drivers(self) -> list[str]:
        """List registered driver names."""
        return sorted(self._drivers.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._drivers


# Global registry
driver_registry = DriverRegistry()


def get_driver(name: str, **config: Any) -> BaseDriver:
    """
    Get a driver instance by name.

    Usage:
        driver = get_driver("memory", collection_name="users")
    """
    return driver_registry.create(name, **config)


__all__ = [
    "DriverRegistry",
    "driver_registry",
    "get_driver",
]
