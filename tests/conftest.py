"""
Shared pytest fixtures and configuration for datagate tests.

This module provides:
- Registry / settings cleanup fixtures for test isolation
- A fresh InstancePool per test
- Sample schemas and stores

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    @pytest.mark.asyncio
    async def test_something(pool, person_schema):
        ...
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Ensure datagate package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from datagate.core.config.settings import clear_settings_cache
from datagate.core.drivers import MemoryStore, driver_registry
from datagate.core.pool import InstancePool
from datagate.core.schema import Schema


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = item.path.relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def restore_driver_registry() -> Generator[None, None, None]:
    """
    Restore the global driver registry after each test.

    Tests that register custom drivers must not leak them into other tests.
    """
    saved = dict(driver_registry._drivers)
    yield
    driver_registry._drivers.clear()
    driver_registry._drivers.update(saved)


@pytest.fixture(autouse=True)
def clean_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear cached settings and ignore any .env file in the working directory."""
    monkeypatch.chdir(Path(__file__).parent)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after a test that calls configure_logging()."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Sample Fixtures
# =============================================================================


@pytest.fixture
def pool() -> Generator[InstancePool, None, None]:
    """Fresh pool, cleared after the test."""
    instance_pool = InstancePool()
    yield instance_pool
    instance_pool.clear()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def person_schema() -> Schema:
    """``name`` required string, ``age`` integer defaulting to 0."""
    return Schema({
        "name": {"type": "string", "required": True},
        "age": {"type": "integer", "default": 0},
    })
