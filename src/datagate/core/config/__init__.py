"""Configuration for datagate (pydantic-settings, ``DATAGATE_*`` env vars)."""

from .settings import DataGateSettings, clear_settings_cache, get_settings

__all__ = [
    "DataGateSettings",
    "get_settings",
    "clear_settings_cache",
]
