"""
Centralized settings for datagate.

Manifesto:
    One validated, cached settings object instead of ad-hoc ``os.environ``
    lookups scattered through the code. Values come from ``DATAGATE_*``
    environment variables or a ``.env`` file.

Tags:
    datagate, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datagate.core.logging import configure_logging


class DataGateSettings(BaseSettings):
    """datagate configuration.

    All fields can be set via ``DATAGATE_*`` environment variables (e.g.
    ``DATAGATE_DEFAULT_COLLECTION=users``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATAGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")
    service_name: str = Field(default="datagate")

    # ── Defaults for DataGate.from_settings() ────────────────────
    default_driver: str = Field(default="memory", description="Registry name of the driver")
    default_collection: str = Field(default="default")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    def configure_logging(self) -> None:
        """Apply the logging settings."""
        configure_logging(
            level=self.log_level,
            json_format=self.log_format == "json",
            service=self.service_name,
        )


# ── Settings factory with caching ────────────────────────────────────────

_settings: DataGateSettings | None = None


def get_settings(*, _force_reload: bool = False) -> DataGateSettings:
    """Load, validate, and cache a :class:`DataGateSettings` instance."""
    global _settings
    if _settings is None or _force_reload:
        _settings = DataGateSettings()
    return _settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    global _settings
    _settings = None


__all__ = [
    "DataGateSettings",
    "get_settings",
    "clear_settings_cache",
]
