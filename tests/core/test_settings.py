"""Tests for datagate.core.config.settings."""

import pydantic
import pytest
import structlog

from datagate.core.config import DataGateSettings, clear_settings_cache, get_settings


class TestDataGateSettings:
    def test_defaults(self):
        settings = DataGateSettings()
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"
        assert settings.service_name == "datagate"
        assert settings.default_driver == "memory"
        assert settings.default_collection == "default"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATAGATE_DEFAULT_COLLECTION", "users")
        monkeypatch.setenv("DATAGATE_LOG_FORMAT", "json")
        settings = DataGateSettings()
        assert settings.default_collection == "users"
        assert settings.log_format == "json"

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("DATAGATE_LOG_LEVEL", "debug")
        assert DataGateSettings().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DataGateSettings(log_level="chatty")

    def test_unknown_log_format_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DataGateSettings(log_format="xml")

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("DATAGATE_SOMETHING_ELSE", "1")
        assert not hasattr(DataGateSettings(), "something_else")

    def test_configure_logging(self, reset_structlog):
        DataGateSettings(log_format="json", log_level="ERROR").configure_logging()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestSettingsCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DATAGATE_DEFAULT_DRIVER", "custom")
        reloaded = get_settings(_force_reload=True)
        assert reloaded is not first
        assert reloaded.default_driver == "custom"

    def test_clear_cache(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
