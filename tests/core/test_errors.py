"""Tests for datagate.core.errors."""

import pytest

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
from datagate.core.schema import FieldRule
from datagate.core.types import TypeTag


class TestErrorContext:
    def test_empty(self):
        assert ErrorContext().to_dict() == {}

    def test_only_set_fields(self):
        ctx = ErrorContext(driver="MemoryDriver", operation="insert")
        assert ctx.to_dict() == {"driver": "MemoryDriver", "operation": "insert"}

    def test_metadata_flattened(self):
        ctx = ErrorContext(collection="users", metadata={"attempt": 2})
        assert ctx.to_dict() == {"collection": "users", "attempt": 2}


class TestDataGateError:
    def test_defaults(self):
        error = DataGateError("boom")
        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_overrides(self):
        error = DataGateError("boom", category=ErrorCategory.UNKNOWN, retryable=True)
        assert error.category == ErrorCategory.UNKNOWN
        assert error.retryable is True

    def test_cause_is_chained(self):
        cause = KeyError("k")
        error = DataGateError("wrapped", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == str(cause)

    def test_with_context_is_fluent(self):
        error = DataGateError("boom")
        assert error.with_context(collection="users", request_id="r1") is error
        assert error.context.collection == "users"
        assert error.context.metadata == {"request_id": "r1"}

    def test_to_dict(self):
        error = DataGateError("boom").with_context(driver="MemoryDriver")
        assert error.to_dict() == {
            "error_type": "DataGateError",
            "message": "boom",
            "category": "INTERNAL",
            "retryable": False,
            "context": {"driver": "MemoryDriver"},
        }

    def test_repr(self):
        assert repr(SchemaError("bad")) == "SchemaError('bad', category=SCHEMA)"


class TestValidationErrors:
    def test_required_field(self):
        rule = FieldRule(type=TypeTag.STRING, required=True)
        error = RequiredFieldError("name", rule=rule)
        assert isinstance(error, ValidationError)
        assert str(error) == 'Field "name" is required.'
        assert error.field == "name"
        assert error.constraint == "required"
        assert error.rule is rule
        assert error.category == ErrorCategory.VALIDATION
        assert error.retryable is False

    def test_type_mismatch(self):
        error = TypeMismatchError("age", "integer", "thirty")
        assert str(error) == 'Field "age" expected type integer.'
        assert error.expected == "integer"
        assert error.value == "thirty"
        assert error.constraint == "type"

    def test_type_mismatch_to_dict(self):
        data = TypeMismatchError("age", "integer", "thirty").to_dict()
        assert data["field"] == "age"
        assert data["value"] == "'thirty'"
        assert data["constraint"] == "type"
        assert data["expected"] == "integer"

    def test_validation_error_omits_unset_fields(self):
        data = ValidationError("bad record").to_dict()
        assert "field" not in data
        assert "value" not in data
        assert "constraint" not in data


class TestConfigErrors:
    def test_driver_not_found_lists_available(self):
        error = DriverNotFoundError("mongo", ["memory", "sqlite"])
        assert isinstance(error, ConfigError)
        assert error.driver_name == "mongo"
        assert str(error) == "Unknown driver: mongo (available: memory, sqlite)"
        assert error.category == ErrorCategory.CONFIG

    def test_driver_not_found_without_alternatives(self):
        assert str(DriverNotFoundError("mongo")) == "Unknown driver: mongo"

    @pytest.mark.parametrize("cls", [SchemaError, ConfigError, ValidationError])
    def test_never_retryable(self, cls):
        assert cls("x").retryable is False
