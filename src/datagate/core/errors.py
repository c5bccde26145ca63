"""
Structured error types for datagate.

Every error raised by the core carries a category, a retry hint, a structured
context and an optional chained cause, so callers can log it with
``to_dict()`` and decide what to do without parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure kind the core owns
    - **Explicit Retry Semantics:** Validation and config errors are never retryable
    - **Rich Context:** Errors name the offending field and the violated rule
    - **Backends Own Their Errors:** Driver failures propagate unchanged

Architecture:
    ::

        DataGateError  (category, retryable, context, cause)
        ├── ValidationError          VALIDATION   field / value / constraint / rule
        │   ├── RequiredFieldError                constraint="required"
        │   └── TypeMismatchError                 constraint="type", expected
        ├── SchemaError              SCHEMA       raised when a Schema is built
        └── ConfigError              CONFIG       bad driver argument
            └── DriverNotFoundError               unknown registry name

Examples:
    >>> error = RequiredFieldError("name")
    >>> error.field, error.constraint
    ('name', 'required')
    >>> str(error)
    'Field "name" is required.'

    >>> error.with_context(collection="users").to_dict()["context"]
    {'collection': 'users'}

Guardrails:
    ❌ DON'T: Wrap backend exceptions in DataGateError
    ✅ DO: Let driver errors propagate to the caller unchanged

    ❌ DON'T: Retry a ValidationError
    ✅ DO: Fix the input and call validate again

Tags:
    error-handling, exception-hierarchy, validation, datagate

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datagate.core.schema import FieldRule


class ErrorCategory(str, Enum):
    """Coarse classification used when logging or routing errors."""

    VALIDATION = "VALIDATION"   # record rejected by a schema
    SCHEMA = "SCHEMA"           # schema definition itself is malformed
    CONFIG = "CONFIG"           # driver name or driver argument
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclasses.dataclass
class ErrorContext:
    """
    Where an error happened.

    ``to_dict()`` drops unset fields and flattens ``metadata`` into the result.

    Examples:
        >>> ErrorContext(driver="MemoryDriver", collection="users").to_dict()
        {'driver': 'MemoryDriver', 'collection': 'users'}
    """

    driver: str | None = None
    collection: str | None = None
    operation: str | None = None
    metadata: dict[str, Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        named = {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        return {**named, **self.metadata}


class DataGateError(Exception):
    """
    Root of every error the core raises itself.

    Subclasses pick their category and retry hint through the
    ``default_category`` / ``default_retryable`` class attributes; both can be
    overridden per instance.

    Examples:
        >>> DataGateError("pool is closed").category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = self.default_category if category is None else category
        self.retryable = self.default_retryable if retryable is None else retryable
        self.context = ErrorContext() if context is None else context
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DataGateError:
        """
        Attach context and return ``self``.

        Keys naming an ErrorContext field set that field; anything else lands
        in ``context.metadata``::

            raise error.with_context(collection="users", operation="insert")
        """
        known = {f.name for f in dataclasses.fields(self.context)} - {"metadata"}
        for key, value in kwargs.items():
            if key in known:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def _details(self) -> dict[str, Any]:
        """Subclass-specific keys merged into ``to_dict()``."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-friendly view for structured logs."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if context := self.context.to_dict():
            data["context"] = context
        if self.cause is not None:
            data["cause"] = str(self.cause)
        data.update(self._details())
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# RECORD VALIDATION
# =============================================================================


class ValidationError(DataGateError):
    """
    A record was rejected before reaching the driver.

    ``constraint`` is ``"required"``, ``"type"`` or ``"record"`` (the input
    was not a mapping at all); ``rule`` is the FieldRule that failed.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        rule: FieldRule | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint
        self.rule = rule

    def _details(self) -> dict[str, Any]:
        details: dict[str, Any] = {}
        if self.field:
            details["field"] = self.field
        if self.value is not None:
            details["value"] = repr(self.value)
        if self.constraint:
            details["constraint"] = self.constraint
        return details


class RequiredFieldError(ValidationError):
    """A required field is absent or null."""

    def __init__(self, field: str, *, rule: FieldRule | None = None, **kwargs: Any):
        super().__init__(
            f'Field "{field}" is required.',
            field=field,
            constraint="required",
            rule=rule,
            **kwargs,
        )


class TypeMismatchError(ValidationError):
    """A present value does not conform to its declared type."""

    def __init__(
        self,
        field: str,
        expected: str,
        value: Any,
        *,
        rule: FieldRule | None = None,
        **kwargs: Any,
    ):
        self.expected = expected
        super().__init__(
            f'Field "{field}" expected type {expected}.',
            field=field,
            value=value,
            constraint="type",
            rule=rule,
            **kwargs,
        )

    def _details(self) -> dict[str, Any]:
        return {**super()._details(), "expected": self.expected}


# =============================================================================
# DEFINITIONS AND WIRING
# =============================================================================


class SchemaError(DataGateError):
    """Malformed schema definition, raised when the Schema is constructed."""

    default_category = ErrorCategory.SCHEMA


class ConfigError(DataGateError):
    """Invalid driver argument; fix the configuration rather than retrying."""

    default_category = ErrorCategory.CONFIG


class DriverNotFoundError(ConfigError):
    """No driver registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.driver_name = name
        self.available = list(available or [])
        suffix = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Unknown driver: {name}{suffix}")


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DataGateError",
    "ValidationError",
    "RequiredFieldError",
    "TypeMismatchError",
    "SchemaError",
    "ConfigError",
    "DriverNotFoundError",
]
