"""Core type tags and aliases shared by the schema, query and driver layers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

Record = dict[str, Any]
Query = dict[str, Any]


class TypeTag(str, Enum):
    """Closed set of field types a schema can declare."""

    STRING = "string"
    TEXT = "text"
    CHAR = "char"
    NUMBER = "number"
    INTEGER = "integer"
    FLOAT = "float"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    JSON = "json"
    BLOB = "blob"
    UUID = "uuid"
    EMAIL = "email"
    URL = "url"
    ANY = "any"

    @classmethod
    def parse(cls, value: TypeTag | str) -> TypeTag | None:
        """Return the matching tag, or ``None`` for an unrecognised name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class _Missing:
    """Marker for "no value supplied", distinct from ``None``."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Final = _Missing()


__all__ = [
    "Record",
    "Query",
    "TypeTag",
    "MISSING",
]
