"""
Schema definitions and record validation.

Manifesto:
    Application code hands records to interchangeable backends. Some of them
    enforce structure, most do not. A schema declared once in Python gives
    every backend the same guarantees before a record is written:

    - **Defaults:** Missing fields are filled from the declaration
    - **Required fields:** Absent or null required fields are rejected
    - **Type conformance:** Present values are checked with ``conforms()``
    - **Open records:** Fields the schema does not mention pass through

Architecture:
    ::

        SchemaDefinition  {field: FieldRule | TypeTag | str | {"type": ...}}
              │
              ▼  FieldRule.coerce()       (once, at construction)
        Schema ── owns ──► SchemaValidator ── calls ──► conforms(value, tag)

        validate(record, partial=False), per field in declaration order:
            1. absent + not partial + has default  → materialise default
            2. not partial + required + absent/None → RequiredFieldError
            3. present + not None + type != any     → TypeMismatchError?

Examples:
    >>> schema = Schema({
    ...     "name": {"type": "string", "required": True},
    ...     "age": {"type": "integer", "default": 0},
    ... })
    >>> schema.validate({"name": "Alice"})
    {'name': 'Alice', 'age': 0}
    >>> schema.validate({"age": 2.5}, partial=True)
    Traceback (most recent call last):
    ...
    datagate.core.errors.TypeMismatchError: Field "age" expected type integer.

Guardrails:
    ❌ DON'T: Validate an update patch with ``partial=False``
    ✅ DO: Use ``partial=True`` so defaults are not re-applied over stored data

Tags:
    schema, validation, defaults, datagate

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import RequiredFieldError, SchemaError, TypeMismatchError, ValidationError
from .logging import get_logger
from .type_rules import conforms
from .types import MISSING, Record, TypeTag

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for one field."""

    type: TypeTag | str = TypeTag.ANY
    required: bool = False
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def tag(self) -> str:
        """The type name as declared."""
        return self.type.value if isinstance(self.type, TypeTag) else str(self.type)

    def materialize_default(self) -> Any:
        """Return a fresh copy of the default so records never share it."""
        return copy.deepcopy(self.default)

    @classmethod
    def coerce(cls, declaration: Any, *, field: str = "") -> FieldRule:
        """
        Build a FieldRule from any accepted declaration form.

        Accepts a FieldRule, a bare tag (``"string"`` or ``TypeTag.STRING``)
        or a mapping with a ``type`` key and optional ``required``/``default``.
        """
        if isinstance(declaration, FieldRule):
            return declaration
        if isinstance(declaration, (TypeTag, str)):
            return cls(type=TypeTag.parse(declaration) or declaration)
        if isinstance(declaration, Mapping):
            if "type" not in declaration:
                raise SchemaError(f'Rule for field "{field}" has no "type"')
            tag = declaration["type"]
            if not isinstance(tag, (TypeTag, str)):
                raise SchemaError(f'Rule for field "{field}" has a non-string type: {tag!r}')
            return cls(
                type=TypeTag.parse(tag) or tag,
                required=bool(declaration.get("required", False)),
                default=declaration.get("default", MISSING),
            )
        raise SchemaError(f'Unsupported rule for field "{field}": {declaration!r}')


SchemaDefinition = Mapping[str, "FieldRule | TypeTag | str | Mapping[str, Any]"]


class SchemaValidator:
    """Applies a fixed set of field rules to records."""

    def __init__(self, rules: Mapping[str, FieldRule]):
        self._rules = MappingProxyType(dict(rules))

    @property
    def rules(self) -> Mapping[str, FieldRule]:
        return self._rules

    def validate(self, record: Mapping[str, Any], partial: bool = False) -> Record:
        """
        Validate ``record`` and return a shallow copy with defaults applied.

        Args:
            record: Input record (not modified)
            partial: Skip defaults and required checks (update patches)

        Raises:
            RequiredFieldError: A required field is absent or None
            TypeMismatchError: A present value does not conform to its type
            ValidationError: ``record`` is not a mapping
        """
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Record must be a mapping, got {type(record).__name__}",
                value=record,
                constraint="record",
            )

        validated: Record = dict(record)

        for name, rule in self._rules.items():
            value = validated.get(name, MISSING)

            if not partial and value is MISSING and rule.has_default:
                value = rule.materialize_default()
                validated[name] = value

            if not partial and rule.required and (value is MISSING or value is None):
                raise RequiredFieldError(name, rule=rule)

            if value is MISSING or value is None or rule.type == TypeTag.ANY:
                continue

            if not conforms(value, rule.type):
                raise TypeMismatchError(name, rule.tag, value, rule=rule)

        return validated


class Schema:
    """
    Immutable schema wrapping a single SchemaValidator.

    Construction normalises every declaration into a FieldRule; a malformed
    declaration raises SchemaError here rather than at validation time.
    """

    def __init__(self, definition: SchemaDefinition):
        if not isinstance(definition, Mapping):
            raise SchemaError(
                f"Schema definition must be a mapping, got {type(definition).__name__}"
            )

        rules: dict[str, FieldRule] = {}
        for name, declaration in definition.items():
            if not isinstance(name, str):
                raise SchemaError(f"Field names must be strings, got {name!r}")
            rule = FieldRule.coerce(declaration, field=name)
            if not isinstance(rule.type, TypeTag):
                logger.warning("schema_unknown_type", field=name, type=rule.tag)
            rules[name] = rule

        self._definition = MappingProxyType(dict(definition))
        self._validator = SchemaValidator(rules)

    @classmethod
    def coerce(cls, schema: Schema | SchemaDefinition | None) -> Schema | None:
        """Return ``schema`` as a Schema, wrapping plain definitions."""
        if schema is None or isinstance(schema, Schema):
            return schema
        return cls(schema)

    @property
    def definition(self) -> Mapping[str, Any]:
        """The definition exactly as declared (read-only)."""
        return self._definition

    @property
    def rules(self) -> Mapping[str, FieldRule]:
        """Normalised rules, one per field, in declaration order."""
        return self._validator.rules

    @property
    def validator(self) -> SchemaValidator:
        return self._validator

    @property
    def fields(self) -> list[str]:
        return list(self._validator.rules)

    def validate(self, record: Mapping[str, Any], partial: bool = False) -> Record:
        """Validate ``record``; see :meth:`SchemaValidator.validate`."""
        try:
            return self._validator.validate(record, partial=partial)
        except ValidationError as e:
            logger.debug(
                "validation_failed",
                field=e.field,
                constraint=e.constraint,
                partial=partial,
            )
            raise

    def __contains__(self, name: object) -> bool:
        return name in self._validator.rules

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}:{rule.tag}" for name, rule in self.rules.items())
        return f"Schema({fields})"


__all__ = [
    "FieldRule",
    "SchemaDefinition",
    "SchemaValidator",
    "Schema",
]
