"""
Type conformance rules for schema fields.

Manifesto:
    Validation has to give the same verdict for the same value no matter which
    backend the record is headed for. ``conforms()`` is that single verdict:
    a pure, total function from ``(value, tag)`` to ``bool`` that never raises.

Rules:
    ::

        string / text / char   str
        number / float         real number (bool excluded), not NaN
        integer                real number with zero fractional part
        bigint                 int (bool excluded)
        boolean                bool
        array                  list or tuple
        object / json          mapping
        date                   date / datetime, or a str dateutil can parse
        blob                   bytes / bytearray / memoryview
        uuid                   str, 8-4-4-4-12 hex, either case
        email                  str shaped like local@domain.tld
        url                    str accepted by pydantic's AnyUrl
        any / unknown tag      always True

Guardrails:
    ❌ DON'T: Pass an epoch number for a date field
    ✅ DO: Convert it with ``datetime.fromtimestamp()`` first

    The date rule is loose on purpose: anything dateutil's parser accepts
    counts, which includes strings such as ``"10"`` or ``"Monday"``.

Tags:
    validation, type-checking, schema, datagate

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from dateutil import parser as date_parser
from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .types import TypeTag

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    # ints and fractions can exceed float range and are never NaN
    if isinstance(value, numbers.Rational):
        return False
    return math.isnan(value)


def _is_integer(value: Any) -> bool:
    if not _is_number(value):
        return False
    if isinstance(value, numbers.Rational):
        return value.denominator == 1
    number = float(value)
    return math.isfinite(number) and number.is_integer()


def _is_date(value: Any) -> bool:
    if isinstance(value, date):
        return True
    if not isinstance(value, str):
        return False
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def conforms(value: Any, tag: TypeTag | str) -> bool:
    """
    Check whether ``value`` conforms to the type ``tag``.

    Unrecognised tags and ``any`` always conform.

    Examples:
        >>> conforms(3, "integer"), conforms(2.5, "integer")
        (True, False)
        >>> conforms(1700000000, "date")
        False
    """
    match TypeTag.parse(tag):
        case TypeTag.STRING | TypeTag.TEXT | TypeTag.CHAR:
            return isinstance(value, str)
        case TypeTag.NUMBER | TypeTag.FLOAT:
            return _is_number(value) and not _is_nan(value)
        case TypeTag.INTEGER:
            return _is_integer(value)
        case TypeTag.BIGINT:
            return isinstance(value, int) and not isinstance(value, bool)
        case TypeTag.BOOLEAN:
            return isinstance(value, bool)
        case TypeTag.ARRAY:
            return isinstance(value, (list, tuple))
        case TypeTag.OBJECT | TypeTag.JSON:
            return isinstance(value, Mapping)
        case TypeTag.DATE:
            return _is_date(value)
        case TypeTag.BLOB:
            return isinstance(value, (bytes, bytearray, memoryview))
        case TypeTag.UUID:
            return isinstance(value, str) and bool(_UUID_RE.fullmatch(value))
        case TypeTag.EMAIL:
            return isinstance(value, str) and bool(_EMAIL_RE.fullmatch(value))
        case TypeTag.URL:
            return _is_url(value)
        case TypeTag.ANY | None:
            return True


__all__ = [
    "conforms",
]
