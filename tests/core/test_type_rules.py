"""Tests for datagate.core.type_rules: conforms(value, tag)."""

import math
import uuid
from datetime import date, datetime
from decimal import Decimal
from fractions import Fraction

import pytest

from datagate.core.type_rules import conforms
from datagate.core.types import TypeTag


class TestTextual:
    @pytest.mark.parametrize("tag", ["string", "text", "char"])
    def test_str_conforms(self, tag):
        assert conforms("hello", tag) is True
        assert conforms("", tag) is True

    @pytest.mark.parametrize("value", [1, 1.5, None, b"bytes", ["a"], {"a": 1}])
    def test_non_str_rejected(self, value):
        assert conforms(value, "string") is False


class TestNumeric:
    @pytest.mark.parametrize("tag", ["number", "float"])
    def test_numbers(self, tag):
        assert conforms(1, tag) is True
        assert conforms(1.5, tag) is True
        assert conforms(-0.0, tag) is True
        assert conforms(math.inf, tag) is True
        assert conforms(Fraction(1, 3), tag) is True

    @pytest.mark.parametrize("tag", ["number", "float"])
    def test_nan_rejected(self, tag):
        assert conforms(math.nan, tag) is False

    @pytest.mark.parametrize("tag", ["number", "float", "integer", "bigint"])
    def test_bool_is_not_numeric(self, tag):
        assert conforms(True, tag) is False
        assert conforms(False, tag) is False

    def test_numeric_strings_rejected(self):
        assert conforms("42", "number") is False
        assert conforms("42", "integer") is False

    def test_integer(self):
        assert conforms(5, "integer") is True
        assert conforms(5.0, "integer") is True
        assert conforms(-3, "integer") is True
        assert conforms(2**80, "integer") is True

    def test_integer_rejects_fractions_and_non_finite(self):
        assert conforms(2.5, "integer") is False
        assert conforms(math.inf, "integer") is False
        assert conforms(math.nan, "integer") is False

    def test_bigint(self):
        assert conforms(2**100, "bigint") is True
        assert conforms(7, "bigint") is True
        assert conforms(7.0, "bigint") is False

    @pytest.mark.parametrize("tag", ["number", "float", "integer", "bigint"])
    def test_ints_beyond_float_range(self, tag):
        assert conforms(10**400, tag) is True
        assert conforms(-(10**400), tag) is True

    def test_huge_fractions(self):
        assert conforms(Fraction(10**400, 3), "number") is True
        assert conforms(Fraction(10**400, 3), "integer") is False
        assert conforms(Fraction(10**400, 1), "integer") is True

    def test_decimal_is_not_a_real_number(self):
        assert conforms(Decimal("1.5"), "number") is False


class TestBoolean:
    def test_bool(self):
        assert conforms(True, "boolean") is True
        assert conforms(False, "boolean") is True

    @pytest.mark.parametrize("value", [0, 1, "true", None])
    def test_non_bool(self, value):
        assert conforms(value, "boolean") is False


class TestContainers:
    def test_array(self):
        assert conforms([], "array") is True
        assert conforms([1, 2], "array") is True
        assert conforms((1, 2), "array") is True

    @pytest.mark.parametrize("value", ["abc", {"a": 1}, {1, 2}, b"ab"])
    def test_array_rejects_non_sequences(self, value):
        assert conforms(value, "array") is False

    @pytest.mark.parametrize("tag", ["object", "json"])
    def test_object(self, tag):
        assert conforms({}, tag) is True
        assert conforms({"a": {"b": 1}}, tag) is True

    @pytest.mark.parametrize("tag", ["object", "json"])
    @pytest.mark.parametrize("value", [[], [{"a": 1}], None, "{}", 3])
    def test_object_rejects_sequences_and_scalars(self, tag, value):
        assert conforms(value, tag) is False


class TestDate:
    def test_native_dates(self):
        assert conforms(date(2024, 1, 15), "date") is True
        assert conforms(datetime(2024, 1, 15, 10, 30), "date") is True

    @pytest.mark.parametrize(
        "value",
        ["2024-01-15", "2024-01-15T10:30:00Z", "Jan 15 2024", "15 January 2024 10:30"],
    )
    def test_parseable_strings(self, value):
        assert conforms(value, "date") is True

    @pytest.mark.parametrize("value", ["not a date", "", "2024-13-45"])
    def test_unparseable_strings(self, value):
        assert conforms(value, "date") is False

    @pytest.mark.parametrize("value", [1700000000, 1700000000.5, 0])
    def test_numbers_are_never_dates(self, value):
        assert conforms(value, "date") is False

    def test_known_looseness_bare_day_number_string(self):
        """A bare number in a string parses as a day of the current month and is accepted."""
        assert conforms("10", "date") is True
        assert conforms(10, "date") is False

    def test_known_looseness_weekday_name(self):
        assert conforms("Monday", "date") is True


class TestBlob:
    def test_binary_types(self):
        assert conforms(b"\x00\x01", "blob") is True
        assert conforms(bytearray(b"ab"), "blob") is True
        assert conforms(memoryview(b"ab"), "blob") is True

    def test_str_is_not_blob(self):
        assert conforms("ab", "blob") is False


class TestUuid:
    def test_canonical(self):
        assert conforms(str(uuid.uuid4()), "uuid") is True
        assert conforms("123E4567-E89B-12D3-A456-426614174000", "uuid") is True

    @pytest.mark.parametrize(
        "value",
        [
            "123e4567e89b12d3a456426614174000",
            "123e4567-e89b-12d3-a456-42661417400",
            "123e4567-e89b-12d3-a456-426614174000\n",
            "g23e4567-e89b-12d3-a456-426614174000",
        ],
    )
    def test_malformed(self, value):
        assert conforms(value, "uuid") is False

    def test_uuid_object_is_not_textual(self):
        assert conforms(uuid.uuid4(), "uuid") is False


class TestEmail:
    @pytest.mark.parametrize("value", ["alice@example.com", "a.b+c@mail.example.org"])
    def test_valid(self, value):
        assert conforms(value, "email") is True

    @pytest.mark.parametrize(
        "value",
        ["alice", "alice@example", "al ice@example.com", "@example.com", "a@b@c.com", "alice@example.com\n"],
    )
    def test_invalid(self, value):
        assert conforms(value, "email") is False


class TestUrl:
    @pytest.mark.parametrize(
        "value",
        ["https://example.com", "http://localhost:8080/path?q=1", "ftp://files.example.org/a.txt"],
    )
    def test_valid(self, value):
        assert conforms(value, "url") is True

    @pytest.mark.parametrize("value", ["not a url", "example.com", "", "http://"])
    def test_invalid(self, value):
        assert conforms(value, "url") is False

    def test_non_string(self):
        assert conforms(42, "url") is False


class TestAnyAndUnknown:
    @pytest.mark.parametrize("value", [None, 1, "x", [], {}, object()])
    def test_any_always_conforms(self, value):
        assert conforms(value, "any") is True
        assert conforms(value, TypeTag.ANY) is True

    def test_unknown_tag_conforms(self):
        assert conforms(123, "geometry") is True

    def test_tags_are_case_sensitive(self):
        # "String" is not a known tag, so anything conforms
        assert conforms(123, "String") is True

    def test_unhashable_tag_does_not_raise(self):
        assert conforms(1, ["integer"]) is True

    def test_enum_and_string_tags_agree(self):
        for tag in TypeTag:
            assert conforms("abc", tag) == conforms("abc", tag.value)
