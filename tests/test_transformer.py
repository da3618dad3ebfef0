"""Tests for the record transformation helpers."""

import unittest
from datetime import datetime, timezone

from xtrax.data_processing import (
    TransformOptions,
    deep_transform,
    extract_unique_values,
    group_by_field,
    normalize_strings,
    normalize_strings_in_array,
    parse_date,
    safe_get,
    transform_data,
    transform_data_array,
    transform_dates,
    transform_dates_in_array,
)
from xtrax.template_engine import TemplateContext, substitute_template


class TestTransformDates(unittest.TestCase):
    """Test suite for date field conversion."""

    def test_converts_iso_datetime_with_z(self) -> None:
        """1. Success: A UTC timestamp becomes an aware datetime."""
        result = transform_dates({"d": "2020-01-01T12:00:00Z"}, ["d"])
        assert result["d"] == datetime(2020, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_converts_plain_date(self) -> None:
        """2. Date Only: A bare date parses to midnight."""
        result = transform_dates({"start": "1875-06-01"}, ["start"])
        assert result["start"] == datetime(1875, 6, 1)

    def test_keeps_invalid_and_empty_values(self) -> None:
        """3. Invalid: Unparsable or empty strings are left unchanged."""
        result = transform_dates({"d": "invalid-date", "e": "", "n": 5}, ["d", "e", "n", "missing"])
        assert result == {"d": "invalid-date", "e": "", "n": 5}

    def test_does_not_mutate_input(self) -> None:
        """4. Immutability: The input mapping is untouched."""
        data = {"d": "2020-01-01"}
        transform_dates(data, ["d"])
        assert data == {"d": "2020-01-01"}

    def test_array_variant(self) -> None:
        """5. Arrays: Each record is transformed."""
        result = transform_dates_in_array([{"d": "2020-01-01"}, {"d": "bad"}], iter(["d"]))
        assert isinstance(result[0]["d"], datetime)
        assert result[1]["d"] == "bad"


def test_parse_date_rejects_garbage() -> None:
    """parse_date returns None for non-dates."""
    assert parse_date("not a date") is None
    assert parse_date("2021-02-30") is None


def test_normalize_strings_transliterates() -> None:
    """Unicode strings are transliterated to ASCII."""
    result = normalize_strings({"name": "Cour de cassation, 1re ch. civ. — café", "n": 1}, ["name", "n"])
    assert result["name"] == "Cour de cassation, 1re ch. civ. -- cafe"
    assert result["n"] == 1


def test_normalize_strings_in_array() -> None:
    """Each record's fields are transliterated."""
    result = normalize_strings_in_array([{"s": "Éd."}, {"s": "München"}], ["s"])
    assert [item["s"] for item in result] == ["Ed.", "Munchen"]


class TestDeepTransform(unittest.TestCase):
    """Test suite for recursive transformation."""

    def test_nested_mapping(self) -> None:
        """1. Mappings: Nested values are passed through the transformer."""
        result = deep_transform({"a": {"b": 1}}, lambda v, _k, _p: v + 1 if isinstance(v, int) else v)
        assert result == {"a": {"b": 2}}

    def test_arrays(self) -> None:
        """2. Arrays: Records inside lists are transformed."""
        data = [{"a": 1}, {"a": 2}]
        result = deep_transform(data, lambda v, _k, _p: v * 2 if isinstance(v, int) else v)
        assert result == [{"a": 2}, {"a": 4}]
        assert data == [{"a": 1}, {"a": 2}]

    def test_paths(self) -> None:
        """3. Paths: The transformer sees dotted paths with list indices."""
        seen = []

        def record(value: object, key: str, path: str) -> object:
            seen.append(path)
            return value

        deep_transform({"a": [{"b": 1}], "c": 2}, record)
        assert seen == ["a", "a[0].b", "c"]

    def test_scalar_root(self) -> None:
        """4. Scalars: A scalar root is returned as is."""
        assert deep_transform(5, lambda v, _k, _p: v * 10) == 5


class TestTransformData(unittest.TestCase):
    """Test suite for option-driven transformation."""

    def test_dates_and_strings(self) -> None:
        """1. Options: Date fields are parsed and strings normalized on request."""
        options = TransformOptions(date_fields=["d"], string_fields=["s"], normalize_unicode=True)
        result = transform_data({"d": "2020-01-01", "s": "naïve"}, options)
        assert isinstance(result["d"], datetime)
        assert result["s"] == "naive"

    def test_strings_untouched_without_flag(self) -> None:
        """2. Flags: String fields are left alone unless normalize_unicode is set."""
        result = transform_data({"s": "naïve"}, TransformOptions(string_fields=["s"]))
        assert result["s"] == "naïve"

    def test_preserve_original_deep_copies(self) -> None:
        """3. Preserve: Nested values are not shared with the input."""
        data = {"meta": {"tags": ["a"]}}
        result = transform_data(data, TransformOptions(preserve_original=True))
        result["meta"]["tags"].append("b")
        assert data == {"meta": {"tags": ["a"]}}

    def test_default_options(self) -> None:
        """4. Defaults: Without options the data passes through."""
        assert transform_data({"x": "2020-01-01"}) == {"x": "2020-01-01"}

    def test_array_variant(self) -> None:
        """5. Arrays: Every record is transformed with the same options."""
        result = transform_data_array([{"d": "2020-01-01"}, {"d": "2021-01-01"}], TransformOptions(date_fields=["d"]))
        assert [item["d"].year for item in result] == [2020, 2021]

    def test_template_integration(self) -> None:
        """6. Integration: Transformed data can feed template substitution."""
        transformed = transform_data({"date": "2020-01-01", "name": "test"}, TransformOptions(date_fields=["date"]))
        context = TemplateContext(variables={"date": transformed["date"].date().isoformat(), "name": transformed["name"]})
        assert substitute_template("Date: ${date}, Name: ${name}", context) == "Date: 2020-01-01, Name: test"


def test_extract_unique_values() -> None:
    """Distinct values are returned in first-seen order."""
    assert extract_unique_values([{"x": 1}, {"x": 2}, {"x": 1}], "x") == [1, 2]


def test_extract_unique_values_skips_missing_and_none() -> None:
    """Missing fields and None values are ignored."""
    assert extract_unique_values([{}, {"x": None}, {}], "x") == []


def test_extract_unique_values_handles_unhashable() -> None:
    """List values are compared by equality."""
    assert extract_unique_values([{"x": [1]}, {"x": [1]}, {"x": [2]}], "x") == [[1], [2]]


def test_group_by_field() -> None:
    """Records are grouped by the field's string value."""
    grouped = group_by_field([{"x": "a"}, {"x": "b"}, {"x": "a"}], "x")
    assert len(grouped["a"]) == 2
    assert len(grouped["b"]) == 1


def test_group_by_field_undefined() -> None:
    """Missing or falsy values fall into the 'undefined' group."""
    grouped = group_by_field([{}, {"missing": ""}], "missing")
    assert list(grouped) == ["undefined"]
    assert len(grouped["undefined"]) == 2


def test_safe_get() -> None:
    """Dotted paths read nested values, with a default for anything missing."""
    obj = {"a": {"b": 2, "none": None}, "items": [{"name": "first"}]}
    assert safe_get(obj, "a.b", 0) == 2
    assert safe_get(obj, "a.c", 42) == 42
    assert safe_get(obj, "a.none", "fallback") == "fallback"
    assert safe_get(obj, "items.0.name", None) == "first"
    assert safe_get(obj, "items.5.name", "none") == "none"
    assert safe_get({}, "missing.path", "default") == "default"
