"""Tests for template substitution and reference validation."""

import unittest

import pytest
from pydantic import ValidationError

from xtrax.template_engine import (
    TemplateContext,
    TemplateValidation,
    extract_variable_references,
    substitute_template,
    substitute_templates,
    validate_template,
)
from xtrax.template_engine.tokens import contains_token, replace_token


class TestSubstituteTemplate(unittest.TestCase):
    """Test suite for context-driven substitution."""

    def test_substitute_template(self) -> None:
        """1. Success: Variables from the context are substituted."""
        context = TemplateContext(variables={"name": "World"})
        assert substitute_template("Hello ${name}!", context) == "Hello World!"

    def test_substitute_templates_keeps_keys(self) -> None:
        """2. Bulk: Every value is substituted and the keys are kept."""
        context = TemplateContext(variables={"foo": "bar"})
        result = substitute_templates({"a": "x${foo}y", "b": "${foo}"}, context)
        assert result == {"a": "xbary", "b": "bar"}

    def test_unresolved_preserved_regardless_of_flag(self) -> None:
        """3. Preservation: Unknown tokens stay even with preserve_unresolved=False."""
        context = TemplateContext(variables={}, preserve_unresolved=False)
        assert substitute_template("keep $this", context) == "keep $this"

    def test_context_max_depth_is_honoured(self) -> None:
        """4. Depth: The context's max_depth bounds the passes."""
        context = TemplateContext(variables={"a": "$b", "b": "$c", "c": "end"}, max_depth=1)
        assert substitute_template("$a", context) == "$b"

    def test_context_defaults(self) -> None:
        """5. Defaults: max_depth is 100 and preserve_unresolved is True."""
        context = TemplateContext()
        assert context.max_depth == 100
        assert context.preserve_unresolved is True
        assert context.variables == {}

    def test_context_rejects_negative_depth(self) -> None:
        """6. Validation: A negative max_depth is rejected."""
        with pytest.raises(ValidationError):
            TemplateContext(variables={}, max_depth=-1)

    def test_context_zero_depth_means_default(self) -> None:
        """7. Unset Depth: max_depth of 0 or None falls back to 100 passes."""
        assert TemplateContext(variables={}, max_depth=0).max_depth == 100
        assert TemplateContext(variables={}, max_depth=None).max_depth == 100
        context = TemplateContext(variables={"a": "$b", "b": "done"}, max_depth=0)
        assert substitute_template("$a", context) == "done"


def test_extract_variable_references_in_order() -> None:
    """References are returned in order of appearance."""
    assert extract_variable_references("Hello ${name}, welcome to ${place}!") == ["name", "place"]


def test_extract_variable_references_keeps_duplicates() -> None:
    """Repeated references are not de-duplicated."""
    assert extract_variable_references("$a ${b} $a") == ["a", "b", "a"]


def test_extract_variable_references_none() -> None:
    """A template without references yields an empty list."""
    assert extract_variable_references("no vars here") == []


def test_validate_template_reports_missing() -> None:
    """Missing variables are reported and the template is invalid."""
    result = validate_template("Hi ${foo} and ${bar}", {"foo": "x"})
    assert result == TemplateValidation(is_valid=False, missing_variables=["bar"])


def test_validate_template_all_present() -> None:
    """A template whose references all exist is valid."""
    result = validate_template("Hi ${foo}", {"foo": "bar"})
    assert result.is_valid
    assert result.missing_variables == []


def test_validate_template_keeps_duplicate_missing_names() -> None:
    """A missing name is listed once per occurrence."""
    result = validate_template("$x $x", {})
    assert result.missing_variables == ["x", "x"]


def test_validate_template_counts_empty_values_as_present() -> None:
    """Presence is a key check; empty values still count as present."""
    assert validate_template("$blank", {"blank": ""}).is_valid


@pytest.mark.parametrize(
    ("template", "expected"),
    [
        ("$edition", True),
        ("${edition}", True),
        ("x $edition y", True),
        ("$editions", False),
        ("$edition_optional", False),
        ("edition", False),
    ],
)
def test_contains_token(template: str, expected: bool) -> None:
    """Only whole references to the name are detected."""
    assert contains_token(template, "edition") is expected


def test_replace_token_inserts_replacement_literally() -> None:
    """Backslashes and group references in the replacement are kept as written."""
    assert replace_token(r"$page \1", "page", r"(?<page>\d+)\g<0>") == r"(?<page>\d+)\g<0> \1"


def test_replace_token_leaves_longer_names_alone() -> None:
    """Replacing $page does not touch $page_with_commas."""
    assert replace_token("$page $page_with_commas ${page}", "page", "P") == "P $page_with_commas P"
