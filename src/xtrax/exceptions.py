"""Exceptions raised by xtrax."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xtrax.data_processing.models import ValidationIssue


class XtraxError(Exception):
    """Base class for all xtrax errors."""


class PatternPathNotFoundError(XtraxError, KeyError):
    """Raised when a dotted template path does not exist in the regex data."""

    def __init__(self, path: str) -> None:
        """
        Initialize the error with the missing path.

        Args:
            path: The dotted path that could not be resolved.

        """
        self.path = path
        super().__init__(f"Template path '{path}' not found in regex data")

    def __str__(self) -> str:
        """Return the plain message rather than KeyError's quoted repr."""
        return str(self.args[0])


class NotAPatternError(XtraxError, TypeError):
    """Raised when the value found at a template path is not a string pattern."""

    def __init__(self, path: str) -> None:
        """
        Initialize the error with the offending path.

        Args:
            path: The dotted path whose value is not a string.

        """
        self.path = path
        super().__init__(f"Template at '{path}' is not a string pattern")


class DataLoadError(XtraxError, OSError):
    """Raised when a data file cannot be read or parsed."""


class SchemaLoadError(DataLoadError):
    """Raised when a JSON Schema file cannot be read or parsed."""


class DataValidationError(XtraxError, ValueError):
    """Raised when loaded data does not conform to its JSON Schema."""

    def __init__(self, errors: list[ValidationIssue]) -> None:
        """
        Initialize the error with the collected validation issues.

        Args:
            errors: The issues reported by the schema validator.

        """
        self.errors = errors
        details = ", ".join(f"{error.instance_path}: {error.message}" for error in errors)
        super().__init__(f"Validation failed: {details}")
