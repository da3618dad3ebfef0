"""JSON Schema validation, delegated to the ``jsonschema`` library."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from jsonschema.exceptions import ValidationError as JSONSchemaValidationError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for

from xtrax.exceptions import SchemaLoadError

from .models import ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)


def load_schema(schema_path: str | Path) -> dict[str, Any]:
    """
    Load a JSON Schema document from a file.

    Raises:
        SchemaLoadError: If the file cannot be read or is not valid JSON.

    """
    path = Path(schema_path)
    try:
        with path.open(encoding="utf-8") as f:
            schema = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Failed to load schema from {schema_path}: {e}"
        raise SchemaLoadError(msg) from e
    logger.debug("Loaded schema from %s", path)
    return schema


def create_validator_from_schema(schema: dict[str, Any]) -> Validator:
    """
    Create a validator for a schema object.

    The draft is chosen from the schema's ``$schema`` keyword, defaulting to
    the latest one supported by ``jsonschema``.

    Raises:
        jsonschema.exceptions.SchemaError: If the schema itself is invalid.

    """
    validator_class = validator_for(schema)
    validator_class.check_schema(schema)
    return validator_class(schema)


def create_validator(schema_path: str | Path) -> Validator:
    """Create a validator from a schema file."""
    return create_validator_from_schema(load_schema(schema_path))


def _json_pointer(parts: Iterable[Any]) -> str:
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts)


def _to_issue(error: JSONSchemaValidationError) -> ValidationIssue:
    return ValidationIssue(
        instance_path=_json_pointer(error.absolute_path),
        schema_path="#" + _json_pointer(error.absolute_schema_path),
        keyword=str(error.validator),
        message=error.message or "Validation error",
        data=error.instance,
    )


def validate_data(validator: Validator, data: Any) -> ValidationResult[Any]:  # noqa: ANN401
    """
    Validate data, collecting every error rather than stopping at the first.

    Args:
        validator: A validator returned by :func:`create_validator`.
        data: The parsed JSON data.

    Returns:
        A result holding the data when valid, or the list of issues.

    """
    errors = sorted(validator.iter_errors(data), key=lambda error: [str(part) for part in error.absolute_path])
    if not errors:
        return ValidationResult(is_valid=True, data=data, errors=[])
    return ValidationResult(is_valid=False, data=None, errors=[_to_issue(error) for error in errors])


def validate_data_with_schema(data: Any, schema_path: str | Path) -> ValidationResult[Any]:  # noqa: ANN401
    """Validate data against the schema stored in a file."""
    return validate_data(create_validator(schema_path), data)


def validate_data_array(validator: Validator, data_array: Sequence[Any]) -> ValidationResult[list[Any]]:
    """
    Validate each item of a list against the same schema.

    Issue paths are prefixed with the item's index, e.g. ``[2]/name``.
    """
    validated: list[Any] = []
    all_errors: list[ValidationIssue] = []
    failed = 0

    for index, item in enumerate(data_array):
        result = validate_data(validator, item)
        if result.is_valid:
            validated.append(result.data)
            continue
        failed += 1
        all_errors.extend(
            ValidationIssue(
                instance_path=f"[{index}]{error.instance_path}",
                schema_path=error.schema_path,
                keyword=error.keyword,
                message=error.message,
                data=error.data,
            )
            for error in result.errors
        )

    if all_errors:
        logger.debug("%d of %d item(s) failed validation.", failed, len(data_array))
        return ValidationResult(is_valid=False, data=None, errors=all_errors)
    return ValidationResult(is_valid=True, data=validated, errors=[])


class SchemaValidator:
    """A reusable validator that loads its schema file on first use."""

    def __init__(self, schema_path: str | Path) -> None:
        """
        Initialize the validator.

        Args:
            schema_path: Path to the JSON Schema file.

        """
        self.schema_path = Path(schema_path)
        self._validator: Validator | None = None

    @property
    def validator(self) -> Validator:
        """The compiled validator, created on first access."""
        if self._validator is None:
            self._validator = create_validator(self.schema_path)
        return self._validator

    def validate(self, data: Any) -> ValidationResult[Any]:  # noqa: ANN401
        """Validate a single document."""
        return validate_data(self.validator, data)

    def validate_array(self, data_array: Sequence[Any]) -> ValidationResult[list[Any]]:
        """Validate every item of a list."""
        return validate_data_array(self.validator, data_array)
