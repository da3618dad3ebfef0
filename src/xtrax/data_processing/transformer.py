"""Generic transformations for records loaded from JSON data files."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from unidecode import unidecode

from .models import TransformOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")
Record = dict[str, Any]
Transformer = Callable[[Any, str, str], Any]


def parse_date(value: str) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime string.

    A trailing ``Z`` is read as UTC. Returns None for anything unparsable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def transform_dates(data: Mapping[str, Any], date_fields: Iterable[str]) -> Record:
    """
    Convert the named fields from date strings to ``datetime`` objects.

    Empty or unparsable strings are left as they are. The input is not modified.
    """
    transformed = dict(data)
    for field in date_fields:
        value = transformed.get(field)
        if not isinstance(value, str) or not value:
            continue
        parsed = parse_date(value)
        if parsed is None:
            logger.debug("Field '%s' is not a valid date: %r", field, value)
            continue
        transformed[field] = parsed
    return transformed


def transform_dates_in_array(data_array: Iterable[Mapping[str, Any]], date_fields: Iterable[str]) -> list[Record]:
    """Apply :func:`transform_dates` to every record."""
    fields = list(date_fields)
    return [transform_dates(item, fields) for item in data_array]


def normalize_strings(data: Mapping[str, Any], string_fields: Iterable[str]) -> Record:
    """Transliterate the named string fields to ASCII with Unidecode."""
    normalized = dict(data)
    for field in string_fields:
        value = normalized.get(field)
        if isinstance(value, str):
            normalized[field] = unidecode(value)
    return normalized


def normalize_strings_in_array(data_array: Iterable[Mapping[str, Any]], string_fields: Iterable[str]) -> list[Record]:
    """Apply :func:`normalize_strings` to every record."""
    fields = list(string_fields)
    return [normalize_strings(item, fields) for item in data_array]


def deep_transform(data: T, transformer: Transformer, path: str = "") -> T:
    """
    Rebuild a nested structure, passing every mapping value through ``transformer``.

    The transformer receives ``(value, key, path)`` where ``path`` looks like
    ``a.b[0].c``. Containers it returns are transformed in turn.

    Args:
        data: A mapping, list, or scalar.
        transformer: Called for each mapping value.
        path: The path of ``data`` within the root structure.

    Returns:
        A new structure of the same shape; scalars at the root are returned as is.

    """
    if isinstance(data, list):
        return [deep_transform(item, transformer, f"{path}[{index}]") for index, item in enumerate(data)]  # type: ignore[return-value]

    if isinstance(data, Mapping):
        transformed: Record = {}
        for key, value in data.items():
            current_path = f"{path}.{key}" if path else str(key)
            new_value = transformer(value, key, current_path)
            if isinstance(new_value, (Mapping, list)) and new_value:
                transformed[key] = deep_transform(new_value, transformer, current_path)
            else:
                transformed[key] = new_value
        return transformed  # type: ignore[return-value]

    return data


def transform_data(data: Mapping[str, Any], options: TransformOptions | None = None) -> Record:
    """
    Apply the date and Unicode transformations selected by ``options``.

    With ``preserve_original`` the input is deep-copied first, so nested
    values in the result are never shared with it.
    """
    options = options or TransformOptions()
    transformed: Record = copy.deepcopy(dict(data)) if options.preserve_original else dict(data)

    if options.date_fields:
        transformed = transform_dates(transformed, options.date_fields)

    if options.normalize_unicode and options.string_fields:
        transformed = normalize_strings(transformed, options.string_fields)

    return transformed


def transform_data_array(data_array: Iterable[Mapping[str, Any]], options: TransformOptions | None = None) -> list[Record]:
    """Apply :func:`transform_data` to every record."""
    return [transform_data(item, options) for item in data_array]


def extract_unique_values(data_array: Iterable[Mapping[str, Any]], field: str) -> list[Any]:
    """Collect the distinct non-null values of a field, in first-seen order."""
    values: list[Any] = []
    for item in data_array:
        value = item.get(field)
        if value is not None and value not in values:
            values.append(value)
    return values


def group_by_field(data_array: Iterable[Mapping[str, Any]], field: str) -> dict[str, list[Mapping[str, Any]]]:
    """
    Group records by the string value of a field.

    Records where the field is missing or falsy are grouped under ``"undefined"``.
    """
    groups: dict[str, list[Mapping[str, Any]]] = {}
    for item in data_array:
        key = str(item.get(field) or "undefined")
        groups.setdefault(key, []).append(item)
    return groups


def safe_get(obj: Any, path: str, default: T) -> Any | T:  # noqa: ANN401
    """
    Read a dotted path from nested mappings and lists, falling back to ``default``.

    List elements are addressed by their index, e.g. ``"items.0.name"``.
    """
    current = obj
    for key in path.split("."):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            return default
    return default if current is None else current
