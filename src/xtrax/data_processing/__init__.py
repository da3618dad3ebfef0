"""
JSON data processing helpers.

File loading with caching, JSON Schema validation, and record
transformations such as date parsing and Unicode transliteration.
"""

from .file_loader import (
    JSONFileCache,
    clear_file_cache,
    get_cache_stats,
    load_data_with_schema,
    load_json_file,
    load_json_file_with_cache,
    load_json_file_with_metadata,
    load_json_files,
)
from .json_validator import (
    SchemaValidator,
    create_validator,
    create_validator_from_schema,
    load_schema,
    validate_data,
    validate_data_array,
    validate_data_with_schema,
)
from .models import FileLoadOptions, LoadMetadata, LoadResult, TransformOptions, ValidationIssue, ValidationResult
from .transformer import (
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

__all__ = [
    "FileLoadOptions",
    "JSONFileCache",
    "LoadMetadata",
    "LoadResult",
    "SchemaValidator",
    "TransformOptions",
    "ValidationIssue",
    "ValidationResult",
    "clear_file_cache",
    "create_validator",
    "create_validator_from_schema",
    "deep_transform",
    "extract_unique_values",
    "get_cache_stats",
    "group_by_field",
    "load_data_with_schema",
    "load_json_file",
    "load_json_file_with_cache",
    "load_json_file_with_metadata",
    "load_json_files",
    "load_schema",
    "normalize_strings",
    "normalize_strings_in_array",
    "parse_date",
    "safe_get",
    "transform_data",
    "transform_data_array",
    "transform_dates",
    "transform_dates_in_array",
    "validate_data",
    "validate_data_array",
    "validate_data_with_schema",
]
