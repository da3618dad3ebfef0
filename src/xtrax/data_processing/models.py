"""Data structures and option models for the data processing helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


class FileLoadOptions(BaseModel):
    """Options controlling how data files are read."""

    encoding: str = "utf-8"
    max_size: int | None = Field(DEFAULT_MAX_FILE_SIZE, ge=0)
    cache: bool = True


class TransformOptions(BaseModel):
    """Options for :func:`xtrax.data_processing.transformer.transform_data`."""

    date_fields: list[str] = Field(default_factory=list)
    string_fields: list[str] = Field(default_factory=list)
    normalize_unicode: bool = False
    preserve_original: bool = False


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema violation."""

    instance_path: str
    schema_path: str
    keyword: str
    message: str
    data: Any = None


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of validating data against a JSON Schema."""

    is_valid: bool
    data: T | None = None
    errors: list[ValidationIssue] = field(default_factory=list)


@dataclass(frozen=True)
class LoadMetadata:
    """Details about a loaded file."""

    file_path: str
    load_time_ms: float
    file_size: int


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Loaded data together with its metadata."""

    data: T
    metadata: LoadMetadata
