"""Data structures for the template engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_DEPTH = 100


class TemplateContext(BaseModel):
    """
    Variables and options used to substitute a template string.

    A ``max_depth`` of 0 or None selects the default of 100 passes.
    """

    variables: dict[str, str] = Field(default_factory=dict)
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1)
    # Unresolved tokens are always preserved; the flag is carried for callers only.
    preserve_unresolved: bool = True

    @field_validator("max_depth", mode="before")
    @classmethod
    def default_unset_depth(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat 0 and None as an unset depth."""
        if v is None or (v == 0 and not isinstance(v, bool)):
            return DEFAULT_MAX_DEPTH
        return v


@dataclass(frozen=True)
class TemplateValidation:
    """Outcome of checking a template's references against a variable mapping."""

    is_valid: bool
    missing_variables: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VariableProcessingStats:
    """Counters collected while processing a variable tree."""

    original_variable_count: int
    processed_variable_count: int
    processing_time_ms: float
    optional_variables_added: int


@dataclass(frozen=True)
class VariableProcessingResult:
    """Resolved variables together with processing statistics."""

    variables: dict[str, str]
    stats: VariableProcessingStats
