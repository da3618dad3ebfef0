"""
Template variable engine.

Flattens nested variable trees, derives optional variants, and resolves
chained ``$var`` references with a bounded number of passes.
"""

from .models import TemplateContext, TemplateValidation, VariableProcessingResult, VariableProcessingStats
from .substitution import extract_variable_references, substitute_template, substitute_templates, validate_template
from .variables import (
    add_optional_variants,
    count_variables,
    flatten_variables,
    process_variables,
    process_variables_with_result,
    recursive_substitute,
)

__all__ = [
    "TemplateContext",
    "TemplateValidation",
    "VariableProcessingResult",
    "VariableProcessingStats",
    "add_optional_variants",
    "count_variables",
    "extract_variable_references",
    "flatten_variables",
    "process_variables",
    "process_variables_with_result",
    "recursive_substitute",
    "substitute_template",
    "substitute_templates",
    "validate_template",
]
