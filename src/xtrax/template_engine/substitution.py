"""Template string substitution with a variable context."""

import logging
from collections.abc import Mapping

from .models import TemplateContext, TemplateValidation
from .tokens import TOKEN_PATTERN
from .variables import recursive_substitute

logger = logging.getLogger(__name__)


def substitute_template(template: str, context: TemplateContext) -> str:
    """
    Substitute the context's variables into a template string.

    Unresolved references are kept verbatim whatever ``preserve_unresolved``
    says; use :func:`validate_template` beforehand for strict checking.

    Args:
        template: A string containing ``$name`` or ``${name}`` references.
        context: The variables and the pass limit.

    Returns:
        The substituted string.

    """
    return recursive_substitute(template, context.variables, context.max_depth)


def substitute_templates(templates: Mapping[str, str], context: TemplateContext) -> dict[str, str]:
    """Substitute every template in a mapping, keeping the keys."""
    return {key: substitute_template(template, context) for key, template in templates.items()}


def extract_variable_references(template: str) -> list[str]:
    """Return the referenced names in order of appearance, duplicates included."""
    return TOKEN_PATTERN.findall(template)


def validate_template(template: str, variables: Mapping[str, str]) -> TemplateValidation:
    """
    Check that every reference in a template names a known variable.

    Missing names are reported once per occurrence, in order of appearance.
    """
    missing = [name for name in extract_variable_references(template) if name not in variables]
    if missing:
        logger.debug("Template references unknown variable(s): %s", missing)
    return TemplateValidation(is_valid=not missing, missing_variables=missing)
