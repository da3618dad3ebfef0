"""
PCRE pattern helpers.

Assembles citation patterns from regex data, expands ``$edition``
placeholders into alternation groups, and compiles the results.
"""

from .compiler import PatternCompiler, anchor, convert_named_groups
from .regex_utils import (
    BUILTIN_FRAGMENTS,
    builtin_substitutions,
    edition_alternation,
    escape_regex,
    get_pcre_pattern_from_data,
    substitute_edition,
    substitute_editions,
)

__all__ = [
    "BUILTIN_FRAGMENTS",
    "PatternCompiler",
    "anchor",
    "builtin_substitutions",
    "convert_named_groups",
    "edition_alternation",
    "escape_regex",
    "get_pcre_pattern_from_data",
    "substitute_edition",
    "substitute_editions",
]
