"""Helpers for assembling PCRE citation patterns from regex data and editions."""

import logging
from collections.abc import Mapping
from typing import Final

import regex

from xtrax.exceptions import NotAPatternError, PatternPathNotFoundError
from xtrax.template_engine.tokens import contains_token, replace_token
from xtrax.types import RegexDataTree, branch_default, is_branch

logger = logging.getLogger(__name__)

EDITION_TOKEN: Final[str] = "edition"

# re.escape()-compatible set, including the literal space.
_ESCAPE_PATTERN = regex.compile(r"[.*+?^${}()|\[\]\\ ]")

# Built-in placeholders: name -> (path in the regex data, fallback fragment).
BUILTIN_FRAGMENTS: Final[dict[str, tuple[tuple[str, ...], str]]] = {
    "volume": (("volume",), r"(?<volume>\d+)"),
    "page": (("page",), r"(?<page>\d+)"),
    "page_with_commas": (("page", "with_commas"), r"(?<page>\d(?:[\d,]*\d)?)"),
    "page_with_commas_and_suffix": (("page", "with_commas_and_suffix"), r"(?<page>\d(?:[\d,]*\d)?[A-Z]?)"),
    "page_with_letter": (("page", "with_letter"), r"(?<page>\d+[a-zA-Z])"),
    "page_with_periods": (("page", "with_periods"), r"(?<page>\d(?:[\d.]*\d)?)"),
    "page_with_roman_numerals": (
        ("page", "with_roman_numerals"),
        r"(?<page>[cC]?(?:[xX][cC]|[xX][lL]|[lL]?[xX]{1,3})(?:[iI][xX]|[iI][vV]|[vV]?[iI]{0,3})"
        r"|(?:[cC]?[lL]?)(?:[iI][xX]|[iI][vV]|[vV]?[iI]{1,3})"
        r"|(?:[lL][vV]|[cC][vV]|[cC][lL]|[cC][lL][vV]))",
    ),
    "law_section": (("law", "section"), r"(?<section>(?:\d+(?:[.:\-]\d+){0,3})|(?:\d+(?:\((?:[a-zA-Z]{1}|\d{1,2})\))+))"),
    "law_subject": (("law", "subject"), r"(?<subject>[A-Z][.\-'A-Za-z]*(?: [A-Z][.\-'A-Za-z]*| &){,4})"),
    "law_day": (("law", "day"), r"(?<day>\d{1,2}),?"),
    "law_month": (("law", "month"), r"(?<month>[A-Z][a-z]+\.?)"),
    "law_year": (("law", "year"), r"(?<year>1\d{3}|20\d{2})"),
}


def escape_regex(text: str) -> str:
    """
    Escape regex metacharacters the way Python's ``re.escape`` does for them.

    Spaces are escaped too, so an edition like ``"F. 2d"`` becomes ``"F\\.\\ 2d"``.
    """
    return _ESCAPE_PATTERN.sub(lambda match: "\\" + match.group(0), text)


def substitute_edition(pattern: str, edition_name: str) -> str:
    """Insert ``edition_name``, escaped, in place of the ``$edition`` placeholder."""
    return replace_token(pattern, EDITION_TOKEN, escape_regex(edition_name))


def edition_alternation(edition_name: str, variations: Mapping[str, str]) -> str:
    """
    Build a non-capturing group matching an edition or any of its variations.

    The canonical name comes first, then each variation that maps to it, in
    mapping order.
    """
    editions = [edition_name, *(variant for variant, canonical in variations.items() if canonical == edition_name)]
    return "(?:" + "|".join(escape_regex(edition) for edition in editions) + ")"


def substitute_editions(pattern: str, edition_name: str, variations: Mapping[str, str]) -> list[str]:
    """
    Insert edition strings for the given edition into a pattern with an ``$edition`` placeholder.

    For example::

        substitute_editions(r"\\d+ $edition \\d+", "Foo.", {"Foo. Var.": "Foo."})
        # [r"\\d+ (?:Foo\\.|Foo\\.\\ Var\\.) \\d+"]

    Args:
        pattern: The pattern that may reference ``$edition``.
        edition_name: The canonical edition name.
        variations: Maps variant spellings to their canonical edition.

    Returns:
        A one-element list holding the expanded pattern, or the pattern
        unchanged when it has no ``$edition`` placeholder.

    """
    if not contains_token(pattern, EDITION_TOKEN):
        return [pattern]
    return [replace_token(pattern, EDITION_TOKEN, edition_alternation(edition_name, variations))]


def _lookup_node(regex_data: RegexDataTree, parts: tuple[str, ...] | list[str]) -> tuple[bool, object]:
    """Walk the regex data along the given keys; report whether the path exists."""
    current: object = regex_data
    for part in parts:
        if is_branch(current) and part in current:
            current = current[part]
        else:
            return False, None
    return True, current


def builtin_substitutions(regex_data: RegexDataTree) -> dict[str, str]:
    """Resolve each built-in placeholder from the regex data, or its fallback fragment."""
    resolved = {}
    for name, (parts, fallback) in BUILTIN_FRAGMENTS.items():
        found, node = _lookup_node(regex_data, parts)
        value = branch_default(node) if found else None
        if isinstance(value, str) and value:
            resolved[name] = value
        else:
            resolved[name] = fallback
    return resolved


def get_pcre_pattern_from_data(regex_data: RegexDataTree, template_path: str, substitutions: Mapping[str, str] | None = None) -> str:
    """
    Get a pattern from regex data with placeholder substitutions applied.

    The built-in placeholders are replaced first, then the caller's
    substitutions. Each table is applied in a single pass, so a replacement
    value is only expanded further if a later entry targets a token it
    contains.

    Args:
        regex_data: The nested regex data.
        template_path: A dotted path such as ``"law.section"``.
        substitutions: Extra ``name -> replacement`` pairs.

    Returns:
        The expanded pattern.

    Raises:
        PatternPathNotFoundError: If a segment of the path is missing.
        NotAPatternError: If the value at the path is not a string.

    """
    found, node = _lookup_node(regex_data, template_path.split("."))
    if not found:
        raise PatternPathNotFoundError(template_path)

    pattern = branch_default(node)
    if not isinstance(pattern, str):
        raise NotAPatternError(template_path)

    for name, replacement in builtin_substitutions(regex_data).items():
        pattern = replace_token(pattern, name, replacement)

    for name, replacement in (substitutions or {}).items():
        pattern = replace_token(pattern, name, replacement)

    logger.debug("Expanded pattern at '%s': %s", template_path, pattern)
    return pattern
