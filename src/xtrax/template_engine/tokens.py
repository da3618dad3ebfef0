"""Token grammar shared by the template engine and the PCRE helpers."""

from __future__ import annotations

from functools import lru_cache

import regex

# A reference is $name or ${name}; the braces are optional on either side.
TOKEN_PATTERN: regex.Pattern[str] = regex.compile(r"\$\{?(\w+)\}?", regex.ASCII)


@lru_cache(maxsize=256)
def named_token_pattern(name: str) -> regex.Pattern[str]:
    """
    Build a pattern matching only the ``$name`` / ``${name}`` token for one name.

    The bare form must not run on into further word characters, so ``$page``
    does not match the start of ``$page_with_commas``.

    Args:
        name: The variable name to match.

    Returns:
        A compiled pattern for that single token.

    """
    return regex.compile(rf"\$\{{?{regex.escape(name)}(?!\w)\}}?", regex.ASCII)


def contains_token(template: str, name: str) -> bool:
    """Return True if the template references the given name."""
    return named_token_pattern(name).search(template) is not None


def replace_token(template: str, name: str, replacement: str) -> str:
    """
    Replace every ``$name`` / ``${name}`` token with a literal replacement.

    The replacement is inserted verbatim; backslashes and group references in
    it are not interpreted.
    """
    return named_token_pattern(name).sub(lambda _match: replacement, template)
