"""Compilation of assembled PCRE patterns with the ``regex`` engine."""

from __future__ import annotations

import logging

import regex

logger = logging.getLogger(__name__)

_PYTHON_NAMED_GROUP = regex.compile(r"\(\?P<([^>]+)>")


def convert_named_groups(pattern: str) -> str:
    """Convert Python named groups ``(?P<name>...)`` to PCRE form ``(?<name>...)``."""
    return _PYTHON_NAMED_GROUP.sub(lambda match: f"(?<{match.group(1)}>", pattern)


def anchor(pattern: str) -> str:
    """Anchor a pattern at both ends unless it already is."""
    anchored = pattern if pattern.startswith("^") else "^" + pattern
    return anchored if anchored.endswith("$") else anchored + "$"


class PatternCompiler:
    """
    An explicitly constructed handle on the regex engine.

    Construct one, pass it to whatever needs compiled patterns, and reuse it.
    Compiled patterns are memoised per instance.
    """

    def __init__(self, flags: int = regex.UNICODE, cache_size: int = 512) -> None:
        """
        Initialize the compiler.

        Args:
            flags: Flags applied to every compiled pattern.
            cache_size: How many compiled patterns to keep before the oldest is dropped.

        """
        self.flags = flags
        self.cache_size = cache_size
        self._cache: dict[tuple[str, bool], regex.Pattern[str]] = {}

    def compile(self, pattern: str) -> regex.Pattern[str]:
        """Compile a pattern with fullmatch semantics, like Python's ``re.fullmatch``."""
        return self._compile(pattern, anchored=True)

    def compile_partial(self, pattern: str) -> regex.Pattern[str]:
        """Compile a pattern without anchoring, for searching inside longer text."""
        return self._compile(pattern, anchored=False)

    def clear(self) -> None:
        """Drop all memoised patterns."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return the number of memoised patterns."""
        return len(self._cache)

    def _compile(self, pattern: str, *, anchored: bool) -> regex.Pattern[str]:
        key = (pattern, anchored)
        compiled = self._cache.get(key)
        if compiled is not None:
            return compiled

        source = convert_named_groups(pattern)
        if anchored:
            source = anchor(source)

        try:
            compiled = regex.compile(source, self.flags)
        except regex.error:
            logger.debug("Failed to compile pattern: %s", source)
            raise

        if len(self._cache) >= self.cache_size:
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = compiled
        return compiled
