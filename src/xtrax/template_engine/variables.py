"""
Processing of variables.json contents, in preparation for recursive substitution.

- Keys ending in '#' are comments and are stripped.
- Nested dicts are flattened, so {"page": {"": "A", "foo": "B"}} becomes
  {"page": "A", "page_foo": "B"}.
- Every key gets an optional variant, so {"page": "\\d+"} also yields
  {"page_optional": "(?:\\d+ ?)?"}.
- References between variables are resolved with a bounded number of passes.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping

import regex

from xtrax.types import FlatVariableMap, VariableTree, is_branch, is_comment_key

from .models import DEFAULT_MAX_DEPTH, VariableProcessingResult, VariableProcessingStats
from .tokens import TOKEN_PATTERN

logger = logging.getLogger(__name__)

OPTIONAL_SUFFIX = "_optional"


def flatten_variables(tree: VariableTree, parent_key: str = "") -> FlatVariableMap:
    """
    Flatten a nested variable tree into underscore-joined keys.

    Comment keys are skipped together with everything below them. An empty
    key contributes nothing to the composed key, which is how a branch
    supplies its default value. Leaves that are not nested mappings,
    including lists, are stored as their string representation.

    Args:
        tree: The nested variable mapping.
        parent_key: The key prefix accumulated so far.

    Returns:
        A flat mapping; later duplicate keys overwrite earlier ones.

    """
    items: FlatVariableMap = {}
    for key, value in tree.items():
        if is_comment_key(key):
            continue

        new_key = "_".join(part for part in (parent_key, key) if part)

        if is_branch(value):
            items.update(flatten_variables(value, new_key))
        else:
            items[new_key] = _to_str(value)
    return items


def _to_str(value: object) -> str:
    """Render a leaf the way the JSON source would spell it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, list):
        return ",".join("" if item is None else _to_str(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def add_optional_variants(flat: Mapping[str, str]) -> FlatVariableMap:
    """Return a copy of ``flat`` with a ``<key>_optional`` entry for every key."""
    optionals = {f"{key}{OPTIONAL_SUFFIX}": f"(?:{value} ?)?" for key, value in flat.items()}
    return {**flat, **optionals}


def recursive_substitute(template: str, variables: Mapping[str, str], max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    Recursively substitute values in ``template`` from ``variables``.

    For example::

        recursive_substitute("$a $b $c", {"a": "$b", "b": "$c", "c": "foo"})
        # "foo foo foo"

    Names that are missing, or map to an empty string, are left as written.
    Reference cycles are cut off after ``max_depth`` passes and the partially
    resolved string is returned; no exception is raised.
    """

    def _lookup(match: regex.Match[str]) -> str:
        return variables.get(match.group(1)) or match.group(0)

    old_val = template
    for depth in range(max_depth):
        new_val = TOKEN_PATTERN.sub(_lookup, old_val)
        if new_val == old_val:
            logger.debug("Template reached a fixed point after %d pass(es).", depth + 1)
            return new_val
        old_val = new_val

    logger.debug("Stopped substituting after max_depth=%d passes: %s", max_depth, old_val)
    return old_val


def _resolve_all(variables: Mapping[str, str], max_depth: int) -> FlatVariableMap:
    """Resolve every value against the mapping, isolating failures per key."""
    resolved: FlatVariableMap = {}
    for key, value in variables.items():
        try:
            resolved[key] = recursive_substitute(value, variables, max_depth)
        except MemoryError:
            logger.warning("Could not resolve variable '%s'; keeping its raw value: %s", key, value)
            resolved[key] = value
            continue

        unresolved = [name for name in TOKEN_PATTERN.findall(resolved[key]) if variables.get(name)]
        if unresolved:
            logger.warning("Circular reference detected for variable '%s': %s", key, value)
    return resolved


def process_variables(tree: VariableTree, max_depth: int = DEFAULT_MAX_DEPTH) -> FlatVariableMap:
    """
    Process a variable tree into a flat, self-resolved mapping.

    Args:
        tree: The parsed contents of a variables file.
        max_depth: The pass limit for each variable's resolution.

    Returns:
        The flattened variables plus their optional variants, each resolved
        against the others.

    """
    flat = flatten_variables(tree)
    with_optionals = add_optional_variants(flat)
    logger.debug("Flattened %d variable(s); resolving %d entries.", len(flat), len(with_optionals))
    return _resolve_all(with_optionals, max_depth)


def count_variables(tree: VariableTree) -> int:
    """Count the non-comment leaves of a variable tree."""
    count = 0
    for key, value in tree.items():
        if is_comment_key(key):
            continue
        count += count_variables(value) if is_branch(value) else 1
    return count


def process_variables_with_result(tree: VariableTree, max_depth: int = DEFAULT_MAX_DEPTH) -> VariableProcessingResult:
    """Process a variable tree and report counts and timing alongside the result."""
    start = time.perf_counter()
    original_count = count_variables(tree)

    processed = process_variables(tree, max_depth)

    elapsed_ms = (time.perf_counter() - start) * 1000
    processed_count = len(processed)
    return VariableProcessingResult(
        variables=processed,
        stats=VariableProcessingStats(
            original_variable_count=original_count,
            processed_variable_count=processed_count,
            processing_time_ms=elapsed_ms,
            optional_variables_added=processed_count - len(flatten_variables(tree)),
        ),
    )
