"""Defines the shared tree shapes used by the variable and regex data files."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, TypeAlias, TypeGuard

VariableNode: TypeAlias = "str | Mapping[str, VariableNode]"
"""A node of a variable tree: either a leaf pattern or a nested branch."""

VariableTree: TypeAlias = Mapping[str, Any]
"""A nested mapping as parsed from variables.json; leaves are usually strings."""

RegexDataTree: TypeAlias = Mapping[str, Any]
"""A nested mapping whose leaves are PCRE patterns containing placeholders."""

FlatVariableMap: TypeAlias = dict[str, str]
"""A single-level mapping from underscore-joined keys to string values."""

DEFAULT_KEY: Final[str] = ""
"""The key that holds a branch's default value, e.g. ``{"page": {"": "\\d+"}}``."""

COMMENT_SUFFIX: Final[str] = "#"
"""Keys ending with this suffix are comments and never reach the flattened output."""


def is_branch(node: object) -> TypeGuard[Mapping[str, Any]]:
    """Return True if the node is a nested branch rather than a leaf."""
    return isinstance(node, Mapping)


def is_comment_key(key: str) -> bool:
    """Return True if the key marks a comment entry."""
    return key.endswith(COMMENT_SUFFIX)


def branch_default(node: object) -> object:
    """
    Unwrap a branch to its default value.

    A branch carrying the empty-string key stands for that key's value. Leaves
    and branches without a default are returned unchanged.

    Args:
        node: A leaf or branch taken from a variable or regex data tree.

    Returns:
        The default value of the branch, or the node itself.

    """
    if is_branch(node) and DEFAULT_KEY in node:
        return node[DEFAULT_KEY]
    return node
