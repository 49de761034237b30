"""Dot-path access into nested attribute mappings.

All functions are pure: `upsert` returns a new tree instead of mutating
the one it was given.

Usage:
    tree = {"address": {"city": "Lagos"}}
    path_get(tree, "address.city")          # "Lagos"
    path_has(tree, "address.zip")           # False
    tree = upsert(tree, "address.zip", "100001")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

SEPARATOR = "."

# Values that a path walk treats as "nothing here yet"
_VACANT = (None, "")


def split_path(path: str) -> list[str]:
    """Split a dot-path into its segments.

    Args:
        path: Dot-separated key path, e.g. "profile.address.city".

    Returns:
        List of segments. A path without dots yields a single segment.
    """
    return path.split(SEPARATOR)


def path_has(tree: Mapping[str, Any], path: str) -> bool:
    """Check whether every segment of path resolves to a present value.

    A key holding None counts as absent.

    Args:
        tree: Root mapping to walk.
        path: Dot-separated key path.

    Returns:
        True if the full path resolves, False as soon as a segment is missing.
    """
    node: Any = tree
    for part in split_path(path):
        if not isinstance(node, Mapping) or node.get(part) is None:
            return False
        node = node[part]
    return True


def path_get(tree: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Resolve a dot-path, short-circuiting on the first missing value.

    Args:
        tree: Root mapping to walk.
        path: Dot-separated key path.
        default: Returned when any segment is missing, None, or not a mapping.

    Returns:
        The value at path, or default.
    """
    node: Any = tree
    for part in split_path(path):
        if not isinstance(node, Mapping):
            return default
        node = node.get(part)
        if node is None:
            return default
    return node


def upsert(tree: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a copy of tree with value assigned at path.

    Missing intermediates (absent, None, or the empty placeholder "") are
    created as empty mappings. Mappings along the path are copied; siblings
    off the path are shared with the input.

    Args:
        tree: Root mapping.
        path: Dot-separated key path.
        value: Value to place at the final segment.

    Returns:
        New root mapping.

    Raises:
        TypeError: If an intermediate segment holds a non-mapping value.
    """
    return _upsert(tree, split_path(path), value, [])


def _upsert(
    node: Mapping[str, Any], parts: list[str], value: Any, walked: list[str]
) -> dict[str, Any]:
    head, *rest = parts
    result = dict(node)
    if not rest:
        result[head] = value
        return result

    child = node.get(head)
    walked = [*walked, head]
    if child in _VACANT:
        child = {}
    elif not isinstance(child, Mapping):
        raise TypeError(
            f"Cannot assign below '{SEPARATOR.join(walked)}': "
            f"it holds a {type(child).__name__}, not a mapping"
        )
    result[head] = _upsert(child, rest, value, walked)
    return result
