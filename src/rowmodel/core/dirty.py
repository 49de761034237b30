"""Dirty-set computation against a snapshot.

Usage:
    original = snapshot(attributes)
    attributes["age"] = 11
    diff(attributes, original)  # {"age": 11}
"""

from __future__ import annotations

import copy as cp
from collections.abc import Mapping
from typing import Any


def differs(old: Any, new: Any) -> bool:
    """Strict value comparison.

    A change of type counts as a change even when the values compare equal,
    so 1 -> True and 1 -> 1.0 are both reported. Mappings, lists and tuples
    are compared element by element with the same rule.

    Args:
        old: Snapshot value.
        new: Current value.

    Returns:
        True if new should be considered modified.
    """
    if type(old) is not type(new):
        return True
    if isinstance(old, Mapping):
        return old.keys() != new.keys() or any(differs(old[key], new[key]) for key in old)
    if isinstance(old, list | tuple):
        return len(old) != len(new) or any(differs(a, b) for a, b in zip(old, new))
    return bool(old != new)


def diff(current: Mapping[str, Any], original: Mapping[str, Any]) -> dict[str, Any]:
    """Compute the dirty set of current relative to original.

    Args:
        current: Live attribute mapping.
        original: Snapshot taken at the last synchronization.

    Returns:
        Keys of current that are new or changed, in current's order.
    """
    return {
        key: value
        for key, value in current.items()
        if key not in original or differs(original[key], value)
    }


def snapshot(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-copy attributes so later nested mutation cannot leak into the snapshot."""
    return cp.deepcopy(dict(attributes))
