"""Merge helpers for table state updates.

State updates are deep merges where nested mappings combine key by key while
list values are replaced wholesale. This is what lets a caller write
``{"grid_options": {"pager_config": {"page_sizes": [5, 10]}}}`` and get exactly
``[5, 10]`` back instead of a concatenation with the previous sizes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def clone_tree(value: Any) -> Any:
    """Return a structural copy of ``value``.

    Mappings become fresh ``dict`` objects and lists/tuples fresh ``list``
    objects. Elements of a list are shared, not copied, so rows keep their
    identity and type; every other leaf (functions, models, strings...) is
    shared as well.
    """
    if isinstance(value, Mapping):
        return {key: clone_tree(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def merge_with_array_override(
    source: Mapping[str, Any] | None,
    target: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Deep-merge ``source`` over ``target`` with array-override semantics.

    Args:
        source: The winning mapping (usually a partial update).
        target: The mapping providing the values ``source`` does not set.

    Returns:
        A new ``dict``; neither input is mutated.

    Behavior:
        • Keys of *target* missing from *source* are kept.
        • ``None`` values in *source* are skipped (the target value stays).
        • Mapping over mapping → merged recursively.
        • List/tuple in *source* → replaces the target value wholesale.
        • Anything else in *source* → replaces the target value.

    Examples:
        >>> merge_with_array_override({"a": {"b": 1}}, {"a": {"c": 2}})
        {'a': {'c': 2, 'b': 1}}
        >>> merge_with_array_override({"sizes": [5]}, {"sizes": [10, 20]})
        {'sizes': [5]}
        >>> merge_with_array_override({"x": None}, {"x": 1})
        {'x': 1}
    """
    merged: dict[str, Any] = clone_tree(target) if target else {}
    if not source:
        return merged

    for key, value in source.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_with_array_override(value, current)
        else:
            merged[key] = clone_tree(value)

    return merged


__all__ = ["clone_tree", "merge_with_array_override"]
