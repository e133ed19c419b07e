"""
Structural primitives for plain-data trees.

Trees are built from dicts, lists and scalars. These helpers are the
only places the rest of the package decides what counts as a record,
a sequence, or an equal value.
"""

from copy import deepcopy
from typing import Any


def clone(value: Any) -> Any:
    """
    Return an independent deep copy of a tree.

    Dict and list subclasses (such as fragments carrying merge
    instructions) come back as plain dicts and lists.
    """
    if is_record(value):
        return {key: clone(item) for key, item in value.items()}
    if is_sequence(value):
        return [clone(item) for item in value]
    return deepcopy(value)


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_sequence(value: Any) -> bool:
    return isinstance(value, list)


def values_equal(left: Any, right: Any) -> bool:
    """
    Structural equality for trees.

    Differs from ``==`` in one way: booleans only equal booleans,
    so ``True`` and ``1`` are treated as different values.

    Args:
        left: First tree
        right: Second tree

    Returns:
        True if both trees have the same shape and values
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right

    if is_record(left) and is_record(right):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)

    if is_sequence(left) and is_sequence(right):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))

    if is_record(left) or is_record(right) or is_sequence(left) or is_sequence(right):
        return False

    return left == right
