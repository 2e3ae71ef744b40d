"""Structural equality used to gate broadcasts.

Cyclic values are not supported.
"""

from __future__ import annotations

from collections.abc import Mapping, Set


def deep_equal(a: object, b: object) -> bool:
    """Compare two values recursively.

    Mappings, lists, tuples and sets must be of the same kind on both sides
    to be equal. bool and int are told apart. Anything else falls back to ==.
    """
    if a is b:
        return True

    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b

    if isinstance(a, Mapping):
        if not isinstance(b, Mapping) or len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b or not deep_equal(value, b[key]):
                return False
        return True

    if isinstance(a, (list, tuple)):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if isinstance(a, Set):
        return isinstance(b, Set) and a == b

    if isinstance(b, (Mapping, list, tuple, Set)):
        return False

    if isinstance(a, float) and isinstance(b, float) and a != a and b != b:
        # NaN
        return True

    return a == b
