"""Copies handed to mutator functions.

A mutator must never receive the container's own storage, so every value
goes through clone_state() first.
"""

from __future__ import annotations

import copy
from collections.abc import Set
from typing import TypeVar

T = TypeVar("T")


def clone_state(value: T) -> T:
    """Return an independent copy of value, keeping its runtime type.

    Uniqueness collections hold hashable elements, so a copy of the
    collection itself is enough. Everything else is deep-copied.
    """
    if isinstance(value, Set):
        return copy.copy(value)
    return copy.deepcopy(value)
