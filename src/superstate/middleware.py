"""Middleware — ordered interceptors around every mutating operation.

A middleware is any callable taking (event_type, ss), where ss is the live
container. It may call any container operation, including mutating ones;
nested calls simply run to completion before the outer one resumes.

    def logger(event_type, ss):
        if event_type == EventType.AFTER_SET:
            print("now is", ss.now())

    count = superstate(0).use([logger])
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Protocol

from superstate.errors import assert_validity

if TYPE_CHECKING:
    from superstate.core import SuperState

logger = logging.getLogger("superstate.middleware")


class EventType(str, Enum):
    """Lifecycle events, compared equal to their string names."""

    INIT = "init"
    BEFORE_SET = "before:set"
    AFTER_SET = "after:set"
    BEFORE_SKETCH = "before:sketch"
    AFTER_SKETCH = "after:sketch"
    BEFORE_PUBLISH = "before:publish"
    AFTER_PUBLISH = "after:publish"
    BEFORE_DISCARD = "before:discard"
    AFTER_DISCARD = "after:discard"
    BEFORE_CHANGE = "before:change"
    AFTER_CHANGE = "after:change"
    BEFORE_BROADCAST_NOW = "before:broadcast:now"
    AFTER_BROADCAST_NOW = "after:broadcast:now"
    BEFORE_BROADCAST_DRAFT = "before:broadcast:draft"
    AFTER_BROADCAST_DRAFT = "after:broadcast:draft"

    def __str__(self) -> str:
        return self.value


class Middleware(Protocol):
    def __call__(self, event_type: EventType, ss: SuperState) -> None: ...


class MiddlewarePipeline:
    """Registration-ordered middleware list owned by one container."""

    def __init__(self) -> None:
        self._middlewares: list[Middleware] = []

    def add(self, middlewares: Iterable[Middleware], ss: SuperState) -> None:
        """Append middlewares one at a time, sending `init` to each as it joins.

        A middleware sees no lifecycle event before its own `init`, even when
        an earlier one in the same batch mutates the container during init.
        """
        added = list(middlewares)
        for mw in added:
            assert_validity(
                mw,
                callable(mw),
                what=f"A middleware passed to `use()` is not callable: {mw!r}.",
                solutions=[
                    "A middleware is a function taking `(event_type, ss)`.",
                    "Pass a list of middlewares, e.g. `ss.use([persist('key', store)])`.",
                ],
            )
        for mw in added:
            self._middlewares.append(mw)
            mw(EventType.INIT, ss)
        logger.debug("Registered %d middleware(s), %d total", len(added), len(self._middlewares))

    def fire(self, event_type: EventType, ss: SuperState) -> None:
        for mw in list(self._middlewares):
            mw(event_type, ss)

    def __len__(self) -> int:
        return len(self._middlewares)
