"""SuperState — a value container with a draft -> publish protocol.

`now` is the committed value. `draft` is an optional pending edit on top
of it. set() writes `now` directly, sketch() writes the draft, publish()
commits the draft into `now` and discard() drops it.

Every mutating call is equality gated: when the new value is structurally
equal to the old one nothing happens, not even middleware events.

    count = superstate(0)
    count.subscribe(lambda v: print("now", v))
    count.subscribe(lambda v: print("draft", v), "draft")

    count.sketch(5)      # draft 5
    count.publish()      # draft None, now 5

All work is synchronous. Subscribers and middlewares run on the caller's
stack before the mutating call returns, and their errors propagate to it.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar, Union

from superstate._clone import clone_state
from superstate._equality import deep_equal
from superstate.broadcast import Broadcaster, Subscriber, Subscription
from superstate.errors import assert_validity
from superstate.extension import Extension, ExtendedSuperState
from superstate.middleware import EventType, Middleware, MiddlewarePipeline

S = TypeVar("S")

SetInput = Union[S, Callable[[S], Union[S, None]]]

TARGETS = ("now", "draft")

_UNSET = object()


class SuperState(Generic[S]):
    """A single piece of state with a committed value and an optional draft."""

    def __init__(self, initial: S) -> None:
        self._now: S = initial
        self._draft: Any = _UNSET
        self._broadcasters: dict[str, Broadcaster] = {target: Broadcaster() for target in TARGETS}
        self._middlewares = MiddlewarePipeline()

    # --- Reads ---

    def now(self) -> S:
        """The committed value."""
        return self._now

    def draft(self) -> S | None:
        """The pending value, or None when there is no draft."""
        return None if self._draft is _UNSET else self._draft

    def has_draft(self) -> bool:
        """Whether a draft is pending. Tells a None draft apart from no draft."""
        return self._draft is not _UNSET

    # --- Writes ---

    def set(self, value: SetInput[S], *, silent: bool = False) -> SuperState[S]:
        """Replace `now`.

        value is either the new value or a function receiving a copy of the
        current `now` and returning the new one (or mutating the copy in
        place and returning None).
        """
        candidate = _resolve(value, self._now)
        if deep_equal(candidate, self._now):
            return self

        self._fire(EventType.BEFORE_SET)
        self._change(candidate)
        self._fire(EventType.AFTER_SET)

        if not silent:
            self._broadcast_now()
        return self

    def sketch(self, value: SetInput[S], *, silent: bool = False) -> SuperState[S]:
        """Write the draft.

        A mutator receives a copy of the current draft, or of `now` when
        there is none. Compared against the previous draft, not `now`.
        """
        base = self._now if self._draft is _UNSET else self._draft
        candidate = _resolve(value, base)
        if self._draft is not _UNSET and deep_equal(candidate, self._draft):
            return self

        self._fire(EventType.BEFORE_SKETCH)
        self._draft = candidate
        self._fire(EventType.AFTER_SKETCH)

        if not silent:
            self._broadcast_draft()
        return self

    def publish(self, *, silent: bool = False) -> SuperState[S]:
        """Commit the draft into `now` and discard it.

        With no draft this is a no-op. A draft equal to `now` is dropped
        without publish events or a `now` broadcast.
        """
        draft = self._draft
        if draft is _UNSET:
            return self

        if deep_equal(draft, self._now):
            return self.discard(silent=silent)

        self._fire(EventType.BEFORE_PUBLISH)
        self._change(draft)
        self._fire(EventType.AFTER_PUBLISH)

        self.discard(silent=silent)

        if not silent:
            self._broadcast_now()
        return self

    def discard(self, *, silent: bool = False) -> SuperState[S]:
        """Drop the draft without committing it. No-op when there is none."""
        if self._draft is _UNSET:
            return self

        self._fire(EventType.BEFORE_DISCARD)
        self._draft = _UNSET
        self._fire(EventType.AFTER_DISCARD)

        if not silent:
            self._broadcast_draft()
        return self

    # --- Registration ---

    def subscribe(self, callback: Subscriber, target: str = "now") -> Subscription:
        """Call callback with the new value whenever `target` changes.

        Returns a Subscription; call it to unsubscribe this registration.
        """
        assert_validity(
            callback,
            callable(callback),
            what=f"`subscribe()` expects a callable, got {callback!r}.",
            solutions=["Pass a function taking the new value, e.g. `ss.subscribe(print)`."],
        )
        assert_validity(
            target,
            target in TARGETS,
            what=f"`{target}` is not a subscription target.",
            solutions=["Use `'now'` (the default) or `'draft'`."],
            intelligence={"target": target, "valid": list(TARGETS)},
        )
        return self._broadcasters[target].subscribe(callback)

    def unsubscribe_all(self) -> None:
        """Remove every `now` and `draft` subscriber."""
        for broadcaster in self._broadcasters.values():
            broadcaster.clear()

    def use(self, middlewares: Iterable[Middleware]) -> SuperState[S]:
        """Append middlewares. Each new one receives an `init` event right away."""
        self._middlewares.add(middlewares, self)
        return self

    def extend(self, extensions: Mapping[str, Extension]) -> ExtendedSuperState[S]:
        """Return a handle exposing these extensions plus every base operation."""
        return ExtendedSuperState(self, extensions)

    # --- Internals ---

    def _change(self, value: S) -> None:
        self._fire(EventType.BEFORE_CHANGE)
        self._now = value
        self._fire(EventType.AFTER_CHANGE)

    def _broadcast_now(self) -> None:
        self._fire(EventType.BEFORE_BROADCAST_NOW)
        self._broadcasters["now"].emit(self._now)
        self._fire(EventType.AFTER_BROADCAST_NOW)

    def _broadcast_draft(self) -> None:
        self._fire(EventType.BEFORE_BROADCAST_DRAFT)
        self._broadcasters["draft"].emit(self.draft())
        self._fire(EventType.AFTER_BROADCAST_DRAFT)

    def _fire(self, event_type: EventType) -> None:
        self._middlewares.fire(event_type, self)

    # A container is a handle, not data: values that nest one keep sharing it.
    def __copy__(self) -> SuperState[S]:
        return self

    def __deepcopy__(self, memo: dict) -> SuperState[S]:
        return self

    def __repr__(self) -> str:
        if self._draft is _UNSET:
            return f"SuperState({self._now!r})"
        return f"SuperState({self._now!r}, draft={self._draft!r})"


def superstate(
    initial: S, extensions: Mapping[str, Extension] | None = None
) -> SuperState[S] | ExtendedSuperState[S]:
    """Create a container holding initial.

    Usage:
        count = superstate(0)
        count.set(lambda prev: prev + 1)
        count.now()  # 1

        todos = superstate([], {"add": lambda ss, t: ss.set(lambda prev: prev + [t])})
        todos.add("milk")
    """
    ss = SuperState(initial)
    if extensions:
        return ss.extend(extensions)
    return ss


def _resolve(value: Any, base: Any) -> Any:
    if not callable(value):
        return value
    clone = clone_state(base)
    result = value(clone)
    return clone if result is None else result
