"""Subscriber lists and synchronous fan-out.

Each container owns two Broadcasters, one for `now` and one for `draft`.
Delivery runs over a snapshot of the list, so subscriptions removed or
added while a broadcast is in progress only take effect on the next one.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]


class Subscription:
    """Capability token for one registration. Call it to unsubscribe."""

    __slots__ = ("_broadcaster", "callback")

    def __init__(self, broadcaster: Broadcaster, callback: Subscriber) -> None:
        self._broadcaster: Broadcaster | None = broadcaster
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._broadcaster is not None and self._broadcaster._owns(self)

    def dispose(self) -> None:
        """Remove this registration. Safe to call more than once."""
        if self._broadcaster is not None:
            self._broadcaster._remove(self)
            self._broadcaster = None

    def __call__(self) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"Subscription({name}, {state})"


class Broadcaster(Generic[T]):
    """Ordered subscriber list for one target."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(self, callback: Subscriber[T]) -> Subscription:
        """Append callback. Returns the token that removes exactly this registration."""
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, value: T) -> None:
        """Call every subscriber with value, in registration order."""
        for subscription in list(self._subscriptions):
            subscription.callback(value)

    def clear(self) -> None:
        self._subscriptions = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def _owns(self, subscription: Subscription) -> bool:
        return any(s is subscription for s in self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        # by identity: the same callback may be registered twice
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]
