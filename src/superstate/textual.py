"""Textual integration for superstate. Opt-in — requires textual.

Attach a container to a Textual app or widget: subscribe on mount, dispose
the returned Binding on unmount.

    class Counter(Static):
        def on_mount(self) -> None:
            self._binding = bind_widget(self, count)

        def on_unmount(self) -> None:
            self._binding.dispose()

        def render(self) -> str:
            return str(count.now())

Guards, NoMatches and thread marshalling are handled here, not at callsites.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend bound effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


class Binding:
    """Subscriptions held on behalf of one UI element."""

    __slots__ = ("_subscriptions",)

    def __init__(self, subscriptions):
        self._subscriptions = list(subscriptions)

    @property
    def disposed(self) -> bool:
        return not any(s.active for s in self._subscriptions)

    def dispose(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()


def bind(app, ss, effect, *, target=None) -> Binding:
    """Call effect(value) whenever ss changes, safely bridged to Textual.

    target is "now", "draft" or None for both. Skips effects while the app
    is paused or not running, swallows NoMatches from widget queries and
    marshals calls from other threads via call_from_thread.
    """
    _main = threading.get_ident()

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            effect(value)
        except NoMatches:
            pass

    targets = ("now", "draft") if target is None else (target,)
    return Binding(ss.subscribe(_guarded, t) for t in targets)


def bind_widget(widget, ss, *, target=None) -> Binding:
    """Refresh widget whenever ss changes."""
    return bind(widget.app, ss, lambda _value: widget.refresh(), target=target)
