"""superstate: a reactive value container with drafts, middlewares and extensions."""

from importlib.metadata import version as _version

__version__ = _version("superstate")

from superstate.core import SuperState, superstate
from superstate.broadcast import Broadcaster, Subscription
from superstate.middleware import EventType, Middleware
from superstate.extension import ExtendedSuperState, Extension
from superstate.adapters import persist
from superstate.errors import SuperStateError, panic, assert_validity
# textual NOT auto-imported — opt-in only

__all__ = [
    "SuperState",
    "superstate",
    "Broadcaster",
    "Subscription",
    "EventType",
    "Middleware",
    "ExtendedSuperState",
    "Extension",
    "persist",
    "SuperStateError",
    "panic",
    "assert_validity",
]
