"""Extensions — named operations layered on top of a container.

    count = superstate(5).extend({
        "add": lambda ss, n: ss.set(lambda prev: prev + n),
        "doubled": lambda ss: ss.now() * 2,
    })
    count.add(10)
    count.doubled()  # 30

Whatever the extension returns is handed back to the caller. It is never
applied as new state; extensions call set/sketch/publish themselves.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, Mapping, TypeVar

from superstate.errors import assert_validity

if TYPE_CHECKING:
    from superstate.core import SuperState

S = TypeVar("S")

Extension = Callable[..., Any]

logger = logging.getLogger("superstate.extension")

BASE_OPERATIONS = frozenset({
    "now",
    "draft",
    "has_draft",
    "set",
    "sketch",
    "publish",
    "discard",
    "subscribe",
    "unsubscribe_all",
    "use",
    "extend",
    "base",
})


class ExtendedSuperState(Generic[S]):
    """A container handle with extra named operations.

    Base operations are forwarded to the same live container, so state,
    subscribers and middlewares are shared with the original handle.
    """

    def __init__(self, ss: SuperState[S], extensions: Mapping[str, Extension]) -> None:
        self._ss = ss
        self._extensions: dict[str, Extension] = {}
        self._add(extensions)

    @property
    def base(self) -> SuperState[S]:
        return self._ss

    # --- Reads ---

    def now(self) -> S:
        return self._ss.now()

    def draft(self) -> S | None:
        return self._ss.draft()

    def has_draft(self) -> bool:
        return self._ss.has_draft()

    # --- Writes (return this handle so chains keep the extensions) ---

    def set(self, value, *, silent: bool = False) -> ExtendedSuperState[S]:
        self._ss.set(value, silent=silent)
        return self

    def sketch(self, value, *, silent: bool = False) -> ExtendedSuperState[S]:
        self._ss.sketch(value, silent=silent)
        return self

    def publish(self, *, silent: bool = False) -> ExtendedSuperState[S]:
        self._ss.publish(silent=silent)
        return self

    def discard(self, *, silent: bool = False) -> ExtendedSuperState[S]:
        self._ss.discard(silent=silent)
        return self

    # --- Registration ---

    def subscribe(self, callback, target: str = "now"):
        return self._ss.subscribe(callback, target)

    def unsubscribe_all(self) -> None:
        self._ss.unsubscribe_all()

    def use(self, middlewares) -> ExtendedSuperState[S]:
        self._ss.use(middlewares)
        return self

    def extend(self, extensions: Mapping[str, Extension]) -> ExtendedSuperState[S]:
        """Return a new handle with these extensions on top of the current ones."""
        layered = ExtendedSuperState(self._ss, self._extensions)
        layered._add(extensions)
        return layered

    def _add(self, extensions: Mapping[str, Extension]) -> None:
        for name, fn in extensions.items():
            assert_validity(
                name,
                isinstance(name, str) and name.isidentifier() and not name.startswith("_"),
                what=f"`{name!r}` is not a valid extension name.",
                solutions=["Use a public Python identifier, e.g. `increment`."],
            )
            assert_validity(
                name,
                name not in BASE_OPERATIONS,
                what=f"The extension `{name}` would shadow a built-in operation.",
                solutions=[f"Rename it, for example to `{name}_ext`."],
                intelligence={"reserved": sorted(BASE_OPERATIONS)},
            )
            assert_validity(
                fn,
                callable(fn),
                what=f"The extension `{name}` is not callable.",
                solutions=["An extension is a function taking `(ss, *args)`."],
            )
            self._extensions[name] = fn
        logger.debug("Attached extensions: %s", ", ".join(extensions))

    def __getattr__(self, name: str) -> Any:
        # only reached when normal lookup fails
        extensions = self.__dict__.get("_extensions", {})
        if name not in extensions:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        fn = extensions[name]

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            return fn(self._ss, *args, **kwargs)

        return wrapper

    def __copy__(self) -> ExtendedSuperState[S]:
        return self

    def __deepcopy__(self, memo: dict) -> ExtendedSuperState[S]:
        return self

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._extensions))

    def __repr__(self) -> str:
        return f"ExtendedSuperState({self._ss!r}, extensions={list(self._extensions)})"
