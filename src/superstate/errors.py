"""Errors and user-facing diagnostics.

panic() raises a SuperStateError whose message is split into sections:
what happened, the relevant data, possible solutions and references.
Meant for conditions a developer has to fix, not for control flow.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, TypeVar

T = TypeVar("T")

ISSUES_URL = "https://github.com/chiefGui/superstate/issues/new"


class SuperStateError(Exception):
    """Raised when superstate is used in a way it cannot honour."""


@dataclass(frozen=True)
class Message:
    what: str
    solutions: Sequence[str] = ()
    references: Sequence[str] = ()
    intelligence: Mapping[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        parts = [_section("What happened?"), self.what]

        if self.intelligence:
            parts.append(_section("Intelligence"))
            parts.append("This is the relevant data we have:")
            for key, value in self.intelligence.items():
                parts.append(f"  `{key}`:\n\n      {_dump(value)}")

        for i, solution in enumerate(self.solutions, start=1):
            parts.append(_section(f"Possible solution (#{i})"))
            parts.append(solution)

        if self.references:
            parts.append(_section("References"))
            parts.extend(f"-> {ref}" for ref in self.references)

        parts.append(_section("Need further assistance?"))
        parts.append(f"Please, file an issue on GitHub: {ISSUES_URL}")
        return "\n\n" + "\n\n".join(parts)


def panic(
    what: str,
    solutions: Sequence[str] = (),
    *,
    references: Sequence[str] = (),
    intelligence: Mapping[str, Any] | None = None,
    error_class: type[Exception] = SuperStateError,
) -> None:
    """Raise error_class with a sectioned diagnostic message."""
    message = Message(what, solutions, references, intelligence or {})
    raise error_class(message.render())


def assert_validity(thing: T | None, condition: bool | None = None, **panic_kwargs) -> T:
    """Return thing, or panic if it is None or condition is False.

    Usage:
        store = assert_validity(
            store,
            what="No store was given to persist().",
            solutions=["Pass a MutableMapping as `store`."],
        )
    """
    if condition is not None and not condition:
        _panic_from(panic_kwargs)
    if thing is None:
        _panic_from(panic_kwargs)
    return thing


def _panic_from(kwargs: dict) -> None:
    kwargs = dict(kwargs)
    what = kwargs.pop("what", "An unexpected error occurred on superstate. We apologise.")
    solutions = kwargs.pop("solutions", ())
    panic(what, solutions, **kwargs)


def _section(title: str) -> str:
    return f"---- {title} ".ljust(50, "-")


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, default=repr)
    except ValueError:
        # circular reference
        return repr(value)
