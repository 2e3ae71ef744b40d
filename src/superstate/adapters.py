"""Persistence adapter — a middleware that mirrors a container into a flat store.

The store is any MutableMapping[str, str]: a dict, a `shelve.Shelf`, a
`dbm` database... Values are written as JSON.

    import shelve

    with shelve.open("prefs.db") as db:
        theme = superstate("light").use([persist("theme", db)])
        theme.set("dark")   # db["theme"] == '"dark"'
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, MutableMapping

from superstate.errors import assert_validity
from superstate.middleware import EventType, Middleware

if TYPE_CHECKING:
    from superstate.core import SuperState

logger = logging.getLogger("superstate.adapters")

DRAFT_SUFFIX = "__draft"


def persist(key: str, store: MutableMapping[str, str] | None, *, draft: bool = False) -> Middleware:
    """Middleware loading `key` from store on init and writing it back on change.

    With draft=True the draft is mirrored too, under `key + "__draft"`,
    and removed from the store when discarded or published.
    """
    draft_key = f"{key}{DRAFT_SUFFIX}"

    def middleware(event_type: EventType, ss: SuperState) -> None:
        if event_type == EventType.INIT:
            _hydrate(ss)
            return

        if event_type in (EventType.AFTER_SET, EventType.AFTER_PUBLISH):
            store[key] = json.dumps(ss.now())

        if draft and event_type == EventType.AFTER_SKETCH:
            store[draft_key] = json.dumps(ss.draft())

        if draft and event_type == EventType.AFTER_DISCARD:
            store.pop(draft_key, None)

    def _hydrate(ss: SuperState) -> None:
        assert_validity(
            store,
            what=f"`persist({key!r})` was initialised without a store.",
            solutions=[
                "Pass a MutableMapping such as a dict or an open `shelve.Shelf` as `store`.",
                "If the store is only available in some environments, only add the "
                "middleware there: `ss.use([persist(key, db)] if db is not None else [])`.",
            ],
            references=["https://docs.python.org/3/library/shelve.html"],
            intelligence={"key": key},
        )

        _load(key, ss.set)
        if draft:
            _load(draft_key, ss.sketch)

    def _load(store_key: str, apply) -> None:
        raw = store.get(store_key)
        if raw is None:
            return
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Could not decode stored value for %r, keeping initial state", store_key)
            return
        apply(value)
        logger.info("Hydrated %r from store", store_key)

    return middleware
