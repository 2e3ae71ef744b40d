"""Tests for SuperState — now/draft, set/sketch/publish/discard."""

from collections import OrderedDict

from superstate import SuperState, superstate


class TestNow:
    def test_returns_initial_value(self):
        count = superstate(0)
        assert count.now() == 0

    def test_no_draft_initially(self):
        count = superstate(0)
        assert count.draft() is None
        assert count.has_draft() is False

    def test_nested_superstates(self):
        hp = superstate(100)
        attributes = superstate({"hp": hp})
        hero = superstate({"attributes": attributes})
        assert hero.now()["attributes"].now()["hp"].now() == 100

    def test_repr(self):
        count = superstate(5)
        assert repr(count) == "SuperState(5)"
        count.sketch(6)
        assert repr(count) == "SuperState(5, draft=6)"


class TestSet:
    def test_assigns_new_value(self):
        count = superstate(0)
        count.set(5)
        assert count.now() == 5

    def test_mutator_receives_previous_now(self):
        count = superstate(10)
        count.set(lambda prev: prev + 1)
        assert count.now() == 11

    def test_in_place_mutator(self):
        todos = superstate(["milk"])
        todos.set(lambda prev: prev.append("eggs"))
        assert todos.now() == ["milk", "eggs"]

    def test_mutator_does_not_touch_stored_value(self):
        original = {"items": [1]}
        ss = superstate(original)
        seen = []
        ss.subscribe(lambda v: seen.append(v))

        def mutate(prev):
            prev["items"].append(2)
            return prev

        ss.set(mutate)
        assert original == {"items": [1]}
        assert ss.now() == {"items": [1, 2]}
        assert seen[0] is ss.now()

    def test_does_not_touch_draft(self):
        count = superstate(0)
        count.sketch(3)
        count.set(5)
        assert count.draft() == 3

    def test_returns_container_for_chaining(self):
        count = superstate(0)
        assert count.set(1).set(2) is count
        assert count.now() == 2

    def test_equal_value_is_noop(self):
        ss = superstate({"a": [1, 2]})
        log = []
        ss.subscribe(lambda v: log.append(v))
        ss.set({"a": [1, 2]})
        assert log == []

    def test_preserves_mapping_type_through_mutator(self):
        ss = superstate(OrderedDict(a=1))
        ss.set(lambda prev: prev.update(b=2))
        assert isinstance(ss.now(), OrderedDict)
        assert list(ss.now()) == ["a", "b"]

    def test_set_values_are_cloned(self):
        tags = superstate({"a"})
        original = tags.now()
        tags.set(lambda prev: prev.add("b"))
        assert original == {"a"}
        assert tags.now() == {"a", "b"}


class TestSketch:
    def test_assigns_value_to_draft(self):
        count = superstate(0)
        count.sketch(5)
        assert count.draft() == 5
        assert count.now() == 0

    def test_based_on_previous_draft(self):
        count = superstate(0)
        count.sketch(5)
        count.sketch(lambda prev: prev + 5)
        assert count.draft() == 10

    def test_based_on_now_without_draft(self):
        count = superstate(10)
        count.sketch(lambda prev: prev + 10)
        assert count.draft() == 20

    def test_zero_is_a_valid_draft(self):
        count = superstate(10)
        count.sketch(0)
        assert count.draft() == 0
        assert count.has_draft()

    def test_none_is_a_valid_draft(self):
        ss = superstate("x")
        ss.sketch(None)
        assert ss.has_draft()
        assert ss.draft() is None

    def test_sketch_equal_to_now_still_creates_draft(self):
        count = superstate(5)
        log = []
        count.subscribe(lambda v: log.append(v), "draft")
        count.sketch(5)
        assert count.has_draft()
        assert log == [5]

    def test_clone_independence(self):
        ss = superstate({"id": "a", "items": [1]})
        ss.sketch(lambda prev: {**prev, "items": prev["items"] + [2]})
        assert len(ss.draft()["items"]) == 2
        assert len(ss.now()["items"]) == 1

    def test_in_place_mutation_does_not_leak_into_now(self):
        ss = superstate({"id": "a", "items": [1]})
        ss.sketch(lambda prev: prev["items"].append(2))
        assert ss.draft()["items"] == [1, 2]
        assert ss.now()["items"] == [1]

    def test_chain_publish(self):
        count = superstate(0)
        count.sketch(5).publish()
        assert count.now() == 5

    def test_chain_discard(self):
        count = superstate(0)
        count.sketch(5).discard()
        assert count.draft() is None
        assert count.now() == 0


class TestPublish:
    def test_scenario(self):
        container = superstate(0)
        container.sketch(5)
        assert container.draft() == 5
        assert container.now() == 0
        container.publish()
        assert container.now() == 5
        assert container.draft() is None
        assert not container.has_draft()

    def test_without_draft_is_noop(self):
        count = superstate(0)
        log = []
        count.subscribe(lambda v: log.append(v))
        count.use([lambda event, ss: log.append(str(event))])
        log.clear()
        count.publish()
        assert log == []
        assert count.now() == 0

    def test_draft_equal_to_now_is_dropped(self):
        count = superstate(5)
        count.sketch(5)
        events = []
        now_log = []
        count.use([lambda event, ss: events.append(str(event))])
        count.subscribe(lambda v: now_log.append(v))
        events.clear()

        count.publish()
        assert count.now() == 5
        assert not count.has_draft()
        assert now_log == []
        assert "before:publish" not in events
        assert "after:discard" in events

    def test_published_value_is_independent_of_later_sketches(self):
        ss = superstate({"n": [0]})
        ss.sketch(lambda prev: prev["n"].append(1)).publish()
        ss.sketch(lambda prev: prev["n"].append(2))
        assert ss.now() == {"n": [0, 1]}
        assert ss.draft() == {"n": [0, 1, 2]}

    def test_silent_publish_still_commits(self):
        count = superstate(0)
        now_log, draft_log = [], []
        count.subscribe(lambda v: now_log.append(v))
        count.subscribe(lambda v: draft_log.append(v), "draft")
        count.sketch(5, silent=True)
        count.publish(silent=True)
        assert count.now() == 5
        assert not count.has_draft()
        assert now_log == []
        assert draft_log == []


class TestDiscard:
    def test_discards_the_draft(self):
        count = superstate(0)
        count.sketch(5)
        count.discard()
        assert count.draft() is None
        assert count.now() == 0

    def test_idempotent(self):
        count = superstate(0)
        events = []
        count.use([lambda event, ss: events.append(str(event))])
        count.sketch(5)
        count.discard()
        count.discard()
        assert events.count("before:discard") == 1
        assert events.count("after:discard") == 1

    def test_broadcasts_none_to_draft_subscribers(self):
        count = superstate(0)
        log = []
        count.sketch(5)
        count.subscribe(lambda v: log.append(v), "draft")
        count.discard()
        assert log == [None]


def test_instances_do_not_share_state():
    a = SuperState(0)
    b = SuperState(0)
    log = []
    a.subscribe(lambda v: log.append(("a", v)))
    b.subscribe(lambda v: log.append(("b", v)))
    a.set(1)
    assert log == [("a", 1)]
    assert b.now() == 0
