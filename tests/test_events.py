"""Tests for homehub.events module."""

import logging

import pytest

from homehub.events import EventBus, InvalidCallback, namespaces_of, split_pattern


class TestPatterns:
    def test_split_exact(self):
        assert split_pattern("nav.up") == (False, "nav.up")

    def test_split_wildcard(self):
        assert split_pattern("nav.*") == (True, "nav")

    def test_split_nested_wildcard(self):
        assert split_pattern("a.b.*") == (True, "a.b")

    def test_namespaces_of(self):
        assert namespaces_of("a.b.c") == ["a", "a.b"]

    def test_namespaces_of_plain_name(self):
        assert namespaces_of("sys") == []


class TestSubscribe:
    def test_rejects_non_callable(self, bus):
        with pytest.raises(InvalidCallback):
            bus.subscribe("nav.up", "not a function", "ui")

    def test_invalid_callback_is_type_error(self, bus):
        with pytest.raises(TypeError):
            bus.subscribe("nav.up", None)

    def test_exact_listener_receives_name_and_data(self, bus):
        calls = []
        bus.subscribe("nav.up", lambda name, data: calls.append((name, data)), "ui")
        assert bus.publish("nav.up", {"x": 1}) == 1
        assert calls == [("nav.up", {"x": 1})]

    def test_register_is_idempotent(self, bus):
        bus.register("ui")
        bus.subscribe("a.b", lambda n, d: None, "ui")
        bus.register("ui")
        assert bus.stats()["components"] == {"ui": 1}

    def test_default_owner_is_anonymous(self, bus):
        bus.subscribe("a.b", lambda n, d: None)
        assert "anonymous" in bus.stats()["components"]


class TestPublish:
    def test_no_listeners(self, bus):
        assert bus.publish("nothing.here") == 0

    def test_wildcard_matching(self, bus):
        hits = []
        bus.subscribe("a.b.c", lambda n, d: hits.append("exact"), "t")
        bus.subscribe("a.b.*", lambda n, d: hits.append("a.b.*"), "t")
        bus.subscribe("a.*", lambda n, d: hits.append("a.*"), "t")
        bus.subscribe("x.*", lambda n, d: hits.append("x.*"), "t")
        bus.subscribe("a.b", lambda n, d: hits.append("a.b"), "t")

        assert bus.publish("a.b.c") == 3
        assert sorted(hits) == ["a.*", "a.b.*", "exact"]

    def test_wildcard_requires_dot_boundary(self, bus):
        hits = []
        bus.subscribe("foo.*", lambda n, d: hits.append(n), "t")

        bus.publish("foo")
        bus.publish("foobar.baz")
        bus.publish("foo.bar")
        bus.publish("foo.bar.baz")

        assert hits == ["foo.bar", "foo.bar.baz"]

    def test_exact_listeners_run_before_wildcards(self, bus):
        order = []
        bus.subscribe("nav.*", lambda n, d: order.append("wildcard"), "t")
        bus.subscribe("nav.up", lambda n, d: order.append("exact"), "t")

        bus.publish("nav.up")

        assert order == ["exact", "wildcard"]

    def test_registration_order_within_group(self, bus):
        order = []
        bus.subscribe("a.b.*", lambda n, d: order.append(1), "t")
        bus.subscribe("a.*", lambda n, d: order.append(2), "t")
        bus.subscribe("a.b.*", lambda n, d: order.append(3), "t")
        for i in (4, 5):
            bus.subscribe("a.b.c", lambda n, d, i=i: order.append(i), "t")

        bus.publish("a.b.c")

        assert order == [4, 5, 1, 2, 3]

    def test_failing_listener_does_not_stop_dispatch(self, bus, caplog):
        calls = []

        def broken(name, data):
            raise RuntimeError("boom")

        bus.subscribe("nav.up", broken, "bad")
        bus.subscribe("nav.up", lambda n, d: calls.append(n), "good")

        with caplog.at_level(logging.ERROR, logger="homehub.events"):
            count = bus.publish("nav.up")

        assert count == 2
        assert calls == ["nav.up"]
        assert "from component bad" in caplog.text

    def test_nested_publish(self, bus):
        seen = []
        bus.subscribe("outer.go", lambda n, d: bus.publish("inner.go", d), "t")
        bus.subscribe("inner.go", lambda n, d: seen.append(d), "t")

        bus.publish("outer.go", 42)

        assert seen == [42]

    def test_listener_added_during_dispatch_waits_for_next_publish(self, bus):
        late = []

        def adder(name, data):
            bus.subscribe("ev.x", lambda n, d: late.append(d), "late")

        bus.subscribe("ev.x", adder, "t")

        assert bus.publish("ev.x", 1) == 1
        assert late == []
        bus.publish("ev.x", 2)
        assert late == [2]

    def test_listener_removed_during_dispatch_is_skipped(self, bus):
        calls = []

        def second(name, data):
            calls.append("second")

        def first(name, data):
            calls.append("first")
            bus.unsubscribe("ev.x", second)

        bus.subscribe("ev.x", first, "t")
        bus.subscribe("ev.x", second, "t")

        assert bus.publish("ev.x") == 1
        assert calls == ["first"]

    def test_cleanup_during_dispatch(self, bus):
        calls = []
        bus.subscribe("ev.x", lambda n, d: bus.cleanup("victim"), "killer")
        bus.subscribe("ev.*", lambda n, d: calls.append("victim"), "victim")

        bus.publish("ev.x")

        assert calls == []


class TestUnsubscribe:
    def test_by_callback(self, bus):
        calls = []

        def keep(n, d):
            calls.append("keep")

        def drop(n, d):
            calls.append("drop")

        bus.subscribe("ev.x", keep, "t")
        bus.subscribe("ev.x", drop, "t")

        assert bus.unsubscribe("ev.x", drop) == 1
        bus.publish("ev.x")
        assert calls == ["keep"]

    def test_by_owner(self, bus):
        calls = []
        bus.subscribe("ev.x", lambda n, d: calls.append("a"), "a")
        bus.subscribe("ev.x", lambda n, d: calls.append("b"), "b")

        bus.unsubscribe("ev.x", owner="a")
        bus.publish("ev.x")

        assert calls == ["b"]

    def test_by_callback_and_owner(self, bus):
        calls = []

        def shared(n, d):
            calls.append(n)

        bus.subscribe("ev.x", shared, "a")
        bus.subscribe("ev.x", shared, "b")

        assert bus.unsubscribe("ev.x", shared, "a") == 1
        assert bus.publish("ev.x") == 1

    def test_without_filter_removes_all_exact(self, bus):
        bus.subscribe("ev.x", lambda n, d: None, "a")
        bus.subscribe("ev.x", lambda n, d: None, "b")
        bus.subscribe("ev.*", lambda n, d: None, "c")

        assert bus.unsubscribe("ev.x") == 2
        # Wildcard listener is untouched
        assert bus.publish("ev.x") == 1

    def test_wildcard_pattern(self, bus):
        bus.subscribe("ev.*", lambda n, d: None, "c")
        assert bus.unsubscribe("ev.*", owner="c") == 1
        assert not bus.has_subscribers("ev.x")

    def test_unknown_event(self, bus):
        assert bus.unsubscribe("missing.event") == 0

    def test_updates_owner_tracking(self, bus):
        def cb(n, d):
            pass

        bus.subscribe("ev.x", cb, "a")
        bus.unsubscribe("ev.x", cb)
        assert bus.stats()["components"]["a"] == 0


class TestCleanup:
    def test_removes_only_owner_listeners(self, bus):
        calls = []
        bus.subscribe("ev.x", lambda n, d: calls.append("x-exact"), "X")
        bus.subscribe("ev.*", lambda n, d: calls.append("x-wild"), "X")
        bus.subscribe("ev.x", lambda n, d: calls.append("y-exact"), "Y")
        bus.subscribe("ev.*", lambda n, d: calls.append("y-wild"), "Y")

        assert bus.cleanup("X") == 2
        bus.publish("ev.x")

        assert calls == ["y-exact", "y-wild"]
        assert "X" not in bus.stats()["components"]

    def test_unknown_owner(self, bus):
        assert bus.cleanup("ghost") == 0

    def test_cleanup_twice(self, bus):
        bus.subscribe("ev.x", lambda n, d: None, "X")
        bus.cleanup("X")
        assert bus.cleanup("X") == 0


class TestHasSubscribers:
    def test_exact(self, bus):
        bus.subscribe("a.b", lambda n, d: None)
        assert bus.has_subscribers("a.b")
        assert not bus.has_subscribers("a.c")

    def test_wildcard(self, bus):
        bus.subscribe("a.*", lambda n, d: None)
        assert bus.has_subscribers("a.b.c")
        assert not bus.has_subscribers("a")

    def test_after_cleanup(self, bus):
        bus.subscribe("a.*", lambda n, d: None, "X")
        bus.cleanup("X")
        assert not bus.has_subscribers("a.b")


class TestStats:
    def test_counts(self, bus):
        bus.subscribe("a.b", lambda n, d: None, "one")
        bus.subscribe("a.b", lambda n, d: None, "two")
        bus.subscribe("c.d", lambda n, d: None, "one")
        bus.subscribe("a.*", lambda n, d: None, "two")

        stats = bus.stats()
        assert stats["total_events"] == 2
        assert stats["total_listeners"] == 3
        assert stats["total_wildcards"] == 1
        assert stats["components"] == {"one": 2, "two": 2}


def test_fresh_bus_is_empty():
    stats = EventBus().stats()
    assert stats["total_events"] == 0
    assert stats["components"] == {}
