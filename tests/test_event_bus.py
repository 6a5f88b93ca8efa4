from reviewstack.services.event_bus import EventBus, ReviewEvent


def test_subscribe_and_publish_order():
    bus = EventBus()
    order = []

    def h1(e):
        order.append(("h1", e.name))

    def h2(e):
        order.append(("h2", e.name))

    bus.subscribe(ReviewEvent.WINDOW_CHANGED, h1)
    bus.subscribe(ReviewEvent.WINDOW_CHANGED, h2)
    bus.publish(ReviewEvent.WINDOW_CHANGED, {"slots": ()})
    assert order == [
        ("h1", ReviewEvent.WINDOW_CHANGED.value),
        ("h2", ReviewEvent.WINDOW_CHANGED.value),
    ]


def test_once_subscription():
    bus = EventBus()
    calls = []
    bus.subscribe(ReviewEvent.EXHAUSTED, lambda e: calls.append(e.name), once=True)
    bus.publish(ReviewEvent.EXHAUSTED)
    bus.publish(ReviewEvent.EXHAUSTED)
    assert calls == [ReviewEvent.EXHAUSTED.value]
    assert bus.subscriber_count(ReviewEvent.EXHAUSTED) == 0


def test_unsubscribe():
    bus = EventBus()
    calls = []
    sub = bus.subscribe(ReviewEvent.ITEM_TAPPED, lambda e: calls.append(1))
    bus.publish(ReviewEvent.ITEM_TAPPED)
    bus.unsubscribe(sub)
    bus.publish(ReviewEvent.ITEM_TAPPED)
    assert calls == [1]
    assert not sub.active


def test_cancelled_subscription_is_skipped():
    bus = EventBus()
    calls = []
    sub = bus.subscribe("custom", lambda e: calls.append(1))
    sub.cancel()
    bus.publish("custom")
    assert calls == []


def test_cancelled_subscriptions_are_pruned():
    bus = EventBus()
    keep = bus.subscribe("custom", lambda e: None)
    for _ in range(3):
        bus.subscribe("custom", lambda e: None).cancel()
    assert bus.subscriber_count("custom") == 1
    keep.cancel()
    bus.publish("custom")
    assert bus.subscriber_count("custom") == 0
    assert "custom" not in bus._subs


def test_error_isolation():
    bus = EventBus()
    calls = []

    def bad(e):
        raise RuntimeError("boom")

    def good(e):
        calls.append("ok")

    bus.subscribe(ReviewEvent.ITEM_COMMITTED, bad)
    bus.subscribe(ReviewEvent.ITEM_COMMITTED, good)
    bus.publish(ReviewEvent.ITEM_COMMITTED)
    assert calls == ["ok"]
    assert len(bus.errors) == 1
    assert isinstance(bus.errors[0][1], RuntimeError)


def test_handler_may_subscribe_during_publish():
    bus = EventBus()
    late = []

    def first(_):
        bus.subscribe("custom", lambda e: late.append(e.payload))

    bus.subscribe("custom", first, once=True)
    bus.publish("custom", 1)
    bus.publish("custom", 2)
    assert late == [2]


def test_tracing_disabled_by_default_and_bounded():
    bus = EventBus()
    bus.publish("a")
    assert bus.recent_traces() == []
    bus.enable_tracing(capacity=2)
    assert bus.tracing_enabled
    for name in ("x", "y", "z"):
        bus.publish(name, "p" * 60)
    traces = bus.recent_traces()
    assert [t.name for t in traces] == ["y", "z"]
    assert traces[-1].summary.endswith("...") and len(traces[-1].summary) == 40
