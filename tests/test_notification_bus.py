from core.notification_bus import NotificationBus


def test_publish_reaches_topic_and_wildcard_subscribers():
    bus = NotificationBus()
    topic, everything = [], []
    bus.subscribe("NEWS", lambda n, p, s: topic.append((p, s)))
    bus.subscribe("*", lambda n, p, s: everything.append(n))

    bus.publish("NEWS", {"count": 1}, sender="module_1_newsfeed")
    bus.publish("CLOCK_SECOND", 5)

    assert topic == [({"count": 1}, "module_1_newsfeed")]
    assert everything == ["NEWS", "CLOCK_SECOND"]
    assert bus.get_latest("NEWS") == {"count": 1}
    assert bus.get_latest() == {"NEWS": {"count": 1}, "CLOCK_SECOND": 5}


def test_failing_callback_does_not_block_others():
    bus = NotificationBus()
    received = []

    def broken(n, p, s):
        raise RuntimeError("boom")

    bus.subscribe("X", broken)
    bus.subscribe("X", lambda n, p, s: received.append(p))
    bus.publish("X", 1)
    assert received == [1]


def test_unsubscribe():
    bus = NotificationBus()
    received = []

    def cb(n, p, s):
        received.append(p)

    bus.subscribe("X", cb)
    bus.unsubscribe("X", cb)
    bus.publish("X", 1)
    assert received == []


def test_sse_stream_yields_published_notifications():
    bus = NotificationBus()
    stream = bus.sse_stream(keepalive=0.01)
    assert next(stream) == ("keepalive", None, None)
    bus.publish("HELLO", {"a": 1}, sender="api")
    assert next(stream) == ("HELLO", {"a": 1}, "api")
    stream.close()
    assert bus._sse_clients == []
