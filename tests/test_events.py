from webtools.events import EventChannel, ProgressLog, ResultReady
from webtools.page_heuristics import analyze


def test_subscribers_receive_events():
    channel = EventChannel()
    received = []
    channel.subscribe(received.append)
    channel.log("hello", url="https://example.com")
    assert len(received) == 1
    assert received[0].message == "hello"
    assert received[0].level == "info"


def test_kind_filter():
    channel = EventChannel()
    logs, results = [], []
    channel.subscribe(logs.append, kinds=[ProgressLog])
    channel.subscribe(results.append, kinds=[ResultReady])
    report = analyze("https://example.com", "", load_time=1.0)
    channel.log("working")
    channel.publish(ResultReady(url=report.url, report=report))
    assert [e.kind for e in logs] == ["progress"]
    assert [e.kind for e in results] == ["result"]
    assert results[0].to_dict()["report"]["url"] == "https://example.com"


def test_unsubscribe_stops_delivery():
    channel = EventChannel()
    received = []
    sub = channel.subscribe(received.append)
    channel.log("one")
    sub.unsubscribe()
    sub.unsubscribe()  # second call is a no-op
    channel.log("two")
    assert [e.message for e in received] == ["one"]
    assert channel.subscriber_count == 0


def test_context_manager_scopes_subscription():
    channel = EventChannel()
    received = []
    with channel.subscribe(received.append):
        channel.log("inside")
    channel.log("outside")
    assert [e.message for e in received] == ["inside"]


def test_failing_observer_does_not_block_others():
    channel = EventChannel()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    channel.subscribe(broken)
    channel.subscribe(received.append)
    assert channel.publish(ProgressLog("still delivered")) == 1
    assert received[0].message == "still delivered"
