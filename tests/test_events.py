import logging

from healthaudit.interview.events import (
    EventType, FieldExtractedEvent, InterviewEventBus, InterviewMetrics, SessionConnectedEvent,
)


def test_subscribers_receive_events():
    bus = InterviewEventBus()
    seen, everything = [], []
    bus.subscribe(EventType.FIELD_EXTRACTED, seen.append)
    bus.subscribe_all(everything.append)

    bus.emit(FieldExtractedEvent("s1", 1.0, "age", "age", "34"))
    bus.emit(SessionConnectedEvent("s1", 2.0))

    assert len(seen) == 1
    assert seen[0].data == {"step": "age", "field": "age", "value": "34"}
    assert len(everything) == 2


def test_failing_handler_does_not_stop_others(caplog):
    bus = InterviewEventBus()
    received = []

    def broken(event):
        raise RuntimeError("handler bug")

    bus.subscribe(EventType.SESSION_CONNECTED, broken)
    bus.subscribe_all(received.append)
    with caplog.at_level(logging.ERROR):
        bus.emit(SessionConnectedEvent("s1", 1.0))
    assert received
    assert "handler bug" in caplog.text


def test_unsubscribe_and_clear():
    bus = InterviewEventBus()
    seen = []
    bus.subscribe(EventType.SESSION_CONNECTED, seen.append)
    bus.unsubscribe(EventType.SESSION_CONNECTED, seen.append)
    bus.emit(SessionConnectedEvent("s1", 1.0))
    bus.subscribe_all(seen.append)
    bus.clear_handlers()
    bus.emit(SessionConnectedEvent("s1", 1.0))
    assert seen == []


def test_metrics_count_events():
    metrics = InterviewMetrics()
    metrics.handle_event(SessionConnectedEvent("s1", 1.0))
    metrics.handle_event(FieldExtractedEvent("s1", 1.0, "age", "age", "34"))
    metrics.handle_event(FieldExtractedEvent("s1", 1.0, "lifeStage", "lifeStage", "Early Career"))
    assert metrics.get("sessions_connected") == 1
    assert metrics.get("fields_extracted") == 2
    metrics.reset()
    assert metrics.get("fields_extracted") == 0
