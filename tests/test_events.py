"""Unit tests for the event system.

Tests cover:
- FormEvent creation and enum normalization
- Serialization (to_dict, to_jsonl) and parsing (from_dict)
- EventEmitter subscriptions, dispatch order and error isolation
"""

import json
import logging
from datetime import datetime, timezone

import pytest

from signupform.events import EventEmitter, FormEvent
from signupform.types import EventType, SubmissionStatus


def make_event(event_type=EventType.SUBMISSION_STARTED, **kwargs):
    defaults = dict(
        event_id="evt_001",
        type=event_type,
        session_id="reg_001",
        ts=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        status=SubmissionStatus.SUBMITTING,
    )
    defaults.update(kwargs)
    return FormEvent(**defaults)


class TestFormEvent:
    """Test FormEvent creation and serialization."""

    def test_string_enums_normalized(self):
        event = make_event(event_type="field.updated", status="idle")
        assert event.type == EventType.FIELD_UPDATED
        assert event.status == SubmissionStatus.IDLE

    def test_to_dict(self):
        event = make_event(payload={"field": "email", "errorCleared": True})
        assert event.to_dict() == {
            "eventId": "evt_001",
            "type": "submission.started",
            "sessionId": "reg_001",
            "ts": "2024-05-01T12:00:00+00:00",
            "status": "submitting",
            "payload": {"field": "email", "errorCleared": True},
        }

    def test_to_dict_omits_missing_payload(self):
        assert "payload" not in make_event().to_dict()

    def test_to_jsonl_is_single_line(self):
        line = make_event().to_jsonl()
        assert "\n" not in line
        assert json.loads(line)["eventId"] == "evt_001"

    def test_from_dict_parses_zulu_timestamp(self):
        data = make_event().to_dict()
        data["ts"] = "2024-05-01T12:00:00Z"
        event = FormEvent.from_dict(data)
        assert event.ts == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert event.ts.tzinfo is not None
        assert event.type == EventType.SUBMISSION_STARTED

    def test_from_dict_round_trip(self):
        event = make_event(payload={"reason": "acceptance"})
        assert FormEvent.from_dict(event.to_dict()) == event


class TestEventEmitter:
    """Test EventEmitter subscriptions and dispatch."""

    def test_typed_listener_only_receives_its_type(self):
        emitter = EventEmitter()
        received = []
        emitter.on(EventType.SUBMISSION_SUCCEEDED, received.append)
        emitter.emit(make_event(EventType.SUBMISSION_STARTED))
        emitter.emit(make_event(EventType.SUBMISSION_SUCCEEDED))
        assert [e.type for e in received] == [EventType.SUBMISSION_SUCCEEDED]

    def test_typed_listeners_run_before_wildcard(self):
        emitter = EventEmitter()
        order = []
        emitter.on_any(lambda e: order.append("any"))
        emitter.on(EventType.FIELD_UPDATED, lambda e: order.append("typed"))
        emitter.emit(make_event(EventType.FIELD_UPDATED))
        assert order == ["typed", "any"]

    def test_off_removes_listener(self):
        emitter = EventEmitter()
        received = []
        emitter.on(EventType.FIELD_UPDATED, received.append)
        emitter.on_any(received.append)
        emitter.off(EventType.FIELD_UPDATED, received.append)
        emitter.off_any(received.append)
        emitter.emit(make_event(EventType.FIELD_UPDATED))
        assert received == []

    def test_off_unknown_listener_is_ignored(self):
        emitter = EventEmitter()
        emitter.off(EventType.FIELD_UPDATED, print)
        emitter.off_any(print)
        assert emitter.listener_count() == 0

    def test_failing_listener_is_isolated_and_logged(self, caplog):
        emitter = EventEmitter()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        emitter.on(EventType.FIELD_UPDATED, broken)
        emitter.on_any(received.append)
        with caplog.at_level(logging.ERROR, logger="signupform.events"):
            emitter.emit(make_event(EventType.FIELD_UPDATED))
        assert len(received) == 1
        assert "Event listener" in caplog.text

    def test_listener_count_and_clear(self):
        emitter = EventEmitter()
        emitter.on(EventType.FIELD_UPDATED, print)
        emitter.on(EventType.FIELD_UPDATED, repr)
        emitter.on_any(print)
        assert emitter.listener_count(EventType.FIELD_UPDATED) == 2
        assert emitter.listener_count(EventType.SUBMISSION_FAILED) == 0
        assert emitter.listener_count() == 3
        emitter.clear()
        assert emitter.listener_count() == 0
