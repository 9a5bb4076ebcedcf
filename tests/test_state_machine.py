"""Unit tests for the submission status state machine.

Tests cover:
- Initialization defaults
- Valid and invalid transitions
- Rejection of a second outstanding submission
- Transition events and emitter forwarding
"""

import pytest

from signupform.events import EventEmitter
from signupform.state_machine import (
    InvalidStateTransitionError,
    SubmissionInProgressError,
    SubmissionStatusMachine,
    VALID_TRANSITIONS,
)
from signupform.types import EventType, SubmissionStatus


class TestInitialization:
    """Test state machine initialization and defaults."""

    def test_defaults_to_idle(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        assert sm.session_id == "reg_1"
        assert sm.status == SubmissionStatus.IDLE
        assert sm.get_events() == []

    def test_transition_table_covers_every_status(self):
        assert set(VALID_TRANSITIONS) == set(SubmissionStatus)


class TestValidTransitions:
    """Test the allowed lifecycle paths."""

    def test_idle_to_submitting(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        sm.transition_to(SubmissionStatus.SUBMITTING)
        assert sm.status == SubmissionStatus.SUBMITTING

    @pytest.mark.parametrize("outcome", [SubmissionStatus.SUCCEEDED, SubmissionStatus.FAILED])
    def test_submitting_to_outcome(self, outcome):
        sm = SubmissionStatusMachine(session_id="reg_1", status=SubmissionStatus.SUBMITTING)
        sm.transition_to(outcome)
        assert sm.status == outcome

    @pytest.mark.parametrize("outcome", [SubmissionStatus.SUCCEEDED, SubmissionStatus.FAILED])
    def test_outcome_can_restart(self, outcome):
        sm = SubmissionStatusMachine(session_id="reg_1", status=outcome)
        assert sm.can_transition_to(SubmissionStatus.SUBMITTING)
        sm.transition_to(SubmissionStatus.SUBMITTING)
        assert sm.status == SubmissionStatus.SUBMITTING


class TestInvalidTransitions:
    """Test disallowed transitions."""

    def test_idle_cannot_jump_to_outcome(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(SubmissionStatus.SUCCEEDED)
        assert not isinstance(exc_info.value, SubmissionInProgressError)
        assert exc_info.value.current_status == SubmissionStatus.IDLE
        assert exc_info.value.target_status == SubmissionStatus.SUCCEEDED
        assert "submitting" in str(exc_info.value)
        assert sm.status == SubmissionStatus.IDLE

    def test_second_submission_rejected(self):
        sm = SubmissionStatusMachine(session_id="reg_1", status=SubmissionStatus.SUBMITTING)
        with pytest.raises(SubmissionInProgressError):
            sm.transition_to(SubmissionStatus.SUBMITTING)
        assert sm.status == SubmissionStatus.SUBMITTING

    def test_failed_to_succeeded_rejected(self):
        sm = SubmissionStatusMachine(session_id="reg_1", status=SubmissionStatus.FAILED)
        with pytest.raises(InvalidStateTransitionError):
            sm.transition_to(SubmissionStatus.SUCCEEDED)

    def test_no_event_recorded_on_rejection(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        with pytest.raises(InvalidStateTransitionError):
            sm.transition_to(SubmissionStatus.FAILED)
        assert sm.get_events() == []


class TestTransitionEvents:
    """Test events recorded on transitions."""

    def test_transition_records_typed_event(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        sm.transition_to(SubmissionStatus.SUBMITTING)
        sm.transition_to(SubmissionStatus.FAILED, {"reason": "validation"})

        events = sm.get_events()
        assert [e.type for e in events] == [
            EventType.SUBMISSION_STARTED,
            EventType.SUBMISSION_FAILED,
        ]
        assert events[1].status == SubmissionStatus.FAILED
        assert events[1].session_id == "reg_1"
        assert events[1].payload == {
            "from_status": "submitting",
            "to_status": "failed",
            "reason": "validation",
        }
        assert events[0].event_id != events[1].event_id

    def test_events_forwarded_to_emitter(self):
        emitter = EventEmitter()
        received = []
        emitter.on_any(received.append)
        sm = SubmissionStatusMachine(session_id="reg_1", emitter=emitter)
        sm.transition_to(SubmissionStatus.SUBMITTING)
        sm.record_event(EventType.VALIDATION_PASSED)
        assert [e.type for e in received] == [
            EventType.SUBMISSION_STARTED,
            EventType.VALIDATION_PASSED,
        ]
        assert received[1].status == SubmissionStatus.SUBMITTING

    def test_get_events_returns_copy(self):
        sm = SubmissionStatusMachine(session_id="reg_1")
        sm.transition_to(SubmissionStatus.SUBMITTING)
        sm.get_events().clear()
        assert len(sm.get_events()) == 1

