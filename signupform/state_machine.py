"""Submission status state machine for the signup form.

The state machine:
- Enforces valid transitions between submission statuses
- Tracks the current status of one controller session
- Records a typed event for every transition (and for any event the
  controller records through it) and forwards it to an optional emitter

Usage:
    >>> from signupform.state_machine import SubmissionStatusMachine
    >>> sm = SubmissionStatusMachine(session_id="reg_123")
    >>> sm.status
    <SubmissionStatus.IDLE: 'idle'>
    >>> sm.transition_to(SubmissionStatus.SUBMITTING)
    >>> len(sm.get_events())
    1
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set
import uuid

from signupform.events import EventEmitter, FormEvent
from signupform.types import EventType, SubmissionStatus


class InvalidStateTransitionError(Exception):
    """Raised when attempting an invalid status transition.

    Attributes:
        current_status: The status before the attempted transition
        target_status: The status that was attempted
    """

    def __init__(self, current_status: SubmissionStatus, target_status: SubmissionStatus, message: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(message)


class SubmissionInProgressError(InvalidStateTransitionError):
    """Raised when submit is called while a submission is outstanding."""


STATUS_TO_EVENT_TYPE: Dict[SubmissionStatus, EventType] = {
    SubmissionStatus.SUBMITTING: EventType.SUBMISSION_STARTED,
    SubmissionStatus.SUCCEEDED: EventType.SUBMISSION_SUCCEEDED,
    SubmissionStatus.FAILED: EventType.SUBMISSION_FAILED,
}


# Maps each status to the set of statuses it can transition to.
# SUBMITTING is not reachable from itself: one outstanding submission at a time.
VALID_TRANSITIONS: Dict[SubmissionStatus, Set[SubmissionStatus]] = {
    SubmissionStatus.IDLE: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.SUBMITTING: {
        SubmissionStatus.SUCCEEDED,
        SubmissionStatus.FAILED,
    },
    SubmissionStatus.SUCCEEDED: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.FAILED: {SubmissionStatus.SUBMITTING},
}


@dataclass
class SubmissionStatusMachine:
    """Status machine for one form session.

    Attributes:
        session_id: Identifier of the owning controller session
        status: Current submission status
        emitter: Optional emitter that receives every recorded event

    Examples:
        >>> sm = SubmissionStatusMachine(session_id="reg_123")
        >>> sm.can_transition_to(SubmissionStatus.SUBMITTING)
        True
        >>> sm.can_transition_to(SubmissionStatus.SUCCEEDED)
        False
    """

    session_id: str
    status: SubmissionStatus = SubmissionStatus.IDLE
    emitter: Optional[EventEmitter] = field(default=None, repr=False)
    _events: List[FormEvent] = field(default_factory=list, init=False, repr=False)

    def can_transition_to(self, target_status: SubmissionStatus) -> bool:
        return target_status in VALID_TRANSITIONS.get(self.status, set())

    def transition_to(
        self,
        target_status: SubmissionStatus,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Transition to a new status and record a transition event.

        Args:
            target_status: The status to transition to
            payload: Extra event data merged after from/to status

        Raises:
            SubmissionInProgressError: If a submission is already outstanding
            InvalidStateTransitionError: For any other disallowed transition
        """
        if not self.can_transition_to(target_status):
            error_cls = (
                SubmissionInProgressError
                if self.status == target_status == SubmissionStatus.SUBMITTING
                else InvalidStateTransitionError
            )
            raise error_cls(
                current_status=self.status,
                target_status=target_status,
                message=(
                    f"Invalid status transition: cannot transition from "
                    f"'{self.status.value}' to '{target_status.value}'. "
                    f"Valid transitions from '{self.status.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.status]))}"
                ),
            )

        old_status = self.status
        self.status = target_status

        event_payload: Dict[str, Any] = {
            "from_status": old_status.value,
            "to_status": target_status.value,
        }
        if payload:
            event_payload.update(payload)
        self.record_event(STATUS_TO_EVENT_TYPE[target_status], event_payload)

    def record_event(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> FormEvent:
        """Append an event stamped with the current status and emit it."""
        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            session_id=self.session_id,
            ts=datetime.now(timezone.utc),
            status=self.status,
            payload=payload,
        )
        self._events.append(event)
        if self.emitter is not None:
            self.emitter.emit(event)
        return event

    def get_events(self) -> List[FormEvent]:
        """Get all recorded events in chronological order."""
        return list(self._events)


__all__ = [
    "SubmissionStatusMachine",
    "InvalidStateTransitionError",
    "SubmissionInProgressError",
    "VALID_TRANSITIONS",
]
