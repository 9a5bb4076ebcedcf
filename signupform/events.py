"""Event system for the signup form controller.

This module provides the event data structure and the event emitter used for
operator-visible audit logging and UI notifications. Every status transition,
field edit and validation outcome emits a typed FormEvent.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from dateutil import parser as date_parser

from signupform.types import EventType, SubmissionStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single event in a form session.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f9a...")
        type: Event type from EventType enum
        session_id: ID of the controller session this event relates to
        ts: UTC timestamp when the event occurred
        status: Submission status after this event
        payload: Optional event-specific data (field name, failing fields, data)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = FormEvent(
        ...     event_id="evt_001",
        ...     type=EventType.SUBMISSION_STARTED,
        ...     session_id="reg_001",
        ...     ts=datetime.now(timezone.utc),
        ...     status=SubmissionStatus.SUBMITTING,
        ... )
    """
    event_id: str
    type: EventType
    session_id: str
    ts: datetime
    status: SubmissionStatus
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Normalize string enum values."""
        if isinstance(self.status, str) and not isinstance(self.status, SubmissionStatus):
            object.__setattr__(self, "status", SubmissionStatus(self.status))
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "sessionId": self.session_id,
            "ts": self.ts.isoformat(),
            "status": self.status.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single-line JSON string."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            session_id=data["sessionId"],
            ts=date_parser.isoparse(data["ts"]),
            status=SubmissionStatus(data["status"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted and should not
perform long-running operations.
"""


class EventEmitter:
    """Event emitter for managing listeners and dispatching events.

    Features:
    - Type-specific subscriptions
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch in registration order
    - Error isolation (a failing listener is logged and skipped)

    Examples:
        >>> emitter = EventEmitter()
        >>> emitter.on(EventType.SUBMISSION_SUCCEEDED, lambda e: print(e.payload["data"]))
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from the wildcard subscription."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners.

        Type-specific listeners run first, then wildcard listeners. A listener
        that raises is logged and does not prevent the others from running.
        """
        for listener in list(self._listeners.get(event.type, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener %r failed on %s", listener, event.type.value
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count registered listeners.

        Args:
            event_type: If provided, count listeners for this type only.
                        If None, count all listeners including wildcard ones.
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(ls) for ls in self._listeners.values())


__all__ = [
    "FormEvent",
    "EventType",
    "EventListener",
    "EventEmitter",
]
