"""Form submission controller.

This module provides the FormController class that coordinates the validation
engine, the status state machine, the event stream and the acceptance
collaborator for one registration session.

The controller owns three pieces of state:
- the form record (exactly the schema's fields, all strings)
- the field error map (at most one message per field)
- the submission status (idle, submitting, succeeded, failed)

Usage:
    >>> import asyncio
    >>> from signupform.acceptance import SimulatedAcceptance
    >>> controller = FormController(acceptor=SimulatedAcceptance(delay_seconds=0))
    >>> controller.edit("firstName", "Jo")
    >>> controller.status
    <SubmissionStatus.IDLE: 'idle'>
    >>> result = asyncio.run(controller.submit())
    >>> result.status
    <SubmissionStatus.FAILED: 'failed'>
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from signupform.acceptance import AcceptanceCollaborator, SimulatedAcceptance
from signupform.config import FormConfig
from signupform.errors import AcceptanceFailure, SchemaMismatchError, ValidationFailure
from signupform.events import EventEmitter, FormEvent
from signupform.registration import REGISTRATION_SCHEMA
from signupform.schema import FieldSchema
from signupform.state_machine import SubmissionStatusMachine
from signupform.types import EventType, FailureReason, SubmissionStatus
from signupform.validation import ValidationEngine

logger = logging.getLogger(__name__)

SUBMIT_LABEL = "Create Account"
SUBMITTING_LABEL = "Creating Account..."
SUCCESS_MESSAGE = "Registration successful!"
VALIDATION_FAILURE_MESSAGE = "Please correct the highlighted fields."
ACCEPTANCE_FAILURE_MESSAGE = "Submission failed. Please try again."

# Default for submit(timeout=...): use config.acceptance_timeout_seconds
USE_CONFIG_TIMEOUT = object()


@dataclass(frozen=True)
class FieldView:
    """Everything a presentation layer needs to render one input.

    Attributes:
        name: Field key in the record
        label: Display label
        placeholder: Input placeholder
        value: Current raw value
        error: Current error message, or None
    """
    name: str
    label: str
    placeholder: str
    value: str
    error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submit() call.

    Attributes:
        status: Status after the attempt (succeeded or failed)
        errors: Field error map after the attempt
        data: The accepted snapshot, only when succeeded
        failure_reason: Why the attempt failed, None when succeeded
        message: User-facing summary
    """
    status: SubmissionStatus
    errors: Dict[str, str]
    data: Optional[Dict[str, str]] = None
    failure_reason: Optional[FailureReason] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SUCCEEDED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "ok": self.ok,
            "status": self.status.value,
            "errors": dict(self.errors),
        }
        if self.data is not None:
            result["data"] = dict(self.data)
        if self.failure_reason is not None:
            result["failureReason"] = self.failure_reason.value
        if self.message is not None:
            result["message"] = self.message
        return result


class FormController:
    """Drives the field error lifecycle and submission status of one form.

    edit() and submit() are expected to be called from a single event loop.
    The only suspension point is the acceptance call inside submit(); edits
    made while it is pending change the live record, not the snapshot handed
    to the collaborator.

    Attributes:
        schema: The FieldSchema the form is built from
        acceptor: Collaborator that receives validated snapshots
        config: Timeouts and delays
        session_id: Identifier stamped on every event
        events: Emitter notified of every recorded event

    Examples:
        >>> controller = FormController()
        >>> controller.record["email"]
        ''
        >>> controller.errors
        {}
    """

    def __init__(
        self,
        schema: FieldSchema = REGISTRATION_SCHEMA,
        acceptor: Optional[AcceptanceCollaborator] = None,
        config: Optional[FormConfig] = None,
        emitter: Optional[EventEmitter] = None,
        session_id: Optional[str] = None,
    ):
        self.schema = schema
        self.config = config or FormConfig()
        self.acceptor = acceptor or SimulatedAcceptance(
            delay_seconds=self.config.acceptance_delay_seconds
        )
        self.session_id = session_id or f"reg_{uuid.uuid4().hex[:16]}"
        self.events = emitter or EventEmitter()
        self._engine = ValidationEngine(schema)
        self._machine = SubmissionStatusMachine(session_id=self.session_id, emitter=self.events)
        self._record: Dict[str, str] = schema.empty_record()
        self._errors: Dict[str, str] = {}
        self.failure_reason: Optional[FailureReason] = None
        self.failure_message: Optional[str] = None
        self.last_acceptance_error: Optional[AcceptanceFailure] = None
        self.accepted_data: Optional[Dict[str, str]] = None

    @property
    def status(self) -> SubmissionStatus:
        return self._machine.status

    @property
    def record(self) -> Dict[str, str]:
        """Copy of the current form record."""
        return dict(self._record)

    @property
    def errors(self) -> Dict[str, str]:
        """Copy of the current field error map."""
        return dict(self._errors)

    @property
    def is_submitting(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTING

    @property
    def submit_label(self) -> str:
        return SUBMITTING_LABEL if self.is_submitting else SUBMIT_LABEL

    def edit(self, field: str, value: str) -> None:
        """Set one field and hide its stale error.

        The field is not re-validated; its error only comes back on the next
        submit. The submission status never changes here.

        Raises:
            SchemaMismatchError: If field is not declared in the schema
            TypeError: If value is not a string
        """
        if field not in self.schema:
            raise SchemaMismatchError(field, f"Field '{field}' is not declared in the schema")
        if not isinstance(value, str):
            raise TypeError(f"Field '{field}' expects a str value, got {type(value).__name__}")

        self._record[field] = value
        cleared = self._errors.pop(field, None) is not None
        self._machine.record_event(EventType.FIELD_UPDATED, {"field": field, "errorCleared": cleared})

    async def submit(self, timeout: Any = USE_CONFIG_TIMEOUT) -> SubmitResult:
        """Validate the record and, if valid, hand it to the acceptor.

        Args:
            timeout: Deadline in seconds for the acceptance call, or None for
                no deadline. Defaults to config.acceptance_timeout_seconds.

        Returns:
            SubmitResult describing the attempt

        Raises:
            SubmissionInProgressError: If another submit is still outstanding
            ValueError: If timeout is not positive
        """
        deadline = self.config.acceptance_timeout_seconds if timeout is USE_CONFIG_TIMEOUT else timeout
        if deadline is not None and deadline <= 0:
            raise ValueError(f"Acceptance timeout must be positive, got {deadline}")

        self._machine.transition_to(SubmissionStatus.SUBMITTING)
        self.failure_reason = None
        self.failure_message = None

        try:
            data = self._engine.parse(self._record)
        except ValidationFailure as failure:
            # Replace wholesale: fields that now pass lose their old errors
            self._errors = dict(failure.errors)
            self.failure_reason = FailureReason.VALIDATION
            self.failure_message = VALIDATION_FAILURE_MESSAGE
            self._machine.record_event(EventType.VALIDATION_FAILED, {"fields": failure.fields})
            self._machine.transition_to(
                SubmissionStatus.FAILED, {"reason": FailureReason.VALIDATION.value}
            )
            logger.info(
                "Session %s failed validation on %s", self.session_id, ", ".join(failure.fields)
            )
            return self._result()

        self._errors = {}
        self._machine.record_event(EventType.VALIDATION_PASSED)

        try:
            await asyncio.wait_for(self.acceptor.accept(data), timeout=deadline)
        except Exception as exc:
            logger.warning(
                "Acceptance failed for session %s", self.session_id, exc_info=True
            )
            self._fail_acceptance(AcceptanceFailure(ACCEPTANCE_FAILURE_MESSAGE, cause=exc))
            return self._result()
        except BaseException as exc:
            # Cancellation and interpreter exits still leave the session usable
            if isinstance(exc, asyncio.CancelledError):
                message = "Submission cancelled"
            else:
                message = ACCEPTANCE_FAILURE_MESSAGE
            self._fail_acceptance(AcceptanceFailure(message, cause=exc))
            raise

        self.accepted_data = dict(data)
        self._machine.transition_to(SubmissionStatus.SUCCEEDED, {"data": dict(data)})
        logger.info("Session %s accepted", self.session_id)
        return self._result()

    def _fail_acceptance(self, failure: AcceptanceFailure) -> None:
        # Record and error map stay as they are so the user can retry
        self.last_acceptance_error = failure
        self.failure_reason = FailureReason.ACCEPTANCE
        self.failure_message = failure.message
        self._machine.transition_to(
            SubmissionStatus.FAILED,
            {"reason": FailureReason.ACCEPTANCE.value, "error": failure.to_dict()},
        )

    def _result(self) -> SubmitResult:
        succeeded = self.status == SubmissionStatus.SUCCEEDED
        return SubmitResult(
            status=self.status,
            errors=self.errors,
            data=dict(self.accepted_data) if succeeded and self.accepted_data is not None else None,
            failure_reason=self.failure_reason,
            message=SUCCESS_MESSAGE if succeeded else self.failure_message,
        )

    def field_views(self) -> List[FieldView]:
        """One FieldView per schema field, in schema order."""
        return [
            FieldView(
                name=definition.name,
                label=definition.display_label,
                placeholder=definition.placeholder or definition.display_label,
                value=self._record[definition.name],
                error=self._errors.get(definition.name),
            )
            for definition in self.schema
        ]

    def get_events(self) -> List[FormEvent]:
        """All events recorded for this session, in chronological order."""
        return self._machine.get_events()


__all__ = [
    "FormController",
    "FieldView",
    "SubmitResult",
    "SUBMIT_LABEL",
    "SUBMITTING_LABEL",
    "SUCCESS_MESSAGE",
    "ACCEPTANCE_FAILURE_MESSAGE",
    "USE_CONFIG_TIMEOUT",
]
