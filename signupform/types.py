"""Core type definitions for the signup form.

This module defines the fundamental enums used throughout the package:
- SubmissionStatus: Lifecycle states of a form submission attempt
- RuleKind: The kinds of constraint a FieldRule can express
- EventType: Event types emitted by the submission controller
- FailureReason: Why a submission attempt ended in the failed status

These types form the contract between the validation engine, the submission
controller and whatever presentation layer drives them.
"""

from enum import Enum
from typing import Dict


class SubmissionStatus(str, Enum):
    """Submission status of a form controller.

    Transitions are enforced by SubmissionStatusMachine:
    idle -> submitting -> {succeeded, failed}, and both outcomes may
    restart at submitting.
    """
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RuleKind(str, Enum):
    """Constraint kinds supported by FieldRule.

    Values match the JSON Schema keyword each kind compiles to.
    """
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    FORMAT = "format"


class EventType(str, Enum):
    """Event types for the controller event stream."""
    FIELD_UPDATED = "field.updated"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    SUBMISSION_STARTED = "submission.started"
    SUBMISSION_SUCCEEDED = "submission.succeeded"
    SUBMISSION_FAILED = "submission.failed"


class FailureReason(str, Enum):
    """Why the last submission attempt failed.

    VALIDATION means the error map holds per-field messages; ACCEPTANCE means
    the record was valid but the acceptance collaborator did not complete.
    """
    VALIDATION = "validation"
    ACCEPTANCE = "acceptance"


# Field name -> single error message
FieldErrorMap = Dict[str, str]

# Field name -> raw string value
FormRecord = Dict[str, str]


__all__ = [
    "SubmissionStatus",
    "RuleKind",
    "EventType",
    "FailureReason",
    "FieldErrorMap",
    "FormRecord",
]
