"""Signup form validation engine and submission controller.

signupform provides:
- A declarative field schema with ordered per-field rule chains
- A pure validation engine that returns a validated snapshot or a per-field
  error map (last failing rule wins)
- A submission controller that drives the field error lifecycle and the
  submission status around a pluggable, asynchronous acceptance collaborator
- An event stream for operator-visible audit logging and UI notifications

Basic usage:
    >>> from signupform import REGISTRATION_SCHEMA, validate
    >>> outcome = validate(REGISTRATION_SCHEMA, REGISTRATION_SCHEMA.empty_record())
    >>> outcome.is_valid
    False
    >>> outcome.errors["firstName"]
    'First name can only contain letters, spaces, hyphens, and apostrophes'
"""

__version__ = "0.1.0"
__author__ = "Signupform Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from signupform.controller import FormController
from signupform.registration import REGISTRATION_SCHEMA
from signupform.validation import ValidationEngine, validate

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "FormController",
    "REGISTRATION_SCHEMA",
    "ValidationEngine",
    "validate",
]
