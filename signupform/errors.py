"""Error types for the signup form.

Two runtime error kinds matter to callers:

- ValidationFailure carries a per-field error map. It is raised by
  ValidationEngine.parse and is always recovered by the submission controller,
  which surfaces the map to the UI field by field.
- AcceptanceFailure wraps anything the acceptance collaborator raised (or a
  deadline expiry). The controller records it as a distinct failure reason so
  it is never confused with field errors.

SchemaMismatchError is a precondition violation (a field name the schema does
not declare, or a record missing a declared field) and is not meant to be
recovered from at runtime.
"""

from typing import Any, Dict, Mapping, Optional


class ValidationFailure(Exception):
    """Raised when a record fails one or more field rules.

    Attributes:
        errors: Field name -> the single message recorded for that field

    Examples:
        >>> failure = ValidationFailure({"email": "Please enter a valid email address"})
        >>> failure.fields
        ['email']
    """

    def __init__(self, errors: Mapping[str, str]):
        self.errors: Dict[str, str] = dict(errors)
        super().__init__(
            f"Validation failed for {len(self.errors)} field(s): "
            f"{', '.join(self.errors)}"
        )

    @property
    def fields(self):
        """Names of the failing fields, in schema order."""
        return list(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"type": "validation", "errors": dict(self.errors)}


class AcceptanceFailure(Exception):
    """Raised when the acceptance collaborator fails or misses its deadline.

    Attributes:
        message: User-facing summary, never a field message
        cause: The underlying exception, if any
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"type": "acceptance", "message": self.message}
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result


class SchemaMismatchError(ValueError):
    """Raised when a field name or record does not match the schema.

    Attributes:
        field: The offending field name
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


__all__ = [
    "ValidationFailure",
    "AcceptanceFailure",
    "SchemaMismatchError",
]
