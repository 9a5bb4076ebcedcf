"""Field validation engine for flat string records.

This module provides a ValidationEngine that checks a record against a
FieldSchema and produces either a Valid outcome wrapping an immutable snapshot
of the record, or an Invalid outcome wrapping a per-field error map.

Every rule of every field is evaluated, in declaration order, with no
short-circuit. When several rules on one field fail, each failure overwrites
the field's slot, so the message recorded is the one of the LAST failing rule.
This last-failure-wins behaviour is intentional and must be preserved.

Each rule is checked by a jsonschema Draft7Validator compiled from the rule's
one-keyword fragment, with FORMAT_CHECKER supplying the email shape check.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from jsonschema import Draft7Validator

from signupform.errors import SchemaMismatchError, ValidationFailure
from signupform.schema import FORMAT_CHECKER, FieldRule, FieldSchema


@dataclass(frozen=True)
class Valid:
    """Outcome for a record that satisfies every rule of every field.

    Attributes:
        data: Read-only snapshot with exactly the schema's keys

    Examples:
        >>> Valid(MappingProxyType({"city": "Paris"})).is_valid
        True
    """
    data: Mapping[str, str]

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def errors(self) -> Dict[str, str]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"isValid": True, "data": dict(self.data)}


@dataclass(frozen=True)
class Invalid:
    """Outcome for a record with at least one failing field.

    Attributes:
        errors: Field name -> message of the last failing rule, in schema order
    """
    errors: Dict[str, str]

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def data(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"isValid": False, "errors": dict(self.errors)}


ValidationOutcome = Union[Valid, Invalid]


class ValidationEngine:
    """Validation engine bound to one FieldSchema.

    The engine holds no mutable state after construction; validate() is
    referentially transparent and safe to call repeatedly or concurrently.

    Attributes:
        schema: The FieldSchema to validate against

    Examples:
        >>> from signupform.schema import FieldRule
        >>> schema = FieldSchema.from_rules({
        ...     "nickname": [
        ...         FieldRule.min_length(2, "Too short"),
        ...         FieldRule.pattern(r"[a-z]+", "Lowercase only"),
        ...     ],
        ... })
        >>> engine = ValidationEngine(schema)
        >>> engine.validate({"nickname": "bob"}).is_valid
        True
        >>> engine.validate({"nickname": ""}).errors
        {'nickname': 'Lowercase only'}
    """

    def __init__(self, schema: FieldSchema) -> None:
        """Initialize the engine and compile one validator per rule.

        Args:
            schema: The schema to validate records against
        """
        self.schema = schema
        self._validators: Dict[str, List[Tuple[FieldRule, Draft7Validator]]] = {
            definition.name: [
                (rule, Draft7Validator(rule.to_json_schema(), format_checker=FORMAT_CHECKER))
                for rule in definition.rules
            ]
            for definition in schema
        }

    def validate_field(self, name: str, value: str) -> Optional[str]:
        """Return the message recorded for one field, or None if it passes.

        Args:
            name: A field declared in the schema
            value: The raw string value

        Raises:
            SchemaMismatchError: If name is not declared in the schema
            TypeError: If value is not a string
        """
        if name not in self._validators:
            raise SchemaMismatchError(name, f"Field '{name}' is not declared in the schema")
        if not isinstance(value, str):
            raise TypeError(f"Field '{name}' expects a str value, got {type(value).__name__}")

        message: Optional[str] = None
        for rule, validator in self._validators[name]:
            if not validator.is_valid(value):
                # Keep folding: a later failure replaces an earlier one
                message = rule.message
        return message

    def validate(self, record: Mapping[str, str]) -> ValidationOutcome:
        """Validate a record against the schema.

        Args:
            record: Field name -> raw string value. Must contain every
                declared field; keys the schema does not declare are ignored
                and never echoed back.

        Returns:
            Valid with a read-only snapshot, or Invalid with the error map

        Raises:
            SchemaMismatchError: If a declared field is missing from record
            TypeError: If a declared field holds a non-string value
        """
        errors: Dict[str, str] = {}
        snapshot: Dict[str, str] = {}

        for name in self.schema.field_names:
            if name not in record:
                raise SchemaMismatchError(name, f"Record is missing declared field '{name}'")
            value = record[name]
            snapshot[name] = value
            message = self.validate_field(name, value)
            if message is not None:
                errors[name] = message

        if errors:
            return Invalid(errors=errors)
        return Valid(data=MappingProxyType(snapshot))

    def parse(self, record: Mapping[str, str]) -> Mapping[str, str]:
        """Validate a record and return its snapshot, raising on failure.

        Raises:
            ValidationFailure: If any field fails, carrying the error map
            SchemaMismatchError: If a declared field is missing from record
        """
        outcome = self.validate(record)
        if isinstance(outcome, Invalid):
            raise ValidationFailure(outcome.errors)
        return outcome.data


def validate(schema: FieldSchema, record: Mapping[str, str]) -> ValidationOutcome:
    """Validate record against schema. See ValidationEngine.validate."""
    return ValidationEngine(schema).validate(record)


__all__ = [
    "ValidationEngine",
    "ValidationOutcome",
    "Valid",
    "Invalid",
    "validate",
]
