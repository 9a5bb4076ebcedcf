"""Declarative field schema for flat string records.

A FieldSchema is an ordered set of FieldDefinitions. Each definition names a
field and carries an ordered tuple of FieldRules; rule order is significant
because the validation engine records the message of the last rule that
fails (see signupform.validation).

Every rule compiles to a one-keyword JSON Schema fragment, so the whole schema
can be exported as a Draft 7 object schema for other consumers.

Usage:
    >>> from signupform.schema import FieldDefinition, FieldRule, FieldSchema
    >>> schema = FieldSchema([
    ...     FieldDefinition("nickname", [
    ...         FieldRule.min_length(2, "Too short"),
    ...         FieldRule.pattern(r"[a-z]+", "Lowercase only"),
    ...     ]),
    ... ])
    >>> schema.field_names
    ('nickname',)
    >>> schema.empty_record()
    {'nickname': ''}
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

from jsonschema import Draft7Validator, FormatChecker

from signupform.types import RuleKind


# Email shape check used by the "email" format: no leading dot, no doubled
# dots, a dotted domain and an alphabetic TLD of at least two letters.
EMAIL_SHAPE = re.compile(
    r"(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+-]@(?:[A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}",
    re.IGNORECASE,
)

# Only the formats registered here are accepted by FieldRule.format_of
FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("email")
def is_email(instance: Any) -> bool:
    """Return True if instance has a standard email shape."""
    if not isinstance(instance, str):
        return True
    return EMAIL_SHAPE.fullmatch(instance) is not None


def anchor_pattern(pattern: str) -> str:
    """Anchor a pattern so a search behaves like a full match.

    ``\\Z`` is used instead of ``$`` so a trailing newline never matches.
    """
    return f"^(?:{pattern})\\Z"


@dataclass(frozen=True)
class FieldRule:
    """One constraint on a single string field.

    Attributes:
        kind: Which constraint this is
        param: Integer bound for length rules, regex for pattern rules,
            format name for format rules
        message: Human-readable error recorded when the rule fails

    Examples:
        >>> rule = FieldRule.max_length(50, "Too long")
        >>> rule.to_json_schema()
        {'maxLength': 50}
    """
    kind: RuleKind
    param: Union[int, str]
    message: str

    def __post_init__(self):
        """Normalize kind and reject malformed parameters."""
        if isinstance(self.kind, str) and not isinstance(self.kind, RuleKind):
            object.__setattr__(self, "kind", RuleKind(self.kind))

        if self.kind in (RuleKind.MIN_LENGTH, RuleKind.MAX_LENGTH):
            if isinstance(self.param, bool) or not isinstance(self.param, int) or self.param < 0:
                raise ValueError(
                    f"{self.kind.value} rule needs a non-negative integer bound, got {self.param!r}"
                )
        elif self.kind == RuleKind.PATTERN:
            if not isinstance(self.param, str):
                raise ValueError(f"pattern rule needs a string, got {self.param!r}")
            try:
                re.compile(self.param)
            except re.error as exc:
                raise ValueError(f"pattern rule has an invalid regex {self.param!r}: {exc}") from exc
        elif self.kind == RuleKind.FORMAT:
            if self.param not in FORMAT_CHECKER.checkers:
                raise ValueError(
                    f"Unknown format {self.param!r}. "
                    f"Known formats: {', '.join(sorted(FORMAT_CHECKER.checkers))}"
                )

        Draft7Validator.check_schema(self.to_json_schema())

    @classmethod
    def min_length(cls, n: int, message: str) -> "FieldRule":
        return cls(RuleKind.MIN_LENGTH, n, message)

    @classmethod
    def max_length(cls, n: int, message: str) -> "FieldRule":
        return cls(RuleKind.MAX_LENGTH, n, message)

    @classmethod
    def pattern(cls, regex: str, message: str) -> "FieldRule":
        return cls(RuleKind.PATTERN, regex, message)

    @classmethod
    def format_of(cls, name: str, message: str) -> "FieldRule":
        return cls(RuleKind.FORMAT, name, message)

    @classmethod
    def email(cls, message: str) -> "FieldRule":
        return cls(RuleKind.FORMAT, "email", message)

    def to_json_schema(self) -> Dict[str, Any]:
        """Compile this rule to a single-keyword JSON Schema fragment."""
        if self.kind == RuleKind.PATTERN:
            return {"pattern": anchor_pattern(self.param)}
        return {self.kind.value: self.param}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"kind": self.kind.value, "param": self.param, "message": self.message}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldRule":
        """Create FieldRule from dict."""
        return cls(kind=RuleKind(data["kind"]), param=data["param"], message=data["message"])


@dataclass(frozen=True)
class FieldDefinition:
    """A named field with its ordered rule chain and presentation hints.

    Attributes:
        name: Field key in the record
        rules: Rules evaluated in this order
        label: Optional display label for generated inputs
        placeholder: Optional input placeholder
    """
    name: str
    rules: Tuple[FieldRule, ...] = field(default_factory=tuple)
    label: Optional[str] = None
    placeholder: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Field name must be a non-empty string")
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    @property
    def display_label(self) -> str:
        return self.label or self.name


class FieldSchema:
    """Ordered mapping from field name to FieldDefinition.

    Field order never changes which errors are produced, only the iteration
    order of records and error maps.

    Examples:
        >>> schema = FieldSchema.from_rules({"city": [FieldRule.min_length(2, "Too short")]})
        >>> "city" in schema
        True
        >>> len(schema.rules_for("city"))
        1
    """

    def __init__(self, fields: Iterable[FieldDefinition]):
        self._fields: Dict[str, FieldDefinition] = {}
        for definition in fields:
            if definition.name in self._fields:
                raise ValueError(f"Duplicate field name in schema: '{definition.name}'")
            self._fields[definition.name] = definition

    @classmethod
    def from_rules(cls, mapping: Mapping[str, Sequence[FieldRule]]) -> "FieldSchema":
        """Build a schema from a plain name -> rules mapping."""
        return cls(FieldDefinition(name, tuple(rules)) for name, rules in mapping.items())

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def rules_for(self, name: str) -> Tuple[FieldRule, ...]:
        return self._fields[name].rules

    def empty_record(self) -> Dict[str, str]:
        """Return a fresh record with every declared field set to ''."""
        return {name: "" for name in self._fields}

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, name: str) -> FieldDefinition:
        return self._fields[name]

    def __repr__(self) -> str:
        return f"FieldSchema({', '.join(self._fields)})"

    def to_json_schema(self) -> Dict[str, Any]:
        """Export as a Draft 7 object schema.

        Every field is a required string whose constraints are the ``allOf``
        of its rule fragments, in declaration order. Additional properties
        are rejected.
        """
        properties: Dict[str, Any] = {}
        for definition in self._fields.values():
            prop: Dict[str, Any] = {"type": "string"}
            if definition.label:
                prop["title"] = definition.label
            if definition.rules:
                prop["allOf"] = [rule.to_json_schema() for rule in definition.rules]
            properties[definition.name] = prop
        return {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": properties,
            "required": list(self._fields),
            "additionalProperties": False,
        }


__all__ = [
    "FieldRule",
    "FieldDefinition",
    "FieldSchema",
    "FORMAT_CHECKER",
    "EMAIL_SHAPE",
    "anchor_pattern",
]
