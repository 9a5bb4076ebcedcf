"""The six-field account registration schema.

Rule order per field matters: when more than one rule fails, the message of
the last failing rule is the one shown. An empty first name therefore reports
the letters-only message rather than the minimum-length one.
"""

from signupform.schema import FieldDefinition, FieldRule, FieldSchema

NAME_PATTERN = r"[A-Za-z \-']+"
PLACE_PATTERN = r"[A-Za-z \-]+"
EMAIL_PATTERN = r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"
PHONE_PATTERN = r"\+?[1-9][0-9]{1,14}"

EMAIL_MESSAGE = "Please enter a valid email address"


def _name_field(name: str, label: str, noun: str) -> FieldDefinition:
    return FieldDefinition(
        name,
        [
            FieldRule.min_length(2, f"{noun} must be at least 2 characters"),
            FieldRule.max_length(50, f"{noun} must be less than 50 characters"),
            FieldRule.pattern(
                NAME_PATTERN,
                f"{noun} can only contain letters, spaces, hyphens, and apostrophes",
            ),
        ],
        label=label,
        placeholder=label,
    )


def _place_field(name: str, label: str, max_length: int) -> FieldDefinition:
    return FieldDefinition(
        name,
        [
            FieldRule.min_length(2, f"{label} must be at least 2 characters"),
            FieldRule.max_length(max_length, f"{label} must be less than {max_length} characters"),
            FieldRule.pattern(PLACE_PATTERN, f"{label} can only contain letters, spaces, and hyphens"),
        ],
        label=label,
        placeholder=label,
    )


REGISTRATION_SCHEMA = FieldSchema([
    _name_field("firstName", "First Name", "First name"),
    _name_field("lastName", "Last Name", "Last name"),
    FieldDefinition(
        "email",
        [
            FieldRule.email(EMAIL_MESSAGE),
            FieldRule.min_length(5, "Email must be at least 5 characters"),
            FieldRule.max_length(100, "Email must be less than 100 characters"),
            FieldRule.pattern(EMAIL_PATTERN, EMAIL_MESSAGE),
        ],
        label="Email",
        placeholder="Email",
    ),
    _place_field("country", "Country", 56),
    _place_field("city", "City", 85),
    FieldDefinition(
        "phone",
        [
            FieldRule.min_length(10, "Phone number must be at least 10 digits"),
            FieldRule.max_length(15, "Phone number must be less than 15 digits"),
            FieldRule.pattern(
                PHONE_PATTERN,
                "Please enter a valid phone number with country code (e.g., +1234567890)",
            ),
        ],
        label="Phone",
        placeholder="Phone",
    ),
])


__all__ = [
    "REGISTRATION_SCHEMA",
    "EMAIL_MESSAGE",
]
