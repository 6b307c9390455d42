"""
Field validator - Ordered, fail-fast rules over a raw registration record.

The record arrives exactly as the transport layer decoded it, so values
may be of any type. Rules run in a fixed precedence order and the first
violation wins:

1. Presence        - username, password and role keys must exist
2. Type            - each of them must be a string
3. Whitespace      - username and password must already be trimmed
4. Too short       - username >= 1, password >= 8 (trimmed length)
5. Too long        - password <= 72 characters and <= 72 UTF-8 bytes

Every sized field is checked for "too short" before any field is checked
for "too long". The role field is never trimmed or measured.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

REQUIRED_FIELDS = ("username", "password", "role")
STRING_FIELDS = ("username", "password", "role")
TRIMMED_FIELDS = ("username", "password")

# bcrypt only considers the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class SizeBounds:
    """Inclusive length bounds for a field, measured after trimming."""

    min: int | None = None
    max: int | None = None


SIZED_FIELDS: dict[str, SizeBounds] = {
    "username": SizeBounds(min=1),
    "password": SizeBounds(min=8, max=72),
}


class ViolationKind(str, Enum):
    """Reason a registration record was rejected by the validator."""

    MISSING_FIELD = "MissingField"
    TYPE_MISMATCH = "TypeMismatch"
    UNTRIMMED_FIELD = "UntrimmedField"
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"


@dataclass(frozen=True)
class Violation:
    """First rule a record failed, with the offending field."""

    kind: ViolationKind
    field: str
    message: str


Rule = Callable[[Mapping[str, Any]], Violation | None]


def check_presence(record: Mapping[str, Any]) -> Violation | None:
    missing = next((f for f in REQUIRED_FIELDS if f not in record), None)
    if missing is None:
        return None
    return Violation(ViolationKind.MISSING_FIELD, missing, "Missing field")


def check_types(record: Mapping[str, Any]) -> Violation | None:
    non_string = next(
        (f for f in STRING_FIELDS if f in record and not isinstance(record[f], str)),
        None,
    )
    if non_string is None:
        return None
    return Violation(
        ViolationKind.TYPE_MISMATCH,
        non_string,
        "Incorrect field type: expected string",
    )


def check_trimmed(record: Mapping[str, Any]) -> Violation | None:
    untrimmed = next(
        (f for f in TRIMMED_FIELDS if record[f].strip() != record[f]),
        None,
    )
    if untrimmed is None:
        return None
    return Violation(
        ViolationKind.UNTRIMMED_FIELD,
        untrimmed,
        "Cannot start or end with whitespace",
    )


def check_too_short(record: Mapping[str, Any]) -> Violation | None:
    for field, bounds in SIZED_FIELDS.items():
        if bounds.min is not None and len(record[field].strip()) < bounds.min:
            return Violation(
                ViolationKind.TOO_SHORT,
                field,
                f"Must be at least {bounds.min} characters long",
            )
    return None


def check_too_long(record: Mapping[str, Any]) -> Violation | None:
    for field, bounds in SIZED_FIELDS.items():
        if bounds.max is None:
            continue
        value = record[field].strip()
        # A multi-byte password can fit the character bound yet overflow bcrypt
        if len(value) > bounds.max or (
            field == "password" and len(value.encode()) > BCRYPT_MAX_BYTES
        ):
            return Violation(
                ViolationKind.TOO_LONG,
                field,
                f"Must be at most {bounds.max} characters long",
            )
    return None


RULES: tuple[Rule, ...] = (
    check_presence,
    check_types,
    check_trimmed,
    check_too_short,
    check_too_long,
)


def validate(record: Mapping[str, Any], rules: tuple[Rule, ...] = RULES) -> Violation | None:
    """
    Run rules in order and return the first violation.

    Later rules may assume earlier ones passed (e.g. the whitespace rule
    only runs once every field is known to be a string).

    Args:
        record: Raw registration record, extra keys are ignored
        rules: Ordered rule functions, defaults to the registration rules

    Returns:
        None if the record is valid, otherwise the first Violation
    """
    for rule in rules:
        violation = rule(record)
        if violation is not None:
            return violation
    return None
