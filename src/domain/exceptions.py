"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each exception renders itself as the caller-facing ErrorBody.
"""

from .models import ErrorBody, RegistrationState
from .validation import Violation

VALIDATION_REASON = "ValidationError"
INTERNAL_REASON = "InternalError"


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    code = 422
    reason = VALIDATION_REASON

    def __init__(
        self,
        message: str,
        location: str | None = None,
        after: RegistrationState | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        # Last pipeline state reached before the failure
        self.after = after

    def to_error_body(self) -> ErrorBody:
        return ErrorBody(
            code=self.code,
            reason=self.reason,
            message=self.message,
            location=self.location,
        )


class FieldValidationError(RegistrationError):
    """A field failed one of the validator rules."""

    def __init__(self, violation: Violation) -> None:
        super().__init__(
            violation.message, location=violation.field, after=RegistrationState.RECEIVED
        )
        self.violation = violation


class DuplicateUsername(RegistrationError):
    """An account with this username already exists."""

    def __init__(self, username: str, after: RegistrationState | None = None) -> None:
        super().__init__("Username already taken", location="username", after=after)
        self.username = username


class RegistrationFailed(RegistrationError):
    """
    Store unavailable, hashing failed, or another unexpected error.

    The message is always generic; the underlying cause is chained as
    __cause__ and logged, never returned to the caller.
    """

    code = 500
    reason = INTERNAL_REASON

    def __init__(self, after: RegistrationState | None = None) -> None:
        super().__init__("Internal server error", after=after)
