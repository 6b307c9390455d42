"""
Domain models - Users, pipeline states and structured outcomes.

Plain dataclasses with no framework imports. The transport layer decides
how a RegistrationResult is rendered.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RegistrationState(str, Enum):
    """
    Per-request registration pipeline states.

    Forward path:
        RECEIVED -> FIELD_VALIDATED -> UNIQUENESS_CHECKED
                 -> PASSWORD_HASHED -> PERSISTED

    REJECTED can follow RECEIVED (invalid fields), UNIQUENESS_CHECKED
    (duplicate username) or any later step (internal failure, or a
    duplicate detected at write time).
    """

    RECEIVED = "RECEIVED"
    FIELD_VALIDATED = "FIELD_VALIDATED"
    UNIQUENESS_CHECKED = "UNIQUENESS_CHECKED"
    PASSWORD_HASHED = "PASSWORD_HASHED"
    PERSISTED = "PERSISTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class User:
    """A persisted account. Never holds the plaintext password."""

    username: str
    password_hash: str = field(repr=False)
    role: str

    def api_repr(self) -> dict[str, str]:
        """Public representation, safe to return to callers."""
        return {"username": self.username, "role": self.role}


@dataclass(frozen=True)
class ErrorBody:
    """Caller-facing error value."""

    code: int
    reason: str
    message: str
    location: str | None = None

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "code": self.code,
            "reason": self.reason,
            "message": self.message,
        }
        if self.location is not None:
            body["location"] = self.location
        return body


@dataclass(frozen=True)
class RegistrationResult:
    """Single outcome of one registration request."""

    state: RegistrationState
    user: User | None = None
    error: ErrorBody | None = None
    rejected_after: RegistrationState | None = None

    @property
    def ok(self) -> bool:
        return self.state is RegistrationState.PERSISTED

    @classmethod
    def persisted(cls, user: User) -> "RegistrationResult":
        return cls(state=RegistrationState.PERSISTED, user=user)

    @classmethod
    def rejected(cls, error: ErrorBody, after: RegistrationState) -> "RegistrationResult":
        return cls(state=RegistrationState.REJECTED, error=error, rejected_after=after)
