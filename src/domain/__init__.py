"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration pipeline: the ordered field
validator and the account creator. It defines its own port interfaces
for infrastructure abstraction, ensuring true hexagonal architecture
decoupling.
"""

from .exceptions import (
    DuplicateUsername,
    FieldValidationError,
    RegistrationError,
    RegistrationFailed,
)
from .models import ErrorBody, RegistrationResult, RegistrationState, User
from .ports import PasswordHasher, UserStore
from .registration import RegistrationService
from .validation import Violation, ViolationKind, validate

__all__ = [
    "DuplicateUsername",
    "ErrorBody",
    "FieldValidationError",
    "PasswordHasher",
    "RegistrationError",
    "RegistrationFailed",
    "RegistrationResult",
    "RegistrationService",
    "RegistrationState",
    "User",
    "UserStore",
    "Violation",
    "ViolationKind",
    "validate",
]
