"""
Registration domain service - Field validation and account creation.

Pipeline (per request, forward-only):

    RECEIVED -> FIELD_VALIDATED -> UNIQUENESS_CHECKED
             -> PASSWORD_HASHED -> PERSISTED

Any step can exit to REJECTED:
- after RECEIVED: a field rule failed (no store access happens)
- after UNIQUENESS_CHECKED: the username already exists
- after PASSWORD_HASHED: the username was taken by a concurrent request
  (write-time conflict) or the store failed

The uniqueness read is an optimization that spares a bcrypt round for
obvious duplicates. The store's conditional insert is what actually
guarantees one account per username.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import (
    DuplicateUsername,
    FieldValidationError,
    RegistrationError,
    RegistrationFailed,
)
from .models import RegistrationResult, RegistrationState, User
from .ports import UserStore
from .validation import validate

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the registration flow: field validation, uniqueness
    check, password hashing and account persistence.
    """

    store: UserStore

    async def register(self, record: Mapping[str, Any]) -> RegistrationResult:
        """
        Validate a raw record and create the account it describes.

        Expected failures never raise; they come back as a rejected
        result carrying the caller-facing error.

        Args:
            record: Request body as decoded by the transport layer

        Returns:
            RegistrationResult in PERSISTED or REJECTED state
        """
        violation = validate(record)
        if violation is not None:
            logger.info(
                "Registration rejected: %s on %s", violation.kind.value, violation.field
            )
            error = FieldValidationError(violation).to_error_body()
            return RegistrationResult.rejected(error, after=RegistrationState.RECEIVED)

        try:
            user = await self.create_account(
                record["username"], record["password"], record["role"]
            )
        except RegistrationError as e:
            after = e.after or RegistrationState.FIELD_VALIDATED
            return RegistrationResult.rejected(e.to_error_body(), after=after)
        return RegistrationResult.persisted(user)

    async def create_account(self, username: str, password: str, role: str) -> User:
        """
        Create an account for already-validated fields.

        Args:
            username: Trimmed, non-empty username
            password: Trimmed password within bcrypt's limits
            role: Role as supplied by the caller

        Returns:
            The persisted User

        Raises:
            DuplicateUsername: If the username exists (before or at write time)
            RegistrationFailed: If the store or hasher fails
        """
        state = RegistrationState.FIELD_VALIDATED
        try:
            existing = await self.store.find_by_username(username)
            state = RegistrationState.UNIQUENESS_CHECKED
            if existing > 0:
                logger.info("Registration rejected: username taken: %s", username)
                raise DuplicateUsername(username, after=state)

            password_hash = await self.store.hash_password(password)
            state = RegistrationState.PASSWORD_HASHED

            user = await self.store.create(username, password_hash, role)
        except RegistrationError:
            raise
        except Exception as e:
            logger.exception("Registration failed for %s after %s", username, state.value)
            raise RegistrationFailed(after=state) from e

        if user is None:
            logger.warning("Username claimed concurrently: %s", username)
            raise DuplicateUsername(username, after=state)

        logger.info("Registered user: %s (role=%s)", user.username, user.role)
        return user
