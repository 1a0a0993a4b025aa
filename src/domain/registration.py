"""
Registration domain service - request-level registration pipeline.

This module contains the core business logic for user registration:
validate, normalize, check for a duplicate, persist, send the
confirmation email, and record whether delivery succeeded.

Pipeline (single pass, no automatic retries)
============================================

    validate -> normalize -> duplicate check -> create -> send -> record

Terminal outcomes:
- VALIDATION_FAILED (400): every violated input rule is listed
- CONFLICT (409): email found by the pre-check, or rejected by the
  storage uniqueness constraint at create time (concurrent registration)
- INTERNAL_ERROR (500): unexpected storage failure before the user exists
- CREATED (201): the user row exists; email_sent reports delivery

Email delivery never gates registration: a failed send still yields
CREATED with email_sent=False and a client-safe email_error. A failure
to record a successful delivery is logged and does not change the
outcome already computed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .ports import ConfirmationMailer, StoreStatus, UserRepository
from .validation import normalize_email, normalize_name, validate_registration

logger = logging.getLogger(__name__)

MSG_CREATED = "User registered successfully and confirmation email sent!"
MSG_CREATED_EMAIL_FAILED = (
    "User registered successfully, but email sending failed. "
    "Please check the email configuration."
)
MSG_VALIDATION_FAILED = "Validation failed"
MSG_CONFLICT = "Email address is already registered"
MSG_CHECK_FAILED = "Internal server error while checking email"
MSG_CREATE_FAILED = "Internal server error while creating user"


class RegistrationOutcome(Enum):
    """Terminal state of one registration request, tagged with its HTTP status."""

    CREATED = 201
    VALIDATION_FAILED = 400
    CONFLICT = 409
    INTERNAL_ERROR = 500

    @property
    def http_status(self) -> int:
        return self.value


@dataclass(frozen=True)
class RegisteredUser:
    """Data returned to the client for a created registration."""

    user_id: int
    name: str
    email: str
    email_sent: bool
    email_error: str | None


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of RegistrationService.register()."""

    outcome: RegistrationOutcome
    message: str
    errors: list[str] = field(default_factory=list)
    user: RegisteredUser | None = None

    @property
    def success(self) -> bool:
        return self.outcome is RegistrationOutcome.CREATED


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Both collaborators are injected so tests can substitute doubles for
    the database and the mail transport.
    """

    repository: UserRepository
    mailer: ConfirmationMailer

    def register(self, name: Any, email: Any) -> RegistrationResult:
        """
        Register a new user and attempt to send the confirmation email.

        Args:
            name: Raw name from the request body (any JSON value)
            email: Raw email from the request body (any JSON value)

        Returns:
            RegistrationResult describing the terminal outcome
        """
        errors = validate_registration(name, email)
        if errors:
            return RegistrationResult(
                RegistrationOutcome.VALIDATION_FAILED, MSG_VALIDATION_FAILED, errors
            )

        clean_name = normalize_name(name)
        clean_email = normalize_email(email)

        existing = self.repository.find_by_email(clean_email)
        if existing.status is StoreStatus.OK:
            return RegistrationResult(RegistrationOutcome.CONFLICT, MSG_CONFLICT)
        if existing.status is not StoreStatus.NOT_FOUND:
            logger.error("Error checking for duplicate email: %s", existing.detail)
            return RegistrationResult(RegistrationOutcome.INTERNAL_ERROR, MSG_CHECK_FAILED)

        created = self.repository.create(clean_name, clean_email)
        if created.status is StoreStatus.DUPLICATE_EMAIL:
            logger.info("Registration lost a concurrent race for %s", clean_email)
            return RegistrationResult(RegistrationOutcome.CONFLICT, MSG_CONFLICT)
        if created.status is not StoreStatus.OK or created.value is None:
            logger.error("Error creating user: %s", created.detail)
            return RegistrationResult(RegistrationOutcome.INTERNAL_ERROR, MSG_CREATE_FAILED)
        user_id = created.value

        sent = self.mailer.send_confirmation(clean_name, clean_email)
        if sent.ok:
            recorded = self.repository.mark_email_sent(user_id)
            if not recorded.ok:
                logger.warning(
                    "Failed to update email sent status for user %s: %s",
                    user_id,
                    recorded.detail or recorded.status.value,
                )
        else:
            logger.warning(
                "Confirmation email not sent to %s: %s (%s)",
                clean_email,
                sent.message,
                sent.details,
            )

        return RegistrationResult(
            RegistrationOutcome.CREATED,
            MSG_CREATED if sent.ok else MSG_CREATED_EMAIL_FAILED,
            user=RegisteredUser(
                user_id=user_id,
                name=clean_name,
                email=clean_email,
                email_sent=sent.ok,
                email_error=None if sent.ok else sent.message,
            ),
        )
