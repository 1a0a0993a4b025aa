"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, together with the tagged result types those
ports return. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class User:
    """
    A registered user as persisted by the user store.

    Invariant: email_sent is True only when email_sent_at is set.
    """

    id: int
    name: str
    email: str
    created_at: datetime
    email_sent: bool = False
    email_sent_at: datetime | None = None


class StoreStatus(Enum):
    """Outcome tag for user store operations."""

    OK = "ok"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """
    Result of a user store operation.

    value is set only when status is OK. detail holds the server-side
    diagnostic for failures and must not be shown to clients.
    """

    status: StoreStatus
    value: T | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.OK


class MailStatus(Enum):
    """Outcome tag for mail transporter operations."""

    SENT = "sent"
    CONNECTED = "connected"
    CONFIGURATION_ERROR = "configuration_error"
    INITIALIZATION_ERROR = "initialization_error"
    VALIDATION_ERROR = "validation_error"
    SEND_ERROR = "send_error"
    CONNECTION_ERROR = "connection_error"


@dataclass(frozen=True)
class MailResult:
    """
    Result of a mail transporter operation.

    message is safe to show to clients; details carries the underlying
    transport diagnostic for logs only.
    """

    status: MailStatus
    message: str
    message_id: str | None = None
    recipient: str | None = None
    details: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (MailStatus.SENT, MailStatus.CONNECTED)


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def create(self, name: str, email: str) -> StoreResult[int]:
        """
        Insert a new user and return its generated id.

        Returns DUPLICATE_EMAIL when the storage uniqueness constraint
        rejects the email, STORAGE_ERROR for any other failure.
        """
        ...

    def find_by_email(self, email: str) -> StoreResult[User]:
        """
        Look up a user by normalized email.

        NOT_FOUND is an expected outcome for pre-registration checks.
        """
        ...

    def mark_email_sent(self, user_id: int) -> StoreResult[None]:
        """
        Record a successful confirmation delivery (email_sent, email_sent_at).

        Returns NOT_FOUND when no row matches user_id.
        """
        ...

    def list_all(self) -> StoreResult[list[User]]:
        """Return every user, newest first."""
        ...


class ConfirmationMailer(Protocol):
    """Port interface for confirmation email delivery."""

    def initialize(self) -> MailResult:
        """Build and verify the mail transport (idempotent)."""
        ...

    def test_connection(self) -> MailResult:
        """Re-verify transport reachability without sending anything."""
        ...

    def send_confirmation(self, name: str, email: str) -> MailResult:
        """Make exactly one delivery attempt of the confirmation email."""
        ...
