"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration pipeline, the confirmation email
templates and the shared input rules. It defines its own port interfaces
for infrastructure abstraction, so the database and the mail transport
are plugged in by adapters.
"""

from .exceptions import (
    ConfigurationError,
    EmailAlreadyRegistered,
    InitializationError,
    MailError,
    RegistrationError,
    SendError,
    StorageError,
    UserNotFound,
    ValidationFailed,
)
from .ports import (
    ConfirmationMailer,
    MailResult,
    MailStatus,
    StoreResult,
    StoreStatus,
    User,
    UserRepository,
)
from .registration import (
    RegisteredUser,
    RegistrationOutcome,
    RegistrationResult,
    RegistrationService,
)

__all__ = [
    "ConfigurationError",
    "ConfirmationMailer",
    "EmailAlreadyRegistered",
    "InitializationError",
    "MailError",
    "MailResult",
    "MailStatus",
    "RegisteredUser",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationResult",
    "RegistrationService",
    "SendError",
    "StorageError",
    "StoreResult",
    "StoreStatus",
    "User",
    "UserNotFound",
    "UserRepository",
    "ValidationFailed",
]
