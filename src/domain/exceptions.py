"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Adapters raise them internally and translate them into tagged
results (see ports.py) at their public boundary.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class ValidationFailed(RegistrationError):
    """Client input is malformed; carries every violated rule."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class EmailAlreadyRegistered(RegistrationError):
    """Email is already registered to another user."""

    pass


class UserNotFound(RegistrationError):
    """No user matches the lookup key."""

    pass


class StorageError(RegistrationError):
    """Unexpected persistence failure (connectivity, SQL, pool)."""

    pass


class MailError(RegistrationError):
    """Base class for confirmation email delivery errors."""

    pass


class ConfigurationError(MailError):
    """Mail credentials or provider settings are missing or invalid."""

    pass


class InitializationError(MailError):
    """Mail transport could not be built or verified."""

    pass


class SendError(MailError):
    """A single delivery attempt failed."""

    pass
