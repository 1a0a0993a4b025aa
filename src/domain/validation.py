"""
Registration input rules shared by the API orchestrator and the mailer.

Both layers check name/email shape; keeping the rules here prevents
the two checks from drifting apart.
"""

import re
from typing import Any

from .exceptions import ValidationFailed

MAX_FIELD_LENGTH = 255

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

NAME_REQUIRED = "Name is required and must be a non-empty string"
NAME_TOO_LONG = "Name must be less than 255 characters"
NAME_CONTROL_CHARACTERS = "Name must not contain control characters"
EMAIL_REQUIRED = "Email is required and must be a non-empty string"
EMAIL_INVALID = "Email must be a valid email address"
EMAIL_TOO_LONG = "Email must be less than 255 characters"
EMAIL_CONTROL_CHARACTERS = "Email must not contain control characters"


def validate_name(name: Any) -> str | None:
    """
    Return the violated name rule, or None when the name is acceptable.

    Control characters (line breaks, NUL) are rejected: the name ends up
    in the Subject header and in a text column.
    """
    if not isinstance(name, str) or not name.strip():
        return NAME_REQUIRED
    trimmed = normalize_name(name)
    if CONTROL_CHARACTERS.search(trimmed):
        return NAME_CONTROL_CHARACTERS
    if len(trimmed) > MAX_FIELD_LENGTH:
        return NAME_TOO_LONG
    return None


def validate_email(email: Any) -> str | None:
    """
    Return the violated email rule, or None when the email is acceptable.

    Rules are checked on the trimmed value in order: presence, control
    characters, shape. Length is checked on the normalized value, since
    lowercasing can lengthen some addresses.
    """
    if not isinstance(email, str) or not email.strip():
        return EMAIL_REQUIRED
    trimmed = email.strip()
    if CONTROL_CHARACTERS.search(trimmed):
        return EMAIL_CONTROL_CHARACTERS
    if not EMAIL_PATTERN.match(trimmed):
        return EMAIL_INVALID
    if len(normalize_email(trimmed)) > MAX_FIELD_LENGTH:
        return EMAIL_TOO_LONG
    return None


def validate_registration(name: Any, email: Any) -> list[str]:
    """Return every violated rule for a registration (empty when valid)."""
    return [error for error in (validate_name(name), validate_email(email)) if error]


def require_valid(name: Any, email: Any) -> None:
    """
    Raise ValidationFailed listing all violations.

    Raises:
        ValidationFailed: If name or email breaks a rule
    """
    errors = validate_registration(name, email)
    if errors:
        raise ValidationFailed(errors)


def normalize_name(name: str) -> str:
    return name.strip()


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()
