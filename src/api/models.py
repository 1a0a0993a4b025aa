"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Responses use camelCase keys on the wire.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RegisterRequest(BaseModel):
    """
    Request model for user registration.

    Fields accept any JSON value; type and shape rules are applied by the
    registration service so every violation is reported together as a 400.
    """

    name: Any = Field(default=None, description="Display name (1-255 characters)")
    email: Any = Field(default=None, description="Email address (max 255 characters)")


class RegisteredUserData(BaseModel):
    """Registration details returned on success."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: int
    name: str
    email: str
    email_sent: bool
    email_error: str | None


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    success: bool = True
    message: str
    data: RegisteredUserData
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
    errors: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utc_timestamp)


class HealthResponse(BaseModel):
    """Response model for health checks."""

    success: bool = True
    message: str
    timestamp: str = Field(default_factory=utc_timestamp)
    version: str | None = None


class NotFoundResponse(BaseModel):
    """Response model for unmatched routes."""

    success: bool = False
    message: str = "API endpoint not found"
    path: str
