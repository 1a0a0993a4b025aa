"""
API routes - Registration and health endpoints.

This module defines the HTTP endpoints mounted under /api:
- POST /api/register - Register a user and send the confirmation email
- GET /api/health/email - Check the mail transport is reachable

Handlers are plain ``def`` functions: FastAPI runs them in its worker
threadpool, so blocking database and SMTP calls never stall the event loop.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.adapters.smtp.mailer import SmtpConfirmationMailer
from src.api.dependencies import get_mailer, get_registration_service
from src.api.error_handlers import error_response
from src.api.models import ErrorResponse, HealthResponse, RegisteredUserData, RegisterRequest, RegisterResponse
from src.domain.registration import RegistrationService

router = APIRouter(tags=["registration"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Register a new user",
    description="Submit name and email to register. A confirmation email is sent "
    "to the address; registration succeeds even when delivery fails.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse | JSONResponse:
    """
    Register a new user and send the confirmation email.

    - **name**: Display name (required, max 255 characters)
    - **email**: Email address (required, max 255 characters, case-insensitive)

    The response reports whether the confirmation email was sent.
    """
    result = service.register(request_data.name, request_data.email)

    if not result.success or result.user is None:
        return error_response(result.outcome.http_status, result.message, result.errors)

    user = result.user
    return RegisterResponse(
        message=result.message,
        data=RegisteredUserData(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            email_sent=user.email_sent,
            email_error=user.email_error,
        ),
    )


@router.get(
    "/health/email",
    response_model=HealthResponse,
    responses={503: {"model": ErrorResponse, "description": "Mail transport unreachable"}},
    summary="Check mail transport connectivity",
)
def email_health(
    mailer: SmtpConfirmationMailer = Depends(get_mailer),
) -> HealthResponse | JSONResponse:
    """Verify the mail transport without sending any email."""
    result = mailer.test_connection()
    if not result.ok:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, result.message)
    return HealthResponse(message=result.message)
