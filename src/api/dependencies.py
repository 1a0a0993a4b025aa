"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.smtp.mailer import SmtpConfirmationMailer
from src.domain.registration import RegistrationService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresUserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


def get_mailer(request: Request) -> SmtpConfirmationMailer:
    """
    Get the process-wide confirmation mailer from app state.

    One mailer per process keeps a single verified transport shared by
    all requests.
    """
    return request.app.state.mailer


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository and mailer for the domain service.
    """
    repository = get_repository(request)
    mailer = get_mailer(request)
    return RegistrationService(repository=repository, mailer=mailer)
