"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Database connection pool (skips when PostgreSQL is unreachable)
- Mail transport doubles
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from tests.fakes import FakeTransport


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Create connection pool against the configured PostgreSQL database.

    Tests depending on this fixture are skipped when the database cannot
    be reached (e.g. docker-compose is not running).
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.conninfo(),
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not available")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_users(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty the users table before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield


@pytest.fixture
def transport() -> FakeTransport:
    """A mail transport that accepts every message."""
    return FakeTransport()
