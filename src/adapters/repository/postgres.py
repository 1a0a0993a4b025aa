"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
user store port using psycopg3 with raw SQL.

Every operation borrows one connection from the bounded pool and
returns it on every exit path (the pool's context manager commits on
success and rolls back on error). When all connections are busy the
caller waits up to the pool timeout instead of failing immediately.

Email uniqueness is enforced by the UNIQUE constraint on users.email;
a UniqueViolation raised by INSERT is reported as DUPLICATE_EMAIL so
the service can treat a lost registration race as a conflict.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg.rows import RowFactory, class_row, tuple_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import EmailAlreadyRegistered, StorageError, UserNotFound
from src.domain.ports import StoreResult, StoreStatus, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, name, email, created_at, email_sent, email_sent_at"


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def _cursor(self, row_factory: RowFactory[Any] = tuple_row) -> Iterator[psycopg.Cursor[Any]]:
        """
        Borrow a pooled connection and yield a cursor on it.

        Raises:
            EmailAlreadyRegistered: On a users.email uniqueness violation
            StorageError: On any other database or pool failure
        """
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=row_factory) as cursor:
                yield cursor
                conn.commit()
        except psycopg.errors.UniqueViolation as e:
            raise EmailAlreadyRegistered(str(e)) from e
        except psycopg.Error as e:
            logger.exception("Database operation failed")
            raise StorageError(f"{type(e).__name__}: {e}") from e

    def create(self, name: str, email: str) -> StoreResult[int]:
        """
        Insert a new user with email_sent=FALSE and created_at=NOW().

        Args:
            name: Normalized display name
            email: Normalized email address (lowercase, stripped)

        Returns:
            OK with the generated id, DUPLICATE_EMAIL if the email is taken,
            STORAGE_ERROR otherwise
        """
        sql = """
            INSERT INTO users (name, email, created_at, email_sent, email_sent_at)
            VALUES (%s, %s, NOW(), FALSE, NULL)
            RETURNING id
        """
        try:
            with self._cursor() as cursor:
                cursor.execute(sql, (name, email))
                row = cursor.fetchone()
        except EmailAlreadyRegistered as e:
            return StoreResult(StoreStatus.DUPLICATE_EMAIL, detail=str(e))
        except StorageError as e:
            return StoreResult(StoreStatus.STORAGE_ERROR, detail=str(e))

        user_id = row[0]
        logger.info("User created successfully: ID %s, Email: %s", user_id, email)
        return StoreResult(StoreStatus.OK, value=user_id)

    def find_by_email(self, email: str) -> StoreResult[User]:
        """
        Fetch the user registered with this normalized email.

        A missing user is the common case during registration and is
        not logged.
        """
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s"
        try:
            with self._cursor(class_row(User)) as cursor:
                cursor.execute(sql, (email,))
                user = cursor.fetchone()
            if user is None:
                raise UserNotFound(email)
        except UserNotFound:
            return StoreResult(StoreStatus.NOT_FOUND, detail="User not found")
        except StorageError as e:
            return StoreResult(StoreStatus.STORAGE_ERROR, detail=str(e))
        return StoreResult(StoreStatus.OK, value=user)

    def mark_email_sent(self, user_id: int) -> StoreResult[None]:
        """
        Set email_sent=TRUE and email_sent_at=NOW() for one user.

        Returns:
            OK, NOT_FOUND if no row has this id, or STORAGE_ERROR
        """
        sql = """
            UPDATE users
            SET email_sent = TRUE, email_sent_at = NOW()
            WHERE id = %s
        """
        try:
            with self._cursor() as cursor:
                cursor.execute(sql, (user_id,))
                if cursor.rowcount == 0:
                    raise UserNotFound(str(user_id))
        except UserNotFound:
            return StoreResult(StoreStatus.NOT_FOUND, detail=f"User {user_id} not found")
        except StorageError as e:
            return StoreResult(StoreStatus.STORAGE_ERROR, detail=str(e))

        logger.info("Email status updated for user ID: %s", user_id)
        return StoreResult(StoreStatus.OK)

    def list_all(self) -> StoreResult[list[User]]:
        """Return all users ordered by created_at, newest first."""
        sql = f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"
        try:
            with self._cursor(class_row(User)) as cursor:
                cursor.execute(sql)
                users = cursor.fetchall()
        except StorageError as e:
            return StoreResult(StoreStatus.STORAGE_ERROR, detail=str(e))
        return StoreResult(StoreStatus.OK, value=users)


def check_connection(pool: ConnectionPool) -> None:
    """
    Verify the database is reachable with a trivial query.

    Raises:
        StorageError: If no connection can be obtained or the query fails
    """
    try:
        with pool.connection() as conn:
            conn.execute("SELECT 1")
    except psycopg.Error as e:
        raise StorageError(f"Database connection test failed: {e}") from e
    logger.info("Database connection test successful")


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
