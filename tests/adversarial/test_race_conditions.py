"""
Adversarial tests for concurrent registration of the same email.

The pre-registration lookup is only an optimization: when several
requests race past it, the users.email UNIQUE constraint decides the
winner and every loser must see a conflict, never a 500.
Requires PostgreSQL to be running (via docker-compose); skipped otherwise.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.smtp.mailer import SmtpConfirmationMailer
from src.domain.ports import MailResult, MailStatus, StoreResult, StoreStatus, User
from src.domain.registration import RegistrationOutcome, RegistrationService
from tests.fakes import FakeTransport, make_config

pytestmark = [pytest.mark.adversarial, pytest.mark.usefixtures("clean_users")]

CONCURRENCY = 10


class BlindPrecheckRepository(PostgresUserRepository):
    """
    Repository whose lookup always misses and waits at a barrier.

    Forces every request through to INSERT at the same moment so the
    uniqueness constraint is the only thing standing between them.
    """

    def __init__(self, pool: ConnectionPool, barrier: threading.Barrier) -> None:
        super().__init__(pool)
        self._barrier = barrier

    def find_by_email(self, email: str) -> StoreResult[User]:
        self._barrier.wait(timeout=10)
        return StoreResult(StoreStatus.NOT_FOUND)


class CountingMailer:
    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def send_confirmation(self, name: str, email: str) -> MailResult:
        with self._lock:
            self.calls += 1
        return MailResult(MailStatus.SENT, "Confirmation email sent successfully")


class TestConcurrentRegistration:
    """Race conditions on duplicate registration."""

    def test_storage_constraint_resolves_race(self, pool: ConnectionPool) -> None:
        barrier = threading.Barrier(CONCURRENCY)
        mailer = CountingMailer()
        service = RegistrationService(
            repository=BlindPrecheckRepository(pool, barrier), mailer=mailer
        )

        with ThreadPoolExecutor(max_workers=CONCURRENCY) as executor:
            results = list(
                executor.map(
                    lambda i: service.register(f"User {i}", "  Race@Example.com "),
                    range(CONCURRENCY),
                )
            )

        outcomes = [result.outcome for result in results]
        assert outcomes.count(RegistrationOutcome.CREATED) == 1
        assert outcomes.count(RegistrationOutcome.CONFLICT) == CONCURRENCY - 1
        assert mailer.calls == 1

        with pool.connection() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM users WHERE email = %s", ("race@example.com",)
            ).fetchone()
        assert count is not None and count[0] == 1

    def test_concurrent_distinct_registrations_all_succeed(self, pool: ConnectionPool) -> None:
        transport = FakeTransport()
        mailer = SmtpConfirmationMailer(make_config(), transport_factory=lambda config: transport)
        service = RegistrationService(repository=PostgresUserRepository(pool), mailer=mailer)

        with ThreadPoolExecutor(max_workers=CONCURRENCY) as executor:
            results = list(
                executor.map(
                    lambda i: service.register(f"User {i}", f"user{i}@example.com"),
                    range(CONCURRENCY * 2),
                )
            )

        assert all(result.outcome is RegistrationOutcome.CREATED for result in results)
        assert len({result.user.user_id for result in results if result.user}) == CONCURRENCY * 2
        assert len(transport.sent) == CONCURRENCY * 2
