"""
Integration tests for registration flow.

Tests the full registration flow through the API with real database
and a fake mail transport.
Requires PostgreSQL to be running (via docker-compose); skipped otherwise.
"""

import logging

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.smtp.mailer import SmtpConfirmationMailer
from src.api.main import app
from tests.fakes import FakeTransport, make_config

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_users")]


def fetch_user(pool: ConnectionPool, email: str) -> tuple | None:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            "SELECT id, name, email_sent, email_sent_at FROM users WHERE email = %s",
            (email,),
        )
        return cursor.fetchone()


@pytest.fixture
def client(pool: ConnectionPool, transport: FakeTransport) -> TestClient:
    """Create test client with real database connection."""
    # Override the app's shared services; lifespan is not run
    app.state.pool = pool
    app.state.mailer = SmtpConfirmationMailer(
        make_config(), transport_factory=lambda config: transport
    )
    return TestClient(app)


class TestRegisterFlow:
    """Integration tests for POST /api/register."""

    def test_full_registration_flow(
        self, client: TestClient, pool: ConnectionPool, transport: FakeTransport
    ) -> None:
        response = client.post("/api/register", json={"name": "Ada", "email": "ADA@Example.com"})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "ada@example.com"
        assert isinstance(data["userId"], int) and data["userId"] > 0
        assert data["emailSent"] is True
        assert data["emailError"] is None

        row = fetch_user(pool, "ada@example.com")
        assert row is not None
        assert row[0] == data["userId"]
        assert row[2] is True
        assert row[3] is not None
        assert transport.sent[0]["To"] == "ada@example.com"

    def test_repeat_registration_conflicts(self, client: TestClient) -> None:
        payload = {"name": "Ada", "email": "ADA@Example.com"}

        assert client.post("/api/register", json=payload).status_code == 201
        assert client.post("/api/register", json=payload).status_code == 409

    def test_normalized_duplicate_conflicts(self, client: TestClient) -> None:
        assert client.post("/api/register", json={"name": "A", "email": "a@b.com"}).status_code == 201
        response = client.post("/api/register", json={"name": "B", "email": "  A@B.COM "})

        assert response.status_code == 409

    def test_failed_email_keeps_user_unsent(
        self,
        client: TestClient,
        pool: ConnectionPool,
        transport: FakeTransport,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        transport.send_error = ConnectionResetError("connection reset by peer")

        with caplog.at_level(logging.WARNING):
            response = client.post("/api/register", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 201
        assert response.json()["data"]["emailSent"] is False
        assert response.json()["data"]["emailError"] == "Failed to send confirmation email"
        row = fetch_user(pool, "ada@example.com")
        assert row is not None
        assert row[2] is False
        assert row[3] is None
        assert "connection reset by peer" in caplog.text

    def test_missing_credentials_still_registers(
        self, client: TestClient, pool: ConnectionPool
    ) -> None:
        app.state.mailer = SmtpConfirmationMailer(make_config(user=None, password=None))

        response = client.post("/api/register", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 201
        assert response.json()["data"]["emailSent"] is False
        assert response.json()["data"]["emailError"] is not None
        row = fetch_user(pool, "ada@example.com")
        assert row is not None
        assert row[2] is False

    def test_validation_failure_writes_nothing(self, client: TestClient, pool: ConnectionPool) -> None:
        response = client.post("/api/register", json={"name": "", "email": "bad"})

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 2
        with pool.connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM users").fetchone()
        assert count is not None and count[0] == 0
