"""
Mail transport clients.

A transport knows how to reach one mail provider: verify() performs a
liveness round-trip, send() delivers one message and returns its
Message-ID. SmtpTransport speaks SMTP via smtplib; ConsoleTransport
logs messages instead of sending them, for local development.
"""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from src.config.settings import Settings

logger = logging.getLogger(__name__)

GMAIL_HOST = "smtp.gmail.com"
GMAIL_PORT = 465


@dataclass(frozen=True)
class TransportConfig:
    """Connection and sender settings for one mail provider."""

    provider: str
    host: str
    port: int
    secure: bool
    user: str | None
    password: str | None
    timeout: float
    from_name: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransportConfig":
        """
        Resolve provider-specific connection settings.

        gmail always uses smtp.gmail.com over implicit TLS; any other
        provider uses the configured SMTP host, port and secure flag.
        """
        provider = settings.email_service.strip().lower()
        if provider == "gmail":
            host, port, secure = GMAIL_HOST, GMAIL_PORT, True
        else:
            host, port, secure = settings.smtp_host, settings.smtp_port, settings.smtp_secure
        return cls(
            provider=provider,
            host=host,
            port=port,
            secure=secure,
            user=settings.email_user or None,
            password=settings.email_pass or None,
            timeout=settings.smtp_timeout,
            from_name=settings.email_from_name,
        )

    @property
    def requires_credentials(self) -> bool:
        return self.provider != "console"


class Transport(Protocol):
    """Client capable of delivering email."""

    def verify(self) -> None:
        ...

    def send(self, message: EmailMessage) -> str:
        ...


class SmtpTransport:
    """
    SMTP client built on smtplib.

    A new authenticated session is opened per operation, so one
    instance is safe to share between request threads.
    """

    def __init__(self, config: TransportConfig) -> None:
        self._config = config

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated SMTP session (implicit TLS or STARTTLS)."""
        config = self._config
        context = ssl.create_default_context()
        if config.secure:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                config.host, config.port, timeout=config.timeout, context=context
            )
        else:
            smtp = smtplib.SMTP(config.host, config.port, timeout=config.timeout)
        try:
            smtp.ehlo()
            if not config.secure and smtp.has_extn("starttls"):
                smtp.starttls(context=context)
                smtp.ehlo()
            if config.user and config.password:
                smtp.login(config.user, config.password)
        except Exception:
            smtp.close()
            raise
        return smtp

    def verify(self) -> None:
        """
        Check the server accepts a connection and our credentials.

        Raises:
            smtplib.SMTPException: On protocol or authentication failure
            OSError: On network failure
        """
        with self._connect() as smtp:
            code, reply = smtp.noop()
            if code != 250:
                raise smtplib.SMTPResponseException(code, reply)

    def send(self, message: EmailMessage) -> str:
        """Deliver one message and return its Message-ID."""
        with self._connect() as smtp:
            smtp.send_message(message)
        return str(message["Message-ID"])


class ConsoleTransport:
    """
    Logs outgoing messages instead of delivering them.

    For demo/development purposes - the confirmation is visible in the
    application logs.
    """

    def verify(self) -> None:
        logger.info("[EMAIL] Console transport ready")

    def send(self, message: EmailMessage) -> str:
        logger.info(
            "[EMAIL] To: %s Subject: %s Message-ID: %s",
            message["To"],
            message["Subject"],
            message["Message-ID"],
        )
        return str(message["Message-ID"])


def build_transport(config: TransportConfig) -> Transport:
    """Create the transport client for the configured provider."""
    if config.provider == "console":
        return ConsoleTransport()
    return SmtpTransport(config)
