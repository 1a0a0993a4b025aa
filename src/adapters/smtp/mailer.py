"""
Confirmation mailer adapter - Implements ConfirmationMailer protocol.

Owns the process-wide mail transport and its lifecycle:

    UNINITIALIZED --initialize()--> INITIALIZED
          |                              |
          +--(config/build/verify error)--> FAILED --next call--> retry

initialize() is idempotent and single-flight: concurrent callers wait on
one lock, and the first successful transport is reused by everyone. A
failure is never cached; the next call builds and verifies from scratch.
Missing credentials are reported here, on first use, rather than at
process startup.
"""

import logging
import threading
from collections.abc import Callable
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from enum import Enum

from src.domain.exceptions import (
    ConfigurationError,
    InitializationError,
    SendError,
    ValidationFailed,
)
from src.domain.ports import MailResult, MailStatus
from src.domain.templates import generate_confirmation
from src.domain.validation import require_valid

from .transport import Transport, TransportConfig, build_transport

logger = logging.getLogger(__name__)

MSG_CONFIGURATION = "Email service configuration is incomplete"
MSG_INITIALIZATION = "Failed to initialize email service"
MSG_SEND = "Failed to send confirmation email"
MSG_CONNECTION = "Email service connection test failed"


class TransporterState(str, Enum):
    """Lifecycle of the shared mail transport."""

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZED = "INITIALIZED"
    FAILED = "FAILED"


class SmtpConfirmationMailer:
    """
    Implements ConfirmationMailer protocol.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The transport factory is injectable so tests can avoid the network.
    """

    def __init__(
        self,
        config: TransportConfig,
        transport_factory: Callable[[TransportConfig], Transport] = build_transport,
    ) -> None:
        self._config = config
        self._transport_factory = transport_factory
        self._transport: Transport | None = None
        self._state = TransporterState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> TransporterState:
        return self._state

    def initialize(self) -> MailResult:
        """
        Build and verify the transport unless it is already initialized.

        Returns:
            CONNECTED on success (or if already initialized),
            CONFIGURATION_ERROR when credentials are missing,
            INITIALIZATION_ERROR when build or verify fails
        """
        if self._state is TransporterState.INITIALIZED:
            return MailResult(MailStatus.CONNECTED, "Email service already initialized")

        with self._lock:
            if self._state is TransporterState.INITIALIZED:
                return MailResult(MailStatus.CONNECTED, "Email service already initialized")
            try:
                transport = self._build_and_verify()
            except ConfigurationError as e:
                self._state = TransporterState.FAILED
                logger.error("Email configuration missing: %s", e)
                return MailResult(
                    MailStatus.CONFIGURATION_ERROR, MSG_CONFIGURATION, details=str(e)
                )
            except InitializationError as e:
                self._state = TransporterState.FAILED
                logger.error("Failed to initialize email service: %s", e)
                return MailResult(
                    MailStatus.INITIALIZATION_ERROR, MSG_INITIALIZATION, details=str(e)
                )

            self._transport = transport
            self._state = TransporterState.INITIALIZED

        logger.info(
            "Email service initialized successfully (%s via %s:%s)",
            self._config.provider,
            self._config.host,
            self._config.port,
        )
        return MailResult(MailStatus.CONNECTED, "Email service initialized successfully")

    def _build_and_verify(self) -> Transport:
        """
        Raises:
            ConfigurationError: If EMAIL_USER/EMAIL_PASS are missing
            InitializationError: If the transport cannot be built or verified
        """
        config = self._config
        if config.requires_credentials and not (config.user and config.password):
            raise ConfigurationError("EMAIL_USER and EMAIL_PASS are required")
        try:
            transport = self._transport_factory(config)
            transport.verify()
        except Exception as e:
            raise InitializationError(f"{type(e).__name__}: {e}") from e
        return transport

    def test_connection(self) -> MailResult:
        """
        Verify the transport is reachable, initializing it first if needed.

        Sends nothing and touches no business data.
        """
        initialized = self.initialize()
        if not initialized.ok:
            return initialized
        try:
            self._require_transport().verify()
        except Exception as e:
            logger.error("Email service connection test failed: %s", e)
            return MailResult(
                MailStatus.CONNECTION_ERROR, MSG_CONNECTION, details=f"{type(e).__name__}: {e}"
            )
        return MailResult(MailStatus.CONNECTED, "Email service connection test successful")

    def send_confirmation(self, name: str, email: str) -> MailResult:
        """
        Send the confirmation email: exactly one delivery attempt, no retry.

        Args:
            name: Recipient display name
            email: Recipient address

        Returns:
            SENT with message_id and recipient, or the failing MailStatus
        """
        initialized = self.initialize()
        if not initialized.ok:
            return initialized

        try:
            require_valid(name, email)
        except ValidationFailed as e:
            return MailResult(MailStatus.VALIDATION_ERROR, "; ".join(e.errors))

        recipient = email.strip()
        logger.info("Sending confirmation email to: %s", recipient)
        try:
            message_id = self._deliver(name.strip(), recipient)
        except SendError as e:
            logger.error("Failed to send email to %s: %s", recipient, e)
            return MailResult(MailStatus.SEND_ERROR, MSG_SEND, recipient=recipient, details=str(e))

        logger.info("Email sent successfully: %s", message_id)
        return MailResult(
            MailStatus.SENT,
            "Confirmation email sent successfully",
            message_id=message_id,
            recipient=recipient,
        )

    def _deliver(self, name: str, recipient: str) -> str:
        """
        Raises:
            SendError: If the message cannot be built or delivered
        """
        try:
            message = self._build_message(name, recipient)
            return self._require_transport().send(message)
        except Exception as e:
            raise SendError(f"{type(e).__name__}: {e}") from e

    def _build_message(self, name: str, recipient: str) -> EmailMessage:
        content = generate_confirmation(name, recipient)
        sender = self._config.user or "noreply@localhost"

        message = EmailMessage()
        message["Subject"] = content.subject
        message["From"] = formataddr((self._config.from_name, sender))
        message["To"] = recipient
        message["Message-ID"] = make_msgid(domain=sender.rpartition("@")[2] or None)
        message.set_content(content.text)
        message.add_alternative(content.html, subtype="html")
        return message

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise InitializationError("Email transport is not initialized")
        return self._transport
