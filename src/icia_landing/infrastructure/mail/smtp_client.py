"""
SMTP Mail Client.

Relays contact inquiries to the association inbox.
"""

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from icia_landing.config import MailSettings, settings
from icia_landing.core.exceptions import ConfigurationError, MailDeliveryError
from icia_landing.infrastructure.logging import get_logger, log_duration


logger = get_logger(__name__)


@dataclass(frozen=True)
class OutgoingMail:
    """A plain-text email ready for dispatch."""
    subject: str
    body: str
    reply_to: str

    def to_message(self, from_address: str, to_address: str) -> EmailMessage:
        """Build the MIME message."""
        message = EmailMessage()
        message["From"] = from_address
        message["To"] = to_address
        message["Subject"] = self.subject
        message["Reply-To"] = self.reply_to
        message.set_content(self.body)
        return message


class SmtpMailer:
    """
    Sends mail through an authenticated SMTP relay.

    ``secure`` selects implicit TLS (usually port 465). Otherwise the
    connection is upgraded with STARTTLS when the server offers it.
    """

    def __init__(self, mail_settings: Optional[MailSettings] = None) -> None:
        self._settings = mail_settings or settings.mail

    def ensure_configured(self) -> None:
        """
        Fail fast on missing SMTP configuration.

        Raises:
            ConfigurationError: Naming the first missing variable.
        """
        missing = self._settings.missing_variables()
        if missing:
            raise ConfigurationError(missing[0])

    def _connect(self) -> smtplib.SMTP:
        if self._settings.secure:
            return smtplib.SMTP_SSL(
                self._settings.host,
                self._settings.port,
                timeout=self._settings.timeout_seconds,
            )
        return smtplib.SMTP(
            self._settings.host,
            self._settings.port,
            timeout=self._settings.timeout_seconds,
        )

    @log_duration("smtp_send")
    def send(self, mail: OutgoingMail) -> None:
        """
        Send one message.

        Raises:
            ConfigurationError: If SMTP settings are incomplete.
            MailDeliveryError: If the relay cannot be reached or
                rejects the message.
        """
        self.ensure_configured()

        try:
            message = mail.to_message(self._settings.from_address, self._settings.to_address)
        except (ValueError, TypeError) as e:
            raise MailDeliveryError(f"message could not be built: {e}") from e

        try:
            with self._connect() as server:
                if not self._settings.secure:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls()
                        server.ehlo()
                server.login(self._settings.user, self._settings.password)
                server.send_message(message)

        except smtplib.SMTPResponseException as e:
            raise MailDeliveryError(str(e.smtp_error), status_code=e.smtp_code) from e
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(str(e)) from e

        logger.info(
            "Inquiry email sent",
            extra={"extra_fields": {"subject": mail.subject}}
        )
