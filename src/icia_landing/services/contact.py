"""
Contact Intake Service.

Relays validated contact form inquiries to the association inbox.
"""

from icia_landing.core.inquiry import Inquiry
from icia_landing.infrastructure.logging import get_logger
from icia_landing.infrastructure.mail import OutgoingMail, SmtpMailer


logger = get_logger(__name__)


class ContactService:
    """Turns an inquiry into exactly one email."""

    def __init__(self, mailer: SmtpMailer) -> None:
        self._mailer = mailer

    def submit(self, inquiry: Inquiry) -> None:
        """
        Send the inquiry email.

        Args:
            inquiry: Validated submission.

        Raises:
            ConfigurationError: If SMTP settings are incomplete.
            MailDeliveryError: If the relay fails.
        """
        self._mailer.ensure_configured()

        self._mailer.send(OutgoingMail(
            subject=inquiry.subject,
            body=inquiry.body,
            reply_to=inquiry.email,
        ))

        logger.info(
            "Contact inquiry relayed",
            extra={"extra_fields": {"role": inquiry.role.value}}
        )
