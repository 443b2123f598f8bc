"""Mail Infrastructure Package."""

from icia_landing.infrastructure.mail.smtp_client import OutgoingMail, SmtpMailer


__all__ = [
    "OutgoingMail",
    "SmtpMailer",
]
