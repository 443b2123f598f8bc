"""
Contact Inquiry Model.

A validated contact form submission and the email it becomes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class InquiryRole(str, Enum):
    """Who the submitter says they are."""
    CONTRACTOR = "contractor"
    SPECIALIST = "specialist"
    OPERATOR = "operator"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: str) -> "InquiryRole":
        """Map free-form input to a known role, else UNKNOWN."""
        try:
            return cls(value.strip())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Inquiry:
    """
    A validated contact form submission.

    Attributes:
        name: Submitter name, trimmed and non-empty.
        email: Submitter email, used as Reply-To.
        role: Submitter role.
        message: Free-form message body.
    """
    name: str
    email: str
    role: InquiryRole
    message: str

    @property
    def subject(self) -> str:
        """Email subject line for the association inbox, on one line."""
        name = " ".join(self.name.split())
        return f"Заявка с сайта ICIA: {name} ({self.role.value})"

    @property
    def body(self) -> str:
        """Plain-text email body listing every field."""
        lines: List[str] = [
            f"Имя: {self.name}",
            f"Email: {self.email}",
            f"Роль: {self.role.value}",
            "",
            "Сообщение:",
            self.message,
        ]
        return "\n".join(lines)
