"""
API Request Validation.

Uses Pydantic for request payload validation.
"""

import re
from typing import Any, Dict

from pydantic import BaseModel, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from icia_landing.core.inquiry import Inquiry, InquiryRole


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_MAX_MESSAGE_LENGTH = 4000


def is_honeypot_filled(payload: Dict[str, Any]) -> bool:
    """True when the hidden ``company`` field carries a value."""
    return bool(payload.get("company"))


class ContactRequest(BaseModel):
    """
    Request body for /api/contact.

    Errors are reported per field in declaration order, so the
    first one is the message shown to the user. Pass
    ``context={"max_message_length": n}`` to override the limit.
    """

    name: str = ""
    email: str = ""
    role: InquiryRole = InquiryRole.UNKNOWN
    message: str = ""

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        """Trim strings; anything else counts as empty."""
        return v.strip() if isinstance(v, str) else ""

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v: Any) -> InquiryRole:
        """Unknown or missing roles become 'unknown'."""
        if isinstance(v, str):
            return InquiryRole.coerce(v)
        return InquiryRole.UNKNOWN

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("name_required", "Введите имя")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise PydanticCustomError("email_invalid", "Введите корректный email")
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str, info: ValidationInfo) -> str:
        if not v:
            raise PydanticCustomError("message_required", "Добавьте сообщение")
        max_length = (info.context or {}).get("max_message_length", DEFAULT_MAX_MESSAGE_LENGTH)
        if len(v) > max_length:
            raise PydanticCustomError("message_too_long", "Сообщение слишком длинное")
        return v

    def to_inquiry(self) -> Inquiry:
        """Convert to the domain model."""
        return Inquiry(
            name=self.name,
            email=self.email,
            role=self.role,
            message=self.message,
        )
