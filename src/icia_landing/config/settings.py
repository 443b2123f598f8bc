"""
Application configuration.

Centralizes environment variables, constants, and settings
using dataclasses for type safety and immutability.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_int(name: str) -> Optional[int]:
    """Read an integer environment variable, None if unset or invalid."""
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class MailSettings:
    """SMTP relay settings for the contact form."""

    host: str = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_HOST", "")
    )
    port: Optional[int] = field(
        default_factory=lambda: _env_int("CONTACT_EMAIL_PORT")
    )
    user: str = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_USER", "")
    )
    password: str = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_PASS", "")
    )
    secure: bool = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_SECURE", "false").lower() == "true"
    )
    from_address: str = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_FROM", "")
    )
    to_address: str = field(
        default_factory=lambda: os.environ.get("CONTACT_EMAIL_TO", "")
    )
    timeout_seconds: int = 10

    def missing_variables(self) -> List[str]:
        """Names of required environment variables that are not set."""
        required = [
            ("CONTACT_EMAIL_HOST", self.host),
            ("CONTACT_EMAIL_PORT", self.port),
            ("CONTACT_EMAIL_USER", self.user),
            ("CONTACT_EMAIL_PASS", self.password),
            ("CONTACT_EMAIL_FROM", self.from_address),
            ("CONTACT_EMAIL_TO", self.to_address),
        ]
        return [name for name, value in required if not value]

    @property
    def is_configured(self) -> bool:
        """Check if every required SMTP setting is present."""
        return not self.missing_variables()


@dataclass(frozen=True)
class UpstreamSettings:
    """Upstream region statistics API settings."""

    url: str = field(
        default_factory=lambda: os.environ.get("GEOGRAPHY_REGIONS_API_URL", "").strip()
    )
    token: str = field(
        default_factory=lambda: os.environ.get("GEOGRAPHY_REGIONS_API_TOKEN", "")
    )
    timeout_seconds: float = 5.0

    @property
    def is_configured(self) -> bool:
        """Check if the upstream API is configured."""
        return bool(self.url)


@dataclass(frozen=True)
class MongoSettings:
    """MongoDB settings for the users collection."""

    uri: str = field(
        default_factory=lambda: os.environ.get("MONGODB_URI", "")
    )
    db_name: str = field(
        default_factory=lambda: os.environ.get("MONGODB_DB_NAME") or "ciwork"
    )
    users_collection: str = "users"
    region_field: str = "regionCode"
    timeout_ms: int = 5000

    @property
    def is_configured(self) -> bool:
        """Check if MongoDB is configured."""
        return bool(self.uri)


@dataclass(frozen=True)
class PublicApiSettings:
    """Settings for the token-protected public regions endpoint."""

    token: str = field(
        default_factory=lambda: (
            os.environ.get("PUBLIC_GEOGRAPHY_API_TOKEN")
            or os.environ.get("GEOGRAPHY_REGIONS_API_TOKEN", "")
        )
    )


@dataclass(frozen=True)
class ContactSettings:
    """Contact form intake settings."""

    rate_limit_window_seconds: int = 10 * 60
    rate_limit_max_requests: int = 5
    rate_limit_sweep_seconds: int = 5 * 60
    max_message_length: int = 4000


@dataclass(frozen=True)
class Settings:
    """Main application settings."""

    mail: MailSettings = field(default_factory=MailSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    mongo: MongoSettings = field(default_factory=MongoSettings)
    public_api: PublicApiSettings = field(default_factory=PublicApiSettings)
    contact: ContactSettings = field(default_factory=ContactSettings)
    max_regions: int = 200
    environment: str = field(default_factory=lambda: os.environ.get("ENVIRONMENT", "development"))
    port: int = field(default_factory=lambda: _env_int("PORT") or 8080)


# Singleton settings instance
settings = Settings()
