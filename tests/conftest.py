"""
Test Configuration and Fixtures.

Provides shared fixtures for all tests.
"""

from unittest.mock import MagicMock

import pytest
from flask import Flask
from flask.testing import FlaskClient

from icia_landing.app import create_app
from icia_landing.config import (
    ContactSettings,
    MailSettings,
    MongoSettings,
    PublicApiSettings,
    Settings,
    UpstreamSettings,
)
from icia_landing.infrastructure.http import RegionsUpstreamClient
from icia_landing.infrastructure.mail import SmtpMailer
from icia_landing.infrastructure.mongo import UserRegionRepository
from icia_landing.services.container import build_services


@pytest.fixture
def public_token() -> str:
    """Token guarding the public regions endpoint."""
    return "public-token"


@pytest.fixture
def mail_settings() -> MailSettings:
    """Complete SMTP configuration."""
    return MailSettings(
        host="smtp.example.com",
        port=465,
        user="robot@example.com",
        password="smtp-password",
        secure=True,
        from_address="robot@example.com",
        to_address="team@example.com",
    )


@pytest.fixture
def settings(mail_settings: MailSettings, public_token: str) -> Settings:
    """Settings with SMTP configured and no optional data sources."""
    return Settings(
        mail=mail_settings,
        upstream=UpstreamSettings(url="", token=""),
        mongo=MongoSettings(uri="", db_name="ciwork"),
        public_api=PublicApiSettings(token=public_token),
        contact=ContactSettings(),
        environment="test",
        port=8080,
    )


@pytest.fixture
def mock_mailer(mail_settings: MailSettings) -> MagicMock:
    """Mailer that records sends instead of talking SMTP."""
    mailer = MagicMock(spec=SmtpMailer)
    real = SmtpMailer(mail_settings)
    mailer.ensure_configured.side_effect = real.ensure_configured
    return mailer


@pytest.fixture
def mock_upstream() -> MagicMock:
    """Mock upstream regions client."""
    return MagicMock(spec=RegionsUpstreamClient)


@pytest.fixture
def mock_repository() -> MagicMock:
    """Mock users region repository."""
    return MagicMock(spec=UserRegionRepository)


@pytest.fixture
def app(settings: Settings, mock_mailer: MagicMock) -> Flask:
    """Create test Flask application with no optional data sources."""
    services = build_services(settings, mailer=mock_mailer)
    return create_app({"TESTING": True}, services=services)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_client(settings: Settings, mock_mailer: MagicMock):
    """Build a test client with chosen collaborators."""
    def _make(**overrides) -> FlaskClient:
        service_settings = overrides.pop("settings", settings)
        services = build_services(
            service_settings,
            mailer=overrides.pop("mailer", mock_mailer),
            **overrides,
        )
        return create_app({"TESTING": True}, services=services).test_client()
    return _make
