"""
Service Container.

Builds the process-wide collaborators once at startup and hands
them to request handlers through the Flask app.
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from icia_landing.api.rate_limiting import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStore,
    RateLimitStore,
)
from icia_landing.config import Settings, settings as default_settings
from icia_landing.infrastructure.http import RegionsUpstreamClient
from icia_landing.infrastructure.logging import get_logger
from icia_landing.infrastructure.mail import SmtpMailer
from icia_landing.infrastructure.mongo import MongoClientProvider, UserRegionRepository
from icia_landing.services.contact import ContactService
from icia_landing.services.geography import RegionStatsResolver


logger = get_logger(__name__)


EXTENSION_KEY = "icia_landing"


@dataclass
class Services:
    """Collaborators shared by every request."""
    settings: Settings
    rate_limiter: FixedWindowRateLimiter
    contact: ContactService
    regions: RegionStatsResolver
    mongo: Optional[MongoClientProvider] = None
    upstream: Optional[RegionsUpstreamClient] = None

    def close(self) -> None:
        """Release network resources."""
        if self.upstream is not None:
            self.upstream.close()
        if self.mongo is not None:
            self.mongo.close()


def build_services(
    settings: Optional[Settings] = None,
    mailer: Optional[SmtpMailer] = None,
    upstream_client: Optional[RegionsUpstreamClient] = None,
    region_repository: Optional[UserRegionRepository] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
) -> Services:
    """
    Wire collaborators from settings.

    Explicit arguments replace the default for that collaborator.
    Optional data sources are only built when configured.
    """
    settings = settings or default_settings

    store = rate_limit_store or InMemoryRateLimitStore(
        window_seconds=settings.contact.rate_limit_window_seconds,
        sweep_interval_seconds=settings.contact.rate_limit_sweep_seconds,
    )
    rate_limiter = FixedWindowRateLimiter(store, settings.contact.rate_limit_max_requests)

    if upstream_client is None and settings.upstream.is_configured:
        upstream_client = RegionsUpstreamClient(settings.upstream)

    mongo: Optional[MongoClientProvider] = None
    if region_repository is None and settings.mongo.is_configured:
        mongo = MongoClientProvider(settings.mongo)
        region_repository = UserRegionRepository(mongo, settings.mongo)

    mailer = mailer or SmtpMailer(settings.mail)
    if not settings.mail.is_configured:
        logger.warning(
            "SMTP is not fully configured, contact form will fail",
            extra={"extra_fields": {"missing": settings.mail.missing_variables()}}
        )

    return Services(
        settings=settings,
        rate_limiter=rate_limiter,
        contact=ContactService(mailer),
        regions=RegionStatsResolver(
            upstream_client=upstream_client,
            region_repository=region_repository,
            max_regions=settings.max_regions,
        ),
        mongo=mongo,
        upstream=upstream_client,
    )


def get_services() -> Services:
    """Services bound to the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]
