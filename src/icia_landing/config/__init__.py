"""Configuration package."""

from icia_landing.config.settings import (
    ContactSettings,
    MailSettings,
    MongoSettings,
    PublicApiSettings,
    Settings,
    UpstreamSettings,
    settings,
)

__all__ = [
    "ContactSettings",
    "MailSettings",
    "MongoSettings",
    "PublicApiSettings",
    "Settings",
    "UpstreamSettings",
    "settings",
]
