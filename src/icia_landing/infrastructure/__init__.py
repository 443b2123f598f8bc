"""
Infrastructure Layer.

This layer contains all external dependencies and adapters:
- Logging configuration
- MongoDB client and repositories
- HTTP clients (upstream regions API)
- SMTP mailer
"""

from icia_landing.infrastructure.logging import (
    get_logger,
    log_duration,
    log_request_context,
    logger,
    StructuredLogger,
)


__all__ = [
    "get_logger",
    "log_duration",
    "log_request_context",
    "logger",
    "StructuredLogger",
]
