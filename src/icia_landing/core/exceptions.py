"""
Custom exceptions for the landing site backend.

Provides a hierarchy of business and infrastructure exceptions
for proper error handling and HTTP status code mapping.
"""

from typing import Optional


class IciaLandingError(Exception):
    """Base exception for all landing site errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# =============================================================================
# Business Errors (4xx)
# =============================================================================

class BusinessError(IciaLandingError):
    """Base exception for client-caused errors (typically 4xx)."""
    pass


class RateLimitExceededError(BusinessError):
    """Raised when a client exceeds its request window."""

    def __init__(self, client_id: str, retry_after: int):
        super().__init__(
            f"Rate limit exceeded for {client_id}",
            {"retry_after": retry_after}
        )
        self.client_id = client_id
        self.retry_after = retry_after


class UnauthorizedError(BusinessError):
    """Raised when a bearer token is missing or does not match."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


# =============================================================================
# Infrastructure Errors (5xx)
# =============================================================================

class InfrastructureError(IciaLandingError):
    """Base exception for infrastructure errors (typically 5xx)."""
    pass


class ConfigurationError(InfrastructureError):
    """Raised when a required configuration is missing."""

    def __init__(self, config_name: str, message: Optional[str] = None):
        msg = message or f"Configuration missing: {config_name}"
        super().__init__(msg, {"config_name": config_name})
        self.config_name = config_name


class ExternalServiceError(InfrastructureError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        service_name: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            f"{service_name} error: {message}",
            {"service_name": service_name, "status_code": status_code}
        )
        self.service_name = service_name
        self.status_code = status_code


class UpstreamError(ExternalServiceError):
    """Raised when the upstream regions API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("Upstream", message, status_code)


class DatabaseError(ExternalServiceError):
    """Raised when a MongoDB query fails."""

    def __init__(self, message: str):
        super().__init__("MongoDB", message)


class MailDeliveryError(ExternalServiceError):
    """Raised when the SMTP relay rejects or drops a message."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("SMTP", message, status_code)
