"""Core package - Pure business logic with no external dependencies."""

from icia_landing.core.exceptions import (
    BusinessError,
    ConfigurationError,
    DatabaseError,
    ExternalServiceError,
    IciaLandingError,
    InfrastructureError,
    MailDeliveryError,
    RateLimitExceededError,
    UnauthorizedError,
    UpstreamError,
)
from icia_landing.core.inquiry import Inquiry, InquiryRole
from icia_landing.core.regions import (
    FALLBACK_REGIONS,
    MAX_REGIONS,
    REGION_LABELS,
    RegionSource,
    RegionStat,
    RegionStatsResult,
    aggregate_users_by_region,
    get_region_label,
    parse_region_array,
    parse_upstream_payload,
    to_positive_int,
    to_region_code,
)

__all__ = [
    # Exceptions
    "BusinessError",
    "ConfigurationError",
    "DatabaseError",
    "ExternalServiceError",
    "IciaLandingError",
    "InfrastructureError",
    "MailDeliveryError",
    "RateLimitExceededError",
    "UnauthorizedError",
    "UpstreamError",
    # Inquiry
    "Inquiry",
    "InquiryRole",
    # Regions
    "FALLBACK_REGIONS",
    "MAX_REGIONS",
    "REGION_LABELS",
    "RegionSource",
    "RegionStat",
    "RegionStatsResult",
    "aggregate_users_by_region",
    "get_region_label",
    "parse_region_array",
    "parse_upstream_payload",
    "to_positive_int",
    "to_region_code",
]
