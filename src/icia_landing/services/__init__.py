"""
Services Layer.

Business logic orchestration:
- Contact inquiry relay
- Region statistics resolution
"""

from icia_landing.services.contact import ContactService
from icia_landing.services.geography import RegionStatsResolver


__all__ = [
    "ContactService",
    "RegionStatsResolver",
]
