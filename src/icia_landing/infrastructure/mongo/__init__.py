"""
MongoDB Infrastructure Package.

Exports:
- MongoClientProvider (owned, lazily connected client)
- UserRegionRepository (per-region user counts)
"""

from icia_landing.infrastructure.mongo.repositories import (
    MongoClientProvider,
    UserRegionRepository,
    build_region_pipeline,
)


__all__ = [
    "MongoClientProvider",
    "UserRegionRepository",
    "build_region_pipeline",
]
