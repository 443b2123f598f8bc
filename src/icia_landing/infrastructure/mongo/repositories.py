"""
MongoDB Repositories.

Owned client provider and the users collection aggregation
behind the region statistics.
"""

from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from icia_landing.config import MongoSettings, settings
from icia_landing.core.exceptions import ConfigurationError, DatabaseError
from icia_landing.core.regions import MAX_REGIONS, to_region_code
from icia_landing.infrastructure.logging import get_logger, log_duration


logger = get_logger(__name__)


class MongoClientProvider:
    """
    Owns a single MongoClient for the process.

    The client is created on first use; concurrent first requests
    share one instance.
    """

    def __init__(
        self,
        mongo_settings: Optional[MongoSettings] = None,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ) -> None:
        self._settings = mongo_settings or settings.mongo
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._lock = Lock()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def get_client(self) -> MongoClient:
        """
        Get or create the MongoDB client.

        Raises:
            ConfigurationError: If MONGODB_URI is not set.
            DatabaseError: If the URI is rejected by the driver.
        """
        if self._client is None:
            if not self._settings.is_configured:
                raise ConfigurationError("MONGODB_URI")
            with self._lock:
                if self._client is None:
                    try:
                        self._client = self._client_factory(
                            self._settings.uri,
                            serverSelectionTimeoutMS=self._settings.timeout_ms,
                            connectTimeoutMS=self._settings.timeout_ms,
                            socketTimeoutMS=self._settings.timeout_ms,
                            appname="icia-landing",
                        )
                    except (PyMongoError, ValueError, TypeError) as e:
                        # pymongo rejects malformed URIs and options with ValueError/TypeError
                        raise DatabaseError(f"client creation failed: {e}") from e
                    logger.info(
                        "MongoDB client created",
                        extra={"extra_fields": {"db_name": self._settings.db_name}}
                    )
        return self._client

    def get_database(self) -> Database:
        """Get the configured database handle."""
        return self.get_client()[self._settings.db_name]

    def close(self) -> None:
        """Close the client if one was created."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None


def build_region_pipeline(region_field: str, limit: int) -> List[Dict[str, Any]]:
    """
    Aggregation pipeline counting users per one- or two-digit region code.

    Codes are read as trimmed strings so numeric and string
    fields are grouped together; unconvertible values become null
    and fail the match.
    """
    return [
        {"$project": {
            "_id": 0,
            "regionCode": {"$trim": {"input": {"$convert": {
                "input": f"${region_field}",
                "to": "string",
                "onError": None,
                "onNull": None,
            }}}},
        }},
        {"$match": {"regionCode": {"$regex": "^[0-9]{1,2}$"}}},
        {"$group": {"_id": "$regionCode", "count": {"$sum": 1}}},
        {"$sort": {"count": -1, "_id": 1}},
        {"$limit": limit},
    ]


class UserRegionRepository:
    """Repository for per-region user counts."""

    def __init__(
        self,
        provider: MongoClientProvider,
        mongo_settings: Optional[MongoSettings] = None,
    ) -> None:
        self._provider = provider
        self._settings = mongo_settings or settings.mongo

    @property
    def collection(self):
        """Get the users collection reference."""
        return self._provider.get_database()[self._settings.users_collection]

    @log_duration("mongo_count_users_by_region")
    def count_users_by_region(self, limit: int = MAX_REGIONS) -> List[Dict[str, Any]]:
        """
        Count users grouped by region code.

        Args:
            limit: Maximum number of regions to return.

        Returns:
            ``{"regionCode", "count"}`` rows sorted by count descending,
            region codes zero-padded to two characters.

        Raises:
            ConfigurationError: If MongoDB is not configured.
            DatabaseError: If the aggregation fails.
        """
        pipeline = build_region_pipeline(self._settings.region_field, limit)

        try:
            cursor = self.collection.aggregate(
                pipeline,
                maxTimeMS=self._settings.timeout_ms,
            )
            rows = list(cursor)
        except PyMongoError as e:
            raise DatabaseError(f"aggregation failed: {e}") from e

        return [
            {"regionCode": to_region_code(row["_id"]), "count": int(row["count"])}
            for row in rows
        ]
