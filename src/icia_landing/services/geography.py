"""
Region Statistics Resolver.

Answers "how many users per region" from the best available source:
upstream HTTP API, then MongoDB aggregation, then a static default.
"""

from typing import Any, Dict, List, Optional

from icia_landing.core.exceptions import ConfigurationError, ExternalServiceError
from icia_landing.core.regions import (
    FALLBACK_REGIONS,
    MAX_REGIONS,
    RegionSource,
    RegionStat,
    RegionStatsResult,
    parse_region_array,
    parse_upstream_payload,
)
from icia_landing.infrastructure.http import RegionsUpstreamClient
from icia_landing.infrastructure.logging import get_logger
from icia_landing.infrastructure.mongo import UserRegionRepository


logger = get_logger(__name__)


class RegionStatsResolver:
    """
    Linear fallback over the region data sources.

    Each stage returns a list; an empty list means the stage had
    nothing to offer and the next one is tried. Unconfigured
    sources are passed as None and skipped.
    """

    def __init__(
        self,
        upstream_client: Optional[RegionsUpstreamClient] = None,
        region_repository: Optional[UserRegionRepository] = None,
        max_regions: int = MAX_REGIONS,
    ) -> None:
        self._upstream = upstream_client
        self._repository = region_repository
        self._max_regions = max_regions

    def resolve(self) -> RegionStatsResult:
        """
        Resolve region statistics. Never returns an empty list.

        Returns:
            RegionStatsResult tagged with the stage that answered.
        """
        regions = self.from_upstream()
        if regions:
            return RegionStatsResult(tuple(regions), RegionSource.UPSTREAM)

        regions = self.from_database()
        if regions:
            return RegionStatsResult(tuple(regions), RegionSource.MONGO)

        logger.info("Serving fallback region statistics")
        return RegionStatsResult(FALLBACK_REGIONS, RegionSource.FALLBACK)

    def from_upstream(self) -> List[RegionStat]:
        """Upstream stage: fetch and normalize, empty on any failure."""
        if self._upstream is None:
            return []

        try:
            regions = parse_upstream_payload(self._upstream.fetch_payload(), self._max_regions)
        except ExternalServiceError as e:
            self._stage_failed(RegionSource.UPSTREAM, e)
            return []
        except Exception as e:
            self._stage_failed(RegionSource.UPSTREAM, e, unexpected=True)
            return []

        if not regions:
            logger.warning(
                "Upstream payload had no usable regions",
                extra={"extra_fields": {"stage": RegionSource.UPSTREAM.value}}
            )
        return regions

    def from_database(self) -> List[RegionStat]:
        """Database stage: aggregate users per region, empty on any failure."""
        if self._repository is None:
            return []

        try:
            return parse_region_array(self.count_rows(), self._max_regions)
        except (ConfigurationError, ExternalServiceError) as e:
            self._stage_failed(RegionSource.MONGO, e)
            return []
        except Exception as e:
            self._stage_failed(RegionSource.MONGO, e, unexpected=True)
            return []

    @staticmethod
    def _stage_failed(stage: RegionSource, error: Exception, unexpected: bool = False) -> None:
        logger.warning(
            f"{stage.value} stage yielded nothing: {error}",
            exc_info=unexpected,
            extra={"extra_fields": {
                "stage": stage.value,
                "error_type": type(error).__name__,
            }}
        )

    def count_rows(self) -> List[Dict[str, Any]]:
        """
        Raw ``{regionCode, count}`` rows straight from the database.

        Raises:
            ConfigurationError: If MongoDB is not configured.
            DatabaseError: If the aggregation fails.
        """
        if self._repository is None:
            raise ConfigurationError("MONGODB_URI")
        return self._repository.count_users_by_region(self._max_regions)
