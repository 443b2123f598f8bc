"""
Tests for Region Statistics Resolver.

Tests the upstream -> database -> fallback chain.
"""

import pytest

from icia_landing.core.exceptions import ConfigurationError, DatabaseError, UpstreamError
from icia_landing.core.regions import FALLBACK_REGIONS, RegionSource
from icia_landing.services.geography import RegionStatsResolver


class TestRegionStatsResolver:
    """Tests for RegionStatsResolver."""

    def test_no_sources_returns_fallback(self):
        """Unconfigured sources should yield the static default."""
        result = RegionStatsResolver().resolve()

        assert result.source == RegionSource.FALLBACK
        assert result.regions == FALLBACK_REGIONS

    def test_upstream_answer_skips_database(self, mock_upstream, mock_repository):
        """A non-empty upstream result ends the chain."""
        mock_upstream.fetch_payload.return_value = {"users": [{"regionCode": "38"}] * 3}
        resolver = RegionStatsResolver(mock_upstream, mock_repository)

        result = resolver.resolve()

        assert result.source == RegionSource.UPSTREAM
        assert result.regions[0].count == 3
        mock_repository.count_users_by_region.assert_not_called()

    def test_upstream_error_falls_through_to_database(self, mock_upstream, mock_repository):
        mock_upstream.fetch_payload.side_effect = UpstreamError("HTTP 500", status_code=500)
        mock_repository.count_users_by_region.return_value = [
            {"regionCode": "54", "count": 8},
            {"regionCode": "38", "count": 2},
        ]
        resolver = RegionStatsResolver(mock_upstream, mock_repository)

        result = resolver.resolve()

        assert result.source == RegionSource.MONGO
        assert [(r.region_code, r.count) for r in result.regions] == [("54", 8), ("38", 2)]

    def test_empty_upstream_payload_falls_through(self, mock_upstream, mock_repository):
        """Parsed-but-empty upstream data counts as nothing."""
        mock_upstream.fetch_payload.return_value = {"regions": []}
        mock_repository.count_users_by_region.return_value = [{"regionCode": "38", "count": 1}]

        result = RegionStatsResolver(mock_upstream, mock_repository).resolve()

        assert result.source == RegionSource.MONGO

    def test_database_rows_with_unknown_codes_are_dropped(self, mock_repository):
        mock_repository.count_users_by_region.return_value = [
            {"regionCode": "99", "count": 40},
            {"regionCode": "03", "count": 1},
        ]

        result = RegionStatsResolver(region_repository=mock_repository).resolve()

        assert [r.region_code for r in result.regions] == ["03"]

    @pytest.mark.parametrize("error", [
        DatabaseError("server selection timeout"),
        ConfigurationError("MONGODB_URI"),
    ])
    def test_database_failure_returns_fallback(self, mock_repository, error):
        mock_repository.count_users_by_region.side_effect = error

        result = RegionStatsResolver(region_repository=mock_repository).resolve()

        assert result.source == RegionSource.FALLBACK

    def test_database_stage_passes_region_cap(self, mock_repository):
        mock_repository.count_users_by_region.return_value = []

        RegionStatsResolver(region_repository=mock_repository, max_regions=50).resolve()

        mock_repository.count_users_by_region.assert_called_once_with(50)

    def test_count_rows_without_database_raises(self):
        with pytest.raises(ConfigurationError):
            RegionStatsResolver().count_rows()

    def test_result_serializes_source_tag(self):
        data = RegionStatsResolver().resolve().to_dict()

        assert data == {
            "regions": [{"regionCode": "38", "label": "Иркутская область", "count": 1}],
            "source": "fallback",
        }

    def test_unexpected_database_error_returns_fallback(self, mock_repository):
        """Errors outside the adapter hierarchy must not escape the stage."""
        mock_repository.count_users_by_region.side_effect = ValueError("bad port")

        result = RegionStatsResolver(region_repository=mock_repository).resolve()

        assert result.source == RegionSource.FALLBACK

    def test_unexpected_upstream_error_falls_through(self, mock_upstream, mock_repository):
        mock_upstream.fetch_payload.side_effect = TypeError("unexpected payload")
        mock_repository.count_users_by_region.return_value = [{"regionCode": "38", "count": 2}]

        result = RegionStatsResolver(mock_upstream, mock_repository).resolve()

        assert result.source == RegionSource.MONGO
