"""
Tests for Region Normalization.

Tests coercion and the three upstream payload shapes.
"""

import pytest

from icia_landing.core.regions import (
    RegionStat,
    aggregate_users_by_region,
    parse_region_array,
    parse_upstream_payload,
    to_positive_int,
    to_region_code,
)


class TestToRegionCode:
    """Tests for region code coercion."""

    @pytest.mark.parametrize("value,expected", [
        ("5", "05"),
        (5, "05"),
        (5.0, "05"),
        (" 38 ", "38"),
        ("77", "77"),
        ("123", "123"),
    ])
    def test_pads_to_two_characters(self, value, expected):
        assert to_region_code(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", True, [], {}])
    def test_rejects_blank_and_non_scalar(self, value):
        assert to_region_code(value) is None


class TestToPositiveInt:
    """Tests for count coercion."""

    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        (3.9, 3),
        ("12", 12),
        (" 7.5 ", 7),
    ])
    def test_accepts_positive_numbers(self, value, expected):
        assert to_positive_int(value) == expected

    @pytest.mark.parametrize("value", [
        0, -1, 0.5, float("inf"), float("nan"), "abc", "", "-3", "inf", None, False,
    ])
    def test_rejects_invalid_counts(self, value):
        assert to_positive_int(value) is None


class TestParseRegionArray:
    """Tests for the regions array shape."""

    def test_pads_code_and_keeps_count(self):
        regions = parse_region_array([{"regionCode": "5", "count": 3}])

        assert regions == [RegionStat(region_code="05", label="Республика Дагестан", count=3)]

    def test_drops_unknown_codes(self):
        assert parse_region_array([{"regionCode": "99", "count": 3}]) == []

    def test_code_and_users_aliases(self):
        regions = parse_region_array([{"code": 38, "users": "4"}])

        assert regions[0].region_code == "38"
        assert regions[0].count == 4

    def test_invalid_count_defaults_to_one(self):
        regions = parse_region_array([{"regionCode": "38", "count": -5}])

        assert regions[0].count == 1

    def test_skips_non_objects(self):
        regions = parse_region_array(["38", None, {"regionCode": "38"}])

        assert len(regions) == 1

    def test_truncates_to_limit(self):
        items = [{"regionCode": "38", "count": i + 1} for i in range(250)]

        assert len(parse_region_array(items)) == 200
        assert len(parse_region_array(items, limit=10)) == 10

    def test_normalizing_twice_is_a_no_op(self):
        once = parse_region_array([
            {"regionCode": "5", "count": "3"},
            {"code": 77, "users": 9.2},
        ])

        twice = parse_region_array([region.to_dict() for region in once])

        assert twice == once


class TestAggregateUsersByRegion:
    """Tests for the raw users shape."""

    def test_counts_users_per_code(self):
        users = [
            {"regionCode": "38"},
            {"regionCode": 38},
            {"regionCode": "5"},
            {"name": "no region"},
        ]

        regions = aggregate_users_by_region(users)

        assert [(r.region_code, r.count) for r in regions] == [("38", 2), ("05", 1)]

    def test_non_list_yields_nothing(self):
        assert aggregate_users_by_region({"regionCode": "38"}) == []


class TestParseUpstreamPayload:
    """Tests for shape selection."""

    def test_regions_shape_wins(self):
        payload = {
            "regions": [{"regionCode": "77", "count": 2}],
            "users": [{"regionCode": "38"}],
        }

        assert [r.region_code for r in parse_upstream_payload(payload)] == ["77"]

    def test_users_shape_when_regions_empty(self):
        payload = {"regions": [{"regionCode": "99"}], "users": [{"regionCode": "38"}]}

        assert [r.region_code for r in parse_upstream_payload(payload)] == ["38"]

    def test_bare_array_shape(self):
        payload = [{"regionCode": "78", "count": 5}]

        assert parse_upstream_payload(payload)[0].label == "Санкт-Петербург"

    @pytest.mark.parametrize("payload", [None, "text", 42, {}, []])
    def test_unusable_payload_yields_nothing(self, payload):
        assert parse_upstream_payload(payload) == []
