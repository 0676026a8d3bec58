"""
Unit tests for platform filter preferences.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from deal_feed.components.filter_preferences import (
    PREFERENCES_TTL,
    FilterPreferences,
    apply_platform_filters,
    parse_platform_filters,
)


class TestParsePlatformFilters:
    """Test cases for parse_platform_filters."""

    def test_valid(self):
        assert parse_platform_filters('["🎮", "♨"]') == {"🎮", "♨"}

    @pytest.mark.parametrize("raw", [None, "", "{not json", '{"a": 1}', '"🎮"', "42"])
    def test_malformed_means_no_filter(self, raw):
        assert parse_platform_filters(raw) == set()

    def test_non_string_entries_dropped(self):
        assert parse_platform_filters('["🎮", 3, null, ""]') == {"🎮"}


class TestApplyPlatformFilters:
    """Test cases for apply_platform_filters."""

    def test_empty_filter_keeps_all(self, sample_deals):
        assert apply_platform_filters(sample_deals, set()) == sample_deals

    def test_keeps_matching_platforms_in_order(self, sample_deals):
        result = apply_platform_filters(sample_deals, {"🧱", "🎮"})

        assert [d.id for d in result] == ["cid-3", "cid-1"]

    def test_untagged_deals_dropped_by_filter(self, sample_deals):
        from deal_feed.models.deal import Deal

        deals = sample_deals + [Deal("x", "Untagged", "", "", "")]

        assert "x" not in [d.id for d in apply_platform_filters(deals, {"🎮"})]


class TestFilterPreferences:
    """Test cases for FilterPreferences."""

    def test_save_and_load(self, tmp_path):
        preferences = FilterPreferences(str(tmp_path / "prefs" / "filters.json"))

        preferences.save(["🎮", "♨", "🎮"])

        assert preferences.load() == {"🎮", "♨"}

    def test_saved_shape(self, tmp_path):
        path = tmp_path / "filters.json"
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        FilterPreferences(str(path)).save(["🧱"], now=now)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["platforms"] == ["🧱"]
        assert data["expires"] == (now + PREFERENCES_TTL).isoformat()

    def test_expired_preferences_ignored(self, tmp_path):
        preferences = FilterPreferences(str(tmp_path / "filters.json"))

        preferences.save(["🎮"], now=datetime.now(timezone.utc) - timedelta(days=8))

        assert preferences.load() == set()

    def test_missing_file(self, tmp_path):
        assert FilterPreferences(str(tmp_path / "none.json")).load() == set()

    @pytest.mark.parametrize(
        "content",
        [
            "{broken",
            "[]",
            json.dumps({"platforms": ["🎮"]}),
            json.dumps({"platforms": ["🎮"], "expires": "whenever"}),
            json.dumps({"platforms": "🎮", "expires": "2999-01-01T00:00:00+00:00"}),
        ],
    )
    def test_malformed_file_means_no_filter(self, tmp_path, content):
        path = tmp_path / "filters.json"
        path.write_text(content, encoding="utf-8")

        assert FilterPreferences(str(path)).load() == set()

    def test_clear(self, tmp_path):
        path = tmp_path / "filters.json"
        preferences = FilterPreferences(str(path))
        preferences.save(["🎮"])

        preferences.clear()
        preferences.clear()

        assert not path.exists()
        assert preferences.load() == set()
