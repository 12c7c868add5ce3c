"""
PURPOSE: Tests for time utility functions.

Tests timestamp rendering:
- UTC now is timezone-aware
- ISO-8601 output with a trailing "Z"
- Human-readable notification time in a chosen timezone
"""

from datetime import datetime, timedelta, timezone

from signal_relay.utils.time_utils import (
    as_utc,
    format_for_notification,
    get_utc_now,
    to_iso_utc,
)


class TestGetUtcNow:
    """Test current time retrieval."""

    def test_get_utc_now_returns_utc(self):
        now = get_utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)


class TestIsoRendering:
    """Test ISO-8601 rendering."""

    def test_aware_utc(self):
        moment = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
        assert to_iso_utc(moment) == "2024-05-01T12:30:00Z"

    def test_other_offset_is_converted(self):
        moment = datetime(2024, 5, 1, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso_utc(moment) == "2024-05-01T12:30:00Z"

    def test_naive_is_treated_as_utc(self):
        assert as_utc(datetime(2024, 5, 1, 12, 30)).tzinfo == timezone.utc
        assert to_iso_utc(datetime(2024, 5, 1, 12, 30)) == "2024-05-01T12:30:00Z"

    def test_microseconds_kept(self):
        moment = datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)
        assert to_iso_utc(moment) == "2024-05-01T12:30:00.123000Z"


class TestNotificationRendering:
    """Test chat-facing time strings."""

    def test_utc_default(self):
        moment = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert format_for_notification(moment) == "2024-01-01 12:00:00 (UTC)"

    def test_named_zone(self):
        moment = datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert format_for_notification(moment, "Asia/Taipei") == "2024-07-01 20:00:00 (Asia/Taipei)"

    def test_daylight_saving_applied(self):
        winter = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        summer = datetime(2024, 7, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert format_for_notification(winter, "America/New_York").startswith("2024-01-15 07:00")
        assert format_for_notification(summer, "America/New_York").startswith("2024-07-15 08:00")
