"""Tests for the date utility functions."""

from datetime import datetime, timedelta, timezone

import pytest

from mcp_jira.utils import days_since, parse_datetime

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestParseDatetime:
    """Tests for parse_datetime."""

    def test_jira_timestamp(self):
        """Test that Jira's offset format is parsed as an aware datetime."""
        result = parse_datetime("2024-03-08T12:00:00.000+0000")
        assert result == datetime(2024, 3, 8, 12, 0, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        """Test that epoch timestamps in milliseconds are supported."""
        assert parse_datetime("1612137600000") == datetime(
            2021, 2, 1, tzinfo=timezone.utc
        )

    def test_naive_value_is_utc(self):
        """Test that a value without offset is assumed to be UTC."""
        assert parse_datetime("2021-01-01T00:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param(None, id="none"),
            pytest.param("", id="empty"),
            pytest.param("invalid", id="garbage"),
        ],
    )
    def test_unparseable_returns_none(self, value):
        """Test that missing or invalid input yields None."""
        assert parse_datetime(value) is None


class TestDaysSince:
    """Tests for days_since."""

    def test_whole_days(self):
        """Test that exact multiples of a day are counted."""
        then = (NOW - timedelta(days=7)).isoformat()
        assert days_since(then, NOW) == 7

    def test_partial_day_is_floored(self):
        """Test that 4 days and 23 hours count as 4 days."""
        then = (NOW - timedelta(days=4, hours=23)).isoformat()
        assert days_since(then, NOW) == 4

    def test_naive_now_is_utc(self):
        """Test that a naive reference time is treated as UTC."""
        then = (NOW - timedelta(days=2)).isoformat()
        assert days_since(then, NOW.replace(tzinfo=None)) == 2

    def test_invalid_date_returns_none(self):
        """Test that an unparseable date yields None."""
        assert days_since("not a date", NOW) is None

    def test_defaults_to_current_time(self):
        """Test that the reference defaults to the current UTC time."""
        then = (datetime.now(timezone.utc) - timedelta(days=3, hours=1)).isoformat()
        assert days_since(then) == 3
