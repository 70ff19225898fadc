"""Tests for time utility functions."""

import datetime as dt

import pytest

from scuba_admin.calculators.time_utils import (
    convert_time_to_minutes,
    dive_duration_minutes,
    format_api_date,
    parse_api_date,
    parse_time,
)


class TestConvertTimeToMinutes:
    """Test convert_time_to_minutes function."""

    def test_midnight(self):
        """Test conversion of midnight."""
        assert convert_time_to_minutes(dt.time(0, 0)) == 0

    def test_morning_dive(self):
        assert convert_time_to_minutes(dt.time(9, 30)) == 570

    def test_end_of_day(self):
        """Test conversion of last minute of day."""
        assert convert_time_to_minutes(dt.time(23, 59)) == 1439

    def test_seconds_ignored(self):
        assert convert_time_to_minutes(dt.time(10, 15, 59)) == 615


class TestDiveDurationMinutes:
    """Test dive_duration_minutes function."""

    def test_same_day(self):
        assert dive_duration_minutes(dt.time(9, 10), dt.time(9, 58)) == 48

    def test_night_dive_across_midnight(self):
        """Test an exit before the entry counts as the next day."""
        assert dive_duration_minutes(dt.time(23, 40), dt.time(0, 20)) == 40

    def test_equal_times_rejected(self):
        with pytest.raises(ValueError, match="Exit time must be after entry time"):
            dive_duration_minutes(dt.time(9, 0), dt.time(9, 0))


class TestParseTime:
    """Test parse_time function."""

    @pytest.mark.parametrize(
        "value,expected",
        [("09:10", dt.time(9, 10)), ("21:05:30", dt.time(21, 5, 30)), (" 7:05 ", dt.time(7, 5))],
    )
    def test_valid(self, value, expected):
        assert parse_time(value) == expected

    def test_time_passthrough(self):
        value = dt.time(8, 0)
        assert parse_time(value) is value

    @pytest.mark.parametrize("value", ["25:00", "9.30", "noon", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid time format"):
            parse_time(value)


class TestApiDates:
    """Test parse_api_date and format_api_date."""

    def test_plain_date(self):
        assert parse_api_date("2024-03-01") == dt.date(2024, 3, 1)

    def test_timestamp(self):
        """Test ISO timestamps are cut to the calendar date."""
        assert parse_api_date("2024-03-01T00:00:00.000000Z") == dt.date(2024, 3, 1)

    def test_date_and_datetime_values(self):
        assert parse_api_date(dt.date(2024, 3, 1)) == dt.date(2024, 3, 1)
        assert parse_api_date(dt.datetime(2024, 3, 1, 15, 0)) == dt.date(2024, 3, 1)

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_empty_or_invalid(self, value):
        assert parse_api_date(value) is None

    def test_format(self):
        assert format_api_date("2024-03-01T12:00:00Z") == "2024-03-01"
        assert format_api_date(None) == "-"
        assert format_api_date("", default="never") == "never"
