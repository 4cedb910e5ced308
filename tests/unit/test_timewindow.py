"""Unit tests for local time handling

Tests parsing of user-entered dates and conversion to naive UTC.
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from sensorboard.dashboard.timewindow import (
    InvalidPeriod, default_period, default_window, format_local, parse_local_datetime, parse_period
)

UTC = ZoneInfo("UTC")
PRAGUE = ZoneInfo("Europe/Prague")


class TestParseLocalDatetime:
    """Test accepted input formats"""

    def test_form_format_in_utc(self):
        assert parse_local_datetime("01.01.2024 12:00", UTC) == datetime(2024, 1, 1, 12, 0)

    def test_local_zone_is_converted(self):
        # CET in winter, CEST in summer
        assert parse_local_datetime("01.01.2024 12:00", PRAGUE) == datetime(2024, 1, 1, 11, 0)
        assert parse_local_datetime("01.07.2024 12:00", PRAGUE) == datetime(2024, 7, 1, 10, 0)

    def test_iso_variants(self):
        assert parse_local_datetime("2024-01-01 12:30", UTC) == datetime(2024, 1, 1, 12, 30)
        assert parse_local_datetime("2024-01-01T12:30:00+02:00", UTC) == datetime(2024, 1, 1, 10, 30)

    def test_date_only(self):
        assert parse_local_datetime("02.01.2024", UTC) == datetime(2024, 1, 2, 0, 0)

    def test_epoch_seconds(self):
        assert parse_local_datetime("1704110400", PRAGUE) == datetime(2024, 1, 1, 12, 0)
        assert parse_local_datetime(1704110400, PRAGUE) == datetime(2024, 1, 1, 12, 0)

    def test_aware_datetime(self):
        value = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert parse_local_datetime(value, PRAGUE) == datetime(2024, 1, 1, 12, 0)

    @pytest.mark.parametrize("value", ["", "   ", "yesterday", "32.13.2024 10:00"])
    def test_invalid_input(self, value):
        with pytest.raises(InvalidPeriod):
            parse_local_datetime(value, UTC)


class TestParsePeriod:

    def test_valid_period(self):
        start, end = parse_period("01.01.2024 10:00", "01.01.2024 12:00", UTC)
        assert (start, end) == (datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 12))

    def test_reversed_period_is_rejected(self):
        with pytest.raises(InvalidPeriod):
            parse_period("01.01.2024 12:00", "01.01.2024 10:00", UTC)

    def test_empty_period_is_rejected(self):
        with pytest.raises(InvalidPeriod):
            parse_period("01.01.2024 12:00", "01.01.2024 12:00", UTC)


def test_format_local():
    assert format_local(datetime(2024, 1, 1, 12, 0), PRAGUE) == "01.01.2024 13:00"
    assert format_local(None, PRAGUE) == ""


def test_default_period_spans_days():
    now = datetime(2024, 1, 10, 8, 30)
    assert default_period(UTC, 2, now=now) == ("08.01.2024 08:30", "10.01.2024 08:30")


def test_default_period_rounds_end_up_to_next_minute():
    now = datetime(2024, 1, 10, 8, 30, 45)
    assert default_period(UTC, 1, now=now) == ("09.01.2024 08:31", "10.01.2024 08:31")


def test_default_window_covers_current_second():
    now = datetime(2024, 1, 10, 8, 30, 45, 999000)
    start, end = default_window(1, now=now)

    assert end == datetime(2024, 1, 10, 8, 30, 46)
    assert start == datetime(2024, 1, 9, 8, 30, 46)
    assert start <= now < end
