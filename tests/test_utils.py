"""Tests for shared helpers."""

from datetime import date, datetime

import pytest

from readtracker.utils import resolve_today, round_half_up, start_of_day, to_calendar_day


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.0, 0), (0.4, 0), (0.5, 1), (1.5, 2), (2.5, 3), (12.5, 13), (99.49, 99), (150.0, 150)],
    )
    def test_values(self, value, expected):
        assert round_half_up(value) == expected


class TestDates:
    def test_start_of_day(self):
        assert start_of_day(datetime(2025, 3, 4, 17, 45, 12, 500)) == datetime(2025, 3, 4)

    def test_to_calendar_day(self):
        assert to_calendar_day(datetime(2025, 3, 4, 17)) == date(2025, 3, 4)
        assert to_calendar_day(date(2025, 3, 4)) == date(2025, 3, 4)

    def test_resolve_today_default(self):
        assert resolve_today() == date.today()

    def test_resolve_today_datetime(self):
        assert resolve_today(datetime(2025, 3, 4, 23, 59)) == date(2025, 3, 4)
