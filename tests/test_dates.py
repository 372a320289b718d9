"""Tests for calendar arithmetic helpers."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from habitflow.errors import ValidationError
from habitflow.services.dates import day_difference, day_of_week, iso_date, iter_dates, parse_date


class TestDayDifference:
    def test_positive_when_second_date_is_later(self):
        assert day_difference(date(2024, 1, 1), date(2024, 1, 3)) == 2

    def test_negative_when_second_date_is_earlier(self):
        assert day_difference("2024-01-03", "2024-01-01") == -2

    def test_ignores_time_of_day(self):
        """Late-evening start and early-morning end are still one day apart."""
        assert day_difference(datetime(2024, 3, 9, 23, 59), datetime(2024, 3, 10, 0, 1)) == 1

    def test_crosses_dst_change_without_drift(self):
        assert day_difference("2024-03-09", "2024-03-11") == 2
        assert day_difference("2024-10-26", "2024-10-28") == 2

    def test_leap_year(self):
        assert day_difference("2024-02-28", "2024-03-01") == 2
        assert day_difference("2023-02-28", "2023-03-01") == 1


class TestFormatting:
    def test_iso_date_uses_calendar_fields(self):
        assert iso_date(datetime(2024, 5, 6, 23, 30)) == "2024-05-06"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024-03-03", 0),  # Sunday
            ("2024-03-04", 1),  # Monday
            ("2024-03-09", 6),  # Saturday
        ],
    )
    def test_day_of_week_sunday_is_zero(self, value, expected):
        assert day_of_week(value) == expected


class TestParseDate:
    def test_accepts_iso_string(self):
        assert parse_date("2024-01-31") == date(2024, 1, 31)

    @pytest.mark.parametrize("value", ["2024-1-31", "20240131", "2024-02-30", "today", ""])
    def test_rejects_malformed_strings_naming_field(self, value):
        with pytest.raises(ValidationError) as excinfo:
            parse_date(value, "startDate")
        assert excinfo.value.field == "startDate"

    def test_rejects_non_date_types(self):
        with pytest.raises(ValidationError):
            parse_date(20240101)  # type: ignore[arg-type]


def test_iter_dates_is_inclusive():
    days = list(iter_dates(date(2024, 1, 30), date(2024, 2, 2)))
    assert [d.isoformat() for d in days] == ["2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02"]


def test_iter_dates_empty_when_range_inverted():
    assert list(iter_dates(date(2024, 1, 2), date(2024, 1, 1))) == []
