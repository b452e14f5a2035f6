"""
Tests for the schedule calculator.
"""
from datetime import date, datetime

import pytest

from cropdoctor.services.scheduling import (
    DEFAULT_FREQUENCY_DAYS,
    add_days,
    compute_next_application,
    parse_frequency_days,
)


@pytest.mark.parametrize("descriptor,expected", [
    ("Apply every 10 days", 10),
    ("10 days", 10),
    ("every 3 days, then every 14 days", 3),
    ("Every 5 days", 5),
    ("0 days", 0),
])
def test_parse_extracts_first_integer(descriptor, expected):
    assert parse_frequency_days(descriptor) == expected


@pytest.mark.parametrize("descriptor", ["Once", "Immediate", "Seasonal", "Next season", "", None])
def test_parse_defaults_to_weekly(descriptor):
    assert parse_frequency_days(descriptor) == DEFAULT_FREQUENCY_DAYS == 7


def test_next_application_examples():
    assert compute_next_application(date(2024, 1, 1), "Apply every 10 days") == date(2024, 1, 11)
    assert compute_next_application(date(2024, 1, 1), "Seasonal") == date(2024, 1, 8)


def test_next_application_crosses_month_and_leap_day():
    assert compute_next_application(date(2024, 2, 25), "7 days") == date(2024, 3, 3)
    assert compute_next_application(date(2023, 12, 30), "3 days") == date(2024, 1, 2)


def test_datetime_start_uses_calendar_day():
    """Time of day never shifts the result."""
    start = datetime(2024, 1, 1, 23, 59)
    assert compute_next_application(start, "1 day") == date(2024, 1, 2)


def test_huge_day_count_does_not_raise():
    assert add_days(date(2024, 1, 1), 10 ** 9) == date.max
