"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from tagledger.utils.date_parser import parse_date, get_date_range

# A Wednesday
TODAY = date(2024, 5, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Today ", today=TODAY) == TODAY


def test_parse_yesterday_and_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("yesterday", today=TODAY) == TODAY - timedelta(days=1)
    assert parse_date("tomorrow", today=TODAY) == TODAY + timedelta(days=1)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("this week", date(2024, 5, 13)),
        ("last week", date(2024, 5, 6)),
        ("next week", date(2024, 5, 20)),
        ("this month", date(2024, 5, 1)),
        ("last month", date(2024, 4, 1)),
        ("next month", date(2024, 6, 1)),
        ("this year", date(2024, 1, 1)),
        ("last year", date(2023, 1, 1)),
    ],
)
def test_parse_period_starts(text, expected):
    """Test that relative periods resolve to their first day."""
    assert parse_date(text, today=TODAY) == expected


def test_parse_last_weekday():
    """Test 'last <weekday>' including the same weekday as today."""
    assert parse_date("last monday", today=TODAY) == date(2024, 5, 13)
    assert parse_date("last wednesday", today=TODAY) == date(2024, 5, 8)
    assert parse_date("last friday", today=TODAY) == date(2024, 5, 10)


def test_parse_invalid():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("gibberish")


@pytest.mark.parametrize(
    "period, expected",
    [
        ("this-month", (date(2024, 5, 1), TODAY)),
        ("this-year", (date(2024, 1, 1), TODAY)),
        ("this-week", (date(2024, 5, 13), TODAY)),
        ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
        ("last-week", (date(2024, 5, 6), date(2024, 5, 12))),
    ],
)
def test_get_date_range(period, expected):
    """Test reporting period ranges."""
    assert get_date_range(period, today=TODAY) == expected


def test_get_date_range_unknown():
    """Test that unknown periods raise ValueError."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
