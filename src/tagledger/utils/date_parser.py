"""Date parsing utilities for transaction dates and report periods."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta, MO

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def _period_start(anchor: str, unit: str, today: date) -> date | None:
    """First day of the week/month/year selected by 'last', 'this' or 'next'."""
    shift = {"last": -1, "this": 0, "next": 1}[anchor]
    if unit == "week":
        return today + relativedelta(weekday=MO(-1), weeks=shift)
    if unit == "month":
        return today.replace(day=1) + relativedelta(months=shift)
    if unit == "year":
        return today.replace(month=1, day=1) + relativedelta(years=shift)
    return None


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", "last/this/next week|month|year"
    (first day of that period) and "last <weekday>".

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    anchor, _, unit = text.partition(" ")
    if anchor in ("last", "this", "next") and unit:
        start = _period_start(anchor, unit, today)
        if start is not None:
            return start
        if anchor == "last" and unit in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(unit)) % 7 or 7
            return today - timedelta(days=days_ago)

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a reporting period.

    "this-*" periods run to today; "last-*" periods cover the whole
    previous week, month or year.

    Raises:
        ValueError: If period string is not recognized
    """
    key = period.strip().lower()
    today = today or date.today()
    if key not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    anchor, unit = key.split("-")
    start = _period_start(anchor, unit, today)
    if anchor == "this":
        return start, today
    return start, _period_start("this", unit, today) - timedelta(days=1)
