"""Date parsing utilities.

Relative expressions are resolved against a reference day so transaction
dates, goal deadlines and report ranges can be typed the way people say them.
"""

import re
from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

CALENDAR_UNITS = ("week", "month", "year")
RANGE_OFFSETS = {"this": 0, "last": -1}

_OFFSET_WORDS = {"last": -1, "this": 0, "next": 1}
_IN_PATTERN = re.compile(r"^in (\d+) (day|week|month|year)s?$")


def period_start(unit: str, today: date, offset: int = 0) -> date:
    """First day of the week (Monday), month or year containing ``today``.

    Args:
        unit: "week", "month" or "year"
        today: Reference date
        offset: Number of whole periods to move (negative goes back)
    """
    if unit == "week":
        return today - timedelta(days=today.weekday()) + timedelta(weeks=offset)
    if unit == "month":
        return today.replace(day=1) + relativedelta(months=offset)
    if unit == "year":
        return date(today.year + offset, 1, 1)
    raise ValueError(f"Unknown calendar unit: '{unit}'")


def _shift(today: date, count: int, unit: str) -> date:
    if unit == "day":
        return today + timedelta(days=count)
    return today + relativedelta(**{f"{unit}s": count})


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15/01/2024"
    - "today", "yesterday", "tomorrow"
    - Period starts: "last month", "this week", "next year", ...
    - Offsets: "in 3 months", "in 10 days"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative expressions (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)
    if date_str == "tomorrow":
        return today + timedelta(days=1)

    word, _, unit = date_str.partition(" ")
    if word in _OFFSET_WORDS and unit in CALENDAR_UNITS:
        return period_start(unit, today, _OFFSET_WORDS[word])

    match = _IN_PATTERN.match(date_str)
    if match:
        return _shift(today, int(match.group(1)), match.group(2))

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get inclusive start and end dates for a named range.

    "this-*" ranges end today; "last-*" ranges cover the whole previous
    week, month or year.

    Args:
        period: Range name (this-month, this-year, this-week, last-month, last-year, last-week)
        today: Reference date (defaults to date.today())

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    which, _, unit = period.partition("-")
    if which not in RANGE_OFFSETS or unit not in CALENDAR_UNITS:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
            "this-week, last-month, last-year, last-week"
        )

    start = period_start(unit, today, RANGE_OFFSETS[which])
    if which == "this":
        return (start, today)
    return (start, period_start(unit, today) - timedelta(days=1))
