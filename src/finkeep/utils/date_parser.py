"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta, UTC
from dateutil import parser as date_parser


def utcnow() -> datetime:
    """Current instant as naive UTC, the form stored in the database."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC.

    Aware datetimes are converted to UTC first; naive datetimes are assumed
    to already be UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def parse_datetime(value_str: str) -> datetime:
    """Parse a date/time string into a naive UTC datetime.

    Supports:
    - Relative dates: "now", "today", "yesterday", "tomorrow"
    - Absolute dates and times: "2024-01-15", "2024-01-15 09:30",
      "2024-01-15T09:30:00+05:30", "January 15, 2024"

    Date-only values resolve to midnight.

    Args:
        value_str: Date or date-time string

    Returns:
        Naive UTC datetime

    Raises:
        ValueError: If the string cannot be parsed
    """
    value_str = value_str.strip().lower()

    if value_str == "now":
        return utcnow()

    today = utcnow().date()
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if value_str in relative_dates:
        return datetime.combine(relative_dates[value_str], time.min)

    try:
        parsed = date_parser.parse(value_str)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value_str}': {e}")
    return to_naive_utc(parsed)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object."""
    return parse_datetime(date_str).date()
