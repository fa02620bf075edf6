"""
Date Utilities
==============

Calendar-date helpers for query ranges and result timestamps.
"""

from datetime import UTC, date, datetime, timedelta


def local_today() -> date:
    """
    Get today's calendar date in the local timezone.

    Returns:
        Today's date (time-of-day dropped)
    """
    return datetime.now().date()


def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current UTC datetime
    """
    return datetime.now(UTC)


def format_date(value: date) -> str:
    """
    Format a date as YYYY-MM-DD with zero-padded month and day.

    Args:
        value: Date (or datetime) to format

    Returns:
        ISO calendar date string
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def add_days(value: date, days: int) -> date:
    """
    Add days to a date.

    Args:
        value: Base date
        days: Number of days to add (may be negative)

    Returns:
        New date
    """
    return value + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Inclusive number of calendar days from start to end."""
    return (end - start).days + 1
