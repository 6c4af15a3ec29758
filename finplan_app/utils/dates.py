"""
Calendar date utilities for deadline and recurrence math.

Month arithmetic follows whole-calendar-month semantics: a month between two
dates only counts once the day of month has been reached again.
"""

from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from ..errors import MalformedDateError


def get_today(today: Optional[date] = None) -> date:
    """
    Get the planning reference date.

    Args:
        today: Optional pinned date, returned unchanged when given

    Returns:
        The pinned date or the local calendar date
    """
    if today is not None:
        return today
    return date.today()


def months_between(start: date, end: date) -> int:
    """
    Count whole calendar months from start to end.

    The result is negative when end precedes start. A partial month is not
    counted: Jan 20 to Feb 19 is 0 months, Jan 15 to Feb 15 is 1.
    A start day past the end of the target month is clamped, so Jan 31 to
    Feb 28 counts as 1.

    Args:
        start: Starting date
        end: Ending date

    Returns:
        Signed integer month count
    """
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse an ISO date or datetime into a calendar date.

    Args:
        value: ISO 8601 string (a trailing Z is accepted), date, datetime or None

    Returns:
        Calendar date, or None when value is None or an empty string

    Raises:
        MalformedDateError: If the value cannot be interpreted as a date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedDateError(
            f"Unsupported date value type: {type(value).__name__}",
            raw_data=repr(value)
        )

    text = value.strip()
    if not text:
        return None

    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as e:
        raise MalformedDateError(f"Invalid date: {value!r} ({e})", raw_data=value) from e


def format_date(value: Optional[date]) -> Optional[str]:
    """Format a date as ISO 8601, passing None through."""
    return value.isoformat() if value is not None else None
