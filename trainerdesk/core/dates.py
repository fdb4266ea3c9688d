"""
Calendar arithmetic shared by billing and scheduling.

Pure functions over calendar dates (billing) and HH:MM times of day
(schedules). Nothing here knows about time zones: dates are plain
`datetime.date` values built directly from their year/month/day parts,
so a calendar day can never shift because of a local UTC offset.
"""

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Union

from .errors import InvalidDate, InvalidFormat

MINUTES_PER_DAY = 24 * 60

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

DateLike = Union[date, datetime]


# ---------------------------------------------------------------------------
# Time of day
# ---------------------------------------------------------------------------

def time_to_minutes(value: str) -> int:
    """
    Convert a 24-hour "HH:MM" string to minutes since midnight.

    Raises InvalidFormat unless the value is exactly two colon-separated
    integers with hours in [0, 23] and minutes in [0, 59].
    """
    if not isinstance(value, str):
        raise InvalidFormat(f"Time must be a string in HH:MM format, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidFormat(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if not 0 <= hours <= 23:
        raise InvalidFormat(f"Hours must be between 0 and 23, got {hours}")
    if not 0 <= minutes <= 59:
        raise InvalidFormat(f"Minutes must be between 0 and 59, got {minutes}")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight back into "HH:MM"."""
    # 24:00 is allowed so a window can end at midnight
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise InvalidFormat(f"Minutes must be between 0 and {MINUTES_PER_DAY}, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


# ---------------------------------------------------------------------------
# Calendar dates
# ---------------------------------------------------------------------------

def parse_calendar_date(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" string as a literal calendar date.

    The three components are taken as written and passed straight to
    `date(year, month, day)`; there is no datetime or timezone round-trip.
    """
    if not isinstance(value, str):
        raise InvalidDate(f"Date must be a YYYY-MM-DD string, got {value!r}")

    match = _ISO_DATE.match(value.strip())
    if not match:
        raise InvalidDate(f"Date must be in YYYY-MM-DD format, got {value!r}")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDate(f"{value!r} is not a valid calendar date: {e}") from e


def truncate_to_day(value: DateLike) -> date:
    """Drop any time-of-day component so dates compare as whole days."""
    if isinstance(value, datetime):
        return value.date()
    return value


def end_of_day(value: date) -> datetime:
    """The last representable instant of a calendar day."""
    return datetime.combine(value, time.max)


def add_months(start: date, months: int) -> date:
    """
    Calendar month addition anchored on `start`'s day of month.

    When the anchor day does not exist in the target month the result is
    clamped to that month's last day: Jan 31 + 1 month is Feb 29 in a leap
    year and Feb 28 otherwise. Callers always add to the original anchor,
    so one short month never drags later results backwards.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1

    if not 1 <= year <= 9999:
        raise InvalidDate(f"Adding {months} months to {start} leaves the supported calendar")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def months_between(start: date, end: date) -> int:
    """Whole calendar months from `start`'s month to `end`'s month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def ceil_days(delta: timedelta) -> int:
    """Round a timedelta up to whole days (negative deltas round toward zero)."""
    seconds = delta.total_seconds()
    whole, remainder = divmod(seconds, 86400)
    return int(whole) + (1 if remainder > 0 else 0)
