"""
Datetime utilities for consistent timezone handling across the application.

All instants are stored and compared in UTC. Patients submit appointment
times as epoch milliseconds together with their UTC offset; the helpers here
turn that pair into a timezone-aware UTC datetime and provide the month
arithmetic used by the well guide status engine.
"""

import calendar
import logging
import re
from datetime import datetime, timezone, timedelta, date
from typing import Optional, Union

from core.constants import AVERAGE_DAYS_PER_MONTH, MAX_UTC_OFFSET_MINUTES

logger = logging.getLogger(__name__)

UTC = timezone.utc

_OFFSET_PATTERN = re.compile(r"^([+-])(\d{1,2})(?::?(\d{2}))?$")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utc_now() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        Current datetime with UTC timezone
    """
    return datetime.now(UTC)


def utc_today() -> date:
    """Get the current UTC calendar date."""
    return utc_now().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is timezone-aware with UTC timezone.

    Naive datetimes are assumed to already be in UTC (SQLite returns naive
    values for timezone-aware columns).

    Args:
        dt: Datetime to normalize

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_utc_offset(value: Union[str, int, None]) -> timezone:
    """
    Parse a UTC offset into a fixed timezone.

    Accepts "Z", "+HH:MM", "+HHMM", "+HH" and integers. Short strings such
    as "+16" are always hours. Integers with an absolute value below 16 are
    hours, anything else is minutes.

    Raises:
        ValueError: If the offset is missing, malformed or out of range
    """
    if value is None:
        raise ValueError("UTC offset is required")

    minutes: int
    if isinstance(value, bool):
        raise ValueError(f"Invalid UTC offset: {value!r}")
    if isinstance(value, int):
        minutes = value * 60 if abs(value) < 16 else value
    else:
        text = value.strip()
        if not text:
            raise ValueError("UTC offset is required")
        if text.upper() == "Z":
            minutes = 0
        elif re.fullmatch(r"[+-]?\d+", text) and ":" not in text and len(text.lstrip("+-")) <= 2:
            minutes = int(text) * 60
        else:
            match = _OFFSET_PATTERN.match(text)
            if not match:
                raise ValueError(f"Invalid UTC offset: {value!r}")
            sign, hours_part, minutes_part = match.groups()
            if minutes_part is not None and int(minutes_part) >= 60:
                raise ValueError(f"Invalid UTC offset: {value!r}")
            minutes = int(hours_part) * 60 + int(minutes_part or 0)
            if sign == "-":
                minutes = -minutes

    if abs(minutes) > MAX_UTC_OFFSET_MINUTES:
        raise ValueError(f"UTC offset out of range: {value!r}")
    return timezone(timedelta(minutes=minutes))


def format_utc_offset(tz: timezone) -> str:
    """Format a fixed timezone as "+HH:MM"."""
    offset = tz.utcoffset(None)
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def parse_epoch_millis(value: Union[str, int, float, None]) -> int:
    """
    Parse an epoch-millisecond timestamp submitted as a string or number.

    Raises:
        ValueError: If the value is missing or not an integral number
    """
    if value is None or isinstance(value, bool):
        raise ValueError("Timestamp is required")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Invalid timestamp: {value!r}")
        return int(value)

    text = value.strip()
    if not re.fullmatch(r"-?\d+", text):
        raise ValueError(f"Invalid timestamp: {value!r}")
    return int(text)


def epoch_millis_to_utc(millis: Union[str, int, float, None], utc_offset: Union[str, int, None]) -> datetime:
    """
    Normalize a submitted (epoch milliseconds, UTC offset) pair to a UTC instant.

    Epoch milliseconds already identify an absolute instant; the offset only
    labels the patient's local time, so it is validated and then dropped by
    the conversion to UTC.

    Raises:
        ValueError: If either part cannot be parsed
    """
    tz = parse_utc_offset(utc_offset)
    ms = parse_epoch_millis(millis)
    try:
        local = datetime.fromtimestamp(ms / 1000, tz=tz)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp out of range: {millis!r}") from e
    return local.astimezone(UTC)


def fractional_months_between(later: datetime, earlier: datetime) -> float:
    """
    Continuous number of months from ``earlier`` to ``later``.

    Elapsed wall-clock time divided by the average Gregorian month, so the
    result is negative when ``earlier`` is after ``later``.
    """
    elapsed = ensure_utc(later) - ensure_utc(earlier)
    return elapsed.total_seconds() / 86400 / AVERAGE_DAYS_PER_MONTH


def add_months(dt: datetime, months: int) -> datetime:
    """
    Add calendar months, clamping the day to the end of the target month.

    Example: Jan 31 + 1 month -> Feb 28 (or 29 in leap years).
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def month_name(dt: Union[date, datetime]) -> str:
    """English month name for display (e.g. "October"), independent of locale."""
    return MONTH_NAMES[dt.month - 1]
