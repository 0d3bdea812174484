# File: utils/dt_utils.py
"""Date and time utilities for habitcore.

Pure Python date/time functions with no engine imports, so every function
here can be unit tested in isolation. Uses standard library datetime and
zoneinfo plus dateutil for calendar-aware month/year arithmetic.

Everything the engines reason about is a *local calendar day*. These helpers
are the single place where dates, datetimes, ISO strings and epoch
timestamps are turned into such days.

Functions:
    - set_default_timezone / get_default_timezone: Configure "local"
    - dt_today_local: Today's date in the local timezone
    - as_local: Convert a datetime to the local timezone
    - dt_parse_date: Parse date strings in common formats
    - dt_to_local_date: Normalize any date input to a local calendar day
    - dt_parse_timestamp: Parse anchor/creation timestamps to aware datetimes
    - dt_from_epoch_ms: Epoch milliseconds to an aware local datetime
    - dt_day_key: Canonical YYYY-MM-DD key for a day
    - sunday_based_weekday: Weekday index with 0=Sunday
    - monday_start / weeks_between / months_between: Interval arithmetic
    - dt_add_interval: Add days/weeks/months/years with month-end clamping
    - each_day_in_range: Lazily iterate an inclusive day range
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
import logging
import math
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Time unit constants
TIME_UNIT_DAYS = "days"
TIME_UNIT_WEEKS = "weeks"
TIME_UNIT_MONTHS = "months"
TIME_UNIT_YEARS = "years"

DAY_KEY_FORMAT = "%Y-%m-%d"
DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12

# Safety limit for range iteration (days)
MAX_DATE_CALCULATION_ITERATIONS = 1000


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this once during host setup to configure the user's timezone. It
    decides which calendar day an aware datetime or epoch timestamp falls on.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date / Timezone Conversion
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.
    """
    return datetime.now(tz or DEFAULT_TIME_ZONE).date()


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object. Naive values are taken as local wall-clock
            time and only get the timezone attached.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "04/07/2025" (US format)
    - "07/04/2025" (European format - attempted if US fails)
    - "2025/04/07"

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def dt_to_local_date(
    dt_input: date | datetime | str | None, tz: ZoneInfo | None = None
) -> date | None:
    """Normalize a date input to the local calendar day it denotes.

    Rules:
        - date: returned unchanged
        - naive datetime: its own calendar date
        - aware datetime: converted to the local timezone first
        - string: the calendar date *written in the string*. An offset such
          as "Z" is ignored, so "2025-01-15T00:00:00.000Z" is Jan 15 in
          every timezone (hosts store local midnight with a Z suffix).

    Args:
        dt_input: Date-like value to normalize.
        tz: Optional timezone override for aware datetimes.

    Returns:
        The local calendar day, or None if the input cannot be interpreted.
    """
    if dt_input is None or isinstance(dt_input, bool):
        return None

    if isinstance(dt_input, datetime):
        if dt_input.tzinfo is None:
            return dt_input.date()
        return as_local(dt_input, tz).date()

    if isinstance(dt_input, date):
        return dt_input

    if isinstance(dt_input, str):
        text = dt_input.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            parsed = dt_parse_date(text)
            if parsed is None:
                _LOGGER.debug("dt_to_local_date: Unparseable date string: %s", text)
            return parsed

    _LOGGER.debug("dt_to_local_date: Unsupported input type %s", type(dt_input))
    return None


def dt_from_epoch_ms(
    epoch_ms: int | float, tz: ZoneInfo | None = None
) -> datetime | None:
    """Convert epoch milliseconds to an aware datetime in local timezone.

    Args:
        epoch_ms: Milliseconds since 1970-01-01T00:00:00Z.
        tz: Optional timezone override.

    Returns:
        Aware local datetime, or None if the value is not a finite,
        representable timestamp.
    """
    if isinstance(epoch_ms, bool) or not math.isfinite(epoch_ms):
        return None
    try:
        return datetime.fromtimestamp(epoch_ms / 1000, tz=UTC).astimezone(
            tz or DEFAULT_TIME_ZONE
        )
    except (OverflowError, OSError, ValueError):
        _LOGGER.debug("dt_from_epoch_ms: Timestamp out of range: %s", epoch_ms)
        return None


def dt_parse_timestamp(
    value: date | datetime | str | int | float | None, tz: ZoneInfo | None = None
) -> datetime | None:
    """Parse a stored timestamp (anchorDate, createdAt) to an aware datetime.

    Accepts ISO strings (date-only or full), other common date strings,
    epoch milliseconds, `date` and `datetime` objects. Naive values are
    interpreted as local wall-clock time.

    Args:
        value: Raw timestamp from a habit record.
        tz: Optional timezone override.

    Returns:
        Timezone-aware datetime, or None if the value is empty or unparseable.
    """
    tz_info = tz or DEFAULT_TIME_ZONE

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int | float):
        return dt_from_epoch_ms(value, tz_info)

    if isinstance(value, datetime):
        return as_local(value, tz_info) if value.tzinfo is None else value

    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time(), tzinfo=tz_info)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed_date = dt_parse_date(text)
            if parsed_date is None:
                return None
            parsed = datetime.combine(parsed_date, datetime.min.time())
        return as_local(parsed, tz_info) if parsed.tzinfo is None else parsed

    return None


# ==============================================================================
# Keys and Weekdays
# ==============================================================================


def dt_day_key(day: date) -> str:
    """Return the canonical local day key ("YYYY-MM-DD") for a date."""
    return day.strftime(DAY_KEY_FORMAT)


def sunday_based_weekday(day: date) -> int:
    """Return the weekday index with 0=Sunday..6=Saturday.

    Habit records store weekdays Sunday-based, while Python's
    `date.weekday()` is Monday-based (0=Monday).
    """
    return (day.weekday() + 1) % DAYS_PER_WEEK


# ==============================================================================
# Interval Calculations
# ==============================================================================


def monday_start(day: date) -> date:
    """Return the Monday that starts the week containing `day`."""
    return day - timedelta(days=day.weekday())


def weeks_between(anchor: date, day: date) -> int:
    """Count whole Monday-aligned weeks from `anchor`'s week to `day`'s week.

    Works on calendar days, so DST transitions cannot shave an hour off a
    week. Negative when `day` lies in an earlier week than `anchor`.

    Examples:
        weeks_between(Mon Jan 5, Sun Jan 11) → 0 (same week)
        weeks_between(Sun Jan 11, Mon Jan 12) → 1
        weeks_between(Mon Jan 12, Sun Jan 11) → -1
    """
    return (monday_start(day) - monday_start(anchor)).days // DAYS_PER_WEEK


def months_between(anchor: date, day: date) -> int:
    """Count calendar months from `anchor`'s month to `day`'s month."""
    return (day.year - anchor.year) * MONTHS_PER_YEAR + (day.month - anchor.month)


def dt_add_interval(day: date, interval_unit: str, delta: int) -> date | None:
    """Add or subtract a calendar interval to a date.

    Month and year steps clamp to the end of shorter months via relativedelta
    (Jan 31 + 1 month = Feb 28, Feb 29 + 1 year = Feb 28).

    Args:
        day: Base date.
        interval_unit: One of the TIME_UNIT_* constants.
        delta: Number of units to add (negative to subtract).

    Returns:
        The shifted date, or None for an unknown unit or out-of-range result.
    """
    try:
        if interval_unit == TIME_UNIT_DAYS:
            return day + timedelta(days=delta)
        if interval_unit == TIME_UNIT_WEEKS:
            return day + timedelta(weeks=delta)
        if interval_unit == TIME_UNIT_MONTHS:
            return day + relativedelta(months=delta)
        if interval_unit == TIME_UNIT_YEARS:
            return day + relativedelta(years=delta)
    except (ValueError, OverflowError) as exc:
        _LOGGER.error("dt_add_interval: Error adding interval: %s", exc)
        return None

    _LOGGER.warning("dt_add_interval: Unknown interval_unit: %s", interval_unit)
    return None


def each_day_in_range(start: date, end: date) -> Iterator[date]:
    """Yield each day from `start` to `end` inclusive.

    Lazy, so callers can stop early. Yields nothing when `end` < `start`.
    Bounded by MAX_DATE_CALCULATION_ITERATIONS days.
    """
    current = start
    iteration = 0
    while current <= end:
        if iteration >= MAX_DATE_CALCULATION_ITERATIONS:
            _LOGGER.warning(
                "each_day_in_range: Max iterations reached between %s and %s",
                start,
                end,
            )
            return
        yield current
        iteration += 1
        current += timedelta(days=1)
