"""Period Engine - Navigation groups and bookkeeping period keys.

Every habit belongs to one navigation group (daily/weekly/monthly/yearly)
derived from its frequency. The group decides which bookkeeping period a
date falls into, and therefore which key its completion and progress are
stored under:

    daily   → "2026-01-19"   (day)
    weekly  → "2026-W04"     (ISO week, ISO week-year)
    monthly → "2026-01"      (calendar month)
    yearly  → "2026"         (calendar year)

Design Principles:
    - Single source of truth: no other module formats day or period keys
    - Total: every valid (group, date) pair maps to exactly one key
    - Biweekly habits share weekly periods with weekly habits
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    TIME_UNIT_DAYS,
    TIME_UNIT_MONTHS,
    TIME_UNIT_WEEKS,
    TIME_UNIT_YEARS,
    dt_add_interval,
    dt_day_key,
    dt_to_local_date,
    dt_today_local,
    monday_start,
)
from .schedule_rules import get_frequency

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import DateInput, PeriodBounds

_GROUP_TO_TIME_UNIT: dict[str, str] = {
    const.GROUP_DAILY: TIME_UNIT_DAYS,
    const.GROUP_WEEKLY: TIME_UNIT_WEEKS,
    const.GROUP_MONTHLY: TIME_UNIT_MONTHS,
    const.GROUP_YEARLY: TIME_UNIT_YEARS,
}


# ────────────────────────────────────────────────────────────────
# Group Classification
# ────────────────────────────────────────────────────────────────


def get_habit_group(habit: Mapping[str, Any]) -> str:
    """Return the navigation group for a habit.

    Mapping: daily → daily; weekly, biweekly → weekly; monthly → monthly;
    yearly → yearly; anything unrecognized → daily.
    """
    return const.FREQUENCY_TO_GROUP.get(get_frequency(habit), const.GROUP_DAILY)


def belongs_to_group(habit: Mapping[str, Any], group: str) -> bool:
    """Return True if the habit is listed under the given navigation tab."""
    return get_habit_group(habit) == group


# ────────────────────────────────────────────────────────────────
# Period Key Generation
# ────────────────────────────────────────────────────────────────


def get_day_key(day: DateInput) -> str | None:
    """Return the canonical local day key ("YYYY-MM-DD").

    Args:
        day: Date, datetime or ISO string.

    Returns:
        Day key, or None if the date cannot be parsed.
    """
    local_day = dt_to_local_date(day)
    if local_day is None:
        return None
    return dt_day_key(local_day)


def format_period_key(group: str, day: date) -> str:
    """Format the key of the period of `group` that contains `day`.

    Unknown groups are keyed daily.
    """
    return day.strftime(const.PERIOD_FORMATS.get(group, const.PERIOD_FORMAT_DAILY))


def get_period_key(habit: Mapping[str, Any], day: DateInput) -> str | None:
    """Return the bookkeeping period key for a habit on a given day.

    Args:
        habit: Habit record.
        day: Date, datetime or ISO string.

    Returns:
        Period key for the habit's navigation group, or None if the date
        cannot be parsed.

    Example:
        >>> get_period_key({"id": "h1", "frequency": "biweekly"}, "2026-01-19")
        '2026-W04'
    """
    local_day = dt_to_local_date(day)
    if local_day is None:
        const.LOGGER.debug("PeriodEngine: Invalid date %r, no period key", day)
        return None
    return format_period_key(get_habit_group(habit), local_day)


def get_period_keys(reference_date: DateInput | None = None) -> dict[str, str]:
    """Generate period keys for all groups at once.

    Args:
        reference_date: Date to generate keys for. Defaults to today (local).

    Returns:
        Dictionary with keys "daily", "weekly", "monthly", "yearly", or an
        empty dict if the reference date cannot be parsed.

    Example:
        >>> get_period_keys("2026-01-19")
        {'daily': '2026-01-19', 'weekly': '2026-W04', 'monthly': '2026-01', 'yearly': '2026'}
    """
    ref = (
        dt_today_local()
        if reference_date is None
        else dt_to_local_date(reference_date)
    )
    if ref is None:
        return {}
    return {group: format_period_key(group, ref) for group in const.GROUP_OPTIONS}


# ────────────────────────────────────────────────────────────────
# Period Arithmetic
# ────────────────────────────────────────────────────────────────


def get_period_bounds(group: str, day: DateInput) -> PeriodBounds | None:
    """Return the first and last calendar day of the period containing `day`.

    Weeks run Monday to Sunday, matching ISO week keys.

    Args:
        group: Navigation group.
        day: Date, datetime or ISO string.

    Returns:
        Inclusive bounds, or None for an unparseable date or unknown group.
    """
    local_day = dt_to_local_date(day)
    if local_day is None:
        return None

    if group == const.GROUP_DAILY:
        return {"start": local_day, "end": local_day}
    if group == const.GROUP_WEEKLY:
        start = monday_start(local_day)
        return {"start": start, "end": start + timedelta(days=6)}
    if group == const.GROUP_MONTHLY:
        start = local_day.replace(day=1)
        next_month = dt_add_interval(start, TIME_UNIT_MONTHS, 1)
        # Only December 9999 has no following month
        end = (
            next_month - timedelta(days=1)
            if next_month is not None
            else local_day.replace(day=31)
        )
        return {"start": start, "end": end}
    if group == const.GROUP_YEARLY:
        return {
            "start": local_day.replace(month=1, day=1),
            "end": local_day.replace(month=12, day=31),
        }

    const.LOGGER.debug("PeriodEngine: Unknown group %r for period bounds", group)
    return None


def is_same_period(a: DateInput, b: DateInput, group: str) -> bool:
    """Return True if two dates fall into the same period of `group`.

    Unparseable dates are never in the same period as anything.
    """
    day_a = dt_to_local_date(a)
    day_b = dt_to_local_date(b)
    if day_a is None or day_b is None:
        return False
    return format_period_key(group, day_a) == format_period_key(group, day_b)


def advance_date(day: DateInput, group: str, direction: int = 1) -> date | None:
    """Step a date forward (direction=1) or back (-1) by one period of `group`.

    Month and year steps clamp to shorter months (Jan 31 → Feb 28).

    Returns:
        Shifted date, or None if the date, group or result is invalid.
    """
    local_day = dt_to_local_date(day)
    unit = _GROUP_TO_TIME_UNIT.get(group)
    if local_day is None or unit is None:
        return None
    return dt_add_interval(local_day, unit, direction)
