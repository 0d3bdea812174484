"""Schedule Rules - Typed recurrence rules parsed from habit records.

Habit records describe recurrence with loosely-typed strings and lists
(`frequency`, `days`, `monthly`, `months`, ...). This module parses them ONCE
into a tagged union of frozen dataclasses, one variant per frequency:

    DailyRule | WeeklyRule | BiweeklyRule | MonthlyRule | YearlyRule

so the evaluator can `match` exhaustively instead of comparing strings.

Filter sets use the convention:
    - None            → not configured, every value qualifies
    - frozenset(...)  → configured; only listed values qualify. A configured
                        filter whose entries were all malformed parses to an
                        EMPTY set, which matches nothing (fail closed).

Parsing never raises. Malformed values are logged at DEBUG and degrade to
the fail-closed interpretation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .. import const

# =============================================================================
# RULE VARIANTS
# =============================================================================


@dataclass(frozen=True, slots=True)
class DailyRule:
    """Due every day.

    Attributes:
        recognized: False when the stored frequency was an unknown string and
            this rule is only the fallback. Unknown frequencies are scheduled
            like daily habits but are not holiday-suppressed.
    """

    recognized: bool = True


@dataclass(frozen=True, slots=True)
class WeeklyRule:
    """Due on selected weekdays (Sunday-based indices) or every day."""

    days: frozenset[int] | None = None


@dataclass(frozen=True, slots=True)
class BiweeklyRule:
    """Due on selected weekdays of every second Monday-aligned week."""

    days: frozenset[int] | None = None


@dataclass(frozen=True, slots=True)
class MonthlyCombination:
    """One "<ordinal>-<weekday>" entry, e.g. "last-friday".

    Attributes:
        ordinal: 1-5 for first..fifth, or None for "last".
        weekday: Sunday-based weekday index.
    """

    ordinal: int | None
    weekday: int


@dataclass(frozen=True, slots=True)
class MonthlyRule:
    """Due every `interval` months on selected dates or weekday ordinals.

    Attributes:
        interval: Months between active months; None if unparseable (never due).
        mode: "each" (day-of-month dates) or "on" (weekday combinations);
            None if the stored mode is unknown (never due).
        dates: Day-of-month filter for "each" mode.
        combinations: Ordinal/weekday filter for "on" mode.
    """

    interval: int | None = const.DEFAULT_MONTHLY_INTERVAL
    mode: str | None = const.MONTHLY_MODE_EACH
    dates: frozenset[int] | None = None
    combinations: tuple[MonthlyCombination, ...] | None = None


@dataclass(frozen=True, slots=True)
class YearlyRule:
    """Due every `interval` years in selected months on selected dates.

    `months` are 0-based (0=January) as stored on habit records.
    """

    interval: int | None = const.DEFAULT_YEAR_INTERVAL
    months: frozenset[int] | None = None
    dates: frozenset[int] | None = None


ScheduleRule = DailyRule | WeeklyRule | BiweeklyRule | MonthlyRule | YearlyRule


# =============================================================================
# HABIT FIELD ACCESSORS
# =============================================================================


def get_frequency(habit: Mapping[str, Any]) -> str:
    """Return the habit's effective frequency, lower-cased.

    `targetFrequency` wins over `frequency` when set. Absent or empty values
    mean daily. Unknown strings are returned as-is (lower-cased) so callers
    can tell them apart from a recognized frequency.
    """
    raw = habit.get(const.DATA_HABIT_TARGET_FREQUENCY) or habit.get(
        const.DATA_HABIT_FREQUENCY
    )
    if not raw:
        return const.FREQUENCY_DAILY
    if not isinstance(raw, str):
        return str(raw).lower()
    return raw.strip().lower()


def is_goal_habit(habit: Mapping[str, Any]) -> bool:
    """Return True if the habit tracks a strictly positive numeric target."""
    target = habit.get(const.DATA_HABIT_TARGET)
    if isinstance(target, bool) or not isinstance(target, int | float):
        return False
    return target > 0


# =============================================================================
# PARSING
# =============================================================================


def parse_schedule_rule(habit: Mapping[str, Any]) -> ScheduleRule:
    """Parse a habit record into its typed recurrence rule.

    Args:
        habit: Habit record.

    Returns:
        The rule variant matching the habit's effective frequency. Unknown
        frequencies yield `DailyRule(recognized=False)`.
    """
    frequency = get_frequency(habit)

    if frequency == const.FREQUENCY_DAILY:
        return DailyRule()
    if frequency == const.FREQUENCY_WEEKLY:
        return WeeklyRule(days=_parse_int_filter(habit.get(const.DATA_HABIT_DAYS)))
    if frequency == const.FREQUENCY_BIWEEKLY:
        return BiweeklyRule(
            days=_parse_int_filter(habit.get(const.DATA_HABIT_DAYS))
        )
    if frequency == const.FREQUENCY_MONTHLY:
        return _parse_monthly(habit.get(const.DATA_HABIT_MONTHLY))
    if frequency == const.FREQUENCY_YEARLY:
        return YearlyRule(
            interval=_parse_interval(habit.get(const.DATA_HABIT_YEAR_INTERVAL)),
            months=_parse_int_filter(habit.get(const.DATA_HABIT_MONTHS)),
            dates=_parse_int_filter(habit.get(const.DATA_HABIT_YEARLY_DATES)),
        )

    const.LOGGER.debug(
        "ScheduleRules: Unknown frequency %r for habit %s, treating as daily",
        frequency,
        habit.get(const.DATA_HABIT_ID),
    )
    return DailyRule(recognized=False)


def parse_combination(raw: Any) -> MonthlyCombination | None:
    """Parse one "<ordinal>-<weekday>" string.

    Args:
        raw: Entry from `monthly.combinations`, e.g. "Second-Tuesday".

    Returns:
        Parsed combination, or None if the entry is malformed.
    """
    if not isinstance(raw, str):
        return None
    ordinal_str, _, weekday_str = raw.strip().lower().partition(
        const.COMBINATION_SEPARATOR
    )
    weekday = const.WEEKDAY_INDEX.get(weekday_str)
    if weekday is None:
        return None
    if ordinal_str == const.ORDINAL_LAST:
        return MonthlyCombination(ordinal=None, weekday=weekday)
    ordinal = const.ORDINAL_INDEX.get(ordinal_str)
    if ordinal is None:
        return None
    return MonthlyCombination(ordinal=ordinal, weekday=weekday)


def _parse_monthly(raw: Any) -> MonthlyRule:
    """Parse the `monthly` sub-record (absent means every day of every month)."""
    cfg: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    interval = _parse_interval(cfg.get(const.DATA_MONTHLY_INTERVAL))

    mode_raw = cfg.get(const.DATA_MONTHLY_MODE)
    mode: str | None
    if not mode_raw:
        mode = const.MONTHLY_MODE_EACH
    elif isinstance(mode_raw, str) and mode_raw.strip().lower() in (
        const.MONTHLY_MODE_EACH,
        const.MONTHLY_MODE_ON,
    ):
        mode = mode_raw.strip().lower()
    else:
        const.LOGGER.debug("ScheduleRules: Unknown monthly mode %r", mode_raw)
        mode = None

    combinations: tuple[MonthlyCombination, ...] | None = None
    raw_combinations = cfg.get(const.DATA_MONTHLY_COMBINATIONS)
    if isinstance(raw_combinations, list | tuple) and raw_combinations:
        parsed = [parse_combination(item) for item in raw_combinations]
        combinations = tuple(item for item in parsed if item is not None)
        if len(combinations) != len(parsed):
            const.LOGGER.debug(
                "ScheduleRules: Dropped malformed monthly combinations in %r",
                raw_combinations,
            )

    return MonthlyRule(
        interval=interval,
        mode=mode,
        dates=_parse_int_filter(cfg.get(const.DATA_MONTHLY_DATES)),
        combinations=combinations,
    )


def _parse_interval(raw: Any) -> int | None:
    """Parse a repeat interval.

    Empty/zero means the default of 1 and values below 1 are raised to 1.
    Returns None when the value cannot be read as a number at all.
    """
    if not raw:
        return 1
    value = _coerce_int(raw)
    if value is None:
        const.LOGGER.debug("ScheduleRules: Unparseable interval %r", raw)
        return None
    return max(1, value)


def _parse_int_filter(raw: Any) -> frozenset[int] | None:
    """Parse a list of ints into a filter set (None when not configured)."""
    if not isinstance(raw, Iterable) or isinstance(raw, str | bytes | Mapping):
        return None
    items = list(raw)
    if not items:
        return None
    return frozenset(
        value for value in (_coerce_int(item) for item in items) if value is not None
    )


def _coerce_int(raw: Any) -> int | None:
    """Read an int from an int, integral float or numeric string."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None
