"""Schedule Engine for habitcore.

Answers "is this habit due on this day?" for every frequency class:
- DAILY (and unknown frequencies, which fall back to daily)
- WEEKLY with optional weekday filter
- BIWEEKLY by Monday-aligned week parity from the anchor
- MONTHLY every N months, by day-of-month ("each") or weekday ordinal ("on")
- YEARLY every N years, filtered by month and day-of-month

Goal habits (numeric `target`) are gated per period elsewhere, so here they
only honour biweekly parity and daily holiday suppression.

IMPORTANT: Holiday status comes ONLY from the injected predicate, called
fresh on every evaluation. Never cache its answers: the host can change the
holiday calendar between calls without telling the engine.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    dt_day_key,
    dt_to_local_date,
    each_day_in_range,
    months_between,
    sunday_based_weekday,
    weeks_between,
)
from .anchor_engine import get_anchor_date
from .schedule_rules import (
    BiweeklyRule,
    DailyRule,
    MonthlyCombination,
    MonthlyRule,
    WeeklyRule,
    YearlyRule,
    is_goal_habit,
    parse_schedule_rule,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import DateInput, HolidayPredicate
    from .schedule_rules import ScheduleRule


def _never_holiday(_day_key: str) -> bool:
    """Holiday predicate used when the host provides none."""
    return False


def is_nth_weekday_of_month(day: date, ordinal: int | None) -> bool:
    """Return True if `day` is the Nth (or last) occurrence of its weekday.

    Args:
        day: Calendar day to test.
        ordinal: 1-5 for first..fifth, None for last.

    Examples:
        2026-01-30 (Fri), None → True  (no Friday on Feb 6 in January)
        2026-01-23 (Fri), None → False
        2026-01-15 (Thu), 3    → True
    """
    if ordinal is None:
        return day.day + const.DAYS_PER_WEEK > monthrange(day.year, day.month)[1]
    return (day.day - 1) // const.DAYS_PER_WEEK + 1 == ordinal


class ScheduleEngine:
    """Recurrence evaluator for habit records.

    The engine holds no habit state; the only thing it keeps is the holiday
    predicate handed in by the host.

    Example:
        engine = ScheduleEngine(is_holiday=calendar.__contains__)
        if engine.is_due(habit, "2026-03-14"):
            ...
    """

    def __init__(self, is_holiday: HolidayPredicate | None = None) -> None:
        """Initialize the engine.

        Args:
            is_holiday: Predicate receiving a "YYYY-MM-DD" day key. Defaults
                to a predicate that never reports a holiday.
        """
        self._is_holiday: HolidayPredicate = is_holiday or _never_holiday

    def is_due(self, habit: Mapping[str, Any], day: DateInput) -> bool:
        """Return True if the habit is scheduled on the given day.

        Fails closed: paused habits, unparseable dates and malformed rules
        are never due.

        Args:
            habit: Habit record.
            day: Date, datetime or ISO string; normalized to a local day.

        Returns:
            True if the habit is due on that day.
        """
        if habit.get(const.DATA_HABIT_PAUSED) is True:
            return False

        local_day = dt_to_local_date(day)
        if local_day is None:
            const.LOGGER.debug(
                "ScheduleEngine: Invalid date %r for habit %s",
                day,
                habit.get(const.DATA_HABIT_ID),
            )
            return False

        rule = parse_schedule_rule(habit)
        active_on_holidays = bool(habit.get(const.DATA_HABIT_ACTIVE_ON_HOLIDAYS))

        if is_goal_habit(habit):
            if isinstance(rule, BiweeklyRule):
                weeks = weeks_between(get_anchor_date(habit), local_day)
                return weeks % 2 == 0
            if isinstance(rule, DailyRule) and rule.recognized:
                return active_on_holidays or not self._holiday(local_day)
            return True

        if (
            self._is_holiday_suppressed(rule)
            and not active_on_holidays
            and self._holiday(local_day)
        ):
            return False

        match rule:
            case DailyRule():
                return True
            case WeeklyRule(days=days):
                return days is None or sunday_based_weekday(local_day) in days
            case BiweeklyRule():
                return self._is_biweekly_due(habit, rule, local_day)
            case MonthlyRule():
                return self._is_monthly_due(habit, rule, local_day)
            case YearlyRule():
                return self._is_yearly_due(habit, rule, local_day)

        return False

    def get_due_dates(
        self,
        habit: Mapping[str, Any],
        start: DateInput,
        end: DateInput,
        limit: int = 100,
    ) -> list[date]:
        """List the days in an inclusive range on which the habit is due.

        Args:
            habit: Habit record.
            start: Range start (inclusive).
            end: Range end (inclusive).
            limit: Maximum number of due dates to return (safety limit).

        Returns:
            Due days in ascending order; empty if either bound is invalid.
        """
        start_day = dt_to_local_date(start)
        end_day = dt_to_local_date(end)
        if start_day is None or end_day is None:
            return []

        due_dates: list[date] = []
        for current in each_day_in_range(start_day, end_day):
            if len(due_dates) >= limit:
                break
            if self.is_due(habit, current):
                due_dates.append(current)
        return due_dates

    # =========================================================================
    # Private: holiday handling
    # =========================================================================

    def _holiday(self, day: date) -> bool:
        """Ask the host's predicate (uncached) whether `day` is a holiday."""
        return bool(self._is_holiday(dt_day_key(day)))

    @staticmethod
    def _is_holiday_suppressed(rule: ScheduleRule) -> bool:
        """Return True for the non-goal rules hidden on holidays.

        Only daily and weekly habits are suppressed; biweekly, monthly and
        yearly habits stay due on holidays.
        """
        if isinstance(rule, DailyRule):
            return rule.recognized
        return isinstance(rule, WeeklyRule)

    # =========================================================================
    # Private: per-frequency evaluation
    # =========================================================================

    @staticmethod
    def _is_biweekly_due(
        habit: Mapping[str, Any], rule: BiweeklyRule, day: date
    ) -> bool:
        """Evaluate weekday filter and week parity against the anchor."""
        if rule.days is not None and sunday_based_weekday(day) not in rule.days:
            return False

        anchor = get_anchor_date(habit)
        weeks = weeks_between(anchor, day)
        if weeks % 2 != 0:
            return False
        # Weekdays (Sunday-based) of the anchor week that precede the anchor
        if weeks == 0 and sunday_based_weekday(day) < sunday_based_weekday(anchor):
            return False
        return True

    @staticmethod
    def _is_monthly_due(
        habit: Mapping[str, Any], rule: MonthlyRule, day: date
    ) -> bool:
        """Evaluate month interval, then "each" dates or "on" combinations."""
        if rule.interval is None or rule.mode is None:
            return False

        if months_between(get_anchor_date(habit), day) % rule.interval != 0:
            return False

        if rule.mode == const.MONTHLY_MODE_EACH:
            return rule.dates is None or day.day in rule.dates

        if rule.combinations is None:
            return True
        weekday = sunday_based_weekday(day)
        return any(
            _combination_matches(combination, weekday, day)
            for combination in rule.combinations
        )

    @staticmethod
    def _is_yearly_due(habit: Mapping[str, Any], rule: YearlyRule, day: date) -> bool:
        """Evaluate year interval, month filter (0-based) and date filter."""
        if rule.interval is None:
            return False

        if (day.year - get_anchor_date(habit).year) % rule.interval != 0:
            return False
        if rule.months is not None and day.month - 1 not in rule.months:
            return False
        if rule.dates is not None and day.day not in rule.dates:
            return False
        return True


def _combination_matches(
    combination: MonthlyCombination, weekday: int, day: date
) -> bool:
    """Return True if `day` (with Sunday-based `weekday`) fits the combination."""
    if combination.weekday != weekday:
        return False
    return is_nth_weekday_of_month(day, combination.ordinal)


def is_due(
    habit: Mapping[str, Any],
    day: DateInput,
    is_holiday: HolidayPredicate | None = None,
) -> bool:
    """Check whether a habit is due on a day (convenience wrapper).

    Args:
        habit: Habit record.
        day: Date, datetime or ISO string.
        is_holiday: Optional holiday predicate ("YYYY-MM-DD" → bool).

    Returns:
        True if the habit is due.
    """
    return ScheduleEngine(is_holiday).is_due(habit, day)
