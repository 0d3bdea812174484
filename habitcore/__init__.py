"""habitcore - recurrence and period bookkeeping engine for habit tracking.

Given a habit record and a calendar date, decides whether the habit is due,
which bookkeeping period the date belongs to, whether that period is already
completed or skipped, and which navigation group the habit is listed under.

The engines are pure: they read a habit record (a plain dict owned by the
host state store) and a date, and return a decision. Only the tracking
mutators write, and only to the record they are given.

Usage:
    from habitcore import ScheduleEngine, TrackingEngine, get_period_key
    from habitcore.utils import dt_utils

    dt_utils.set_default_timezone(ZoneInfo("Europe/Berlin"))
    engine = ScheduleEngine(is_holiday=holiday_keys.__contains__)
    engine.is_due(habit, "2026-03-14")
"""

from .engines import (
    BiweeklyRule,
    DailyRule,
    InvalidDateError,
    MonthlyCombination,
    MonthlyRule,
    PeriodStatus,
    ScheduleEngine,
    ScheduleRule,
    TrackingEngine,
    WeeklyRule,
    YearlyRule,
    advance_date,
    belongs_to_group,
    get_anchor_date,
    get_day_key,
    get_habit_group,
    get_period_bounds,
    get_period_key,
    get_period_keys,
    is_due,
    is_nth_weekday_of_month,
    is_same_period,
    parse_schedule_rule,
    resolve_anchor,
)

__all__ = [
    "BiweeklyRule",
    "DailyRule",
    "InvalidDateError",
    "MonthlyCombination",
    "MonthlyRule",
    "PeriodStatus",
    "ScheduleEngine",
    "ScheduleRule",
    "TrackingEngine",
    "WeeklyRule",
    "YearlyRule",
    "advance_date",
    "belongs_to_group",
    "get_anchor_date",
    "get_day_key",
    "get_habit_group",
    "get_period_bounds",
    "get_period_key",
    "get_period_keys",
    "is_due",
    "is_nth_weekday_of_month",
    "is_same_period",
    "parse_schedule_rule",
    "resolve_anchor",
]
