"""Engine modules for habitcore.

Contains the pure computation engines, each depending only on those above it:
- anchor_engine: Reference date for interval counting
- schedule_rules: Typed recurrence rules parsed from habit records
- schedule_engine: Due-date evaluation (is this habit due today?)
- period_engine: Navigation groups and bookkeeping period keys
- tracking_engine: Completion, skip and progress records
"""

# Use relative imports within package to avoid mypy module resolution issues
from .anchor_engine import get_anchor_date, resolve_anchor
from .period_engine import (
    advance_date,
    belongs_to_group,
    get_day_key,
    get_habit_group,
    get_period_bounds,
    get_period_key,
    get_period_keys,
    is_same_period,
)
from .schedule_engine import ScheduleEngine, is_due, is_nth_weekday_of_month
from .schedule_rules import (
    BiweeklyRule,
    DailyRule,
    MonthlyCombination,
    MonthlyRule,
    ScheduleRule,
    WeeklyRule,
    YearlyRule,
    parse_schedule_rule,
)
from .tracking_engine import InvalidDateError, PeriodStatus, TrackingEngine

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
