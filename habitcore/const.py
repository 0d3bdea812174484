# File: const.py
"""Constants for the habitcore recurrence engine.

This file centralizes habit record keys, frequency and group identifiers,
period key formats and safety limits for consistency across the engines.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Habit Record Keys
# ------------------------------------------------------------------------------------------------
# Habits arrive as the host store's JSON objects, so keys keep its camelCase spelling.
DATA_HABIT_ACTIVE_ON_HOLIDAYS = "activeOnHolidays"
DATA_HABIT_ANCHOR_DATE = "anchorDate"
DATA_HABIT_COMPLETED = "completed"
DATA_HABIT_CREATED_AT = "createdAt"
DATA_HABIT_DAYS = "days"
DATA_HABIT_FREQUENCY = "frequency"
DATA_HABIT_ID = "id"
DATA_HABIT_MONTHLY = "monthly"
DATA_HABIT_MONTHS = "months"
DATA_HABIT_PAUSED = "paused"
DATA_HABIT_PROGRESS = "progress"
DATA_HABIT_SKIPPED_DATES = "skippedDates"
DATA_HABIT_TARGET = "target"
DATA_HABIT_TARGET_FREQUENCY = "targetFrequency"
DATA_HABIT_YEAR_INTERVAL = "yearInterval"
DATA_HABIT_YEARLY_DATES = "yearlyDates"

# Monthly sub-record keys
DATA_MONTHLY_COMBINATIONS = "combinations"
DATA_MONTHLY_DATES = "dates"
DATA_MONTHLY_INTERVAL = "interval"
DATA_MONTHLY_MODE = "mode"

# ------------------------------------------------------------------------------------------------
# Frequencies
# ------------------------------------------------------------------------------------------------
FREQUENCY_BIWEEKLY = "biweekly"
FREQUENCY_DAILY = "daily"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_YEARLY = "yearly"

FREQUENCY_OPTIONS: Final[tuple[str, ...]] = (
    FREQUENCY_DAILY,
    FREQUENCY_WEEKLY,
    FREQUENCY_BIWEEKLY,
    FREQUENCY_MONTHLY,
    FREQUENCY_YEARLY,
)

# Monthly modes
MONTHLY_MODE_EACH = "each"
MONTHLY_MODE_ON = "on"

DEFAULT_MONTHLY_INTERVAL = 1
DEFAULT_YEAR_INTERVAL = 1

# ------------------------------------------------------------------------------------------------
# Navigation Groups / Periods
# ------------------------------------------------------------------------------------------------
GROUP_DAILY = "daily"
GROUP_WEEKLY = "weekly"
GROUP_MONTHLY = "monthly"
GROUP_YEARLY = "yearly"

GROUP_OPTIONS: Final[tuple[str, ...]] = (
    GROUP_DAILY,
    GROUP_WEEKLY,
    GROUP_MONTHLY,
    GROUP_YEARLY,
)

FREQUENCY_TO_GROUP: Final[dict[str, str]] = {
    FREQUENCY_DAILY: GROUP_DAILY,
    FREQUENCY_WEEKLY: GROUP_WEEKLY,
    FREQUENCY_BIWEEKLY: GROUP_WEEKLY,
    FREQUENCY_MONTHLY: GROUP_MONTHLY,
    FREQUENCY_YEARLY: GROUP_YEARLY,
}

# strftime formats; weekly uses the ISO year so a week straddling Jan 1 has one key
PERIOD_FORMAT_DAILY = "%Y-%m-%d"
PERIOD_FORMAT_WEEKLY = "%G-W%V"
PERIOD_FORMAT_MONTHLY = "%Y-%m"
PERIOD_FORMAT_YEARLY = "%Y"

PERIOD_FORMATS: Final[dict[str, str]] = {
    GROUP_DAILY: PERIOD_FORMAT_DAILY,
    GROUP_WEEKLY: PERIOD_FORMAT_WEEKLY,
    GROUP_MONTHLY: PERIOD_FORMAT_MONTHLY,
    GROUP_YEARLY: PERIOD_FORMAT_YEARLY,
}

# Period status (collapsed completed/skipped view)
PERIOD_STATUS_COMPLETED = "completed"
PERIOD_STATUS_PENDING = "pending"
PERIOD_STATUS_SKIPPED = "skipped"

# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------
# Habit weekday indices are Sunday-based (0=Sunday..6=Saturday)
WEEKDAY_INDEX: Final[dict[str, int]] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

ORDINAL_LAST = "last"
ORDINAL_INDEX: Final[dict[str, int]] = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
}

COMBINATION_SEPARATOR = "-"

DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12

# Legacy ids start with their creation time in epoch milliseconds
LEGACY_ID_TIMESTAMP_DIGITS = 13
