"""Type definitions for habitcore data structures.

Habit records are owned by the host state store and arrive as plain dicts
(decoded JSON). TypedDict documents their shape for static analysis only;
the engines still read every field with `.get()` and tolerate missing or
malformed values at runtime.

IMPORTANT: This file must NOT import from the engines. Only import from
typing (type machinery) to avoid circular dependencies.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str  # Opaque; legacy ids start with a 13-digit epoch-ms timestamp
DayKey = str  # Local calendar day "2026-01-18"
PeriodKey = str  # "2026-01-18" | "2026-W03" | "2026-01" | "2026"
DateInput = date | datetime | str  # Anything the engines normalize to a local day
TimestampInput = date | datetime | str | int | float  # anchorDate / createdAt

# Injected holiday calendar: called with a DayKey, answers "is this a holiday?"
HolidayPredicate = Callable[[DayKey], bool]


# =============================================================================
# Habit Records
# =============================================================================


class MonthlyConfig(TypedDict, total=False):
    """Monthly recurrence settings stored under `habit["monthly"]`.

    `combinations` entries look like "last-friday" or "second-monday".
    """

    interval: int
    mode: str  # "each" | "on"
    dates: list[int]
    combinations: list[str]


class HabitData(TypedDict):
    """Type definition for a habit record as consumed by the engines.

    Only `id` is guaranteed; every other key is optional and defaults to the
    least restrictive interpretation (daily, never paused, no goal).
    """

    id: HabitId
    frequency: NotRequired[str]
    targetFrequency: NotRequired[str]
    target: NotRequired[int | float | None]
    days: NotRequired[list[int]]
    monthly: NotRequired[MonthlyConfig]
    yearInterval: NotRequired[int]
    months: NotRequired[list[int]]  # 0=January..11=December
    yearlyDates: NotRequired[list[int]]
    anchorDate: NotRequired[TimestampInput | None]
    createdAt: NotRequired[TimestampInput | None]
    paused: NotRequired[bool]
    activeOnHolidays: NotRequired[bool]
    progress: NotRequired[dict[PeriodKey, float]]
    skippedDates: NotRequired[list[DayKey]]
    completed: NotRequired[dict[PeriodKey, bool] | bool]


# Mutable view used by the tracker, which writes keys in place
HabitRecord = dict[str, Any]


class PeriodBounds(TypedDict):
    """Inclusive calendar-day range of a bookkeeping period."""

    start: date
    end: date
