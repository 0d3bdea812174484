"""Tracking Engine - Pure logic for completion, skip and progress records.

This engine provides stateless functions that read and write the per-period
bookkeeping fields of a habit record:
- `completed`: period key → bool (a legacy bare True means "always done")
- `skippedDates`: list of day keys (skips are always day-granular)
- `progress`: period key → accumulated value for goal habits

ARCHITECTURE: All methods are static and operate on the passed-in record.
Mutators change the record IN PLACE; the host state store owns persistence
and change notification.

Completed and skipped are independent fields. Nothing here enforces that a
day is not both; `get_period_status` gives callers one answer when they need
it. `set_completed` never touches `progress`: callers clearing a completion
on a goal habit should also reset its progress.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from .. import const
from .period_engine import get_day_key, get_period_key

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import DateInput, HabitRecord


class InvalidDateError(ValueError):
    """Raised when a tracker write is given a date that cannot be parsed.

    Reads fail closed instead; a write has no safe key to fall back to.

    Attributes:
        habit_id: Habit whose record was being written
        value: The offending date input
    """

    def __init__(self, habit_id: Any, value: Any) -> None:
        """Initialize InvalidDateError.

        Args:
            habit_id: Habit whose record was being written
            value: The offending date input
        """
        self.habit_id = habit_id
        self.value = value
        super().__init__(f"Invalid date for habit {habit_id}: {value!r}")


class PeriodStatus(StrEnum):
    """Collapsed view of a habit's state for one period."""

    PENDING = const.PERIOD_STATUS_PENDING
    COMPLETED = const.PERIOD_STATUS_COMPLETED
    SKIPPED = const.PERIOD_STATUS_SKIPPED


class TrackingEngine:
    """Pure logic engine for per-period completion and per-day skip state.

    All methods are static - no instance state.
    """

    # =========================================================================
    # Completion
    # =========================================================================

    @staticmethod
    def is_completed(habit: Mapping[str, Any], day: DateInput) -> bool:
        """Return True if the habit is marked done for the period of `day`.

        Args:
            habit: Habit record.
            day: Date, datetime or ISO string.

        Returns:
            True if the completion record for the period key is True.
        """
        completed = habit.get(const.DATA_HABIT_COMPLETED)
        if completed is True:
            return True
        if not isinstance(completed, dict):
            return False
        key = get_period_key(habit, day)
        if key is None:
            return False
        return completed.get(key) is True

    @staticmethod
    def set_completed(habit: HabitRecord, day: DateInput, value: bool) -> None:
        """Set or clear the completion record for the period of `day`.

        A legacy non-dict `completed` value is replaced by a fresh mapping.

        Raises:
            InvalidDateError: If `day` cannot be parsed.
        """
        key = _require_period_key(habit, day)
        completed = habit.get(const.DATA_HABIT_COMPLETED)
        if not isinstance(completed, dict):
            completed = {}
            habit[const.DATA_HABIT_COMPLETED] = completed
        completed[key] = bool(value)

    @staticmethod
    def toggle_completed(habit: HabitRecord, day: DateInput) -> bool:
        """Flip the completion state for the period of `day`.

        Returns:
            The new completion state.

        Raises:
            InvalidDateError: If `day` cannot be parsed.
        """
        new_value = not TrackingEngine.is_completed(habit, day)
        TrackingEngine.set_completed(habit, day, new_value)
        return new_value

    # =========================================================================
    # Skips
    # =========================================================================

    @staticmethod
    def is_skipped_today(habit: Mapping[str, Any], day: DateInput) -> bool:
        """Return True if the habit was explicitly skipped on this exact day."""
        skipped = habit.get(const.DATA_HABIT_SKIPPED_DATES)
        if not isinstance(skipped, list | tuple | set | frozenset):
            return False
        key = get_day_key(day)
        return key is not None and key in skipped

    @staticmethod
    def set_skipped(habit: HabitRecord, day: DateInput, value: bool) -> None:
        """Add (value=True) or remove (value=False) a day from `skippedDates`.

        Never creates duplicates; removing a day that is not skipped is a no-op.

        Raises:
            InvalidDateError: If `day` cannot be parsed.
        """
        key = get_day_key(day)
        if key is None:
            raise InvalidDateError(habit.get(const.DATA_HABIT_ID), day)

        skipped = habit.get(const.DATA_HABIT_SKIPPED_DATES)
        current = (
            list(skipped)
            if isinstance(skipped, list | tuple | set | frozenset)
            else []
        )
        if value:
            if key not in current:
                current.append(key)
        else:
            current = [item for item in current if item != key]
        habit[const.DATA_HABIT_SKIPPED_DATES] = current

    # =========================================================================
    # Progress (goal habits)
    # =========================================================================

    @staticmethod
    def get_progress(habit: Mapping[str, Any], day: DateInput) -> float:
        """Return the stored progress value for the period of `day` (0 if none)."""
        progress = habit.get(const.DATA_HABIT_PROGRESS)
        key = get_period_key(habit, day)
        if not isinstance(progress, dict) or key is None:
            return 0
        value = progress.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 0
        return value

    @staticmethod
    def set_progress(habit: HabitRecord, day: DateInput, value: float) -> None:
        """Store a progress value for the period of `day`.

        Raises:
            InvalidDateError: If `day` cannot be parsed.
        """
        key = _require_period_key(habit, day)
        progress = habit.get(const.DATA_HABIT_PROGRESS)
        if not isinstance(progress, dict):
            progress = {}
            habit[const.DATA_HABIT_PROGRESS] = progress
        progress[key] = value

    # =========================================================================
    # Combined status / integrity
    # =========================================================================

    @staticmethod
    def get_period_status(habit: Mapping[str, Any], day: DateInput) -> PeriodStatus:
        """Collapse completed/skipped into a single status.

        Completed wins when both are set.
        """
        if TrackingEngine.is_completed(habit, day):
            return PeriodStatus.COMPLETED
        if TrackingEngine.is_skipped_today(habit, day):
            return PeriodStatus.SKIPPED
        return PeriodStatus.PENDING

    @staticmethod
    def ensure_habit_integrity(habit: HabitRecord) -> None:
        """Install empty `progress` / `skippedDates` containers if missing.

        Skips stored as a tuple or set are kept and converted to a list.
        """
        if not isinstance(habit.get(const.DATA_HABIT_PROGRESS), dict):
            habit[const.DATA_HABIT_PROGRESS] = {}
        skipped = habit.get(const.DATA_HABIT_SKIPPED_DATES)
        if isinstance(skipped, tuple | set | frozenset):
            habit[const.DATA_HABIT_SKIPPED_DATES] = list(skipped)
        elif not isinstance(skipped, list):
            habit[const.DATA_HABIT_SKIPPED_DATES] = []


def _require_period_key(habit: Mapping[str, Any], day: DateInput) -> str:
    """Return the period key for a write, raising on an unparseable date."""
    key = get_period_key(habit, day)
    if key is None:
        raise InvalidDateError(habit.get(const.DATA_HABIT_ID), day)
    return key


# Module-level aliases for callers that prefer plain functions
is_completed = TrackingEngine.is_completed
set_completed = TrackingEngine.set_completed
toggle_completed = TrackingEngine.toggle_completed
is_skipped_today = TrackingEngine.is_skipped_today
set_skipped = TrackingEngine.set_skipped
get_period_status = TrackingEngine.get_period_status
