"""Unit tests for schedule_engine.py ScheduleEngine.

Calendar reference (2026): Jan 1 is a Thursday, Jan 5 a Monday.
January Fridays: 2, 9, 16, 23, 30 (five). February Fridays: 6, 13, 20, 27 (four).

Covers:
- Pause dominance and invalid dates (fail closed)
- Holiday suppression (daily/weekly only) and the goal-habit asymmetry
- Biweekly week parity from the anchor
- Monthly "each" dates and "on" weekday ordinals, including "last"
- Yearly interval, 0-based month filter and date filter
- get_due_dates range scanning
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from habitcore.engines.schedule_engine import (
    ScheduleEngine,
    is_due,
    is_nth_weekday_of_month,
)
from habitcore.utils.dt_utils import set_default_timezone

MakeHabit = Callable[..., dict[str, Any]]


@pytest.fixture
def engine(holidays: set[str]) -> ScheduleEngine:
    """Return an engine backed by the shared holiday calendar."""
    return ScheduleEngine(is_holiday=holidays.__contains__)


# =============================================================================
# Fail-closed basics
# =============================================================================


class TestFailClosed:
    """Tests for pause dominance and invalid input handling."""

    def test_daily_habit_due_every_day(self, make_habit: MakeHabit) -> None:
        """A habit with no frequency is due daily."""
        habit = make_habit()

        assert is_due(habit, "2026-03-14")
        assert is_due(habit, date(2026, 3, 15))

    @pytest.mark.parametrize(
        "fields",
        [
            {},
            {"frequency": "weekly", "days": [6]},
            {"frequency": "monthly"},
            {"frequency": "daily", "target": 5},
            {"frequency": "daily", "activeOnHolidays": True},
        ],
    )
    def test_paused_never_due(
        self, make_habit: MakeHabit, fields: dict[str, Any]
    ) -> None:
        """paused=True overrides every other rule."""
        habit = make_habit(paused=True, **fields)

        assert not is_due(habit, "2026-03-14")

    @pytest.mark.parametrize("day", ["not-a-date", "", "2026-02-30", None])
    def test_invalid_date_not_due(self, make_habit: MakeHabit, day: Any) -> None:
        """Unparseable dates are never due."""
        assert not is_due(make_habit(), day)

    def test_unknown_frequency_scheduled_daily(self, make_habit: MakeHabit) -> None:
        """Unknown frequencies fall back to daily scheduling."""
        assert is_due(make_habit(frequency="fortnightly"), "2026-03-14")


# =============================================================================
# Holidays
# =============================================================================


class TestHolidays:
    """Tests for holiday suppression."""

    def test_daily_suppressed(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """Daily habits are hidden on holidays."""
        assert not engine.is_due(make_habit(frequency="daily"), "2026-01-01")
        assert engine.is_due(make_habit(frequency="daily"), "2026-01-02")

    def test_active_on_holidays_opts_out(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """activeOnHolidays keeps a habit due on holidays."""
        habit = make_habit(frequency="daily", activeOnHolidays=True)

        assert engine.is_due(habit, "2026-01-01")

    def test_weekly_suppressed(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """Weekly habits are hidden on holidays even on a selected weekday."""
        habit = make_habit(frequency="weekly", days=[4])  # Thursday

        assert not engine.is_due(habit, "2026-01-01")
        assert engine.is_due(habit, "2026-01-08")

    @pytest.mark.parametrize(
        "fields",
        [
            {"frequency": "biweekly", "anchorDate": "2026-01-01"},
            {"frequency": "monthly"},
            {"frequency": "yearly"},
            {"frequency": "fortnightly"},
        ],
    )
    def test_other_frequencies_not_suppressed(
        self,
        engine: ScheduleEngine,
        make_habit: MakeHabit,
        fields: dict[str, Any],
    ) -> None:
        """Biweekly, monthly, yearly and unknown frequencies stay due."""
        assert engine.is_due(make_habit(**fields), "2026-01-01")

    def test_goal_daily_suppressed(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """Goal habits with a daily frequency honour holidays."""
        habit = make_habit(frequency="daily", target=8)

        assert not engine.is_due(habit, "2026-01-01")
        opted_in = make_habit(frequency="daily", target=8, activeOnHolidays=True)
        assert engine.is_due(opted_in, "2026-01-01")

    def test_goal_weekly_not_suppressed(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """Goal habits with other frequencies ignore holidays and day filters."""
        habit = make_habit(frequency="weekly", target=3, days=[1])

        assert engine.is_due(habit, "2026-01-01")

    def test_predicate_called_fresh(self, make_habit: MakeHabit) -> None:
        """Holiday answers are never cached between evaluations."""
        calendar: set[str] = set()
        calls: list[str] = []

        def is_holiday(day_key: str) -> bool:
            calls.append(day_key)
            return day_key in calendar

        engine = ScheduleEngine(is_holiday=is_holiday)
        habit = make_habit(frequency="daily")

        assert engine.is_due(habit, "2026-05-01")
        calendar.add("2026-05-01")
        assert not engine.is_due(habit, "2026-05-01")
        assert calls == ["2026-05-01", "2026-05-01"]

    def test_aware_datetime_uses_local_day(self, make_habit: MakeHabit) -> None:
        """The predicate receives the local day key of an aware datetime."""
        set_default_timezone(ZoneInfo("America/New_York"))
        habit = make_habit(frequency="daily")

        # 03:00 UTC on Jan 2 is still Jan 1 in New York
        moment = datetime(2026, 1, 2, 3, 0, tzinfo=UTC)

        assert not is_due(habit, moment, {"2026-01-01"}.__contains__)
        assert is_due(habit, moment, {"2026-01-02"}.__contains__)


# =============================================================================
# Weekly / Biweekly
# =============================================================================


class TestWeekly:
    """Tests for weekly weekday filters."""

    def test_selected_days(self, make_habit: MakeHabit) -> None:
        """Only selected Sunday-based weekdays are due."""
        habit = make_habit(frequency="weekly", days=[0, 3])  # Sun, Wed

        assert is_due(habit, "2026-01-04")
        assert is_due(habit, "2026-01-07")
        assert not is_due(habit, "2026-01-05")

    def test_no_days_means_every_day(self, make_habit: MakeHabit) -> None:
        """An absent or empty filter matches every day."""
        assert is_due(make_habit(frequency="weekly"), "2026-01-06")
        assert is_due(make_habit(frequency="weekly", days=[]), "2026-01-06")

    def test_malformed_days_never_due(self, make_habit: MakeHabit) -> None:
        """A filter with only malformed entries matches nothing."""
        habit = make_habit(frequency="weekly", days=["monday"])

        assert not is_due(habit, "2026-01-05")


class TestBiweekly:
    """Tests for biweekly parity against the anchor."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2026-01-05", True),  # anchor
            ("2026-01-12", False),  # +7
            ("2026-01-19", True),  # +14
            ("2026-01-26", False),  # +21
            ("2026-02-02", True),  # +28
            ("2026-01-04", False),  # previous week
        ],
    )
    def test_parity_from_monday_anchor(
        self, make_habit: MakeHabit, day: str, expected: bool
    ) -> None:
        """Even week offsets are due, odd ones are not."""
        habit = make_habit(frequency="biweekly", anchorDate="2026-01-05")

        assert is_due(habit, day) is expected

    def test_days_before_anchor_in_anchor_week(self, make_habit: MakeHabit) -> None:
        """Anchor-week days with an earlier Sunday-based weekday are not due."""
        habit = make_habit(frequency="biweekly", anchorDate="2026-01-07")  # Wed

        assert not is_due(habit, "2026-01-05")
        assert not is_due(habit, "2026-01-06")
        assert is_due(habit, "2026-01-07")
        assert is_due(habit, "2026-01-10")
        # The week ends on Sunday, weekday 0, which precedes Wednesday
        assert not is_due(habit, "2026-01-11")
        # Same weekdays two weeks later are due
        assert is_due(habit, "2026-01-19")
        assert is_due(habit, "2026-01-25")

    def test_sunday_anchor_keeps_whole_week(self, make_habit: MakeHabit) -> None:
        """No weekday precedes Sunday, so a Sunday anchor excludes nothing."""
        habit = make_habit(frequency="biweekly", anchorDate="2026-01-11")  # Sun

        assert is_due(habit, "2026-01-05")
        assert is_due(habit, "2026-01-11")
        assert not is_due(habit, "2026-01-12")

    def test_weekday_filter(self, make_habit: MakeHabit) -> None:
        """The days filter applies within active weeks."""
        # Tuesdays only
        habit = make_habit(frequency="biweekly", anchorDate="2026-01-05", days=[2])

        assert is_due(habit, "2026-01-20")
        assert not is_due(habit, "2026-01-19")
        assert not is_due(habit, "2026-01-13")

    def test_week_boundary_across_year(self, make_habit: MakeHabit) -> None:
        """Parity is counted on Monday-aligned weeks across Jan 1."""
        habit = make_habit(frequency="biweekly", anchorDate="2025-12-22")  # Mon

        assert not is_due(habit, "2025-12-29")
        assert not is_due(habit, "2026-01-01")
        assert is_due(habit, "2026-01-05")

    def test_goal_biweekly_parity_only(self, make_habit: MakeHabit) -> None:
        """Goal habits check parity but not the anchor-week exclusion."""
        habit = make_habit(frequency="biweekly", target=2, anchorDate="2026-01-07")

        assert is_due(habit, "2026-01-05")
        assert not is_due(habit, "2026-01-12")
        assert is_due(habit, "2026-01-21")


# =============================================================================
# Monthly
# =============================================================================


class TestMonthlyEach:
    """Tests for monthly "each" mode (day-of-month dates)."""

    def test_selected_dates(self, make_habit: MakeHabit) -> None:
        """Only listed days of the month are due."""
        habit = make_habit(
            frequency="monthly",
            anchorDate="2026-01-01",
            monthly={"mode": "each", "dates": [1, 15]},
        )

        assert is_due(habit, "2026-02-01")
        assert is_due(habit, "2026-02-15")
        assert not is_due(habit, "2026-02-02")

    def test_interval(self, make_habit: MakeHabit) -> None:
        """Only every Nth month counted from the anchor month is active."""
        habit = make_habit(
            frequency="monthly",
            anchorDate="2026-01-20",
            monthly={"interval": 2, "dates": [1]},
        )

        assert is_due(habit, "2026-03-01")
        assert not is_due(habit, "2026-02-01")
        assert is_due(habit, "2025-11-01")

    def test_no_config_every_day(self, make_habit: MakeHabit) -> None:
        """A monthly habit without settings is due every day."""
        assert is_due(make_habit(frequency="monthly"), "2026-02-17")

    def test_unknown_mode_never_due(self, make_habit: MakeHabit) -> None:
        """An unrecognized mode fails closed."""
        habit = make_habit(frequency="monthly", monthly={"mode": "sometimes"})

        assert not is_due(habit, "2026-02-17")

    def test_unparseable_interval_never_due(self, make_habit: MakeHabit) -> None:
        """An interval that is not a number fails closed."""
        habit = make_habit(frequency="monthly", monthly={"interval": "often"})

        assert not is_due(habit, "2026-02-17")


class TestMonthlyOn:
    """Tests for monthly "on" mode (weekday ordinals)."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2026-01-30", True),  # 5-Friday month
            ("2026-01-23", False),
            ("2026-02-27", True),  # 4-Friday month
            ("2026-02-20", False),
            ("2026-02-28", False),  # Saturday
        ],
    )
    def test_last_friday(self, make_habit: MakeHabit, day: str, expected: bool) -> None:
        """"last-friday" is the final Friday in both 4- and 5-Friday months."""
        habit = make_habit(
            frequency="monthly",
            monthly={"mode": "on", "combinations": ["last-friday"]},
        )

        assert is_due(habit, day) is expected

    def test_multiple_combinations(self, make_habit: MakeHabit) -> None:
        """Any matching combination makes the day due."""
        habit = make_habit(
            frequency="monthly",
            monthly={"mode": "on", "combinations": ["first-monday", "Second-Tuesday"]},
        )

        assert is_due(habit, "2026-01-05")
        assert is_due(habit, "2026-01-13")
        assert not is_due(habit, "2026-01-12")
        assert not is_due(habit, "2026-01-06")

    def test_fifth_occurrence_absent(self, make_habit: MakeHabit) -> None:
        """"fifth-friday" only fires in months that have one."""
        habit = make_habit(
            frequency="monthly",
            monthly={"mode": "on", "combinations": ["fifth-friday"]},
        )

        assert is_due(habit, "2026-01-30")
        assert not any(is_due(habit, f"2026-02-{d:02d}") for d in range(1, 29))

    def test_last_week_of_year_9999(self, make_habit: MakeHabit) -> None:
        """"last" ordinals stay total at the end of the calendar."""
        habit = make_habit(
            frequency="monthly",
            monthly={"mode": "on", "combinations": ["last-friday"]},
        )

        due = [d for d in range(25, 32) if is_due(habit, date(9999, 12, d))]

        assert len(due) == 1

    def test_no_combinations_every_day(self, make_habit: MakeHabit) -> None:
        """"on" mode without combinations is due every day of active months."""
        habit = make_habit(frequency="monthly", monthly={"mode": "on"})

        assert is_due(habit, "2026-02-17")

    def test_all_malformed_combinations_never_due(self, make_habit: MakeHabit) -> None:
        """A configured list of malformed entries matches nothing."""
        habit = make_habit(
            frequency="monthly",
            monthly={"mode": "on", "combinations": ["whenever"]},
        )

        assert not is_due(habit, "2026-01-30")


class TestNthWeekdayOfMonth:
    """Tests for is_nth_weekday_of_month."""

    @pytest.mark.parametrize(
        ("day", "ordinal", "expected"),
        [
            (date(2026, 1, 1), 1, True),
            (date(2026, 1, 7), 1, True),
            (date(2026, 1, 8), 2, True),
            (date(2026, 1, 15), 3, True),
            (date(2026, 1, 29), 5, True),
            (date(2026, 1, 29), None, True),
            (date(2026, 1, 24), None, False),
            (date(2026, 1, 25), None, True),
            (date(2024, 2, 29), None, True),
            (date(9999, 12, 24), None, False),
            (date(9999, 12, 31), None, True),
        ],
    )
    def test_ordinals(self, day: date, ordinal: int | None, expected: bool) -> None:
        """Ordinals are counted in 7-day blocks from the 1st."""
        assert is_nth_weekday_of_month(day, ordinal) is expected


# =============================================================================
# Yearly
# =============================================================================


class TestYearly:
    """Tests for yearly interval and filters."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2022-06-10", True),  # anchor year
            ("2024-06-10", True),
            ("2026-06-10", True),
            ("2023-06-10", False),  # off-year
            ("2024-06-11", False),  # wrong date
            ("2024-05-10", False),  # wrong month
        ],
    )
    def test_interval_month_and_date(
        self, make_habit: MakeHabit, day: str, expected: bool
    ) -> None:
        """Every second year from 2022, on June 10 (months are 0-based)."""
        habit = make_habit(
            frequency="yearly",
            anchorDate="2022-03-01",
            yearInterval=2,
            months=[5],
            yearlyDates=[10],
        )

        assert is_due(habit, day) is expected

    def test_no_filters_every_day(self, make_habit: MakeHabit) -> None:
        """Without filters a yearly habit is due every day of active years."""
        habit = make_habit(frequency="yearly", anchorDate="2025-01-01", yearInterval=2)

        assert is_due(habit, "2027-08-19")
        assert not is_due(habit, "2026-08-19")


# =============================================================================
# Range scanning
# =============================================================================


class TestGetDueDates:
    """Tests for ScheduleEngine.get_due_dates."""

    def test_weekly_mondays(self, make_habit: MakeHabit) -> None:
        """Lists every due day in the inclusive range."""
        habit = make_habit(frequency="weekly", days=[1])

        result = ScheduleEngine().get_due_dates(habit, "2026-01-01", "2026-01-31")

        assert result == [
            date(2026, 1, 5),
            date(2026, 1, 12),
            date(2026, 1, 19),
            date(2026, 1, 26),
        ]

    def test_limit(self, make_habit: MakeHabit) -> None:
        """Stops after `limit` results."""
        result = ScheduleEngine().get_due_dates(
            make_habit(), "2026-01-01", "2026-12-31", limit=3
        )

        assert result == [date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 3)]

    def test_invalid_bounds(self, make_habit: MakeHabit) -> None:
        """Unparseable bounds yield an empty list."""
        assert ScheduleEngine().get_due_dates(make_habit(), "soon", "2026-01-31") == []

    def test_holidays_excluded(
        self, engine: ScheduleEngine, make_habit: MakeHabit
    ) -> None:
        """Suppressed holidays are not listed."""
        result = engine.get_due_dates(make_habit(), "2025-12-31", "2026-01-02")

        assert result == [date(2025, 12, 31), date(2026, 1, 2)]
