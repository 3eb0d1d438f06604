"""Unit tests for schedule_engine.py RecurrenceEngine.

Tests per expansion regime:
- Week without "each": fixed stride from the start date
- "each" selectors for week, month and year
- Single date per cycle with and without ordinals
- Cascading date adjustments
- Cycle capping via calculate_max_interval()
"""

from __future__ import annotations

from datetime import date

from recurrentry import const
from recurrentry.engines.schedule_engine import RecurrenceEngine, calculate_max_interval
from recurrentry.type_defs import DateAdjustment
from tests.helpers import make_config

WEEKEND = const.WEEKEND_DAYS_SATURDAY_SUNDAY


def cycles(engine: RecurrenceEngine, count: int) -> list[date]:
    """Flatten the candidates of the first ``count`` cycles."""
    return [
        candidate
        for cycle_index in range(count)
        for candidate in engine.get_cycle_dates(cycle_index)
    ]


# =============================================================================
# Construction
# =============================================================================


class TestEngineOptions:
    """Tests for option normalization at construction."""

    def test_non_positive_every_becomes_one(self) -> None:
        """every <= 0 is treated as 1."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 1), "month", 3, every=0))
        assert engine.every == 1

    def test_each_sorted_and_deduplicated(self) -> None:
        """Selectors are emitted in ascending order without duplicates."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 1, each=[15, 1, 15])
        )
        assert engine.each == (1, 15)


# =============================================================================
# Weekly
# =============================================================================


class TestWeekly:
    """Tests for the week period."""

    def test_every_two_weeks_from_start(self) -> None:
        """Without "each" the start date's weekday is kept."""
        engine = RecurrenceEngine(make_config(date(2023, 1, 1), "week", 3, every=2))
        assert cycles(engine, 3) == [
            date(2023, 1, 1),
            date(2023, 1, 15),
            date(2023, 1, 29),
        ]

    def test_each_monday_and_friday(self) -> None:
        """Week selectors pick days of the Monday-started week."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "week", 5, each=[1, 5])
        )
        assert engine.get_cycle_dates(0) == [date(2024, 1, 1), date(2024, 1, 5)]
        assert engine.get_cycle_dates(4) == [date(2024, 1, 29), date(2024, 2, 2)]

    def test_each_uses_week_of_start(self) -> None:
        """A Sunday start belongs to the week beginning the previous Monday."""
        engine = RecurrenceEngine(make_config(date(2023, 1, 1), "week", 1, each=[7]))
        assert engine.get_cycle_dates(0) == [date(2023, 1, 1)]

    def test_fixed_stride_with_adjustment(self) -> None:
        """A day adjustment shifts the fixed weekly date."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 1), "week", 3))
        assert engine.get_cycle_dates(1, DateAdjustment(days=2)) == [
            date(2024, 1, 10)
        ]

    def test_each_with_adjustment(self) -> None:
        """A day adjustment shifts every selected weekday."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "week", 3, each=[1, 3])
        )
        assert engine.get_cycle_dates(0, DateAdjustment(days=1)) == [
            date(2024, 1, 2),
            date(2024, 1, 4),
        ]


# =============================================================================
# Monthly
# =============================================================================


class TestMonthly:
    """Tests for the month period."""

    def test_each_first_of_month(self) -> None:
        """Day-of-month selector."""
        engine = RecurrenceEngine(
            make_config(date(2023, 1, 1), "month", 12, each=[1])
        )
        assert engine.get_cycle_dates(3) == [date(2023, 4, 1)]

    def test_each_day_beyond_month_length_skipped(self) -> None:
        """Day 31 produces nothing in February and April."""
        engine = RecurrenceEngine(
            make_config(date(2023, 1, 1), "month", 4, each=[31])
        )
        assert cycles(engine, 4) == [date(2023, 1, 31), date(2023, 3, 31)]

    def test_each_multiple_days_ascending(self) -> None:
        """Several selectors yield several ascending dates."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 1, each=[15, 1])
        )
        assert engine.get_cycle_dates(0) == [date(2024, 1, 1), date(2024, 1, 15)]

    def test_single_date_clamps(self) -> None:
        """Without selectors the start's day is clamped to the month."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 31), "month", 3))
        assert cycles(engine, 3) == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    def test_every_three_months(self) -> None:
        """every=3 is quarterly."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 10), "month", 3, every=3))
        assert cycles(engine, 3) == [
            date(2024, 1, 10),
            date(2024, 4, 10),
            date(2024, 7, 10),
        ]

    def test_first_monday(self) -> None:
        """Ordinal day name per month."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 2, on="first-monday")
        )
        assert cycles(engine, 2) == [date(2024, 1, 1), date(2024, 2, 5)]

    def test_last_weekday(self) -> None:
        """Ordinal weekday category needs the weekend set."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 2, on="last-weekday"), WEEKEND
        )
        assert cycles(engine, 2) == [date(2024, 1, 31), date(2024, 2, 29)]

    def test_next_to_last_weekday(self) -> None:
        """nextToLast picks the weekday before the last one."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 2, on="nextToLast-weekday"),
            WEEKEND,
        )
        assert cycles(engine, 2) == [date(2024, 1, 30), date(2024, 2, 28)]

    def test_missing_ordinal_skips_cycle(self) -> None:
        """February 2023 has no fifth Monday; March 2023 does not either."""
        engine = RecurrenceEngine(
            make_config(date(2023, 1, 1), "month", 3, on="fifth-monday")
        )
        assert engine.get_cycle_dates(1) == []
        assert cycles(engine, 3) == [date(2023, 1, 30)]

    def test_missing_weekend_context_skips_cycle(self) -> None:
        """Without weekend days a weekday ordinal cannot resolve."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "month", 1, on="first-weekday")
        )
        assert engine.get_cycle_dates(0) == []

    def test_adjustment_before_ordinal(self) -> None:
        """The adjustment can move the anchor into the next month."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 25), "month", 1, on="last-friday")
        )
        assert engine.get_cycle_dates(0, DateAdjustment(days=10)) == [
            date(2024, 2, 23)
        ]

    def test_adjustment_shifts_day(self) -> None:
        """A day adjustment moves a plain monthly date."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 1), "month", 3))
        assert engine.get_cycle_dates(2, DateAdjustment(days=9)) == [
            date(2024, 3, 10)
        ]

    def test_empty_adjustment_ignored(self) -> None:
        """An all-zero adjustment is the same as none."""
        engine = RecurrenceEngine(make_config(date(2024, 1, 1), "month", 1))
        assert engine.get_cycle_dates(0, DateAdjustment()) == [date(2024, 1, 1)]


# =============================================================================
# Yearly
# =============================================================================


class TestYearly:
    """Tests for the year period."""

    def test_each_months_keep_start_day(self) -> None:
        """Month selectors keep the start's day of month."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 1, each=[3, 9])
        )
        assert engine.get_cycle_dates(0) == [date(2024, 3, 1), date(2024, 9, 1)]

    def test_each_clamps_day(self) -> None:
        """The 31st clamps in shorter months."""
        engine = RecurrenceEngine(
            make_config(date(2023, 1, 31), "year", 1, each=[2, 4])
        )
        assert engine.get_cycle_dates(0) == [date(2023, 2, 28), date(2023, 4, 30)]

    def test_each_with_ordinal(self) -> None:
        """Ordinal resolved in each selected month."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 1, each=[3, 9], on="first-monday")
        )
        assert engine.get_cycle_dates(0) == [date(2024, 3, 4), date(2024, 9, 2)]

    def test_each_with_missing_ordinal(self) -> None:
        """Only February 2024 has a fifth Thursday."""
        engine = RecurrenceEngine(
            make_config(
                date(2024, 1, 1), "year", 1, each=[2, 6], on="fifth-thursday"
            )
        )
        assert engine.get_cycle_dates(0) == [date(2024, 2, 29)]

    def test_fifth_monday_over_two_years(self) -> None:
        """April 2024 is the only month with a fifth Monday."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 2, each=[2, 4], on="fifth-monday"),
            WEEKEND,
        )
        assert cycles(engine, 2) == [date(2024, 4, 29)]

    def test_ordinal_without_each(self) -> None:
        """Ordinal in the start's month of each year."""
        engine = RecurrenceEngine(
            make_config(date(2024, 6, 1), "year", 2, on="third-wednesday")
        )
        assert cycles(engine, 2) == [date(2024, 6, 19), date(2025, 6, 18)]

    def test_first_monday_of_year(self) -> None:
        """First Monday of January, two years."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 2, on="first-monday")
        )
        assert cycles(engine, 2) == [date(2024, 1, 1), date(2025, 1, 6)]

    def test_month_adjustment_rolls_year(self) -> None:
        """December + 1 month lands in January of the next year."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 1, each=[12])
        )
        assert engine.get_cycle_dates(0, DateAdjustment(months=1)) == [
            date(2025, 1, 1)
        ]

    def test_month_and_day_adjustment(self) -> None:
        """Month and day deltas both apply to each selected month."""
        engine = RecurrenceEngine(
            make_config(date(2024, 1, 1), "year", 1, each=[3])
        )
        assert engine.get_cycle_dates(0, DateAdjustment(months=1, days=4)) == [
            date(2024, 4, 5)
        ]


# =============================================================================
# calculate_max_interval
# =============================================================================


class TestCalculateMaxInterval:
    """Tests for cycle capping."""

    def test_below_cap(self) -> None:
        """Requested count below the cap is kept."""
        assert calculate_max_interval(12, "month") == 12

    def test_default_caps(self) -> None:
        """Defaults: year 20, month 240, week 1248."""
        assert calculate_max_interval(5000, "week") == 1248
        assert calculate_max_interval(5000, "month") == 240
        assert calculate_max_interval(50, "year") == 20

    def test_override_merged_over_defaults(self) -> None:
        """A caller cap replaces only its own period."""
        caps = {"year": 100}
        assert calculate_max_interval(50, "year", caps) == 50
        assert calculate_max_interval(5000, "month", caps) == 240

    def test_single_is_one(self) -> None:
        """Period none always yields one cycle."""
        assert calculate_max_interval(10, "none") == 1

    def test_zero_interval_uses_cap(self) -> None:
        """A zero interval falls back to the period cap."""
        assert calculate_max_interval(0, "month") == 240
