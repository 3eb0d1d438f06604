"""Unit tests for PaymentEngine - payment due date resolution.

Test Categories:
- Calendar construction (holiday normalization)
- Workday checks
- Grace period and workday adjustment
- Iteration cap safety
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
import logging

import pytest

from recurrentry import const
from recurrentry.engines.payment_engine import PaymentEngine, payment_date

# =============================================================================
# Test: Calendar
# =============================================================================


class TestCalendar:
    """Tests for PaymentEngine construction."""

    def test_datetime_holidays_reduced_to_dates(self) -> None:
        """Holiday datetimes compare by calendar date."""
        engine = PaymentEngine([datetime(2024, 1, 15, 9, 30)], {6, 7})
        assert engine.holidays == frozenset({date(2024, 1, 15)})
        assert not engine.is_workday(date(2024, 1, 15))

    def test_invalid_holiday_raises(self) -> None:
        """A holiday that is not a date is rejected."""
        with pytest.raises(ValueError, match="Invalid holiday"):
            PaymentEngine(["someday"], {6, 7})

    def test_empty_calendar(self) -> None:
        """Without weekend days or holidays every day is a workday."""
        engine = PaymentEngine()
        assert not engine.has_non_workdays
        assert engine.is_workday(date(2023, 1, 1))


# =============================================================================
# Test: resolve
# =============================================================================


class TestResolve:
    """Tests for PaymentEngine.resolve()."""

    def test_none_passes_through(self, payment_engine: PaymentEngine) -> None:
        """A missing actual date yields no payment date."""
        assert payment_engine.resolve(None, 3, True) is None

    def test_no_adjustment_by_default(self, payment_engine: PaymentEngine) -> None:
        """Without grace or workdays-only the date is unchanged."""
        assert payment_engine.resolve(date(2023, 1, 1)) == date(2023, 1, 1)

    def test_sunday_moves_to_monday(self, weekend_days: frozenset[int]) -> None:
        """2023-01-01 is a Sunday."""
        engine = PaymentEngine(weekend_days=weekend_days)
        assert engine.resolve(date(2023, 1, 1), workdays_only=True) == date(
            2023, 1, 2
        )

    def test_saturday_moves_to_monday(self, weekend_days: frozenset[int]) -> None:
        """2023-04-01 is a Saturday."""
        engine = PaymentEngine(weekend_days=weekend_days)
        assert engine.resolve(date(2023, 4, 1), workdays_only=True) == date(
            2023, 4, 3
        )

    def test_holiday_moves_to_next_day(self, payment_engine: PaymentEngine) -> None:
        """2024-01-15 is a holiday Monday."""
        assert payment_engine.resolve(date(2024, 1, 15), workdays_only=True) == date(
            2024, 1, 16
        )

    def test_weekend_then_holiday(self, payment_engine: PaymentEngine) -> None:
        """Saturday 2023-12-30 skips the weekend and New Year's Day."""
        assert payment_engine.resolve(date(2023, 12, 30), workdays_only=True) == date(
            2024, 1, 2
        )

    def test_grace_period_only(self, payment_engine: PaymentEngine) -> None:
        """Grace days are calendar days."""
        assert payment_engine.resolve(date(2024, 1, 1), 2) == date(2024, 1, 3)

    def test_grace_period_then_workday(self, payment_engine: PaymentEngine) -> None:
        """Thursday + 2 lands on Saturday, then skips to after the holiday."""
        assert payment_engine.resolve(date(2024, 1, 11), 2, True) == date(2024, 1, 16)

    def test_negative_grace_ignored(self, payment_engine: PaymentEngine) -> None:
        """Only a positive grace period shifts the date."""
        assert payment_engine.resolve(date(2024, 1, 3), -2) == date(2024, 1, 3)

    def test_workdays_only_without_calendar(self) -> None:
        """Workdays-only is a no-op when nothing is a non-workday."""
        engine = PaymentEngine()
        assert engine.resolve(date(2023, 1, 1), workdays_only=True) == date(
            2023, 1, 1
        )

    def test_payment_never_before_actual_plus_grace(
        self, payment_engine: PaymentEngine
    ) -> None:
        """Payment date >= actual date + grace period across a month."""
        start = date(2024, 1, 1)
        for offset in range(31):
            actual = start + timedelta(days=offset)
            resolved = payment_engine.resolve(actual, 3, True)
            assert resolved is not None
            assert resolved >= actual + timedelta(days=3)
            assert payment_engine.is_workday(resolved)


# =============================================================================
# Test: Safety
# =============================================================================


class TestIterationCap:
    """Tests for the workday walk ceiling."""

    def test_all_weekend_calendar_stops(self, caplog: pytest.LogCaptureFixture) -> None:
        """A calendar with no workdays stops at the cap and warns."""
        engine = PaymentEngine(weekend_days=range(1, 8))
        with caplog.at_level(logging.WARNING):
            result = engine.resolve(date(2024, 1, 1), workdays_only=True)

        assert result == date(2024, 1, 1) + timedelta(
            days=const.MAX_WORKDAY_ADJUSTMENT_ITERATIONS
        )
        assert "Max iterations reached" in caplog.text


# =============================================================================
# Test: payment_date
# =============================================================================


class TestPaymentDateFunction:
    """Tests for the module-level payment_date() helper."""

    def test_matches_engine(self) -> None:
        """The helper builds a one-shot engine."""
        assert payment_date(date(2023, 1, 1), 0, [], {6, 7}, True) == date(2023, 1, 2)
        assert payment_date(date(2024, 1, 1), 2) == date(2024, 1, 3)
        assert payment_date(None) is None
