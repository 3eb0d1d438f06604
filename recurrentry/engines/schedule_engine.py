"""Schedule Engine for recurrentry.

Expands one recurrence cycle into its candidate occurrence dates:
- `dateutil.relativedelta` for month/year arithmetic and clamping
  (Jan 31 + 1 month = Feb 28)
- Ordinal selectors ("third-friday", "last-weekday") resolved per month
- Cascading date adjustments from modifications shift candidates before
  ordinal resolution

IMPORTANT: This module must NOT import from generator.py to avoid circular
imports. Only import from const.py, type_defs.py and utils.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
import datetime
from datetime import timedelta

from dateutil.relativedelta import relativedelta

from .. import const
from ..type_defs import DateAdjustment, RecurrenceConfig
from ..utils.dt_utils import (
    OrdinalResolutionError,
    add_by_period,
    date_in_month,
    resolve_ordinal,
    start_of_week,
)


class RecurrenceEngine:
    """Cycle expander for a single recurrence configuration.

    Handles every period type:
    - WEEK without "each": fixed stride from the start date's own weekday
    - WEEK/MONTH/YEAR with "each": one candidate per selector, ascending
    - MONTH/YEAR without "each": one date per cycle, optionally ordinal

    The engine is stateless between calls; the caller threads the pending
    DateAdjustment through cycles.
    """

    def __init__(
        self,
        config: RecurrenceConfig,
        weekend_days: Collection[int] | None = None,
    ) -> None:
        """Initialize the recurrence engine with configuration.

        Args:
            config: Recurrence description of one item.
            weekend_days: ISO weekday numbers, needed by weekday/weekend ordinals.

        Note:
            Multiplier values (<=0) are coerced to 1.
            Duplicate "each" selectors are collapsed and sorted ascending.
        """
        self._config = config
        self._period = config.period
        self._start = config.start

        options = config.options
        every = options.every
        self._every = every if every and every > 0 else const.DEFAULT_EVERY
        self._each: tuple[int, ...] = tuple(sorted(set(options.each or ())))
        self._on = options.on or None
        self._weekend_days = frozenset(weekend_days or ())

    @property
    def period(self) -> str:
        """Period of the configuration."""
        return self._period

    @property
    def every(self) -> int:
        """Effective cycle multiplier (always >= 1)."""
        return self._every

    @property
    def each(self) -> tuple[int, ...]:
        """Sorted "each" selectors (empty when not configured)."""
        return self._each

    @property
    def on(self) -> str | None:
        """Ordinal selector, if any."""
        return self._on

    def get_base_date(self, cycle_index: int) -> datetime.date:
        """Return the unadjusted anchor date of a cycle."""
        return add_by_period(self._start, cycle_index * self._every, self._period)

    def get_cycle_dates(
        self,
        cycle_index: int,
        adjustment: DateAdjustment | None = None,
    ) -> list[datetime.date]:
        """Calculate the candidate dates of one cycle.

        Args:
            cycle_index: 0-based cycle number.
            adjustment: Pending cascading adjustment from a modification.

        Returns:
            Candidate dates in ascending order. Empty when the cycle has no
            valid date (e.g. "fifth-monday" in a four-Monday month, or a
            day-of-month selector past the month's end).
        """
        if adjustment is not None and adjustment.is_empty():
            adjustment = None

        if self._period == const.PERIOD_WEEK and not self._each:
            return [self._fixed_weekly_date(cycle_index, adjustment)]

        if self._each:
            return sorted(self._each_dates(cycle_index, adjustment))

        single = self._single_date(cycle_index, adjustment)
        return [single] if single is not None else []

    # =========================================================================
    # Private: per-regime expansion
    # =========================================================================

    def _fixed_weekly_date(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> datetime.date:
        """Start date plus whole weeks (the start's weekday is kept)."""
        result = self._start + timedelta(
            days=cycle_index * self._every * const.DAYS_PER_WEEK
        )
        return _apply_adjustment(result, adjustment)

    def _each_dates(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> list[datetime.date]:
        """One candidate per "each" selector."""
        if self._period == const.PERIOD_WEEK:
            return self._weekly_each_dates(cycle_index, adjustment)
        if self._period == const.PERIOD_MONTH:
            return self._monthly_each_dates(cycle_index, adjustment)
        if self._period == const.PERIOD_YEAR:
            return self._yearly_each_dates(cycle_index, adjustment)
        return []

    def _weekly_each_dates(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> list[datetime.date]:
        """Weekdays of the cycle's Monday-started week."""
        period_start = self._start + timedelta(
            days=cycle_index * self._every * const.DAYS_PER_WEEK
        )
        monday = start_of_week(period_start)
        return [
            _apply_adjustment(monday + timedelta(days=target - 1), adjustment)
            for target in self._each
            if const.ISO_MONDAY <= target <= const.ISO_SUNDAY
        ]

    def _monthly_each_dates(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> list[datetime.date]:
        """Days of the cycle's month; days past the month's end are skipped."""
        base = self.get_base_date(cycle_index)
        results: list[datetime.date] = []
        for target in self._each:
            target_date = date_in_month(base.year, base.month, target)
            if target_date is None:
                const.LOGGER.debug(
                    "RecurrenceEngine: Day %s does not exist in %s-%02d, skipping",
                    target,
                    base.year,
                    base.month,
                )
                continue
            results.append(_apply_adjustment(target_date, adjustment))
        return results

    def _yearly_each_dates(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> list[datetime.date]:
        """Months of the cycle's year, keeping the start's day of month.

        A pending adjustment moves the target month (rolling into the next or
        previous year on overflow) and then the day, before any ordinal is
        resolved inside the resulting month.
        """
        base = self.get_base_date(cycle_index)
        results: list[datetime.date] = []
        for target in self._each:
            if not 1 <= target <= 12:
                continue
            target_date = base + relativedelta(month=target)
            if adjustment is not None:
                target_date = target_date + relativedelta(
                    months=adjustment.months, days=adjustment.days
                )
            if self._on:
                resolved = self._resolve_ordinal(target_date)
                if resolved is None:
                    continue
                target_date = resolved
            results.append(target_date)
        return results

    def _single_date(
        self, cycle_index: int, adjustment: DateAdjustment | None
    ) -> datetime.date | None:
        """One date per cycle: base date, adjusted, then ordinal if set."""
        result = _apply_adjustment(self.get_base_date(cycle_index), adjustment)
        if self._on:
            return self._resolve_ordinal(result)
        return result

    def _resolve_ordinal(self, month_anchor: datetime.date) -> datetime.date | None:
        """Resolve the ordinal in the anchor's month, None when absent."""
        try:
            return resolve_ordinal(month_anchor, self._on, self._weekend_days)
        except OrdinalResolutionError as err:
            const.LOGGER.debug("RecurrenceEngine: Skipping candidate: %s", err)
            return None


# =============================================================================
# Module-level convenience functions
# =============================================================================


def _apply_adjustment(
    value: datetime.date, adjustment: DateAdjustment | None
) -> datetime.date:
    """Shift a date by a cascading adjustment (years, months, then days)."""
    if adjustment is None:
        return value
    return value + relativedelta(
        years=adjustment.years, months=adjustment.months, days=adjustment.days
    )


def calculate_max_interval(
    interval: int,
    period: str,
    max_intervals: Mapping[str, int] | None = None,
) -> int:
    """Calculate how many cycles to generate for a configuration.

    Args:
        interval: Requested number of cycles.
        period: PERIOD_* constant.
        max_intervals: Per-period caps merged over const.MAX_INTERVALS.

    Returns:
        1 for single occurrences, otherwise min(interval, cap). A missing or
        zero interval falls back to the cap.

    Examples:
        calculate_max_interval(12, "month") → 12
        calculate_max_interval(5000, "week") → 1248
    """
    if period == const.PERIOD_NONE:
        return 1

    caps = {**const.MAX_INTERVALS, **(max_intervals or {})}
    cap = caps.get(period)
    if not interval:
        return cap or 0
    if cap is None:
        return interval
    return min(interval, cap)
