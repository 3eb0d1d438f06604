"""Payment Engine - Pure logic for payment due date resolution.

Turns an occurrence's actual date into its payment date:
- Add the grace period (calendar days)
- When workdays-only is requested, walk forward past weekend days and
  holidays to the first workday

ARCHITECTURE: Pure logic engine with no I/O. A PaymentEngine instance holds
one calendar (holidays + weekend days) and is reused for every occurrence
of a generation pass.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
import datetime
from datetime import timedelta

from .. import const
from ..utils.dt_utils import dt_parse_date, is_weekday


class PaymentEngine:
    """Resolve payment dates against a fixed holiday/weekend calendar.

    Holidays are compared by calendar date only; datetimes are reduced to
    their date. Weekend days use ISO numbering (Monday=1 ... Sunday=7).
    """

    def __init__(
        self,
        holidays: Iterable[datetime.date] | None = None,
        weekend_days: Collection[int] | None = None,
    ) -> None:
        """Initialize the engine with a calendar.

        Args:
            holidays: Dates (or datetimes) that are never workdays.
            weekend_days: ISO weekday numbers that are never workdays.

        Raises:
            ValueError: If a holiday is not a date.
        """
        normalized: set[datetime.date] = set()
        for holiday in holidays or ():
            parsed = dt_parse_date(holiday)
            if parsed is None:
                raise ValueError(f"Invalid holiday date: {holiday!r}")
            normalized.add(parsed)

        self._holidays = frozenset(normalized)
        self._weekend_days = frozenset(weekend_days or ())

    @property
    def holidays(self) -> frozenset[datetime.date]:
        """Holiday dates of this calendar."""
        return self._holidays

    @property
    def weekend_days(self) -> frozenset[int]:
        """ISO weekend day numbers of this calendar."""
        return self._weekend_days

    @property
    def has_non_workdays(self) -> bool:
        """True when the calendar defines any weekend day or holiday."""
        return bool(self._holidays or self._weekend_days)

    def is_workday(self, value: datetime.date) -> bool:
        """Return True if the date is neither a weekend day nor a holiday."""
        return (
            is_weekday(value.isoweekday(), self._weekend_days)
            and value not in self._holidays
        )

    def next_workday(self, value: datetime.date) -> datetime.date:
        """Return ``value`` or the first workday after it.

        The walk is capped at MAX_WORKDAY_ADJUSTMENT_ITERATIONS so that a
        calendar marking every weekday as weekend cannot loop forever; on
        reaching the cap the last examined date is returned.
        """
        current = value
        iteration = 0
        while (
            not self.is_workday(current)
            and iteration < const.MAX_WORKDAY_ADJUSTMENT_ITERATIONS
        ):
            current = current + timedelta(days=1)
            iteration += 1

        if not self.is_workday(current):
            const.LOGGER.warning(
                "PaymentEngine: Max iterations reached looking for a workday after %s",
                value,
            )

        return current

    def resolve(
        self,
        actual_date: datetime.date | None,
        grace_period: int = const.DEFAULT_GRACE_PERIOD,
        workdays_only: bool = const.DEFAULT_WORKDAYS_ONLY,
    ) -> datetime.date | None:
        """Calculate the payment date for an actual date.

        Args:
            actual_date: Occurrence date. None passes through unchanged.
            grace_period: Days added before workday adjustment (only > 0 counts).
            workdays_only: Walk to the next workday when the calendar has
                weekend days or holidays.

        Returns:
            The payment date (never earlier than actual_date + grace_period).
        """
        if actual_date is None:
            return None

        result = actual_date
        if grace_period > 0:
            result = result + timedelta(days=grace_period)

        if workdays_only and self.has_non_workdays:
            result = self.next_workday(result)

        return result


def payment_date(
    actual_date: datetime.date | None,
    grace_period: int = const.DEFAULT_GRACE_PERIOD,
    holidays: Iterable[datetime.date] | None = None,
    weekend_days: Collection[int] | None = None,
    workdays_only: bool = const.DEFAULT_WORKDAYS_ONLY,
) -> datetime.date | None:
    """Calculate a payment date without keeping an engine around.

    Examples:
        payment_date(date(2024, 1, 1), 2) → date(2024, 1, 3)
        payment_date(date(2023, 1, 1), 0, [], {6, 7}, True) → date(2023, 1, 2)
    """
    return PaymentEngine(holidays, weekend_days).resolve(
        actual_date, grace_period, workdays_only
    )
