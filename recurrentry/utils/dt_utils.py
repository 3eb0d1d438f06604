# File: utils/dt_utils.py
"""Calendar primitives for recurrentry.

Pure Python date functions with ZERO package-level imports (no const.py,
no engines). All functions here can be unit tested in isolation.

Weekday numbering is ISO 8601 everywhere: Monday=1 ... Sunday=7.

Functions:
    - dt_parse_date: Normalize date/datetime/ISO-string input to a date
    - create_date: Strict "YYYY-MM-DD" parser
    - is_valid_date: Check a value is a plain calendar date (not a datetime)
    - get_day_name: Lowercase English weekday name
    - add_by_period: Period-aware date addition (month/year clamping)
    - start_of_week: Monday of the week containing a date
    - date_in_month: Build a date only if the day exists in that month
    - is_weekday: Weekday test against a caller-supplied weekend set
    - day_category: Classify a date as weekday or weekend
    - matches_day_type: Match a date against an ordinal day type
    - iso_weekdays_for_day_type: ISO weekdays an ordinal day type covers
    - month_days_matching: Days of a month matching a day type (rrule)
    - parse_ordinal: Split and validate "{position}-{dayType}"
    - resolve_ordinal: Resolve an ordinal inside a calendar month
"""

from __future__ import annotations

from calendar import monthrange
from collections.abc import Collection
from datetime import date, datetime, timedelta
import logging

# Third-party date utilities
from dateutil.relativedelta import relativedelta
from dateutil.rrule import FR, MO, MONTHLY, SA, SU, TH, TU, WE, rrule

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

PERIOD_NONE = "none"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_YEAR = "year"

DAY_TYPE_DAY = "day"
DAY_TYPE_WEEKDAY = "weekday"
DAY_TYPE_WEEKEND = "weekend"

DAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

ORDINAL_INDEXES = {
    "first": 0,
    "second": 1,
    "third": 2,
    "fourth": 3,
    "fifth": 4,
}
ORDINAL_NEXT_TO_LAST = "nextToLast"
ORDINAL_LAST = "last"
ORDINAL_SEPARATOR = "-"

# ISO weekday (1-7) -> rrule weekday constant
RRULE_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)


# ==============================================================================
# Exceptions
# ==============================================================================


class OrdinalResolutionError(ValueError):
    """Raised when an ordinal selector cannot be resolved to a date.

    Covers malformed selectors, unknown tokens, a missing weekend-day set for the
    weekday/weekend categories, and positions that do not exist in the month
    (e.g. a fifth Monday in a month with four Mondays).

    Attributes:
        ordinal: The ordinal selector that failed
        reason: Human-readable cause
    """

    def __init__(self, ordinal: str, reason: str) -> None:
        """Initialize OrdinalResolutionError.

        Args:
            ordinal: The ordinal selector that failed
            reason: Human-readable cause
        """
        self.ordinal = ordinal
        self.reason = reason
        super().__init__(f"Cannot resolve ordinal {ordinal!r}: {reason}")


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(value: str | date | datetime | None) -> date | None:
    """Safely normalize a value into a `datetime.date`.

    Accepts:
    - datetime.date (returned as-is)
    - datetime.datetime (time of day dropped)
    - "2025-04-07" (ISO format)
    - "2025-04-07T10:30:00" (ISO datetime, time of day dropped)

    Returns:
        datetime.date or None if the value cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        _LOGGER.debug("dt_parse_date: Could not parse %r", value)
        return None


def create_date(date_string: str) -> date:
    """Create a date from a "YYYY-MM-DD" string.

    Raises:
        ValueError: If the string is not a valid ISO calendar date.
    """
    return date.fromisoformat(date_string)


def is_valid_date(value: object) -> bool:
    """Return True if value is a plain calendar date.

    Datetimes are rejected; reduce one with dt_parse_date first.
    """
    return isinstance(value, date) and not isinstance(value, datetime)


def get_day_name(value: date) -> str:
    """Return the lowercase English weekday name of a date.

    Raises:
        TypeError: If value is not a date.
    """
    if not isinstance(value, date):
        raise TypeError(f"Expected a date instance, got {type(value).__name__}")
    return DAY_NAMES[value.isoweekday() - 1]


# ==============================================================================
# Arithmetic
# ==============================================================================


def add_by_period(value: date, amount: int, period: str) -> date:
    """Add ``amount`` periods to a date.

    Uses relativedelta for month/year arithmetic, which clamps an overflowing
    day to the last valid day of the target month (Jan 31 + 1 month = Feb 28,
    Feb 29 + 1 year = Feb 28).

    Args:
        value: Base date.
        amount: Number of periods (may be negative).
        period: One of "year", "month", "week"; anything else adds days.

    Returns:
        The shifted date.

    Examples:
        add_by_period(date(2024, 1, 31), 1, "month") → date(2024, 2, 29)
        add_by_period(date(2023, 1, 1), 2, "week") → date(2023, 1, 15)
    """
    if period == PERIOD_YEAR:
        return value + relativedelta(years=amount)
    if period == PERIOD_MONTH:
        return value + relativedelta(months=amount)
    if period == PERIOD_WEEK:
        return value + timedelta(weeks=amount)
    return value + timedelta(days=amount)


def start_of_week(value: date) -> date:
    """Return the Monday of the ISO week containing ``value``."""
    return value - timedelta(days=value.isoweekday() - 1)


def date_in_month(year: int, month: int, day: int) -> date | None:
    """Return the date if ``day`` exists in the month, else None.

    Used by day-of-month selectors: a selector of 31 produces nothing in
    April rather than rolling into May.
    """
    if day < 1 or day > monthrange(year, month)[1]:
        return None
    return date(year, month, day)


# ==============================================================================
# Classification
# ==============================================================================


def is_weekday(iso_weekday: int, weekend_days: Collection[int]) -> bool:
    """Return True if the ISO weekday is not one of the weekend days."""
    return iso_weekday not in weekend_days


def day_category(value: date, weekend_days: Collection[int]) -> str:
    """Classify a date as "weekday" or "weekend" against ``weekend_days``."""
    if is_weekday(value.isoweekday(), weekend_days):
        return DAY_TYPE_WEEKDAY
    return DAY_TYPE_WEEKEND


def matches_day_type(
    value: date, day_type: str, weekend_days: Collection[int]
) -> bool:
    """Return True if a date matches an ordinal day type.

    "day" matches every date, "weekday"/"weekend" follow ``weekend_days``,
    and a day name ("monday" ... "sunday") matches only that weekday.
    """
    if day_type == DAY_TYPE_DAY:
        return True
    if day_type in (DAY_TYPE_WEEKDAY, DAY_TYPE_WEEKEND):
        return day_category(value, weekend_days) == day_type
    return get_day_name(value) == day_type


# ==============================================================================
# Ordinals
# ==============================================================================


def parse_ordinal(ordinal: str) -> tuple[str, str]:
    """Split an ordinal selector into (position, day_type).

    Raises:
        OrdinalResolutionError: If the selector is not exactly two known tokens.
    """
    if not isinstance(ordinal, str):
        raise OrdinalResolutionError(str(ordinal), "ordinal must be a string")

    parts = ordinal.split(ORDINAL_SEPARATOR)
    if len(parts) != 2:
        raise OrdinalResolutionError(ordinal, "expected '{position}-{dayType}'")

    position, day_type = parts
    if position not in ORDINAL_INDEXES and position not in (
        ORDINAL_NEXT_TO_LAST,
        ORDINAL_LAST,
    ):
        raise OrdinalResolutionError(ordinal, f"unknown position {position!r}")
    if day_type not in (DAY_TYPE_DAY, DAY_TYPE_WEEKDAY, DAY_TYPE_WEEKEND) and (
        day_type not in DAY_NAMES
    ):
        raise OrdinalResolutionError(ordinal, f"unknown day type {day_type!r}")

    return position, day_type


def iso_weekdays_for_day_type(
    day_type: str, weekend_days: Collection[int]
) -> tuple[int, ...]:
    """Return the ISO weekdays (ascending) an ordinal day type matches."""
    if day_type == DAY_TYPE_DAY:
        return tuple(range(1, 8))
    if day_type == DAY_TYPE_WEEKDAY:
        return tuple(d for d in range(1, 8) if is_weekday(d, weekend_days))
    if day_type == DAY_TYPE_WEEKEND:
        return tuple(d for d in range(1, 8) if not is_weekday(d, weekend_days))
    return (DAY_NAMES.index(day_type) + 1,)


def month_days_matching(
    year: int, month: int, day_type: str, weekend_days: Collection[int]
) -> list[date]:
    """Return every day of a month matching an ordinal day type, ascending.

    Weekday filtering is done natively by rrule's byweekday.
    """
    iso_weekdays = iso_weekdays_for_day_type(day_type, weekend_days)
    # An empty byweekday makes rrule fall back to dtstart's day of month
    if not iso_weekdays:
        return []

    rule = rrule(
        MONTHLY,
        dtstart=datetime(year, month, 1),
        until=datetime(year, month, monthrange(year, month)[1]),
        byweekday=[RRULE_WEEKDAYS[d - 1] for d in iso_weekdays],
    )
    return [occurrence.date() for occurrence in rule]


def resolve_ordinal(
    month_anchor: date, ordinal: str, weekend_days: Collection[int]
) -> date:
    """Resolve an ordinal selector within the calendar month of ``month_anchor``.

    Collects the month's days matching the day type (month_days_matching)
    and picks by position: first..fifth are fixed indexes, "last" is the
    final match and "nextToLast" the one before it (clamped to the first
    match when there is only one).

    Args:
        month_anchor: Any date inside the target month.
        ordinal: Selector such as "first-monday", "last-weekday", "second-day".
        weekend_days: ISO weekday numbers considered weekend.

    Returns:
        The resolved date.

    Raises:
        OrdinalResolutionError: Malformed selector, empty weekend set for
            weekday/weekend, no matching day, or position past the matches.

    Examples:
        resolve_ordinal(date(2023, 1, 1), "first-monday", {6, 7}) → 2023-01-02
        resolve_ordinal(date(2023, 1, 1), "last-friday", {6, 7}) → 2023-01-27
    """
    position, day_type = parse_ordinal(ordinal)

    if day_type in (DAY_TYPE_WEEKDAY, DAY_TYPE_WEEKEND) and not weekend_days:
        raise OrdinalResolutionError(
            ordinal,
            f"weekendDays must be provided when using {day_type} day category",
        )

    year, month = month_anchor.year, month_anchor.month
    matching_days = month_days_matching(year, month, day_type, weekend_days)

    if not matching_days:
        raise OrdinalResolutionError(ordinal, f"no {day_type} in {year}-{month:02d}")

    if position == ORDINAL_LAST:
        index = len(matching_days) - 1
    elif position == ORDINAL_NEXT_TO_LAST:
        index = max(0, len(matching_days) - 2)
    else:
        index = ORDINAL_INDEXES[position]

    if index >= len(matching_days):
        raise OrdinalResolutionError(
            ordinal,
            f"only {len(matching_days)} {day_type} match(es) in {year}-{month:02d}",
        )

    return matching_days[index]
