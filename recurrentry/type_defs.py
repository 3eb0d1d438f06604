"""Type definitions for recurrentry data structures.

ARCHITECTURE DECISION: DATACLASSES FOR INPUTS AND RESULTS
=========================================================

Inputs (items, recurrence configs, modifications) and results (generated
occurrences) are small dataclasses with explicit optional fields:

1. **Closed identifier type**: item ids are ``int | str`` and compared by value.
2. **Tagged modification payloads**: ``ModificationPayload`` exposes the two
   fields the engine acts on (``deleted`` and ``date``) as real attributes.
   Everything else the caller wants to carry lives in ``fields`` and is never
   inspected by the engine.
3. **Mutable results**: ``GeneratedOccurrence`` is mutated in place by the
   modification overlay during the pass that creates it, so it is not frozen.

Callers holding plain mappings (JSON-like data) should go through
``data_builders.build_*()``, which validate and coerce into these types.

IMPORTANT: This file must NOT import from generator.py or the engines to
avoid circular dependencies. Only import from const.py and the standard
library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime
from typing import Any

from . import const

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ItemId = int | str
Period = str  # PERIOD_* constant from const.py
Ordinal = str  # "{position}-{dayType}", e.g. "first-monday"
WeekendDays = frozenset[int]  # ISO weekday numbers (Monday=1 ... Sunday=7)
MaxIntervals = dict[str, int]  # PERIOD_* -> maximum number of cycles


# =============================================================================
# Recurrence description
# =============================================================================


@dataclass(frozen=True)
class RecurrenceOptions:
    """Options refining how a recurrence expands.

    Attributes:
        every: Cycle multiplier (every N weeks/months/years). Values <= 0 are
            treated as 1 during expansion.
        each: Selectors within a cycle: ISO weekday (1-7) for week, day of
            month (1-31) for month, month of year (1-12) for year.
        on: Ordinal selector such as "third-friday" (month/year only).
        workdays_only: Shift payment dates off weekend days and holidays.
        grace_period: Days added to the actual date to obtain the payment date.
    """

    every: int = const.DEFAULT_EVERY
    each: tuple[int, ...] | None = None
    on: Ordinal | None = None
    workdays_only: bool = const.DEFAULT_WORKDAYS_ONLY
    grace_period: int = const.DEFAULT_GRACE_PERIOD


@dataclass(frozen=True)
class RecurrenceConfig:
    """Recurrence description attached to a recurring item.

    ``start`` is the origin for cycle arithmetic; ``interval`` is the number of
    cycles to generate (capped per period by ``const.MAX_INTERVALS``).
    """

    start: datetime.date | None
    period: Period
    interval: int
    options: RecurrenceOptions = field(default_factory=RecurrenceOptions)


@dataclass(frozen=True)
class RecurringItem:
    """A caller-owned item, single (``config`` is None) or recurring."""

    id: ItemId | None
    date: datetime.date | None
    config: RecurrenceConfig | None = None


# =============================================================================
# Modifications
# =============================================================================


@dataclass(frozen=True)
class ModificationPayload:
    """Edit applied to a generated occurrence.

    Attributes:
        deleted: Remove the occurrence (in a rest payload, together with a
            per-occurrence delete, remove every later occurrence too).
        date: Actual-date override for the targeted occurrence.
        fields: Caller-defined fields carried onto generated occurrences.
    """

    deleted: bool = False
    date: datetime.date | None = None
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Modification:
    """Point-in-time edit of one occurrence, optionally cascading."""

    item_id: ItemId
    index: int
    payload: ModificationPayload = field(default_factory=ModificationPayload)
    rest_payload: ModificationPayload | None = None


# =============================================================================
# Date arithmetic helpers
# =============================================================================


@dataclass(frozen=True)
class DateAdjustment:
    """Cumulative shift carried forward by a cascading date modification.

    Which components are populated depends on the item's period:
    year keeps months+days, month keeps days, week keeps the weekday delta
    (as days).
    """

    years: int = 0
    months: int = 0
    days: int = 0

    def is_empty(self) -> bool:
        """Return True when the adjustment does not move any date."""
        return not (self.years or self.months or self.days)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; a None bound is unbounded in that direction."""

    start: datetime.date | None = None
    end: datetime.date | None = None

    def contains(self, value: datetime.date) -> bool:
        """Return True if ``value`` lies within the range (bounds inclusive)."""
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


# =============================================================================
# Results
# =============================================================================


@dataclass
class GeneratedOccurrence:
    """A concrete, surviving occurrence of a recurring item.

    Attributes:
        item: The originating item (never mutated).
        index: 1-based, dense per item (deleted occurrences are not counted).
        actual_date: Calendar date of the event.
        payment_date: Actual date shifted by grace period and workday rules.
        fields: Caller-defined fields in effect for this occurrence.
    """

    item: RecurringItem
    index: int
    actual_date: datetime.date
    payment_date: datetime.date
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def item_id(self) -> ItemId | None:
        """Identifier of the originating item."""
        return self.item.id
