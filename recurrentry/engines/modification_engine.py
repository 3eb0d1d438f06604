"""Modification Engine - Pure logic for the occurrence edit overlay.

Applies caller-supplied modifications to occurrences as they are generated:
- Per-occurrence deletion, or deletion of the occurrence and every later one
- One-time actual-date override (payment date re-resolved)
- Cascading date shift carried to every later occurrence of the item
- Caller-defined fields, one-time or cascading

ARCHITECTURE: Pure logic engine with no I/O. The engine is a stateless query
over the modification list; the per-item cascading state lives in an
OverlayState owned by the caller for the duration of one item's expansion.

Modifications target the *generated position* of an occurrence: the 1-based
count of in-range candidates produced so far for the item, including ones
that were deleted. Surviving occurrences are re-indexed densely by the
generator.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..type_defs import DateAdjustment
from .payment_engine import PaymentEngine

if TYPE_CHECKING:
    from ..type_defs import (
        GeneratedOccurrence,
        ItemId,
        Modification,
        RecurrenceOptions,
    )


# =============================================================================
# MODIFICATION OUTCOME CONSTANTS
# =============================================================================

# Returned by ModificationEngine.apply()
MODIFICATION_OUTCOME_KEEP = "keep"
MODIFICATION_OUTCOME_DELETE = "delete"
MODIFICATION_OUTCOME_DELETE_REST = "delete_rest"


# =============================================================================
# OVERLAY STATE
# =============================================================================


@dataclass
class OverlayState:
    """Cascading state of one item's expansion.

    Attributes:
        cascading_fields: Fields of the most recent rest payload, applied to
            every later occurrence (None until a rest payload is seen)
        adjustment: Cumulative date shift applied to every later candidate
            before ordinal resolution (None until a cascading date override)
    """

    cascading_fields: dict[str, Any] | None = None
    adjustment: DateAdjustment | None = None

    def initial_fields(self) -> dict[str, Any]:
        """Return a fresh copy of the fields a new occurrence starts with."""
        return dict(self.cascading_fields or {})


# =============================================================================
# MODIFICATION ENGINE
# =============================================================================


class ModificationEngine:
    """Apply modifications to generated occurrences.

    Modifications are grouped by (item id, position) once at construction;
    lookups during expansion are dictionary hits. Several modifications for
    the same target are applied in their input order.
    """

    def __init__(
        self,
        modifications: Iterable[Modification] | None = None,
        payment_engine: PaymentEngine | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            modifications: Edits in caller order.
            payment_engine: Calendar used to re-resolve overridden dates.
        """
        self._by_target: defaultdict[tuple[ItemId, int], list[Modification]] = (
            defaultdict(list)
        )
        self._item_ids: set[ItemId] = set()
        for modification in modifications or ():
            self._by_target[(modification.item_id, modification.index)].append(
                modification
            )
            self._item_ids.add(modification.item_id)

        self._payment_engine = payment_engine or PaymentEngine()

    def has_modifications(self, item_id: ItemId) -> bool:
        """Return True if any modification targets the item."""
        return item_id in self._item_ids

    def get_modifications(self, item_id: ItemId, position: int) -> list[Modification]:
        """Return the modifications targeting one position, in input order."""
        return list(self._by_target.get((item_id, position), ()))

    def apply(
        self,
        occurrence: GeneratedOccurrence,
        position: int,
        state: OverlayState,
        period: str,
        options: RecurrenceOptions,
    ) -> str:
        """Apply every modification targeting this occurrence.

        Mutates ``occurrence`` (actual/payment date, fields) and ``state``
        (cascading fields, cumulative adjustment) in place.

        Args:
            occurrence: Freshly generated occurrence.
            position: Generated position of the occurrence (1-based).
            state: Cascading state of the item being expanded.
            period: Period of the item, selects the adjustment components.
            options: Item options, used to re-resolve the payment date.

        Returns:
            MODIFICATION_OUTCOME_KEEP, MODIFICATION_OUTCOME_DELETE or
            MODIFICATION_OUTCOME_DELETE_REST.
        """
        computed_date = occurrence.actual_date

        for modification in self.get_modifications(occurrence.item_id, position):
            payload = modification.payload
            rest = modification.rest_payload

            if payload.deleted:
                if rest is not None and rest.deleted:
                    const.LOGGER.debug(
                        "ModificationEngine: Deleting item %s from position %s on",
                        occurrence.item_id,
                        position,
                    )
                    return MODIFICATION_OUTCOME_DELETE_REST
                const.LOGGER.debug(
                    "ModificationEngine: Deleting item %s position %s",
                    occurrence.item_id,
                    position,
                )
                return MODIFICATION_OUTCOME_DELETE

            if payload.date is not None:
                occurrence.actual_date = payload.date
                occurrence.payment_date = self._payment_engine.resolve(
                    payload.date, options.grace_period, options.workdays_only
                )
                if rest is not None:
                    delta = calculate_date_adjustment(
                        computed_date, payload.date, period
                    )
                    state.adjustment = _combine_adjustments(state.adjustment, delta)
                const.LOGGER.debug(
                    "ModificationEngine: Moved item %s position %s from %s to %s",
                    occurrence.item_id,
                    position,
                    computed_date,
                    payload.date,
                )

            if rest is not None:
                state.cascading_fields = dict(rest.fields)
                occurrence.fields.update(rest.fields)

            occurrence.fields.update(payload.fields)

        return MODIFICATION_OUTCOME_KEEP


# =============================================================================
# Module-level convenience functions
# =============================================================================


def calculate_date_adjustment(
    original: datetime.date, modified: datetime.date, period: str
) -> DateAdjustment:
    """Calculate the cascading shift implied by moving one occurrence.

    Which components are kept depends on the period:
    - year: month and day-of-month deltas
    - month: day-of-month delta
    - week: weekday delta (as days)
    - none: no shift

    Examples:
        calculate_date_adjustment(date(2024, 2, 1), date(2024, 2, 10), "month")
            → DateAdjustment(days=9)
        calculate_date_adjustment(date(2024, 1, 1), date(2024, 1, 3), "week")
            → DateAdjustment(days=2)
    """
    if period == const.PERIOD_YEAR:
        return DateAdjustment(
            months=modified.month - original.month,
            days=modified.day - original.day,
        )
    if period == const.PERIOD_MONTH:
        return DateAdjustment(days=modified.day - original.day)
    if period == const.PERIOD_WEEK:
        return DateAdjustment(days=modified.isoweekday() - original.isoweekday())
    return DateAdjustment()


def _combine_adjustments(
    current: DateAdjustment | None, delta: DateAdjustment
) -> DateAdjustment:
    """Add a new delta to the adjustment already in effect."""
    if current is None:
        return delta
    return DateAdjustment(
        years=current.years + delta.years,
        months=current.months + delta.months,
        days=current.days + delta.days,
    )
