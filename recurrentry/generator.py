"""Recurrence generator - orchestrates expansion of recurring items.

Drives one linear pass over the items:
1. Validate calendar, caps, range, every item and every modification
   (nothing is expanded if any input is invalid)
2. For each item, in input order, expand cycles through RecurrenceEngine
3. Filter candidates by the requested range
4. Resolve payment dates through PaymentEngine
5. Apply the modification overlay through ModificationEngine

Output is grouped per item in input order with dense 1-based indexes within
an item. It is not globally sorted by date.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
import datetime

from . import const
from .data_builders import (
    RecurrenceValidationError,
    validate_date_range,
    validate_items,
    validate_max_intervals,
    validate_modifications,
    validate_weekend_days,
)
from .engines.modification_engine import (
    MODIFICATION_OUTCOME_DELETE,
    MODIFICATION_OUTCOME_DELETE_REST,
    ModificationEngine,
    OverlayState,
)
from .engines.payment_engine import PaymentEngine
from .engines.schedule_engine import RecurrenceEngine, calculate_max_interval
from .type_defs import DateRange, GeneratedOccurrence, Modification, RecurringItem


class Recurrentry:
    """Occurrence generator bound to one calendar.

    The calendar (weekend days and holidays) is validated once at
    construction and reused by every generate() call.

    Example:
        recurrentry = Recurrentry(weekend_days={6, 7}, holidays=[date(2024, 1, 15)])
        occurrences = recurrentry.generate(items, modifications)
    """

    def __init__(
        self,
        weekend_days: Iterable[int] | None = None,
        holidays: Iterable[datetime.date] | None = None,
    ) -> None:
        """Initialize the generator with a calendar.

        Args:
            weekend_days: ISO weekday numbers (Monday=1 ... Sunday=7).
            holidays: Dates that are never workdays.

        Raises:
            RecurrenceValidationError: Invalid weekend day or holiday.
        """
        self._weekend_days = validate_weekend_days(weekend_days)
        try:
            self._payment_engine = PaymentEngine(holidays, self._weekend_days)
        except ValueError as err:
            raise RecurrenceValidationError(
                None, const.FIELD_HOLIDAYS, str(err)
            ) from err

    @property
    def weekend_days(self) -> frozenset[int]:
        """Weekend days of the calendar."""
        return self._weekend_days

    @property
    def holidays(self) -> frozenset[datetime.date]:
        """Holidays of the calendar."""
        return self._payment_engine.holidays

    def generate(
        self,
        items: Iterable[RecurringItem],
        modifications: Iterable[Modification] | None = None,
        max_intervals: Mapping[str, int] | None = None,
        date_range: DateRange | None = None,
    ) -> list[GeneratedOccurrence]:
        """Expand items into occurrences.

        Args:
            items: Items to expand, output follows their order.
            modifications: Edits targeting (item id, generated position).
            max_intervals: Per-period cycle caps merged over the defaults.
            date_range: Inclusive range; candidates outside it are skipped.

        Returns:
            Surviving occurrences, grouped per item.

        Raises:
            RecurrenceValidationError: Any invalid input; nothing is generated.
        """
        items = list(items)
        modifications = list(modifications or ())
        caps = validate_max_intervals(max_intervals)
        validate_date_range(date_range)
        validate_items(items, self._weekend_days)
        validate_modifications(modifications)

        modification_engine = ModificationEngine(modifications, self._payment_engine)

        results: list[GeneratedOccurrence] = []
        for item in items:
            if item.config is None or item.config.period == const.PERIOD_NONE:
                occurrences = self._expand_single(item, date_range)
            else:
                occurrences = self._expand_recurring(
                    item, caps, date_range, modification_engine
                )
            const.LOGGER.debug(
                "Recurrentry: Item %s produced %s occurrence(s)",
                item.id,
                len(occurrences),
            )
            results.extend(occurrences)

        return results

    def _expand_single(
        self, item: RecurringItem, date_range: DateRange | None
    ) -> list[GeneratedOccurrence]:
        """One occurrence at the item's date.

        Without a config the payment date is the actual date. A period "none"
        config still applies its grace period and workday rule.
        """
        if date_range is not None and not date_range.contains(item.date):
            return []

        payment = item.date
        if item.config is not None:
            options = item.config.options
            payment = self._payment_engine.resolve(
                item.date, options.grace_period, options.workdays_only
            )

        return [
            GeneratedOccurrence(
                item=item,
                index=const.DEFAULT_OCCURRENCE_INDEX,
                actual_date=item.date,
                payment_date=payment,
            )
        ]

    def _expand_recurring(
        self,
        item: RecurringItem,
        caps: Mapping[str, int],
        date_range: DateRange | None,
        modification_engine: ModificationEngine,
    ) -> list[GeneratedOccurrence]:
        """Expand every cycle of a recurring item.

        Two counters run side by side: ``position`` counts every in-range
        candidate (modifications target it), ``index`` counts survivors only
        (the dense index reported on each occurrence).
        """
        config = item.config
        options = config.options
        engine = RecurrenceEngine(config, self._weekend_days)
        cycle_count = calculate_max_interval(config.interval, config.period, caps)

        has_modifications = modification_engine.has_modifications(item.id)
        state = OverlayState()
        occurrences: list[GeneratedOccurrence] = []
        position = 0
        index = 0

        for cycle_index in range(cycle_count):
            for candidate in engine.get_cycle_dates(cycle_index, state.adjustment):
                if date_range is not None and not date_range.contains(candidate):
                    const.LOGGER.debug(
                        "Recurrentry: Item %s candidate %s outside range, skipping",
                        item.id,
                        candidate,
                    )
                    continue

                position += 1
                index += 1
                occurrence = GeneratedOccurrence(
                    item=item,
                    index=index,
                    actual_date=candidate,
                    payment_date=self._payment_engine.resolve(
                        candidate, options.grace_period, options.workdays_only
                    ),
                    fields=state.initial_fields(),
                )

                if not has_modifications:
                    occurrences.append(occurrence)
                    continue

                outcome = modification_engine.apply(
                    occurrence, position, state, config.period, options
                )
                if outcome == MODIFICATION_OUTCOME_DELETE_REST:
                    return occurrences
                if outcome == MODIFICATION_OUTCOME_DELETE:
                    index -= 1
                    continue

                occurrences.append(occurrence)

        return occurrences


def generate(
    items: Iterable[RecurringItem],
    modifications: Iterable[Modification] | None = None,
    max_intervals: Mapping[str, int] | None = None,
    holidays: Iterable[datetime.date] | None = None,
    weekend_days: Collection[int] | None = None,
    date_range: DateRange | None = None,
) -> list[GeneratedOccurrence]:
    """Expand recurring items into concrete occurrences.

    Convenience wrapper building a one-shot Recurrentry for the calendar.

    Examples:
        generate(
            [RecurringItem(1, date(2023, 1, 1), RecurrenceConfig(
                start=date(2023, 1, 1), period="week", interval=3,
                options=RecurrenceOptions(every=2),
            ))]
        ) → occurrences on 2023-01-01, 2023-01-15, 2023-01-29

    Raises:
        RecurrenceValidationError: Any invalid input; nothing is generated.
    """
    return Recurrentry(weekend_days, holidays).generate(
        items, modifications, max_intervals, date_range
    )
