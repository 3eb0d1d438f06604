"""Input validation and construction helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Recurrence input validation (items, calendar, caps)
- Type guards over periods, ordinals and recurrence configs
- Building dataclass inputs from plain mappings (JSON-like data)

## Key Concepts

### Validation Functions
`validate_recurring_item()` performs the business rule checks on one item and
returns a dict of errors (empty if valid). `validate_items()` is the gate the
generator calls before expanding anything: it raises RecurrenceValidationError
on the first invalid item, so a bad input never yields a partial result.

### Build Functions
Each input type has a `build_<type>()` function that:
- Takes a mapping with DATA_* keys ("id", "config", "workdaysOnly", ...)
- Coerces ISO date strings ("2024-01-15") into dates via voluptuous schemas
- Applies defaults for missing options
- Returns the frozen dataclass the engines consume

Payload keys other than "deleted" and "date" are caller-defined fields and
are carried through to GeneratedOccurrence.fields untouched.

See Also:
- type_defs.py: Dataclass definitions
- generator.py: Orchestrator calling validate_items() and validate_modifications()
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
import datetime
from typing import Any

import voluptuous as vol

from . import const
from .type_defs import (
    DateRange,
    ItemId,
    Modification,
    ModificationPayload,
    RecurrenceConfig,
    RecurrenceOptions,
    RecurringItem,
)
from .utils.dt_utils import dt_parse_date, is_valid_date

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class RecurrenceValidationError(ValueError):
    """Validation error with item and field information.

    Raised when an input fails validation before expansion, or when a
    mapping cannot be built into an input dataclass. Aborts the whole call.

    Attributes:
        item_id: Identifier of the offending item (None for calendar-level
            inputs such as weekend days, or when the id itself is missing)
        field: FIELD_* constant or dotted path of the failing field
        reason: Human-readable cause

    Example:
        raise RecurrenceValidationError(
            item_id="rent",
            field=const.FIELD_INTERVAL,
            reason="interval must be at least 1",
        )
    """

    def __init__(self, item_id: ItemId | None, field: str, reason: str) -> None:
        """Initialize RecurrenceValidationError.

        Args:
            item_id: Identifier of the offending item, if any
            field: Field that failed validation
            reason: Human-readable cause
        """
        self.item_id = item_id
        self.field = field
        self.reason = reason
        if item_id is None:
            message = f"Invalid {field}: {reason}"
        else:
            message = f"Invalid item {item_id!r}, {field}: {reason}"
        super().__init__(message)


# ==============================================================================
# TYPE GUARDS
# ==============================================================================


def is_period(value: Any) -> bool:
    """Return True if value is a known period name."""
    return isinstance(value, str) and value in const.PERIOD_OPTIONS


def is_day_of_week(value: Any) -> bool:
    """Return True if value is a lowercase English weekday name."""
    return isinstance(value, str) and value in const.DAY_OF_WEEK_NUMBERS


def is_day_category(value: Any) -> bool:
    """Return True if value is "day", "weekday" or "weekend"."""
    return isinstance(value, str) and value in const.DAY_CATEGORY_OPTIONS


def is_ordinal_position(value: Any) -> bool:
    """Return True if value is first..fifth, nextToLast or last."""
    return isinstance(value, str) and value in const.ORDINAL_POSITION_OPTIONS


def is_ordinal(value: Any) -> bool:
    """Return True if value is a well-formed "{position}-{dayType}" selector.

    Examples:
        is_ordinal("first-monday") → True
        is_ordinal("last-weekday") → True
        is_ordinal("sixth-monday") → False
        is_ordinal("first-monday-extra") → False
    """
    if not isinstance(value, str):
        return False
    parts = value.split(const.ORDINAL_SEPARATOR)
    if len(parts) != 2:
        return False
    position, day_type = parts
    return is_ordinal_position(position) and (
        is_day_category(day_type) or is_day_of_week(day_type)
    )


def is_valid_recurrence_config(
    config: Any, weekend_days: Collection[int] | None = None
) -> bool:
    """Return True if config is a RecurrenceConfig passing every rule."""
    if not isinstance(config, RecurrenceConfig):
        return False
    return not _validate_config(config, weekend_days)


def is_valid_recurring_item(
    item: Any, weekend_days: Collection[int] | None = None
) -> bool:
    """Return True if item is a RecurringItem passing every rule."""
    if not isinstance(item, RecurringItem):
        return False
    return not validate_recurring_item(item, weekend_days)


def is_single_config(config: Any) -> bool:
    """Return True for a valid single-occurrence config (period none)."""
    return _is_valid_config_for_period(config, const.PERIOD_NONE)


def is_weekly_config(config: Any) -> bool:
    """Return True for a valid weekly config."""
    return _is_valid_config_for_period(config, const.PERIOD_WEEK)


def is_monthly_config(config: Any) -> bool:
    """Return True for a valid monthly config."""
    return _is_valid_config_for_period(config, const.PERIOD_MONTH)


def is_yearly_config(config: Any) -> bool:
    """Return True for a valid yearly config."""
    return _is_valid_config_for_period(config, const.PERIOD_YEAR)


def _is_valid_config_for_period(config: Any, period: str) -> bool:
    # Ordinal categories needing a weekend set are checked by
    # validate_recurring_item(), which has the calendar
    return (
        isinstance(config, RecurrenceConfig)
        and config.period == period
        and not _validate_config(config, None, check_calendar=False)
    )


# ==============================================================================
# SCHEMAS
# ==============================================================================


def _coerce_date(value: Any) -> datetime.date:
    """Voluptuous validator turning a date/datetime/ISO string into a date."""
    parsed = dt_parse_date(value)
    if parsed is None:
        raise vol.Invalid(f"Invalid date: {value!r}")
    return parsed


# "each" selectors per period (week: ISO weekday, month: day, year: month)
EACH_SCHEMAS: dict[str, vol.Schema] = {
    period: vol.Schema([vol.All(int, vol.Range(min=low, max=high))])
    for period, (low, high) in const.EACH_RANGES.items()
}

WEEKEND_DAYS_SCHEMA = vol.Schema(
    [vol.All(int, vol.Range(min=const.ISO_MONDAY, max=const.ISO_SUNDAY))]
)

MAX_INTERVALS_SCHEMA = vol.Schema(
    {vol.In(const.PERIOD_OPTIONS): vol.All(int, vol.Range(min=1))}
)

OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.DATA_OPTION_EVERY, default=const.DEFAULT_EVERY): vol.Coerce(
            int
        ),
        vol.Optional(const.DATA_OPTION_EACH): vol.Any(None, [vol.Coerce(int)]),
        vol.Optional(const.DATA_OPTION_ON): vol.Any(None, str),
        vol.Optional(
            const.DATA_OPTION_WORKDAYS_ONLY, default=const.DEFAULT_WORKDAYS_ONLY
        ): bool,
        vol.Optional(
            const.DATA_OPTION_GRACE_PERIOD, default=const.DEFAULT_GRACE_PERIOD
        ): vol.Coerce(int),
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_CONFIG_START): _coerce_date,
        vol.Required(const.DATA_CONFIG_PERIOD): vol.In(const.PERIOD_OPTIONS),
        vol.Required(const.DATA_CONFIG_INTERVAL): vol.Coerce(int),
        vol.Optional(const.DATA_CONFIG_OPTIONS, default=dict): OPTIONS_SCHEMA,
    }
)

ITEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ITEM_ID): vol.Any(int, str),
        vol.Required(const.DATA_ITEM_DATE): _coerce_date,
        vol.Optional(const.DATA_ITEM_CONFIG): vol.Any(None, CONFIG_SCHEMA),
    },
    extra=vol.ALLOW_EXTRA,
)

PAYLOAD_SCHEMA = vol.Schema(
    {
        vol.Optional(const.DATA_PAYLOAD_DELETED, default=False): bool,
        vol.Optional(const.DATA_PAYLOAD_DATE): vol.Any(None, _coerce_date),
    },
    extra=vol.ALLOW_EXTRA,
)

MODIFICATION_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_MODIFICATION_ITEM_ID): vol.Any(int, str),
        vol.Required(const.DATA_MODIFICATION_INDEX): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(const.DATA_MODIFICATION_PAYLOAD, default=dict): PAYLOAD_SCHEMA,
        vol.Optional(const.DATA_MODIFICATION_REST_PAYLOAD): vol.Any(
            None, PAYLOAD_SCHEMA
        ),
    }
)

RANGE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.DATA_RANGE_START): vol.Any(None, _coerce_date),
        vol.Optional(const.DATA_RANGE_END): vol.Any(None, _coerce_date),
    }
)


def _run_schema(
    schema: vol.Schema, data: Mapping[str, Any], item_id: ItemId | None = None
) -> dict[str, Any]:
    """Validate a mapping, converting voluptuous errors."""
    if not isinstance(data, Mapping):
        raise RecurrenceValidationError(item_id, "data", "expected a mapping")
    try:
        return schema(dict(data))
    except vol.Invalid as err:
        field = ".".join(str(part) for part in err.path) or "data"
        raise RecurrenceValidationError(item_id, field, err.msg) from err


# ==============================================================================
# VALIDATION
# ==============================================================================


def validate_weekend_days(
    weekend_days: Iterable[int] | None,
) -> frozenset[int]:
    """Validate and normalize a weekend-day collection.

    Returns:
        frozenset of ISO weekday numbers (empty when None).

    Raises:
        RecurrenceValidationError: If a value is not an int in 1..7.
    """
    if weekend_days is None:
        return frozenset()
    try:
        return frozenset(WEEKEND_DAYS_SCHEMA(list(weekend_days)))
    except (vol.Invalid, TypeError) as err:
        reason = err.msg if isinstance(err, vol.Invalid) else str(err)
        raise RecurrenceValidationError(
            None, const.FIELD_WEEKEND_DAYS, reason
        ) from err


def validate_max_intervals(
    max_intervals: Mapping[str, int] | None,
) -> dict[str, int]:
    """Validate per-period caps and merge them over the defaults.

    The "none" period is always capped at exactly one occurrence.

    Raises:
        RecurrenceValidationError: Unknown period or cap below 1.
    """
    merged = dict(const.MAX_INTERVALS)
    if max_intervals:
        try:
            merged.update(MAX_INTERVALS_SCHEMA(dict(max_intervals)))
        except vol.Invalid as err:
            raise RecurrenceValidationError(
                None, const.FIELD_MAX_INTERVALS, err.msg
            ) from err
    merged[const.PERIOD_NONE] = 1
    return merged


def validate_recurring_item(
    item: RecurringItem,
    weekend_days: Collection[int] | None = None,
) -> dict[str, str]:
    """Validate recurring item business rules - SINGLE SOURCE OF TRUTH.

    Args:
        item: Item to check.
        weekend_days: Calendar weekend days, needed by weekday/weekend ordinals.

    Returns:
        Dict of errors: {FIELD_*: reason}
        Empty dict means validation passed.

    Validation Rules:
        1. Identifier present (not None, not blank)
        2. Anchor date is a plain date (datetimes rejected)
        3. Config (if any): see _validate_config()
    """
    errors: dict[str, str] = {}

    # === 1. Identifier ===
    item_id = item.id
    if item_id is None or (isinstance(item_id, str) and not item_id.strip()):
        errors[const.FIELD_ID] = "identifier is required"
        return errors

    # === 2. Anchor date ===
    if not is_valid_date(item.date):
        errors[const.FIELD_DATE] = "date must be a calendar date"
        return errors

    # === 3. Config ===
    if item.config is None:
        return errors
    if not isinstance(item.config, RecurrenceConfig):
        errors[const.FIELD_CONFIG] = "config must be a RecurrenceConfig"
        return errors

    return _validate_config(item.config, weekend_days)


def _validate_config(
    config: RecurrenceConfig,
    weekend_days: Collection[int] | None,
    *,
    check_calendar: bool = True,
) -> dict[str, str]:
    """Validate a recurrence config.

    Validation Rules:
        1. Period known
        2. Start is a date
        3. Interval >= 1, exactly 1 for period none
        4. every >= 0 and grace period >= 0
        5. "each" values within the period's range
        6. "on": not for week, well-formed, weekend days when categorised
    """
    errors: dict[str, str] = {}
    options = config.options

    # === 1. Period ===
    if not is_period(config.period):
        errors[const.FIELD_PERIOD] = f"unknown period {config.period!r}"
        return errors

    # === 2. Start ===
    if not is_valid_date(config.start):
        errors[const.FIELD_START] = "start must be a calendar date"
        return errors

    # === 3. Interval ===
    interval = config.interval
    if not isinstance(interval, int) or interval < 1:
        errors[const.FIELD_INTERVAL] = "interval must be at least 1"
        return errors
    if config.period == const.PERIOD_NONE and interval != 1:
        errors[const.FIELD_INTERVAL] = "interval must be 1 for period none"
        return errors

    # === 4. Multiplier and grace period ===
    if not isinstance(options.every, int) or options.every < 0:
        errors[const.FIELD_EVERY] = "every must not be negative"
        return errors
    if not isinstance(options.grace_period, int) or options.grace_period < 0:
        errors[const.FIELD_GRACE_PERIOD] = "grace period must not be negative"
        return errors

    # === 5. "each" selectors ===
    each_schema = EACH_SCHEMAS.get(config.period)
    if options.each is not None and each_schema is not None:
        try:
            each_schema(list(options.each))
        except vol.Invalid as err:
            low, high = const.EACH_RANGES[config.period]
            errors[const.FIELD_EACH] = (
                f"each values must be between {low} and {high} ({err.msg})"
            )
            return errors

    # === 6. Ordinal selector ===
    if options.on:
        if config.period == const.PERIOD_WEEK:
            errors[const.FIELD_ON] = "ordinal selector is not supported for week"
            return errors
        if not is_ordinal(options.on):
            errors[const.FIELD_ON] = f"invalid ordinal {options.on!r}"
            return errors
        day_type = options.on.split(const.ORDINAL_SEPARATOR)[1]
        if (
            check_calendar
            and day_type in const.DAY_CATEGORIES_REQUIRING_WEEKEND
            and not weekend_days
        ):
            errors[const.FIELD_ON] = (
                f"weekend days must be provided when using {day_type} day category"
            )
            return errors

    return errors


def validate_items(
    items: Iterable[RecurringItem],
    weekend_days: Collection[int] | None = None,
) -> None:
    """Validate every item, raising on the first failure.

    Raises:
        RecurrenceValidationError: For the first invalid item.
    """
    for item in items:
        if not isinstance(item, RecurringItem):
            raise RecurrenceValidationError(
                None, "item", f"expected RecurringItem, got {type(item).__name__}"
            )
        errors = validate_recurring_item(item, weekend_days)
        if errors:
            field, reason = next(iter(errors.items()))
            raise RecurrenceValidationError(item.id, field, reason)


def validate_modifications(modifications: Iterable[Modification]) -> None:
    """Validate override dates of every modification.

    Raises:
        RecurrenceValidationError: For the first payload whose date is set
            but is not a plain calendar date.
    """
    for modification in modifications:
        if not isinstance(modification, Modification):
            raise RecurrenceValidationError(
                None,
                "modification",
                f"expected Modification, got {type(modification).__name__}",
            )
        for field, payload in (
            (const.FIELD_PAYLOAD_DATE, modification.payload),
            (const.FIELD_REST_PAYLOAD_DATE, modification.rest_payload),
        ):
            if payload is None or payload.date is None:
                continue
            if not is_valid_date(payload.date):
                raise RecurrenceValidationError(
                    modification.item_id, field, "date must be a calendar date"
                )


# ==============================================================================
# BUILDERS
# ==============================================================================


def build_recurrence_config(
    data: Mapping[str, Any], item_id: ItemId | None = None
) -> RecurrenceConfig:
    """Build a RecurrenceConfig from a mapping.

    Examples:
        build_recurrence_config({
            "start": "2024-01-01",
            "period": "month",
            "interval": 12,
            "options": {"on": "first-monday", "workdaysOnly": True},
        })

    Raises:
        RecurrenceValidationError: Missing or malformed keys.
    """
    validated = _run_schema(CONFIG_SCHEMA, data, item_id)
    return _config_from_validated(validated)


def _config_from_validated(validated: Mapping[str, Any]) -> RecurrenceConfig:
    options = validated[const.DATA_CONFIG_OPTIONS]
    each = options.get(const.DATA_OPTION_EACH)
    return RecurrenceConfig(
        start=validated[const.DATA_CONFIG_START],
        period=validated[const.DATA_CONFIG_PERIOD],
        interval=validated[const.DATA_CONFIG_INTERVAL],
        options=RecurrenceOptions(
            every=options[const.DATA_OPTION_EVERY],
            each=tuple(each) if each is not None else None,
            on=options.get(const.DATA_OPTION_ON),
            workdays_only=options[const.DATA_OPTION_WORKDAYS_ONLY],
            grace_period=options[const.DATA_OPTION_GRACE_PERIOD],
        ),
    )


def build_recurring_item(data: Mapping[str, Any]) -> RecurringItem:
    """Build a RecurringItem from a mapping with "id", "date" and "config".

    Keys other than those three are ignored.

    Raises:
        RecurrenceValidationError: Missing or malformed keys.
    """
    item_id = data.get(const.DATA_ITEM_ID) if isinstance(data, Mapping) else None
    validated = _run_schema(ITEM_SCHEMA, data, item_id)
    config = validated.get(const.DATA_ITEM_CONFIG)
    return RecurringItem(
        id=validated[const.DATA_ITEM_ID],
        date=validated[const.DATA_ITEM_DATE],
        config=_config_from_validated(config) if config is not None else None,
    )


def build_modification_payload(data: Mapping[str, Any]) -> ModificationPayload:
    """Build a payload; keys other than "deleted"/"date" become fields."""
    validated = _run_schema(PAYLOAD_SCHEMA, data)
    return _payload_from_validated(validated)


def _payload_from_validated(validated: Mapping[str, Any]) -> ModificationPayload:
    return ModificationPayload(
        deleted=validated[const.DATA_PAYLOAD_DELETED],
        date=validated.get(const.DATA_PAYLOAD_DATE),
        fields={
            key: value
            for key, value in validated.items()
            if key not in (const.DATA_PAYLOAD_DELETED, const.DATA_PAYLOAD_DATE)
        },
    )


def build_modification(data: Mapping[str, Any]) -> Modification:
    """Build a Modification from a mapping.

    Examples:
        build_modification({
            "itemId": 1,
            "index": 2,
            "payload": {"date": "2024-02-10", "amount": 1200},
            "restPayload": {"amount": 1200},
        })

    Raises:
        RecurrenceValidationError: Missing or malformed keys.
    """
    item_id = (
        data.get(const.DATA_MODIFICATION_ITEM_ID) if isinstance(data, Mapping) else None
    )
    validated = _run_schema(MODIFICATION_SCHEMA, data, item_id)
    rest = validated.get(const.DATA_MODIFICATION_REST_PAYLOAD)
    return Modification(
        item_id=validated[const.DATA_MODIFICATION_ITEM_ID],
        index=validated[const.DATA_MODIFICATION_INDEX],
        payload=_payload_from_validated(validated[const.DATA_MODIFICATION_PAYLOAD]),
        rest_payload=_payload_from_validated(rest) if rest is not None else None,
    )


def build_date_range(data: Mapping[str, Any] | None) -> DateRange | None:
    """Build an inclusive DateRange from {"start": ..., "end": ...}.

    Returns None when data is None.

    Raises:
        RecurrenceValidationError: Malformed bound, or start after end.
    """
    if data is None:
        return None
    validated = _run_schema(RANGE_SCHEMA, data)
    date_range = DateRange(
        start=validated.get(const.DATA_RANGE_START),
        end=validated.get(const.DATA_RANGE_END),
    )
    validate_date_range(date_range)
    return date_range


def validate_date_range(date_range: DateRange | None) -> None:
    """Raise if a bound is not a plain date or start is after end."""
    if date_range is None:
        return
    start, end = date_range.start, date_range.end
    for bound in (start, end):
        if bound is not None and not is_valid_date(bound):
            raise RecurrenceValidationError(
                None, const.FIELD_RANGE, f"bound {bound!r} must be a calendar date"
            )
    if start is not None and end is not None and start > end:
        raise RecurrenceValidationError(
            None, const.FIELD_RANGE, f"start {start} is after end {end}"
        )
