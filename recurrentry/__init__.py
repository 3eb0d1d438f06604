# File: __init__.py
"""recurrentry - recurrence expansion with payment dates and modifications.

Expands declarative recurrence descriptions ("every 2 weeks", "the 15th of
each month, workdays only", "the first Monday of every month") into ordered
occurrences carrying an actual date and a payment date, with per-occurrence
and cascading edits applied in the same pass.

Key Features:
- Period-aware date arithmetic with month-end clamping.
- Ordinal selectors over day names and weekday/weekend categories.
- Grace periods and holiday/weekend-aware payment dates.
- Deletions, date overrides and cascading fields via modifications.
"""

from __future__ import annotations

from .data_builders import (
    RecurrenceValidationError,
    build_date_range,
    build_modification,
    build_recurrence_config,
    build_recurring_item,
    is_monthly_config,
    is_ordinal,
    is_period,
    is_single_config,
    is_valid_recurrence_config,
    is_valid_recurring_item,
    is_weekly_config,
    is_yearly_config,
)
from .engines import calculate_date_adjustment, calculate_max_interval, payment_date
from .generator import Recurrentry, generate
from .type_defs import (
    DateAdjustment,
    DateRange,
    GeneratedOccurrence,
    Modification,
    ModificationPayload,
    RecurrenceConfig,
    RecurrenceOptions,
    RecurringItem,
)
from .utils.dt_utils import (
    OrdinalResolutionError,
    add_by_period,
    create_date,
    day_category,
    get_day_name,
    is_valid_date,
    matches_day_type,
    resolve_ordinal,
)

__all__ = [
    "DateAdjustment",
    "DateRange",
    "GeneratedOccurrence",
    "Modification",
    "ModificationPayload",
    "OrdinalResolutionError",
    "RecurrenceConfig",
    "RecurrenceOptions",
    "RecurrenceValidationError",
    "RecurringItem",
    "Recurrentry",
    "add_by_period",
    "build_date_range",
    "build_modification",
    "build_recurrence_config",
    "build_recurring_item",
    "calculate_date_adjustment",
    "calculate_max_interval",
    "create_date",
    "day_category",
    "generate",
    "get_day_name",
    "is_monthly_config",
    "is_ordinal",
    "is_period",
    "is_single_config",
    "is_valid_date",
    "is_valid_recurrence_config",
    "is_valid_recurring_item",
    "is_weekly_config",
    "is_yearly_config",
    "matches_day_type",
    "payment_date",
    "resolve_ordinal",
]
