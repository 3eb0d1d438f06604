"""Engine modules for recurrentry.

Contains specialized computation engines:
- payment_engine: Grace period and workday adjustment of payment dates
- schedule_engine: Per-cycle expansion of a recurrence configuration
- modification_engine: Deletion, date override and cascading edit overlay
"""

# Use relative imports within package to avoid mypy module resolution issues
from .modification_engine import (
    MODIFICATION_OUTCOME_DELETE,
    MODIFICATION_OUTCOME_DELETE_REST,
    MODIFICATION_OUTCOME_KEEP,
    ModificationEngine,
    OverlayState,
    calculate_date_adjustment,
)
from .payment_engine import PaymentEngine, payment_date
from .schedule_engine import RecurrenceEngine, calculate_max_interval

__all__ = [
    "MODIFICATION_OUTCOME_DELETE",
    "MODIFICATION_OUTCOME_DELETE_REST",
    "MODIFICATION_OUTCOME_KEEP",
    "ModificationEngine",
    "OverlayState",
    "PaymentEngine",
    "RecurrenceEngine",
    "calculate_date_adjustment",
    "calculate_max_interval",
    "payment_date",
]
