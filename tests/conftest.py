"""Shared fixtures for recurrentry tests."""

from __future__ import annotations

from datetime import date

import pytest

from recurrentry import const
from recurrentry.engines.payment_engine import PaymentEngine


@pytest.fixture
def weekend_days() -> frozenset[int]:
    """Return the Saturday/Sunday weekend."""
    return const.WEEKEND_DAYS_SATURDAY_SUNDAY


@pytest.fixture
def holidays() -> list[date]:
    """Return a small holiday calendar for January 2024."""
    return [date(2024, 1, 1), date(2024, 1, 15)]


@pytest.fixture
def payment_engine(
    holidays: list[date], weekend_days: frozenset[int]
) -> PaymentEngine:
    """Return a PaymentEngine with weekend days and holidays."""
    return PaymentEngine(holidays, weekend_days)
