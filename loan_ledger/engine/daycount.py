"""Day count conventions for interest accrual.

Each convention turns a date span into an integer day count. The yearly
divisor used to annualize that count lives beside it so that rate
conversion and day counting always agree on the convention.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable

from loan_ledger.models.enums import DayCountConvention

logger = logging.getLogger(__name__)

DayCountFunc = Callable[[date, date], int]

DEFAULT_YEARLY_DIVISOR = 360


def _thirty_360(start: date, end: date) -> int:
    """Every month counts as 30 days, using the raw calendar components.

    Negative when ``end`` precedes ``start``.
    """
    return (
        (end.year - start.year) * 360
        + (end.month - start.month) * 30
        + (end.day - start.day)
    )


def _actual(start: date, end: date) -> int:
    """Actual elapsed calendar days; a reversed span counts its absolute length."""
    return abs((end - start).days)


def _business_252(start: date, end: date) -> int:
    """Count weekdays in the half-open span [start, end).

    Holidays are not excluded; no holiday calendar is available. A reversed
    span never enters the loop and counts 0.
    """
    count = 0
    current = start
    while current < end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


_REGISTRY: dict[DayCountConvention, DayCountFunc] = {
    DayCountConvention.THIRTY_360: _thirty_360,
    DayCountConvention.ACT_360: _actual,
    DayCountConvention.ACT_365: _actual,
    DayCountConvention.BUS_252: _business_252,
}

_YEARLY_DIVISORS: dict[DayCountConvention, int] = {
    DayCountConvention.THIRTY_360: 360,
    DayCountConvention.ACT_360: 360,
    DayCountConvention.ACT_365: 365,
    DayCountConvention.BUS_252: 252,
}


def resolve_convention(convention: DayCountConvention | str) -> DayCountConvention | None:
    """Return the matching convention, or None when the name is unknown."""
    if isinstance(convention, DayCountConvention):
        return convention
    try:
        return DayCountConvention(str(convention).strip().upper())
    except ValueError:
        return None


def days_between(start: date, end: date, convention: DayCountConvention | str) -> int:
    """Return the number of days between two dates under ``convention``.

    Unknown conventions fall back to the actual-day difference.
    """
    resolved = resolve_convention(convention)
    if resolved is None:
        logger.warning("Unknown day count convention %r, using actual days", convention)
        return _actual(start, end)
    return _REGISTRY[resolved](start, end)


def yearly_divisor(convention: DayCountConvention | str) -> int:
    """Return the days-per-year divisor for ``convention`` (360 when unknown)."""
    resolved = resolve_convention(convention)
    if resolved is None:
        return DEFAULT_YEARLY_DIVISOR
    return _YEARLY_DIVISORS[resolved]
