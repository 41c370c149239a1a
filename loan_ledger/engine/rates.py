"""Annual-to-periodic rate conversion and money rounding."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

from loan_ledger.engine.daycount import yearly_divisor
from loan_ledger.exceptions import InvalidConfigurationError
from loan_ledger.models.enums import Compounding, DayCountConvention, RoundingMode

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

_ROUNDING = {
    RoundingMode.HALF_UP: ROUND_HALF_UP,
    RoundingMode.HALF_EVEN: ROUND_HALF_EVEN,
}


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(
    value: Decimal,
    places: int = 2,
    rounding: RoundingMode = RoundingMode.HALF_UP,
) -> Decimal:
    """Round ``value`` to ``places`` decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=_ROUNDING[rounding])


def periodic_rate(
    annual_rate_percent: Decimal | int | float | str,
    compounding: Compounding | str,
    convention: DayCountConvention | str,
    days_in_period: int,
) -> Decimal:
    """Convert a nominal annual rate into the rate for one period.

    Parameters
    ----------
    annual_rate_percent : Decimal | int | float | str
        Annual rate in percent (12.5 means 12.5% a.a.).
    compounding : Compounding | str
        EXPONENTIAL: ``(1 + i) ** (days / divisor) - 1``.
        LINEAR: ``i * days / divisor``.
    convention : DayCountConvention | str
        Day count convention; selects the yearly divisor.
    days_in_period : int
        Day count of the period under ``convention``.

    Returns
    -------
    Decimal
        Periodic rate as a fraction (0.01 for 1%).
    """
    try:
        mode = Compounding(compounding)
    except ValueError as exc:
        raise InvalidConfigurationError(f"Unsupported compounding mode: {compounding}") from exc

    annual = to_decimal(annual_rate_percent) / HUNDRED
    fraction = Decimal(days_in_period) / Decimal(yearly_divisor(convention))

    if mode == Compounding.EXPONENTIAL:
        return (Decimal(1) + annual) ** fraction - Decimal(1)
    return annual * fraction
