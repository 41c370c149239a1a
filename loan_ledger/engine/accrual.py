"""Interest accrual projection over a date range."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from loan_ledger.engine.daycount import days_between
from loan_ledger.engine.rates import periodic_rate, round_money
from loan_ledger.exceptions import InvalidConfigurationError
from loan_ledger.models.contract import LoanTerms
from loan_ledger.models.enums import AccrualFrequency, RoundingMode
from loan_ledger.models.schedule import AccrualRow

logger = logging.getLogger(__name__)

INTEREST_PLACES = 4

FREQUENCY_STEP = {
    AccrualFrequency.DAILY: relativedelta(days=1),
    AccrualFrequency.MONTHLY: relativedelta(months=1),
    AccrualFrequency.ANNUAL: relativedelta(years=1),
}


class AccrualProjector:
    """Project compound interest accrual period by period.

    Unlike the amortization schedule, every period gets its own day count
    and therefore its own periodic rate. Interest is capitalized into the
    running balance at four decimal places.
    """

    def __init__(self, rounding: RoundingMode = RoundingMode.HALF_UP) -> None:
        self.rounding = rounding

    def project(
        self,
        terms: LoanTerms,
        opening_balance: Decimal,
        start: date,
        end: date,
        frequency: AccrualFrequency | str = AccrualFrequency.DAILY,
    ) -> list[AccrualRow]:
        """Accrue interest from ``start`` while the period start is on or before ``end``.

        Parameters
        ----------
        terms : LoanTerms
            Contract terms supplying rate, convention and compounding.
        opening_balance : Decimal
            Balance on ``start``.
        start, end : date
            Projection window (inclusive of ``end`` as a period start).
        frequency : AccrualFrequency | str
            DAILY, MONTHLY or ANNUAL periods.

        Returns
        -------
        list[AccrualRow]
            One row per period, dated at the period end.
        """
        try:
            step = FREQUENCY_STEP[AccrualFrequency(frequency)]
        except ValueError as exc:
            raise InvalidConfigurationError(f"Unsupported accrual frequency: {frequency}") from exc

        rows: list[AccrualRow] = []
        balance = opening_balance
        accrued = Decimal("0")
        current = start
        periods = 0

        while current <= end:
            periods += 1
            # Step from the window start so month-end clipping does not drift
            next_date = start + step * periods
            days = days_between(current, next_date, terms.day_count)
            rate = periodic_rate(terms.annual_rate_percent, terms.compounding, terms.day_count, days)
            interest = round_money(balance * rate, INTEREST_PLACES, self.rounding)
            closing = balance + interest
            accrued += interest

            rows.append(AccrualRow(
                accrual_date=next_date,
                days=days,
                periodic_rate=rate,
                opening_balance=balance,
                interest=interest,
                closing_balance=closing,
                accrued_interest=accrued,
            ))
            balance = closing
            current = next_date

        logger.debug("Projected %d accrual periods from %s to %s", len(rows), start, end)
        return rows
