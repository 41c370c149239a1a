"""Amortization schedule generation (PRICE and SAC)."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterator

from dateutil.relativedelta import relativedelta

from loan_ledger.engine.daycount import days_between
from loan_ledger.engine.rates import periodic_rate, round_money
from loan_ledger.exceptions import InvalidConfigurationError
from loan_ledger.models.contract import LoanTerms
from loan_ledger.models.enums import AmortizationSystem, GraceType, Periodicity, RoundingMode
from loan_ledger.models.schedule import ScheduleRow

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

PERIOD_MONTHS = {
    Periodicity.MONTHLY: 1,
    Periodicity.QUARTERLY: 3,
    Periodicity.SEMIANNUAL: 6,
    Periodicity.ANNUAL: 12,
}


def add_periods(start: date, count: int, periodicity: Periodicity | str) -> date:
    """Step ``count`` periods forward from ``start``.

    Keeps the day of month when the target month has it, otherwise clips to
    the month's last day (Jan 31 + 1 month = Feb 28/29).
    """
    try:
        months = PERIOD_MONTHS[Periodicity(periodicity)]
    except ValueError as exc:
        raise InvalidConfigurationError(f"Unsupported periodicity: {periodicity}") from exc
    return start + relativedelta(months=months * count)


def installment_amount(principal: Decimal, rate: Decimal, count: int) -> Decimal:
    """Fixed PRICE installment (unrounded PMT)."""
    if rate == ZERO:
        return principal / Decimal(count)
    factor = (Decimal(1) + rate) ** count
    return principal * rate * factor / (factor - Decimal(1))


class AmortizationScheduler:
    """Build PRICE (fixed installment) and SAC (constant amortization) schedules.

    The periodic rate is derived once, from the day count between the start
    date and the first installment date, and reused for every row. Calendar
    months of different lengths therefore accrue the same interest rate.

    No residual correction is applied to the last row: whatever rounding
    drift accumulated across rows is left in the final closing balance.
    """

    def __init__(self, rounding: RoundingMode = RoundingMode.HALF_UP) -> None:
        self.rounding = rounding

    def _round(self, value: Decimal) -> Decimal:
        return round_money(value, 2, self.rounding)

    def first_period_rate(self, terms: LoanTerms) -> Decimal:
        """Periodic rate for the span start date -> first installment date."""
        first_payment = add_periods(terms.start_date, 1, terms.periodicity)
        days = max(1, days_between(terms.start_date, first_payment, terms.day_count))
        return periodic_rate(terms.annual_rate_percent, terms.compounding, terms.day_count, days)

    def build(self, terms: LoanTerms) -> list[ScheduleRow]:
        """Build the full schedule for a contract's terms.

        Grace rows (if any) come first, followed by ``installment_count``
        amortization rows under the contract's system.
        """
        try:
            system = AmortizationSystem(terms.system)
        except ValueError as exc:
            raise InvalidConfigurationError(f"Unsupported amortization system: {terms.system}") from exc

        rate = self.first_period_rate(terms)
        rows = list(self.grace_rows(terms.principal, rate, terms.grace_periods, terms.grace_type,
                                    terms.start_date, terms.periodicity))
        balance = rows[-1].closing_balance if rows else terms.principal

        if system == AmortizationSystem.PRICE:
            body = self.price_rows(balance, rate, terms.installment_count, terms.start_date,
                                   terms.periodicity, offset=len(rows))
        else:
            body = self.sac_rows(balance, rate, terms.installment_count, terms.start_date,
                                 terms.periodicity, offset=len(rows))
        rows.extend(body)

        logger.debug(
            "Built %s schedule: %d rows, periodic rate %s",
            system.value,
            len(rows),
            rate,
        )
        return rows

    def grace_rows(
        self,
        principal: Decimal,
        rate: Decimal,
        periods: int,
        grace_type: GraceType,
        start_date: date,
        periodicity: Periodicity,
    ) -> Iterator[ScheduleRow]:
        """Generate grace-period rows.

        INTEREST_ONLY pays the period's interest and keeps the balance;
        CAPITALIZED pays nothing and adds the interest to the balance.
        """
        balance = principal
        for i in range(1, periods + 1):
            interest = self._round(balance * rate)
            if grace_type == GraceType.CAPITALIZED:
                payment, closing = ZERO, balance + interest
            else:
                payment, closing = interest, balance

            yield ScheduleRow(
                installment_number=i,
                payment_date=add_periods(start_date, i, periodicity),
                opening_balance=balance,
                payment_amount=payment,
                interest_component=interest,
                principal_component=ZERO,
                closing_balance=closing,
                periodic_rate=rate,
            )
            balance = closing

    def price_rows(
        self,
        principal: Decimal,
        rate: Decimal,
        count: int,
        start_date: date,
        periodicity: Periodicity,
        offset: int = 0,
    ) -> Iterator[ScheduleRow]:
        """Generate PRICE rows: constant installment, shifting interest/principal split."""
        pmt = installment_amount(principal, rate, count)
        balance = principal

        for i in range(1, count + 1):
            number = offset + i
            interest = self._round(balance * rate)
            amortization = self._round(pmt - interest)
            closing = max(ZERO, balance - amortization)

            yield ScheduleRow(
                installment_number=number,
                payment_date=add_periods(start_date, number, periodicity),
                opening_balance=balance,
                payment_amount=interest + amortization,
                interest_component=interest,
                principal_component=amortization,
                closing_balance=closing,
                periodic_rate=rate,
            )
            balance = closing

    def sac_rows(
        self,
        principal: Decimal,
        rate: Decimal,
        count: int,
        start_date: date,
        periodicity: Periodicity,
        offset: int = 0,
    ) -> Iterator[ScheduleRow]:
        """Generate SAC rows: constant principal, decreasing installment."""
        amortization = self._round(principal / Decimal(count))
        balance = principal

        for i in range(1, count + 1):
            number = offset + i
            interest = self._round(balance * rate)
            closing = max(ZERO, balance - amortization)

            yield ScheduleRow(
                installment_number=number,
                payment_date=add_periods(start_date, number, periodicity),
                opening_balance=balance,
                payment_amount=amortization + interest,
                interest_component=interest,
                principal_component=amortization,
                closing_balance=closing,
                periodic_rate=rate,
            )
            balance = closing
