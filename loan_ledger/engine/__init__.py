"""Pure loan calculators: day counts, rates, schedules and accrual."""

from loan_ledger.engine.accrual import AccrualProjector
from loan_ledger.engine.daycount import days_between, resolve_convention, yearly_divisor
from loan_ledger.engine.rates import periodic_rate, round_money, to_decimal
from loan_ledger.engine.schedule import AmortizationScheduler, add_periods, installment_amount

__all__ = [
    "AccrualProjector",
    "AmortizationScheduler",
    "add_periods",
    "days_between",
    "installment_amount",
    "periodic_rate",
    "resolve_convention",
    "round_money",
    "to_decimal",
    "yearly_divisor",
]
