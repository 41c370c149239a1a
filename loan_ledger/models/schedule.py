"""Schedule projection models (never persisted)."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class ScheduleRow:
    """One installment of an amortization schedule."""

    installment_number: int  # 1, 2, 3, ...
    payment_date: date
    opening_balance: Decimal
    payment_amount: Decimal
    interest_component: Decimal
    principal_component: Decimal
    closing_balance: Decimal
    periodic_rate: Decimal


@dataclass(frozen=True)
class AccrualRow:
    """Interest accrued over one accrual period ending at ``accrual_date``."""

    accrual_date: date
    days: int
    periodic_rate: Decimal
    opening_balance: Decimal
    interest: Decimal
    closing_balance: Decimal
    accrued_interest: Decimal
