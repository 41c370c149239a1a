"""Loan contract models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import (
    AmortizationSystem,
    Compounding,
    ContractStatus,
    ContractType,
    DayCountConvention,
    GraceType,
    Periodicity,
)


@dataclass(frozen=True)
class LoanTerms:
    """Immutable term sheet, fixed at origination."""

    contract_type: ContractType
    counterparty: str
    currency: str
    principal: Decimal
    annual_rate_percent: Decimal  # 12.5 means 12.5% a.a.
    start_date: date
    maturity_date: date
    system: AmortizationSystem
    periodicity: Periodicity
    installment_count: int
    day_count: DayCountConvention = DayCountConvention.ACT_365
    compounding: Compounding = Compounding.EXPONENTIAL
    grace_periods: int = 0
    grace_type: GraceType = GraceType.INTEREST_ONLY
    notes: str = ""


@dataclass
class ContractInput:
    """Raw contract creation input.

    Values may arrive loosely typed (strings for enums, ints or strings for
    amounts); they are checked and normalized into ``LoanTerms`` on creation.
    ``day_count`` and ``compounding`` fall back to the engine configuration
    when left as ``None``.
    """

    contract_type: ContractType | str
    counterparty: str
    currency: str
    principal: Decimal | int | str
    start_date: date
    maturity_date: date
    annual_rate_percent: Decimal | int | str
    system: AmortizationSystem | str
    periodicity: Periodicity | str
    installment_count: int
    day_count: DayCountConvention | str | None = None
    compounding: Compounding | str | None = None
    grace_periods: int = 0
    grace_type: GraceType | str = GraceType.INTEREST_ONLY
    notes: str = ""


@dataclass
class LoanContract:
    """Loan contract entity: immutable terms plus running state.

    Only ``current_balance``, ``status`` and ``updated_at`` change after
    creation, and only through the contract's ledger.
    """

    contract_id: str  # LOAN-<YYYYMMDDHHMMSS>-<6 chars>
    terms: LoanTerms
    current_balance: Decimal
    status: ContractStatus
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_settled(self) -> bool:
        return self.status == ContractStatus.SETTLED
