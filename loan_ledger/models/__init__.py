"""Domain models for loan contracts, ledgers and schedules."""

from loan_ledger.models.base import Event
from loan_ledger.models.contract import ContractInput, LoanContract, LoanTerms
from loan_ledger.models.enums import (
    AccrualFrequency,
    AmortizationSystem,
    Compounding,
    ContractStatus,
    ContractType,
    DayCountConvention,
    GraceType,
    OperationType,
    Periodicity,
    RoundingMode,
)
from loan_ledger.models.ledger import LedgerEntry
from loan_ledger.models.schedule import AccrualRow, ScheduleRow

__all__ = [
    "AccrualFrequency",
    "AccrualRow",
    "AmortizationSystem",
    "Compounding",
    "ContractInput",
    "ContractStatus",
    "ContractType",
    "DayCountConvention",
    "Event",
    "GraceType",
    "LedgerEntry",
    "LoanContract",
    "LoanTerms",
    "OperationType",
    "Periodicity",
    "RoundingMode",
    "ScheduleRow",
]
