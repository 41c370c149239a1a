"""loan-ledger: loan amortization schedules and contract ledgers."""

from loan_ledger.config import LoanEngineConfig
from loan_ledger.models import ContractInput, LedgerEntry, LoanContract, ScheduleRow
from loan_ledger.store import ContractRegistry

__version__ = "0.1.0"

__all__ = [
    "ContractInput",
    "ContractRegistry",
    "LedgerEntry",
    "LoanContract",
    "LoanEngineConfig",
    "ScheduleRow",
    "__version__",
]
