"""Ledger entry model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import OperationType


@dataclass(frozen=True)
class LedgerEntry:
    """One balance-affecting operation recorded against a contract.

    ``amount_delta`` is signed: +principal on origination, -amount on
    payment. ``balance_after`` is the authoritative balance snapshot.
    """

    contract_id: str
    sequence: int  # 0 for origination, then 1, 2, ...
    entry_date: date
    operation_type: OperationType
    amount_delta: Decimal
    balance_after: Decimal
    description: str
    recorded_at: datetime
