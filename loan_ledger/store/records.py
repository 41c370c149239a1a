"""Conversion between contract ledgers and stored records."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from loan_ledger.exceptions import PersistenceError
from loan_ledger.models.contract import LoanContract, LoanTerms
from loan_ledger.models.enums import (
    AmortizationSystem,
    Compounding,
    ContractStatus,
    ContractType,
    DayCountConvention,
    GraceType,
    OperationType,
    Periodicity,
)
from loan_ledger.models.ledger import LedgerEntry
from loan_ledger.sinks.serialization import dataclass_to_dict, to_dict_fast
from loan_ledger.store.ledger import DEFAULT_SETTLEMENT_THRESHOLD, ContractLedger


def ledger_to_record(ledger: ContractLedger) -> dict[str, Any]:
    """Serialize a contract and its full ledger into one JSON-safe record."""
    return {
        "contract": dataclass_to_dict(ledger.contract),
        "ledger": [to_dict_fast(entry) for entry in ledger.entries],
    }


def _terms_from_dict(data: dict[str, Any]) -> LoanTerms:
    return LoanTerms(
        contract_type=ContractType(data["contract_type"]),
        counterparty=data["counterparty"],
        currency=data["currency"],
        principal=Decimal(data["principal"]),
        annual_rate_percent=Decimal(data["annual_rate_percent"]),
        start_date=date.fromisoformat(data["start_date"]),
        maturity_date=date.fromisoformat(data["maturity_date"]),
        system=AmortizationSystem(data["system"]),
        periodicity=Periodicity(data["periodicity"]),
        installment_count=int(data["installment_count"]),
        day_count=DayCountConvention(data["day_count"]),
        compounding=Compounding(data["compounding"]),
        grace_periods=int(data.get("grace_periods", 0)),
        grace_type=GraceType(data.get("grace_type", GraceType.INTEREST_ONLY.value)),
        notes=data.get("notes", ""),
    )


def _contract_from_dict(data: dict[str, Any]) -> LoanContract:
    updated_at = data.get("updated_at")
    return LoanContract(
        contract_id=data["contract_id"],
        terms=_terms_from_dict(data["terms"]),
        current_balance=Decimal(data["current_balance"]),
        status=ContractStatus(data["status"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
    )


def _entry_from_dict(data: dict[str, Any]) -> LedgerEntry:
    return LedgerEntry(
        contract_id=data["contract_id"],
        sequence=int(data["sequence"]),
        entry_date=date.fromisoformat(data["entry_date"]),
        operation_type=OperationType(data["operation_type"]),
        amount_delta=Decimal(data["amount_delta"]),
        balance_after=Decimal(data["balance_after"]),
        description=data["description"],
        recorded_at=datetime.fromisoformat(data["recorded_at"]),
    )


def ledger_from_record(
    record: dict[str, Any],
    settlement_threshold: Decimal = DEFAULT_SETTLEMENT_THRESHOLD,
) -> ContractLedger:
    """Rebuild a ``ContractLedger`` from a stored record.

    Raises
    ------
    PersistenceError
        If the record is missing fields or holds unparseable values.
    """
    try:
        contract = _contract_from_dict(record["contract"])
        entries = [_entry_from_dict(item) for item in record["ledger"]]
    except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
        raise PersistenceError(f"Malformed contract record: {exc!r}") from exc
    return ContractLedger(contract, entries, settlement_threshold)
