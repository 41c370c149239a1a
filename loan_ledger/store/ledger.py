"""Per-contract append-only ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.exceptions import LedgerIntegrityError
from loan_ledger.models.contract import LoanContract, LoanTerms
from loan_ledger.models.enums import ContractStatus, OperationType
from loan_ledger.models.ledger import LedgerEntry

logger = logging.getLogger(__name__)

DEFAULT_SETTLEMENT_THRESHOLD = Decimal("0.01")


@dataclass(frozen=True)
class PaymentSummary:
    """Aggregate of the payments recorded against a contract."""

    total_paid: Decimal
    payment_count: int
    last_payment_date: date | None


class ContractLedger:
    """Owns one contract's running balance and its operation history.

    The contract's ``current_balance`` always equals the ``balance_after``
    of the newest entry; entries are only ever appended. Status moves from
    ACTIVE to SETTLED the first time a payment leaves the balance at or
    below the settlement threshold, and never moves back.
    """

    def __init__(
        self,
        contract: LoanContract,
        entries: list[LedgerEntry],
        settlement_threshold: Decimal = DEFAULT_SETTLEMENT_THRESHOLD,
    ) -> None:
        self._contract = contract
        self._entries = list(entries)
        self.settlement_threshold = settlement_threshold

    @classmethod
    def originate(
        cls,
        contract_id: str,
        terms: LoanTerms,
        created_at: datetime,
        settlement_threshold: Decimal = DEFAULT_SETTLEMENT_THRESHOLD,
    ) -> "ContractLedger":
        """Create a contract together with its ORIGINATION entry."""
        contract = LoanContract(
            contract_id=contract_id,
            terms=terms,
            current_balance=terms.principal,
            status=ContractStatus.ACTIVE,
            created_at=created_at,
        )
        origination = LedgerEntry(
            contract_id=contract_id,
            sequence=0,
            entry_date=terms.start_date,
            operation_type=OperationType.ORIGINATION,
            amount_delta=terms.principal,
            balance_after=terms.principal,
            description="Contract origination",
            recorded_at=created_at,
        )
        return cls(contract, [origination], settlement_threshold)

    @property
    def contract(self) -> LoanContract:
        return self._contract

    @property
    def contract_id(self) -> str:
        return self._contract.contract_id

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def copy(self) -> "ContractLedger":
        """Independent copy; mutations on it leave this ledger untouched."""
        return ContractLedger(replace(self._contract), self._entries, self.settlement_threshold)

    def record_payment(
        self,
        amount: Decimal,
        payment_date: date,
        description: str | None = None,
        recorded_at: datetime | None = None,
    ) -> LedgerEntry:
        """Append a PAYMENT entry and move the running balance.

        ``amount`` is expected to be validated already (positive).
        """
        recorded_at = recorded_at or datetime.now()
        new_balance = self._contract.current_balance - amount

        entry = LedgerEntry(
            contract_id=self.contract_id,
            sequence=len(self._entries),
            entry_date=payment_date,
            operation_type=OperationType.PAYMENT,
            amount_delta=-amount,
            balance_after=new_balance,
            description=description or "Payment",
            recorded_at=recorded_at,
        )
        self._entries.append(entry)
        self._contract.current_balance = new_balance
        self._contract.updated_at = recorded_at

        if self._contract.status == ContractStatus.ACTIVE and new_balance <= self.settlement_threshold:
            self._contract.status = ContractStatus.SETTLED
            logger.info(
                "Contract %s settled (balance %s)",
                self.contract_id,
                new_balance,
                extra={"contract_id": self.contract_id},
            )
        return entry

    def replay_balance(self) -> Decimal:
        """Rebuild the balance by folding every entry's signed delta."""
        return sum((entry.amount_delta for entry in self._entries), Decimal("0"))

    def balance_at(self, target: date) -> Decimal:
        """Balance as of ``target`` from the ledger history.

        Folds the signed deltas of every entry dated on or before ``target``,
        so backdated payments count on their own date whatever order they
        were recorded in. Before the first entry the principal is returned.
        """
        dated = [e.amount_delta for e in self._entries if e.entry_date <= target]
        if not dated:
            return self._contract.terms.principal
        return sum(dated, Decimal("0"))

    def payment_summary(self) -> PaymentSummary:
        payments = [e for e in self._entries if e.operation_type == OperationType.PAYMENT]
        return PaymentSummary(
            total_paid=sum((-e.amount_delta for e in payments), Decimal("0")),
            payment_count=len(payments),
            last_payment_date=max((e.entry_date for e in payments), default=None),
        )

    def verify(self) -> None:
        """Check the ledger and contract state agree.

        Raises
        ------
        LedgerIntegrityError
            If the history is malformed or the balance/status disagree with it.
        """
        cid = self.contract_id
        if not self._entries:
            raise LedgerIntegrityError(f"Contract {cid} has no ledger entries")
        if self._entries[0].operation_type != OperationType.ORIGINATION:
            raise LedgerIntegrityError(f"Contract {cid} ledger does not start with ORIGINATION")

        running = Decimal("0")
        crossed = False
        for index, entry in enumerate(self._entries):
            if entry.sequence != index:
                raise LedgerIntegrityError(f"Contract {cid} entry {index} has sequence {entry.sequence}")
            if index > 0 and entry.operation_type == OperationType.ORIGINATION:
                raise LedgerIntegrityError(f"Contract {cid} has more than one ORIGINATION entry")
            running += entry.amount_delta
            if running != entry.balance_after:
                raise LedgerIntegrityError(
                    f"Contract {cid} entry {index}: balance_after {entry.balance_after} != running {running}"
                )
            if entry.operation_type == OperationType.PAYMENT and running <= self.settlement_threshold:
                crossed = True

        if self._contract.current_balance != running:
            raise LedgerIntegrityError(
                f"Contract {cid} balance {self._contract.current_balance} != ledger {running}"
            )
        expected = ContractStatus.SETTLED if crossed else ContractStatus.ACTIVE
        if self._contract.status != expected:
            raise LedgerIntegrityError(
                f"Contract {cid} status {self._contract.status.value} != {expected.value} implied by ledger"
            )
