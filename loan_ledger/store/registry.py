"""Contract registry: creation, payments, projections and queries.

The registry is an explicit object constructed once per session and passed
to whoever needs it. Mutations are asynchronous because every change is
written to the storage backend before it becomes visible in memory.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol

from loan_ledger.config import LoanEngineConfig
from loan_ledger.engine.accrual import AccrualProjector
from loan_ledger.engine.schedule import AmortizationScheduler
from loan_ledger.exceptions import ContractNotFoundError, PersistenceError, SinkError
from loan_ledger.models.base import Event
from loan_ledger.models.contract import ContractInput, LoanContract
from loan_ledger.models.enums import AccrualFrequency, ContractStatus, ContractType
from loan_ledger.models.ledger import LedgerEntry
from loan_ledger.models.schedule import AccrualRow, ScheduleRow
from loan_ledger.sinks.serialization import dataclass_to_dict, to_dict_fast
from loan_ledger.store.backends import InMemoryStorage, StorageBackend
from loan_ledger.store.ledger import ContractLedger, PaymentSummary
from loan_ledger.store.records import ledger_from_record, ledger_to_record
from loan_ledger.validation import build_terms, validate_payment

logger = logging.getLogger(__name__)

CONTRACT_INDEX_KEY = "contracts"
ID_PREFIX = "LOAN"
ID_SUFFIX_LENGTH = 6
_ID_ALPHABET = string.ascii_letters + string.digits


def contract_key(contract_id: str) -> str:
    """Storage key holding a contract and its ledger."""
    return f"contract:{contract_id}"


class EventSink(Protocol):
    def send(self, topic: str, record: Any) -> None:
        ...

    def write_batch(self, topic: str, records: list[Any]) -> None:
        ...


@dataclass
class PortfolioSummary:
    """Portfolio totals. Balances are never converted between currencies."""

    contract_count: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    outstanding_by_currency: dict[str, Decimal] = field(default_factory=dict)
    # contract type -> currency -> outstanding balance
    outstanding_by_type: dict[str, dict[str, Decimal]] = field(default_factory=dict)


class ContractRegistry:
    """Keyed collection of contract ledgers.

    Parameters
    ----------
    storage : StorageBackend | None
        Persistence collaborator; an ``InMemoryStorage`` when omitted.
    config : LoanEngineConfig | None
        Engine defaults (day count, compounding, rounding, threshold).
    sinks : list | None
        Event sinks notified after each durable write.
    """

    def __init__(
        self,
        storage: StorageBackend | None = None,
        config: LoanEngineConfig | None = None,
        sinks: list[EventSink] | None = None,
    ) -> None:
        self.config = config or LoanEngineConfig()
        self.storage = storage if storage is not None else InMemoryStorage()
        self.sinks = list(sinks or [])
        self.scheduler = AmortizationScheduler(self.config.rounding)
        self.accrual = AccrualProjector(self.config.rounding)
        self._ledgers: dict[str, ContractLedger] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._index_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._ledgers)

    def __contains__(self, contract_id: object) -> bool:
        return contract_id in self._ledgers

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def generate_id(self, now: datetime | None = None) -> str:
        """Return a new ``LOAN-<YYYYMMDDHHMMSS>-<6 alphanumerics>`` id.

        The suffix is drawn from ``secrets`` and retried on the rare clash
        with an id already registered.
        """
        now = now or datetime.now()
        while True:
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
            contract_id = f"{ID_PREFIX}-{now:%Y%m%d%H%M%S}-{suffix}"
            if contract_id not in self._ledgers:
                return contract_id

    async def create_contract(self, data: ContractInput) -> str:
        """Validate input, then durably create a contract with its origination entry.

        Returns
        -------
        str
            The new contract id.

        Raises
        ------
        ValidationError
            If the input is invalid; nothing is created.
        PersistenceError
            If the storage write fails; nothing is registered.
        """
        terms = build_terms(data, self.config.default_day_count, self.config.default_compounding)

        async with self._index_lock:
            now = datetime.now()
            contract_id = self.generate_id(now)
            ledger = ContractLedger.originate(
                contract_id, terms, now, self.config.settlement_threshold
            )
            key = contract_key(contract_id)
            await self._write(key, ledger_to_record(ledger))
            try:
                await self._write(CONTRACT_INDEX_KEY, [*self._ledgers, contract_id])
            except PersistenceError as exc:
                await self._discard_orphan(key, exc)
                raise
            self._ledgers[contract_id] = ledger

        logger.info(
            "Created contract %s: %s %s %s with %s",
            contract_id,
            terms.contract_type.value,
            terms.principal,
            terms.currency,
            terms.counterparty,
            extra={"contract_id": contract_id},
        )
        self._emit("contract.created", contract_id, dataclass_to_dict(ledger.contract))
        return contract_id

    async def record_payment(
        self,
        contract_id: str,
        amount: Decimal | int | str,
        payment_date: date,
        description: str | None = None,
    ) -> LedgerEntry:
        """Record a payment, durably, and return its ledger entry.

        Raises
        ------
        ContractNotFoundError
            If ``contract_id`` is not registered.
        ValidationError
            If the amount or date is invalid for the contract.
        PersistenceError
            If the storage write fails; in-memory state is left untouched.
        """
        self._require(contract_id)
        lock = self._locks.setdefault(contract_id, asyncio.Lock())

        async with lock:
            current = self._require(contract_id)
            value = validate_payment(
                current.contract, amount, payment_date, self.config.reject_overpayment
            )
            was_settled = current.contract.is_settled

            staged = current.copy()
            entry = staged.record_payment(value, payment_date, description)
            await self._write(contract_key(contract_id), ledger_to_record(staged))
            self._ledgers[contract_id] = staged

        logger.info(
            "Recorded payment of %s on %s for %s, balance %s",
            value,
            payment_date,
            contract_id,
            entry.balance_after,
            extra={"contract_id": contract_id},
        )
        self._emit("payment.recorded", contract_id, to_dict_fast(entry))
        if not was_settled and staged.contract.is_settled:
            self._emit(
                "contract.settled",
                contract_id,
                {"balance": str(entry.balance_after), "settled_on": payment_date.isoformat()},
            )
        return entry

    async def load(self) -> int:
        """Replace in-memory state with the contracts held in storage.

        Every loaded ledger is verified before anything is replaced.

        Returns
        -------
        int
            Number of contracts loaded.
        """
        index = await self._read(CONTRACT_INDEX_KEY) or []
        ledgers: dict[str, ContractLedger] = {}

        for contract_id in index:
            record = await self._read(contract_key(contract_id))
            if record is None:
                raise PersistenceError(f"Contract {contract_id} is indexed but has no stored record")
            ledger = ledger_from_record(record, self.config.settlement_threshold)
            ledger.verify()
            ledgers[contract_id] = ledger

        self._ledgers = ledgers
        self._locks.clear()
        logger.info("Loaded %d contracts from storage", len(ledgers))
        return len(ledgers)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def generate_schedule(self, contract_id: str) -> list[ScheduleRow]:
        """Project the amortization schedule; never touches the ledger."""
        terms = self._require(contract_id).contract.terms
        return self.scheduler.build(terms)

    def generate_accrual(
        self,
        contract_id: str,
        start: date,
        end: date,
        frequency: AccrualFrequency | str = AccrualFrequency.DAILY,
    ) -> list[AccrualRow]:
        """Project interest accrual over ``[start, end]`` from the ledger balance at ``start``."""
        ledger = self._require(contract_id)
        return self.accrual.project(
            ledger.contract.terms, ledger.balance_at(start), start, end, frequency
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_contract(self, contract_id: str) -> LoanContract | None:
        """Contract snapshot, or None when the id is not registered."""
        ledger = self._ledgers.get(contract_id)
        return replace(ledger.contract) if ledger else None

    def get_contract(self, contract_id: str) -> LoanContract:
        return replace(self._require(contract_id).contract)

    def get_balance(self, contract_id: str) -> Decimal:
        return self._require(contract_id).contract.current_balance

    def get_status(self, contract_id: str) -> ContractStatus:
        return self._require(contract_id).contract.status

    def get_ledger(self, contract_id: str) -> tuple[LedgerEntry, ...]:
        return self._require(contract_id).entries

    def balance_at(self, contract_id: str, target: date) -> Decimal:
        return self._require(contract_id).balance_at(target)

    def replay_balance(self, contract_id: str) -> Decimal:
        return self._require(contract_id).replay_balance()

    def payment_summary(self, contract_id: str) -> PaymentSummary:
        return self._require(contract_id).payment_summary()

    def verify(self, contract_id: str) -> None:
        self._require(contract_id).verify()

    def list_contracts(
        self,
        status: ContractStatus | str | None = None,
        contract_type: ContractType | str | None = None,
    ) -> list[LoanContract]:
        """Contracts in creation order, optionally filtered."""
        status = ContractStatus(status) if status is not None else None
        contract_type = ContractType(contract_type) if contract_type is not None else None

        result = []
        for ledger in self._ledgers.values():
            contract = ledger.contract
            if status is not None and contract.status != status:
                continue
            if contract_type is not None and contract.terms.contract_type != contract_type:
                continue
            result.append(replace(contract))
        return result

    def portfolio_summary(self) -> PortfolioSummary:
        """Counts by status and outstanding ACTIVE balances by currency and type."""
        by_status: dict[str, int] = defaultdict(int)
        by_currency: dict[str, Decimal] = defaultdict(Decimal)
        by_type: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))

        for ledger in self._ledgers.values():
            contract = ledger.contract
            by_status[contract.status.value] += 1
            if contract.status != ContractStatus.ACTIVE:
                continue
            currency = contract.terms.currency
            by_currency[currency] += contract.current_balance
            by_type[contract.terms.contract_type.value][currency] += contract.current_balance

        return PortfolioSummary(
            contract_count=len(self._ledgers),
            by_status=dict(by_status),
            outstanding_by_currency=dict(by_currency),
            outstanding_by_type={k: dict(v) for k, v in by_type.items()},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, contract_id: str) -> ContractLedger:
        ledger = self._ledgers.get(contract_id)
        if ledger is None:
            raise ContractNotFoundError(contract_id)
        return ledger

    async def _read(self, key: str) -> Any | None:
        try:
            return await self.storage.get(key)
        except Exception as exc:
            logger.error("Storage read failed for %s", key, exc_info=True)
            raise PersistenceError(f"Failed to read {key}: {exc}") from exc

    async def _write(self, key: str, value: Any) -> None:
        try:
            await self.storage.set(key, value)
        except Exception as exc:
            logger.error("Storage write failed for %s", key, exc_info=True)
            raise PersistenceError(f"Failed to write {key}: {exc}") from exc

    async def _discard_orphan(self, key: str, cause: PersistenceError) -> None:
        """Clear a contract record whose index write failed.

        If clearing fails too, the raised error says the unindexed record
        may remain in storage.
        """
        try:
            await self.storage.set(key, None)
        except Exception as exc:
            logger.error("Could not clear unindexed record %s", key, exc_info=True)
            raise PersistenceError(
                f"{cause}; unindexed record {key} may remain in storage"
            ) from exc

    def _emit(self, event_type: str, contract_id: str, data: dict[str, Any]) -> None:
        """Publish an event to every sink; failures are raised after all sinks ran."""
        if not self.sinks:
            return

        event = Event.create(event_type, contract_id, data)
        topic = f"{self.config.kafka.topic_prefix}.{event_type}"
        failures = []
        for sink in self.sinks:
            try:
                sink.send(topic, event)
            except Exception as exc:
                logger.error("Sink %s failed for %s", type(sink).__name__, topic, exc_info=True)
                failures.append(exc)

        if failures:
            raise SinkError(
                f"{event_type} for {contract_id} was persisted but {len(failures)} sink(s) "
                f"failed to publish it: {failures[0]}"
            ) from failures[0]
