"""Tests for the per-contract ledger."""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from loan_ledger.exceptions import LedgerIntegrityError
from loan_ledger.models import (
    AmortizationSystem,
    ContractStatus,
    ContractType,
    LoanTerms,
    OperationType,
    Periodicity,
)
from loan_ledger.store.ledger import ContractLedger

CONTRACT_ID = "LOAN-20250101000000-abc123"


def make_ledger(principal: str = "1000") -> ContractLedger:
    terms = LoanTerms(
        contract_type=ContractType.CEDIDO,
        counterparty="Banco Exemplo",
        currency="BRL",
        principal=Decimal(principal),
        annual_rate_percent=Decimal("10"),
        start_date=date(2025, 1, 1),
        maturity_date=date(2026, 1, 1),
        system=AmortizationSystem.SAC,
        periodicity=Periodicity.MONTHLY,
        installment_count=12,
    )
    return ContractLedger.originate(CONTRACT_ID, terms, datetime(2025, 1, 1, 9, 0))


class TestOrigination:
    """Tests for ContractLedger.originate."""

    def test_single_origination_entry(self) -> None:
        ledger = make_ledger()

        assert len(ledger.entries) == 1
        entry = ledger.entries[0]
        assert entry.operation_type == OperationType.ORIGINATION
        assert entry.sequence == 0
        assert entry.amount_delta == Decimal("1000")
        assert entry.balance_after == Decimal("1000")
        assert entry.entry_date == date(2025, 1, 1)

    def test_contract_state(self) -> None:
        contract = make_ledger().contract

        assert contract.current_balance == Decimal("1000")
        assert contract.status == ContractStatus.ACTIVE
        assert contract.updated_at is None


class TestRecordPayment:
    """Tests for ContractLedger.record_payment."""

    def test_payment_moves_balance(self) -> None:
        ledger = make_ledger()
        entry = ledger.record_payment(Decimal("250"), date(2025, 2, 1), "Installment 1")

        assert entry.sequence == 1
        assert entry.amount_delta == Decimal("-250")
        assert entry.balance_after == Decimal("750")
        assert entry.description == "Installment 1"
        assert ledger.contract.current_balance == Decimal("750")
        assert ledger.contract.updated_at == entry.recorded_at

    def test_default_description(self) -> None:
        entry = make_ledger().record_payment(Decimal("1"), date(2025, 2, 1))
        assert entry.description == "Payment"

    def test_threshold_settles(self) -> None:
        ledger = make_ledger()
        ledger.record_payment(Decimal("999.99"), date(2025, 2, 1))

        assert ledger.contract.status == ContractStatus.SETTLED

    def test_above_threshold_stays_active(self) -> None:
        ledger = make_ledger()
        ledger.record_payment(Decimal("999.98"), date(2025, 2, 1))

        assert ledger.contract.status == ContractStatus.ACTIVE

    def test_settled_never_reverts(self) -> None:
        ledger = make_ledger()
        ledger.record_payment(Decimal("1000"), date(2025, 2, 1))
        ledger.record_payment(Decimal("5"), date(2025, 3, 1))

        assert ledger.contract.status == ContractStatus.SETTLED
        assert ledger.contract.current_balance == Decimal("-5")

    def test_copy_is_independent(self) -> None:
        ledger = make_ledger()
        staged = ledger.copy()
        staged.record_payment(Decimal("100"), date(2025, 2, 1))

        assert len(ledger.entries) == 1
        assert ledger.contract.current_balance == Decimal("1000")
        assert staged.contract.current_balance == Decimal("900")


class TestQueries:
    """Tests for balance_at, payment_summary and replay_balance."""

    @pytest.fixture
    def ledger(self) -> ContractLedger:
        ledger = make_ledger()
        ledger.record_payment(Decimal("100"), date(2025, 2, 1))
        ledger.record_payment(Decimal("200"), date(2025, 3, 1))
        return ledger

    def test_balance_at(self, ledger: ContractLedger) -> None:
        assert ledger.balance_at(date(2024, 12, 31)) == Decimal("1000")
        assert ledger.balance_at(date(2025, 1, 1)) == Decimal("1000")
        assert ledger.balance_at(date(2025, 2, 15)) == Decimal("900")
        assert ledger.balance_at(date(2025, 3, 1)) == Decimal("700")

    def test_balance_at_same_day_includes_every_entry(self, ledger: ContractLedger) -> None:
        ledger.record_payment(Decimal("50"), date(2025, 3, 1))
        assert ledger.balance_at(date(2025, 3, 1)) == Decimal("650")

    def test_balance_at_with_backdated_payment(self) -> None:
        ledger = make_ledger("100000")
        ledger.record_payment(Decimal("100"), date(2025, 6, 1))
        ledger.record_payment(Decimal("200"), date(2025, 3, 1))

        assert ledger.contract.current_balance == Decimal("99700")
        assert ledger.balance_at(date(2025, 4, 1)) == Decimal("99800")
        assert ledger.balance_at(date(2030, 1, 1)) == ledger.contract.current_balance
        assert ledger.balance_at(date(2025, 2, 1)) == Decimal("100000")

    def test_payment_summary(self, ledger: ContractLedger) -> None:
        summary = ledger.payment_summary()

        assert summary.total_paid == Decimal("300")
        assert summary.payment_count == 2
        assert summary.last_payment_date == date(2025, 3, 1)

    def test_payment_summary_without_payments(self) -> None:
        summary = make_ledger().payment_summary()

        assert summary.total_paid == 0
        assert summary.payment_count == 0
        assert summary.last_payment_date is None

    def test_replay(self, ledger: ContractLedger) -> None:
        assert ledger.replay_balance() == ledger.contract.current_balance == Decimal("700")


class TestVerify:
    """Tests for ContractLedger.verify."""

    def test_consistent_ledger_passes(self) -> None:
        ledger = make_ledger()
        ledger.record_payment(Decimal("1000"), date(2025, 2, 1))
        ledger.verify()

    def test_balance_mismatch(self) -> None:
        ledger = make_ledger()
        ledger.contract.current_balance = Decimal("999")

        with pytest.raises(LedgerIntegrityError, match="balance"):
            ledger.verify()

    def test_status_mismatch(self) -> None:
        ledger = make_ledger()
        ledger.contract.status = ContractStatus.SETTLED

        with pytest.raises(LedgerIntegrityError, match="status"):
            ledger.verify()

    def test_broken_balance_chain(self) -> None:
        ledger = make_ledger()
        entry = ledger.record_payment(Decimal("100"), date(2025, 2, 1))
        tampered = ContractLedger(
            ledger.contract,
            [ledger.entries[0], replace(entry, balance_after=Decimal("800"))],
        )

        with pytest.raises(LedgerIntegrityError, match="running"):
            tampered.verify()

    def test_sequence_gap(self) -> None:
        ledger = make_ledger()
        entry = ledger.record_payment(Decimal("100"), date(2025, 2, 1))
        tampered = ContractLedger(ledger.contract, [ledger.entries[0], replace(entry, sequence=5)])

        with pytest.raises(LedgerIntegrityError, match="sequence"):
            tampered.verify()

    def test_missing_origination(self) -> None:
        ledger = make_ledger()
        entry = ledger.record_payment(Decimal("100"), date(2025, 2, 1))
        tampered = ContractLedger(ledger.contract, [replace(entry, sequence=0)])

        with pytest.raises(LedgerIntegrityError, match="ORIGINATION"):
            tampered.verify()

    def test_empty_ledger(self) -> None:
        with pytest.raises(LedgerIntegrityError, match="no ledger entries"):
            ContractLedger(make_ledger().contract, []).verify()


class TestReplayProperty:
    """Replaying the ledger always reproduces the stored balance."""

    @given(
        principal=st.integers(min_value=1, max_value=10_000_000),
        payments=st.lists(
            st.decimals(
                min_value=Decimal("0.01"), max_value=Decimal("100000"), places=2,
                allow_nan=False, allow_infinity=False,
            ),
            max_size=30,
        ),
    )
    def test_replay_matches_balance(self, principal: int, payments: list[Decimal]) -> None:
        ledger = make_ledger(str(principal))
        for i, amount in enumerate(payments):
            ledger.record_payment(amount, date(2025, 1, 1 + i % 28))

        assert ledger.replay_balance() == ledger.contract.current_balance
        assert ledger.entries[-1].balance_after == ledger.contract.current_balance
        ledger.verify()
