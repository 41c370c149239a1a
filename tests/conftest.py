"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.models import (
    AmortizationSystem,
    ContractInput,
    ContractType,
    DayCountConvention,
    Periodicity,
)
from loan_ledger.store import ContractRegistry, InMemoryStorage


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def start_date() -> date:
    """Contract start date used across tests."""
    return date(2025, 1, 1)


@pytest.fixture
def price_input(start_date: date) -> ContractInput:
    """PRICE contract: 100k at 12.5% a.a., 12 monthly installments."""
    return ContractInput(
        contract_type=ContractType.CEDIDO,
        counterparty="Banco Exemplo S.A.",
        currency="BRL",
        principal=Decimal("100000"),
        start_date=start_date,
        maturity_date=date(2026, 1, 1),
        annual_rate_percent=Decimal("12.5"),
        system=AmortizationSystem.PRICE,
        periodicity=Periodicity.MONTHLY,
        installment_count=12,
        day_count=DayCountConvention.ACT_365,
    )


@pytest.fixture
def sac_input(start_date: date) -> ContractInput:
    """SAC contract: 120k at 10% a.a., 12 monthly installments."""
    return ContractInput(
        contract_type=ContractType.CAPTADO,
        counterparty="Cooperativa Teste",
        currency="USD",
        principal=Decimal("120000"),
        start_date=start_date,
        maturity_date=date(2026, 1, 1),
        annual_rate_percent=Decimal("10"),
        system=AmortizationSystem.SAC,
        periodicity=Periodicity.MONTHLY,
        installment_count=12,
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    """Fresh in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def registry(storage: InMemoryStorage) -> ContractRegistry:
    """Registry backed by in-memory storage with default config."""
    return ContractRegistry(storage=storage)
