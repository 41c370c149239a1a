"""Tests for storage backends and stored record conversion."""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from loan_ledger.config import StorageConfig
from loan_ledger.exceptions import ConfigurationError, PersistenceError
from loan_ledger.models import ContractInput
from loan_ledger.store import InMemoryStorage, JsonFileStorage, create_storage
from loan_ledger.store.ledger import ContractLedger
from loan_ledger.store.records import ledger_from_record, ledger_to_record
from loan_ledger.validation import build_terms


class TestInMemoryStorage:
    """Tests for InMemoryStorage."""

    def test_missing_key(self) -> None:
        assert asyncio.run(InMemoryStorage().get("nope")) is None

    def test_values_are_copied(self) -> None:
        storage = InMemoryStorage()
        value = {"items": [1, 2]}
        asyncio.run(storage.set("k", value))

        value["items"].append(3)
        loaded = asyncio.run(storage.get("k"))
        loaded["items"].append(4)

        assert asyncio.run(storage.get("k")) == {"items": [1, 2]}
        assert storage.keys() == ["k"]


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_set_and_get(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path)
        asyncio.run(storage.set("contract:LOAN-1", {"balance": "10.00"}))

        assert asyncio.run(storage.get("contract:LOAN-1")) == {"balance": "10.00"}
        assert (tmp_path / "contract_LOAN-1.json").exists()
        assert list(tmp_path.glob("*.tmp")) == []

    def test_missing_key(self, tmp_path: Path) -> None:
        assert asyncio.run(JsonFileStorage(tmp_path).get("contracts")) is None

    def test_creates_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "store"
        JsonFileStorage(target)
        assert target.is_dir()


class TestCreateStorage:
    """Tests for create_storage."""

    def test_memory(self) -> None:
        assert isinstance(create_storage(StorageConfig()), InMemoryStorage)

    def test_json(self, tmp_path: Path) -> None:
        storage = create_storage(StorageConfig(backend="json", directory=tmp_path))

        assert isinstance(storage, JsonFileStorage)
        assert storage.directory == tmp_path

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError):
            create_storage(StorageConfig(backend="redis"))


class TestRecords:
    """Tests for ledger_to_record / ledger_from_record."""

    def test_round_trip(self, price_input: ContractInput) -> None:
        ledger = ContractLedger.originate(
            "LOAN-20250101000000-Ab12Cd", build_terms(price_input), datetime(2025, 1, 1, 10, 30)
        )
        ledger.record_payment(Decimal("100.10"), date(2025, 2, 1), "Parcela 1")

        record = ledger_to_record(ledger)
        restored = ledger_from_record(record)

        assert record["contract"]["terms"]["day_count"] == "ACT/365"
        assert record["ledger"][1]["amount_delta"] == "-100.10"
        assert restored.contract == ledger.contract
        assert restored.entries == ledger.entries

    def test_malformed_record(self) -> None:
        with pytest.raises(PersistenceError, match="Malformed"):
            ledger_from_record({"contract": {"contract_id": "x"}, "ledger": []})

    def test_bad_decimal(self, price_input: ContractInput) -> None:
        ledger = ContractLedger.originate("LOAN-1", build_terms(price_input), datetime(2025, 1, 1))
        record = ledger_to_record(ledger)
        record["contract"]["current_balance"] = "lots"

        with pytest.raises(PersistenceError):
            ledger_from_record(record)
