"""Tests for shared serialization helpers."""

from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models import ContractStatus, Event, LedgerEntry, OperationType
from loan_ledger.sinks.serialization import serialize_value, to_dict, to_dict_fast


class TestSerializeValue:
    """Tests for serialize_value."""

    def test_decimal_keeps_precision(self) -> None:
        assert serialize_value(Decimal("0.10")) == "0.10"

    def test_enum(self) -> None:
        assert serialize_value(ContractStatus.SETTLED) == "SETTLED"

    def test_dates(self) -> None:
        assert serialize_value(date(2025, 1, 2)) == "2025-01-02"
        assert serialize_value(datetime(2025, 1, 2, 3, 4, 5)) == "2025-01-02T03:04:05"

    def test_nested_containers(self) -> None:
        result = serialize_value({"a": [Decimal("1.5"), (date(2025, 1, 1),)]})
        assert result == {"a": ["1.5", ["2025-01-01"]]}

    def test_plain_values_unchanged(self) -> None:
        assert serialize_value("x") == "x"
        assert serialize_value(3) == 3
        assert serialize_value(None) is None


class TestToDict:
    """Tests for to_dict and to_dict_fast."""

    def test_event(self) -> None:
        event = Event.create("payment.recorded", "LOAN-1", {"amount": Decimal("5.00")})
        result = to_dict(event)

        assert result["event_type"] == "payment.recorded"
        assert result["subject"] == "LOAN-1"
        assert result["source"] == "loan-ledger"
        assert result["data"] == {"amount": "5.00"}
        assert isinstance(result["event_time"], str)

    def test_dict_values_serialized(self) -> None:
        assert to_dict({"d": Decimal("1")}) == {"d": "1"}

    def test_other_objects(self) -> None:
        assert to_dict(42) == {"value": "42"}

    def test_fast_matches_full(self) -> None:
        entry = LedgerEntry(
            contract_id="LOAN-1",
            sequence=1,
            entry_date=date(2025, 2, 1),
            operation_type=OperationType.PAYMENT,
            amount_delta=Decimal("-10.00"),
            balance_after=Decimal("90.00"),
            description="Payment",
            recorded_at=datetime(2025, 2, 1, 12, 0),
        )

        assert to_dict_fast(entry) == to_dict(entry)
        assert to_dict_fast(entry)["operation_type"] == "PAYMENT"
