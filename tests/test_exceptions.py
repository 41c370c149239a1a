"""Tests for custom exception hierarchy."""

from loan_ledger.exceptions import (
    ConfigurationError,
    ContractNotFoundError,
    InvalidConfigurationError,
    LedgerIntegrityError,
    LoanLedgerError,
    PersistenceError,
    SinkError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_loan_ledger_error_is_exception(self) -> None:
        assert isinstance(LoanLedgerError("test"), Exception)

    def test_all_errors_share_base(self) -> None:
        for exc in (
            ValidationError("bad"),
            ContractNotFoundError("LOAN-1"),
            InvalidConfigurationError("test"),
            LedgerIntegrityError("test"),
            PersistenceError("test"),
            ConfigurationError("test"),
            SinkError("test"),
        ):
            assert isinstance(exc, LoanLedgerError)


class TestValidationError:
    """Tests for ValidationError."""

    def test_collects_errors(self) -> None:
        err = ValidationError(["principal must be greater than zero", "counterparty is required"])

        assert err.errors == ["principal must be greater than zero", "counterparty is required"]
        assert str(err) == "principal must be greater than zero; counterparty is required"

    def test_single_message(self) -> None:
        err = ValidationError("amount must be greater than zero")

        assert err.errors == ["amount must be greater than zero"]


class TestContractNotFoundError:
    """Tests for ContractNotFoundError."""

    def test_message_and_id(self) -> None:
        err = ContractNotFoundError("LOAN-20250101000000-abcdef")

        assert err.contract_id == "LOAN-20250101000000-abcdef"
        assert str(err) == "Contract LOAN-20250101000000-abcdef not found"
