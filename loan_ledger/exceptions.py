"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class ValidationError(LoanLedgerError):
    """Raised when contract or payment input is invalid.

    Every violation found is collected in ``errors`` so callers can report
    them all at once.
    """

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ContractNotFoundError(LoanLedgerError):
    """Raised when a contract id is not registered."""

    def __init__(self, contract_id: str) -> None:
        self.contract_id = contract_id
        super().__init__(f"Contract {contract_id} not found")


class InvalidConfigurationError(LoanLedgerError):
    """Raised for an unsupported amortization system, periodicity or convention."""


class LedgerIntegrityError(LoanLedgerError):
    """Raised when a contract balance disagrees with its ledger history."""


class PersistenceError(LoanLedgerError):
    """Raised when the storage backend fails to read or write."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(LoanLedgerError):
    """Raised when an event sink fails."""
