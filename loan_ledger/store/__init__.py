"""Contract ledgers, the contract registry and storage backends."""

from loan_ledger.store.backends import InMemoryStorage, JsonFileStorage, StorageBackend, create_storage
from loan_ledger.store.ledger import ContractLedger, PaymentSummary
from loan_ledger.store.registry import ContractRegistry, PortfolioSummary, contract_key

__all__ = [
    "ContractLedger",
    "ContractRegistry",
    "InMemoryStorage",
    "JsonFileStorage",
    "PaymentSummary",
    "PortfolioSummary",
    "StorageBackend",
    "contract_key",
    "create_storage",
]
