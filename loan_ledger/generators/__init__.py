"""Synthetic data generators."""

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.generators.contract import ContractInputGenerator

__all__ = ["BaseGenerator", "ContractInputGenerator"]
