"""End-to-end scenarios driving the contract registry."""

from loan_ledger.scenarios.portfolio import PortfolioSimulationScenario

__all__ = ["PortfolioSimulationScenario"]
