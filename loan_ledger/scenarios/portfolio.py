"""Portfolio simulation: originate contracts and pay them down on schedule."""

from __future__ import annotations

import logging
import random
from datetime import date
from decimal import Decimal

from loan_ledger.config import LoanEngineConfig
from loan_ledger.generators.contract import ContractInputGenerator
from loan_ledger.store.backends import StorageBackend
from loan_ledger.store.registry import ContractRegistry, EventSink

logger = logging.getLogger(__name__)


class PortfolioSimulationScenario:
    """Build a loan portfolio and replay its scheduled amortization.

    This scenario:
    - creates ``num_contracts`` random contracts through the registry
    - for each contract, walks the amortization schedule up to ``as_of``
      and records the principal component of every due installment as a
      payment, skipping a share of installments as missed
    - clears any rounding residue on the final installment so fully
      amortized contracts settle
    """

    def __init__(
        self,
        num_contracts: int = 50,
        as_of: date | None = None,
        miss_rate: float = 0.05,
        seed: int | None = None,
        *,
        config: LoanEngineConfig | None = None,
        storage: StorageBackend | None = None,
        sinks: list[EventSink] | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_contracts : int
            Number of contracts to originate.
        as_of : date | None
            Installments due after this date are not paid (default today).
        miss_rate : float
            Share of due installments left unpaid (0.0 to 1.0).
        seed : int | None
            Random seed for reproducibility.
        config, storage, sinks
            Passed through to the ``ContractRegistry``.
        """
        self.num_contracts = num_contracts
        self.as_of = as_of or date.today()
        self.miss_rate = miss_rate
        self.seed = seed

        self._input_gen = ContractInputGenerator(seed=seed)
        self.registry = ContractRegistry(storage=storage, config=config, sinks=sinks)

    async def run(self) -> ContractRegistry:
        """Run the simulation.

        Returns
        -------
        ContractRegistry
            Registry holding every generated contract and payment.
        """
        logger.info(
            "Starting portfolio simulation: %d contracts as of %s",
            self.num_contracts,
            self.as_of,
        )

        payments = 0
        for data in self._input_gen.generate_batch(self.num_contracts):
            contract_id = await self.registry.create_contract(data)
            payments += await self._pay_due_installments(contract_id)

        summary = self.registry.portfolio_summary()
        logger.info(
            "Simulation complete: %d contracts, %d payments, status counts %s",
            summary.contract_count,
            payments,
            summary.by_status,
        )
        return self.registry

    def publish_snapshot(self) -> str:
        """Write every registered contract to each sink as one batch.

        Returns
        -------
        str
            The topic the snapshot was written to.
        """
        topic = f"{self.registry.config.kafka.topic_prefix}.contracts"
        contracts = self.registry.list_contracts()
        for sink in self.registry.sinks:
            sink.write_batch(topic, contracts)
        logger.info("Published snapshot of %d contracts to %s", len(contracts), topic)
        return topic

    async def _pay_due_installments(self, contract_id: str) -> int:
        schedule = self.registry.generate_schedule(contract_id)
        last_number = schedule[-1].installment_number
        paid = 0

        for row in schedule:
            if row.payment_date > self.as_of:
                break
            if random.random() < self.miss_rate:
                logger.debug("Installment %d of %s missed", row.installment_number, contract_id)
                continue

            balance = self.registry.get_balance(contract_id)
            if row.installment_number == last_number:
                amount = balance
            else:
                amount = min(row.principal_component, balance)
            if amount <= Decimal("0"):
                continue

            await self.registry.record_payment(
                contract_id,
                amount,
                row.payment_date,
                f"Installment {row.installment_number} amortization",
            )
            paid += 1
        return paid
