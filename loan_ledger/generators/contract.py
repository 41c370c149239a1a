"""Synthetic contract input generator."""

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

from loan_ledger.engine.schedule import add_periods
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models.contract import ContractInput
from loan_ledger.models.enums import (
    AmortizationSystem,
    Compounding,
    ContractType,
    DayCountConvention,
    GraceType,
    Periodicity,
)


class ContractInputGenerator(BaseGenerator):
    """Generate valid, randomized ``ContractInput`` values."""

    CURRENCIES = ["BRL", "BRL", "BRL", "USD", "EUR"]

    # Installment counts offered per periodicity
    INSTALLMENT_COUNTS = {
        Periodicity.MONTHLY: [6, 12, 18, 24, 36, 48, 60],
        Periodicity.QUARTERLY: [4, 8, 12, 20],
        Periodicity.SEMIANNUAL: [2, 4, 6, 10],
        Periodicity.ANNUAL: [1, 2, 3, 5],
    }

    PERIODICITY_WEIGHTS = {
        Periodicity.MONTHLY: 70,
        Periodicity.QUARTERLY: 15,
        Periodicity.SEMIANNUAL: 10,
        Periodicity.ANNUAL: 5,
    }

    def generate(self, start_date: date | None = None) -> ContractInput:
        """Generate one contract input.

        Parameters
        ----------
        start_date : date | None
            Contract start date; a random date within the last two years
            when omitted.

        Returns
        -------
        ContractInput
            Input that passes creation validation.
        """
        if start_date is None:
            start_date = date.today() - timedelta(days=random.randint(30, 730))

        periodicity = random.choices(
            list(self.PERIODICITY_WEIGHTS),
            weights=list(self.PERIODICITY_WEIGHTS.values()),
        )[0]
        installment_count = random.choice(self.INSTALLMENT_COUNTS[periodicity])
        grace_periods = random.choices([0, 1, 2, 3], weights=[80, 8, 7, 5])[0]

        return ContractInput(
            contract_type=random.choice(list(ContractType)),
            counterparty=self.fake.company(),
            currency=random.choice(self.CURRENCIES),
            principal=Decimal(random.randint(10, 500) * 1000),
            start_date=start_date,
            maturity_date=add_periods(start_date, grace_periods + installment_count, periodicity),
            annual_rate_percent=Decimal(str(round(random.uniform(6.0, 24.0), 2))),
            system=random.choice(list(AmortizationSystem)),
            periodicity=periodicity,
            installment_count=installment_count,
            day_count=random.choice(list(DayCountConvention)),
            compounding=random.choices(list(Compounding), weights=[85, 15])[0],
            grace_periods=grace_periods,
            grace_type=random.choice(list(GraceType)),
            notes=self.fake.sentence(nb_words=6) if random.random() < 0.3 else "",
        )

    def generate_batch(self, count: int, start_date: date | None = None) -> Iterator[ContractInput]:
        """Generate multiple contract inputs.

        Parameters
        ----------
        count : int
            Number of inputs to generate.
        start_date : date | None
            Shared start date, or random per contract when omitted.

        Yields
        ------
        ContractInput
            Generated inputs.
        """
        for _ in range(count):
            yield self.generate(start_date)
