#!/usr/bin/env python3
"""Simulate a loan portfolio and print its summary.

Originates random contracts, pays their scheduled installments up to an
as-of date, and optionally publishes every ledger event, followed by a snapshot of
all contracts, to Kafka or to JSON files.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LoanEngineConfig
from loan_ledger.logging import setup_logging
from loan_ledger.scenarios import PortfolioSimulationScenario
from loan_ledger.sinks import ConsoleSink, JsonFileSink, KafkaSink
from loan_ledger.store import create_storage

logger = logging.getLogger("loan_ledger.scripts.simulate_portfolio")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Simulate a loan portfolio")
    parser.add_argument(
        "--contracts",
        type=int,
        default=50,
        help="Number of contracts to originate (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Pay installments due up to this date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--miss-rate",
        type=float,
        default=0.05,
        help="Share of due installments left unpaid (default: 0.05)",
    )
    parser.add_argument(
        "--sink",
        choices=["none", "console", "json", "kafka"],
        default="none",
        help="Where to publish ledger events (default: none)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("local/events"),
        help="Directory for --sink json (default: local/events)",
    )
    args = parser.parse_args()

    config = LoanEngineConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    sinks = []
    if args.sink == "console":
        sinks.append(ConsoleSink(pretty=False))
    elif args.sink == "json":
        sinks.append(JsonFileSink(args.output_dir))
    elif args.sink == "kafka":
        sinks.append(KafkaSink(config.kafka))

    scenario = PortfolioSimulationScenario(
        num_contracts=args.contracts,
        as_of=args.as_of,
        miss_rate=args.miss_rate,
        seed=args.seed,
        config=config,
        storage=create_storage(config.storage),
        sinks=sinks,
    )
    registry = asyncio.run(scenario.run())
    scenario.publish_snapshot()

    for sink in sinks:
        sink.close()

    summary = registry.portfolio_summary()
    logger.info("=" * 60)
    logger.info("Contracts: %d", summary.contract_count)
    for status, count in sorted(summary.by_status.items()):
        logger.info("  %s: %d", status, count)
    for currency, amount in sorted(summary.outstanding_by_currency.items()):
        logger.info("Outstanding %s: %s", currency, amount)
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
