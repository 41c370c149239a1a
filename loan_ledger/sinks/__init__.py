"""Output sinks for publishing ledger events."""

from loan_ledger.sinks.console import ConsoleSink
from loan_ledger.sinks.json_file import JsonFileSink
from loan_ledger.sinks.kafka import KafkaSink, ProducerStats

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink", "ProducerStats"]
