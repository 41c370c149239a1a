"""Configuration management for loan-ledger."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from loan_ledger.exceptions import ConfigurationError
from loan_ledger.models.enums import Compounding, DayCountConvention, RoundingMode

E = TypeVar("E", bound=Enum)

STORAGE_BACKENDS = ("memory", "json")


@dataclass
class KafkaConfig:
    """Kafka producer configuration for event publishing."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.loans"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class StorageConfig:
    """Persistence backend configuration."""

    backend: str = "memory"  # memory | json
    directory: Path = field(default_factory=lambda: Path("data"))


@dataclass
class LoanEngineConfig:
    """Main configuration for loan-ledger."""

    default_day_count: DayCountConvention = DayCountConvention.ACT_365
    default_compounding: Compounding = Compounding.EXPONENTIAL
    rounding: RoundingMode = RoundingMode.HALF_UP
    settlement_threshold: Decimal = Decimal("0.01")
    reject_overpayment: bool = False
    log_level: str = "INFO"
    log_format: str = "standard"
    storage: StorageConfig = field(default_factory=StorageConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)

    @classmethod
    def from_env(cls) -> "LoanEngineConfig":
        """Create config from environment variables."""
        storage = StorageConfig(
            backend=os.getenv("STORAGE_BACKEND", "memory").lower(),
            directory=Path(os.getenv("STORAGE_DIR", "data")),
        )
        if storage.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {storage.backend!r}"
            )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.loans"),
        )

        threshold_str = os.getenv("LOAN_SETTLEMENT_THRESHOLD", "0.01")
        try:
            threshold = Decimal(threshold_str)
        except InvalidOperation as exc:
            raise ConfigurationError(f"LOAN_SETTLEMENT_THRESHOLD is not a number: {threshold_str!r}") from exc

        return cls(
            default_day_count=_env_enum("LOAN_DAY_COUNT", DayCountConvention, DayCountConvention.ACT_365),
            default_compounding=_env_enum("LOAN_COMPOUNDING", Compounding, Compounding.EXPONENTIAL),
            rounding=_env_enum("LOAN_ROUNDING", RoundingMode, RoundingMode.HALF_UP),
            settlement_threshold=threshold,
            reject_overpayment=os.getenv("LOAN_REJECT_OVERPAYMENT", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            storage=storage,
            kafka=kafka,
        )


def _env_enum(name: str, enum_type: type[E], default: E) -> E:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return enum_type(raw.upper())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"{name} must be one of {allowed}, got {raw!r}") from exc
