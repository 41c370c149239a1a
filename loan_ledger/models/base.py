"""Event envelope shared by every sink."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

EVENT_SOURCE = "loan-ledger"


@dataclass(frozen=True)
class Event:
    """Domain event emitted after a durable ledger write."""

    event_id: str
    event_type: str  # entity.action (e.g., payment.recorded)
    event_time: datetime
    source: str
    subject: str  # contract id
    data: dict[str, Any]
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, event_type: str, subject: str, data: dict[str, Any]) -> "Event":
        return cls(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            event_time=datetime.now(timezone.utc),
            source=EVENT_SOURCE,
            subject=subject,
            data=data,
        )
