from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from django.utils import timezone


@dataclass
class DomainEvent:
    """Something that happened to an order, addressed to one or more users."""

    event_type: str
    occurred_at: datetime = field(default_factory=timezone.now)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def order_number(self) -> str:
        return self.payload.get("order_number", "")

    def notification_payload(self) -> Dict[str, Any]:
        """Payload handed to the notifier; ``occurred_at`` is stamped at event time, not send time."""
        return {**self.payload, "occurred_at": self.occurred_at.isoformat()}

    def to_dict(self) -> dict:
        return {"event_type": self.event_type, "occurred_at": self.occurred_at.isoformat(), "payload": self.payload}
