from dataclasses import dataclass
from decimal import Decimal
from typing import List

from .base import DomainEvent


@dataclass
class OrderPlacedEvent(DomainEvent):
    """Event: Order placed."""

    def __init__(self, order_id: str, order_number: str, customer_id: str, seller_ids: List[str], final_amount: Decimal):
        super().__init__(
            event_type="order.placed",
            payload={
                "order_id": order_id,
                "order_number": order_number,
                "customer_id": customer_id,
                "seller_ids": seller_ids,
                "final_amount": str(final_amount),
            },
        )


@dataclass
class OrderReceivedEvent(DomainEvent):
    """Event: A seller has items in a newly placed order."""

    def __init__(self, payload: dict):
        super().__init__(event_type="order.received", payload=dict(payload))

    @classmethod
    def from_placed(cls, event: OrderPlacedEvent) -> "OrderReceivedEvent":
        return cls(event.payload)


@dataclass
class OrderStatusChangedEvent(DomainEvent):
    """Event: Order status changed by a seller or cancelled by its customer."""

    def __init__(self, order_id: str, order_number: str, from_status: str, to_status: str, actor_id: str, reason: str = ""):
        super().__init__(
            event_type="order.status_changed",
            payload={
                "order_id": order_id,
                "order_number": order_number,
                "from_status": from_status,
                "to_status": to_status,
                "actor_id": actor_id,
                "reason": reason,
            },
        )


@dataclass
class PaymentStatusChangedEvent(DomainEvent):
    """Event: Payment status of an order changed."""

    def __init__(self, order_id: str, order_number: str, from_status: str, to_status: str, actor_id: str):
        super().__init__(
            event_type="order.payment_status_changed",
            payload={
                "order_id": order_id,
                "order_number": order_number,
                "from_status": from_status,
                "to_status": to_status,
                "actor_id": actor_id,
            },
        )
