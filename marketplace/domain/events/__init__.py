from .base import DomainEvent
from .order_events import OrderPlacedEvent, OrderReceivedEvent, OrderStatusChangedEvent, PaymentStatusChangedEvent


__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderReceivedEvent",
    "OrderStatusChangedEvent",
    "PaymentStatusChangedEvent",
]
