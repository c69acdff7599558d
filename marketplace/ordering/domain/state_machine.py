"""
Order and payment status transition tables.

``delivered`` and ``cancelled`` are terminal: nothing leaves them. A request
for the status an order already has is a no-op and is not looked up here.
"""

from typing import Dict, FrozenSet

from marketplace.ordering.domain.models.order import Order


ORDER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Order.STATUS_PENDING: frozenset({Order.STATUS_PROCESSING, Order.STATUS_CANCELLED}),
    Order.STATUS_PROCESSING: frozenset({Order.STATUS_SHIPPED, Order.STATUS_CANCELLED}),
    Order.STATUS_SHIPPED: frozenset({Order.STATUS_DELIVERED}),
    Order.STATUS_DELIVERED: frozenset(),
    Order.STATUS_CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Order.PAYMENT_PENDING: frozenset({Order.PAYMENT_PAID, Order.PAYMENT_FAILED}),
    Order.PAYMENT_PAID: frozenset({Order.PAYMENT_FAILED}),
    Order.PAYMENT_FAILED: frozenset(),
}

# Stamped on first entry into the status, never overwritten
TIMESTAMP_FIELDS: Dict[str, str] = {
    Order.STATUS_PROCESSING: "processed_at",
    Order.STATUS_SHIPPED: "shipped_at",
    Order.STATUS_DELIVERED: "delivered_at",
    Order.STATUS_CANCELLED: "cancelled_at",
}

TERMINAL_STATUSES = frozenset(status for status, targets in ORDER_TRANSITIONS.items() if not targets)


def is_valid_status(status) -> bool:
    return status in ORDER_TRANSITIONS


def is_valid_payment_status(status) -> bool:
    return status in PAYMENT_TRANSITIONS


def can_transition(current: str, new: str) -> bool:
    return new in ORDER_TRANSITIONS.get(current, frozenset())


def can_transition_payment(current: str, new: str) -> bool:
    return new in PAYMENT_TRANSITIONS.get(current, frozenset())
