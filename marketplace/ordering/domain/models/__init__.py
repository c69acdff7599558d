from .order import Order, OrderItem
from .shipping_address import InvalidShippingAddress, ShippingAddress


__all__ = [
    "Order",
    "OrderItem",
    "ShippingAddress",
    "InvalidShippingAddress",
]
