from marketplace.cart.domain.models import Cart, CartItem
from marketplace.catalog.domain.models import Product
from marketplace.ordering.domain.models import Order, OrderItem


__all__ = [
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
]
