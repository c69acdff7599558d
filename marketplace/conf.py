"""
Order engine configuration.

``settings.MARKETPLACE_ORDERS`` is merged over ``DEFAULTS`` on every lookup so
``override_settings`` takes effect without restarting services.
"""

from decimal import Decimal
from typing import Any

from django.conf import settings


DEFAULTS = {
    "FREE_SHIPPING_THRESHOLD": Decimal("50.00"),
    "FLAT_SHIPPING_CHARGE": Decimal("10.00"),
    "TAX_RATE": Decimal("0.10"),
    "ORDER_NUMBER_PREFIX": "ORD",
    "ESTIMATED_DELIVERY_DAYS": 7,
    # "order": a seller cancellation returns every item of the order to stock.
    # "seller": only the cancelling seller's items are returned.
    "CANCELLATION_RESTOCK_SCOPE": "order",
    "PAYMENT_CAPTURE_ORDER_STATUSES": ("shipped", "delivered"),
    "CART_PRUNE_INACTIVE": False,
    "LOW_STOCK_THRESHOLD": 10,
    "LOW_STOCK_LIMIT": 5,
    "STATS_WINDOW_DAYS": 30,
    "RECENT_ORDERS_DAYS": 7,
    "RECENT_ORDERS_LIMIT": 5,
    "DEFAULT_PAGE_SIZE": 10,
    "MAX_PAGE_SIZE": 100,
}

RESTOCK_SCOPE_ORDER = "order"
RESTOCK_SCOPE_SELLER = "seller"


def order_setting(name: str) -> Any:
    overrides = getattr(settings, "MARKETPLACE_ORDERS", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
