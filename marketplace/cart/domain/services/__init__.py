from .cart_service import CartService
from .inventory_service import InventoryService
from .pricing_service import PricingService


__all__ = [
    "CartService",
    "InventoryService",
    "PricingService",
]
