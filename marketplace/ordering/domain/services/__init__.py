from .fulfillment_service import OrderFulfillmentService
from .order_service import OrderService
from .revenue_service import RevenueService


__all__ = [
    "OrderFulfillmentService",
    "OrderService",
    "RevenueService",
]
