from .order_serializers import (
    CancelOrderRequestSerializer,
    CreateOrderRequestSerializer,
    CustomerSummarySerializer,
    OrderItemSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    OrderSummarySerializer,
    SellerOrderSerializer,
    SellerStatsSerializer,
    ShippingAddressSerializer,
    UpdateOrderStatusRequestSerializer,
    UpdatePaymentStatusRequestSerializer,
)


__all__ = [
    "CancelOrderRequestSerializer",
    "CreateOrderRequestSerializer",
    "CustomerSummarySerializer",
    "OrderItemSerializer",
    "OrderListQuerySerializer",
    "OrderSerializer",
    "OrderSummarySerializer",
    "SellerOrderSerializer",
    "SellerStatsSerializer",
    "ShippingAddressSerializer",
    "UpdateOrderStatusRequestSerializer",
    "UpdatePaymentStatusRequestSerializer",
]
