from .response_serializers import (
    CartResponseSerializer,
    CustomerSummaryResponseSerializer,
    ErrorResponseSerializer,
    OrderListResponseSerializer,
    OrderResponseSerializer,
    SellerOrderListResponseSerializer,
    SellerOrderResponseSerializer,
    SellerStatsResponseSerializer,
)


__all__ = [
    "CartResponseSerializer",
    "CustomerSummaryResponseSerializer",
    "ErrorResponseSerializer",
    "OrderListResponseSerializer",
    "OrderResponseSerializer",
    "SellerOrderListResponseSerializer",
    "SellerOrderResponseSerializer",
    "SellerStatsResponseSerializer",
]
