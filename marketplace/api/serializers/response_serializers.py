"""
Response Serializers for Marketplace API Documentation

These serializers define the envelope of API responses for OpenAPI schema
generation. They are NOT used for data validation, only for documentation in
Swagger/ReDoc.
"""

from drf_spectacular.utils import inline_serializer
from rest_framework import serializers

from marketplace.cart.api.serializers import CartSerializer
from marketplace.ordering.api.serializers import (
    CustomerSummarySerializer,
    OrderSerializer,
    OrderSummarySerializer,
    SellerOrderSerializer,
    SellerStatsSerializer,
)

# ===== Common Response Serializers =====


class ErrorDetailSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(
        choices=["InvalidRequest", "NotFound", "InsufficientStock", "Forbidden", "PreconditionFailed", "Internal"],
        help_text="Error category",
    )
    code = serializers.CharField(help_text="Fine-grained error code")


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    success = serializers.BooleanField(default=False)
    message = serializers.CharField(help_text="Human-readable error message")
    error = ErrorDetailSerializer()
    errors = serializers.DictField(help_text="Field errors of invalid request bodies", required=False)


def envelope(name: str, data_serializer):
    """Success envelope ``{"success": true, "data": <data_serializer>}`` for the schema."""
    return inline_serializer(name=name, fields={"success": serializers.BooleanField(default=True), "data": data_serializer})


def page_of(name: str, item_serializer, **extra_fields):
    """Paginated payload carrying ``item_serializer`` results."""
    return inline_serializer(
        name=name,
        fields={
            "results": item_serializer,
            "count": serializers.IntegerField(),
            "page": serializers.IntegerField(),
            "page_size": serializers.IntegerField(),
            "num_pages": serializers.IntegerField(),
            "has_next": serializers.BooleanField(),
            "has_previous": serializers.BooleanField(),
            **extra_fields,
        },
    )


CartResponseSerializer = envelope("CartResponse", CartSerializer())
OrderResponseSerializer = envelope("OrderResponse", OrderSerializer())
OrderListResponseSerializer = envelope("OrderListResponse", page_of("OrderPage", OrderSerializer(many=True)))
SellerOrderResponseSerializer = envelope("SellerOrderResponse", SellerOrderSerializer())
SellerOrderListResponseSerializer = envelope(
    "SellerOrderListResponse",
    page_of("SellerOrderPage", SellerOrderSerializer(many=True), stats=OrderSummarySerializer()),
)
SellerStatsResponseSerializer = envelope("SellerStatsResponse", SellerStatsSerializer())
CustomerSummaryResponseSerializer = envelope("CustomerSummaryResponse", CustomerSummarySerializer())
