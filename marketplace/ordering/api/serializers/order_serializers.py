from rest_framework import serializers

from marketplace.ordering.domain.models.order import Order, OrderItem


# ===== Requests =====


class ShippingAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    country = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=20)
    phone = serializers.CharField(max_length=30)


class OrderLineRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(help_text="Product UUID")
    quantity = serializers.IntegerField(min_value=1, help_text="Units to order")


class CreateOrderRequestSerializer(serializers.Serializer):
    """Request body for placing an order"""

    items = OrderLineRequestSerializer(
        many=True, required=False, allow_empty=False, help_text="Line items; omit to check out the cart"
    )
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES, default=Order.PAYMENT_METHOD_COD)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    clear_cart = serializers.BooleanField(
        default=False, help_text="Empty the cart after an order placed from explicit items"
    )


class CancelOrderRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateOrderStatusRequestSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, default="", help_text="Required to cancel")


class UpdatePaymentStatusRequestSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Order.PAYMENT_STATUS_CHOICES)


class OrderListQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False, help_text="Order status, or 'all'")
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)


# ===== Output =====


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    seller_id = serializers.UUIDField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "seller_id",
            "product_title",
            "product_image",
            "quantity",
            "price",
            "subtotal",
            "restocked_at",
        ]
        read_only_fields = fields


ORDER_STATE_FIELDS = [
    "id",
    "order_number",
    "customer_id",
    "status",
    "payment_status",
    "payment_method",
    "shipping_address",
    "estimated_delivery",
    "notes",
    "cancellation_reason",
    "created_at",
    "updated_at",
    "processed_at",
    "shipped_at",
    "delivered_at",
    "cancelled_at",
    "paid_at",
]


class OrderSerializer(serializers.ModelSerializer):
    """Customer view of an order: every item and the order totals"""

    customer_id = serializers.UUIDField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = ORDER_STATE_FIELDS + [
            "total_amount",
            "shipping_charge",
            "tax_amount",
            "discount_amount",
            "final_amount",
            "items",
        ]
        read_only_fields = fields


class SellerOrderSerializer(serializers.ModelSerializer):
    """Seller view of an order: only the seller's items and their subtotal"""

    customer_id = serializers.UUIDField(read_only=True)
    items = OrderItemSerializer(source="seller_items", many=True, read_only=True)
    seller_subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = ORDER_STATE_FIELDS + ["items", "seller_subtotal"]
        read_only_fields = fields


# ===== Seller statistics =====


class OrderSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)


class ProductCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    active = serializers.IntegerField()
    low_stock = serializers.IntegerField()


class OrderCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())


class RevenueSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=14, decimal_places=2, help_text="Delivered and paid, all time")
    window = serializers.DecimalField(max_digits=14, decimal_places=2, help_text="Delivered and paid, trailing window")
    window_days = serializers.IntegerField()


class WindowCountsSerializer(serializers.Serializer):
    days = serializers.IntegerField()
    pending = serializers.IntegerField()
    processing = serializers.IntegerField()
    completed = serializers.IntegerField()


class LowStockProductSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    stock_quantity = serializers.IntegerField()


class SellerStatsSerializer(serializers.Serializer):
    products = ProductCountsSerializer()
    orders = OrderCountsSerializer()
    revenue = RevenueSerializer()
    window = WindowCountsSerializer()
    recent_orders = SellerOrderSerializer(many=True)
    low_stock_products = LowStockProductSerializer(many=True)


# ===== Customer dashboard =====


class CustomerStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    delivered_orders = serializers.IntegerField()
    cart_items = serializers.IntegerField(help_text="Cart lines with an active product")
    total_spent = serializers.DecimalField(
        max_digits=14, decimal_places=2, help_text="Final amount of every order not cancelled"
    )


class CustomerSummarySerializer(serializers.Serializer):
    stats = CustomerStatsSerializer()
    recent_orders = OrderSerializer(many=True)
