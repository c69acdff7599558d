from rest_framework import serializers


# ===== Requests =====


class AddToCartRequestSerializer(serializers.Serializer):
    """Request body for adding a product to the cart"""

    quantity = serializers.IntegerField(min_value=1, default=1, help_text="Quantity to add (default: 1)")


class UpdateCartItemRequestSerializer(serializers.Serializer):
    """Request body for setting the quantity of a cart item"""

    quantity = serializers.IntegerField(min_value=1, help_text="New quantity")


# ===== Output =====


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_title = serializers.CharField()
    product_image = serializers.CharField()
    seller_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, help_text="Price frozen when the item was added")
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    added_at = serializers.DateTimeField()


class TotalsSerializer(serializers.Serializer):
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, help_text="Sum of line subtotals")
    shipping_charge = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    final_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class CartSerializer(serializers.Serializer):
    """Cart view returned by every cart endpoint"""

    id = serializers.IntegerField(allow_null=True, help_text="Null until the first item is added")
    customer_id = serializers.UUIDField()
    items = CartLineSerializer(many=True)
    total_items = serializers.IntegerField(help_text="Sum of quantities")
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    totals = TotalsSerializer()
    updated_at = serializers.DateTimeField(allow_null=True)
