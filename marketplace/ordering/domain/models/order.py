import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import models
from django.db.models import Prefetch

from marketplace.catalog.domain.models.catalog import Product
from utils.identifiers import coerce_uuid

User = get_user_model()


class OrderQuerySet(models.QuerySet):
    def matching(self, order_ref):
        """Orders addressed by UUID primary key or by human-legible order number."""
        order_uuid = coerce_uuid(order_ref)
        if order_uuid is not None:
            return self.filter(pk=order_uuid)
        return self.filter(order_number=str(order_ref))

    def for_seller(self, seller_id):
        """
        Orders holding at least one item of ``seller_id``.

        Each order gets a ``seller_items`` list with only that seller's items.
        """
        return (
            self.filter(items__seller_id=seller_id)
            .distinct()
            .prefetch_related(
                Prefetch(
                    "items",
                    queryset=OrderItem.objects.filter(seller_id=seller_id).select_related("product"),
                    to_attr="seller_items",
                )
            )
        )


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_PENDING = "pending"
    PAYMENT_PAID = "paid"
    PAYMENT_FAILED = "failed"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_FAILED, "Failed"),
    ]

    PAYMENT_METHOD_COD = "cod"
    PAYMENT_METHOD_CARD = "card"

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_METHOD_COD, "Cash on Delivery"),
        (PAYMENT_METHOD_CARD, "Card"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=40, unique=True, editable=False)
    customer = models.ForeignKey(User, on_delete=models.PROTECT, related_name="orders")

    # Order Details
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_METHOD_COD)

    # Pricing
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_charge = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    final_amount = models.DecimalField(max_digits=12, decimal_places=2)

    # Shipping Information (validated ShippingAddress, stored as a dict)
    shipping_address = models.JSONField()
    estimated_delivery = models.DateTimeField(null=True, blank=True)

    # Notes
    notes = models.TextField(blank=True)
    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="cancelled_orders"
    )

    # Timestamps (each lifecycle stamp is written once)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
            models.Index(fields=["status", "payment_status"], name="order_status_payment_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number} by {self.customer_id}"

    def compute_final_amount(self) -> Decimal:
        return self.total_amount + self.shipping_charge + self.tax_amount - self.discount_amount

    @property
    def seller_subtotal(self):
        """Sum of the seller-scoped items, available on querysets built with ``for_seller``."""
        items = getattr(self, "seller_items", None)
        if items is None:
            return None
        return sum((item.subtotal for item in items), Decimal("0.00"))


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="order_items")
    seller = models.ForeignKey(User, on_delete=models.PROTECT, related_name="sold_items")
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)  # Snapshot at creation

    # Product snapshot for display
    product_title = models.CharField(max_length=200)
    product_image = models.CharField(max_length=500, blank=True)

    # Set when this item's quantity went back to stock
    restocked_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["id"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "order"], name="orderitem_seller_order_idx"),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self):
        return f"{self.quantity}x {self.product_title} in {self.order_id}"
