import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models

User = get_user_model()


class Product(models.Model):
    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Seller
    seller = models.ForeignKey(User, on_delete=models.CASCADE, related_name="products")

    # Pricing and Inventory
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))])
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Selling price while set; overrides price",
    )
    stock_quantity = models.PositiveIntegerField(default=0)

    # Display image reference copied onto order items
    image_url = models.CharField(max_length=500, blank=True)

    # Status and Visibility
    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "is_active"], name="product_seller_active_idx"),
            models.Index(fields=["is_active", "stock_quantity"], name="product_active_stock_idx"),
        ]

    @property
    def effective_price(self) -> Decimal:
        """Price a buyer pays right now: the discount price when one is set."""
        return self.discount_price if self.discount_price is not None else self.price

    def __str__(self):
        return self.name
