"""
Catalog Gateway - read/write access to products for the order engine

The cart and ordering contexts never touch Product rows directly. They read
product snapshots and move stock through this gateway, whose stock writes are
single conditional UPDATE statements: a decrement either applies in full
against the current row or does not apply at all.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db.models import F
from django.utils import timezone

from marketplace.catalog.domain.models.catalog import Product
from utils.identifiers import coerce_uuid


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: Decimal
    discount_price: Optional[Decimal]
    stock: int
    seller_id: str
    is_active: bool
    image: str = ""

    @property
    def effective_price(self) -> Decimal:
        return self.discount_price if self.discount_price is not None else self.price

    @classmethod
    def from_product(cls, product: Product) -> "ProductSnapshot":
        return cls(
            id=str(product.id),
            name=product.name,
            price=product.price,
            discount_price=product.discount_price,
            stock=product.stock_quantity,
            seller_id=str(product.seller_id),
            is_active=product.is_active,
            image=product.image_url,
        )


class CatalogGateway(ABC):
    """Catalog lookup consumed by the cart and order services."""

    @abstractmethod
    def get(self, product_id, lock: bool = False) -> Optional[ProductSnapshot]:
        """Current product state, or None if the product does not exist."""
        pass

    @abstractmethod
    def decrement_stock(self, product_id, quantity: int) -> bool:
        """Atomically take ``quantity`` units if at least that many are in stock."""
        pass

    @abstractmethod
    def increment_stock(self, product_id, quantity: int) -> bool:
        """Return ``quantity`` units to stock."""
        pass


class DjangoCatalogGateway(CatalogGateway):
    """CatalogGateway over the local Product table."""

    def get(self, product_id, lock: bool = False) -> Optional[ProductSnapshot]:
        """
        Args:
            product_id: Product UUID (malformed ids behave like missing ones)
            lock: Take a row lock until the surrounding transaction ends
        """
        pk = coerce_uuid(product_id)
        if pk is None:
            return None

        queryset = Product.objects.all()
        if lock:
            queryset = queryset.select_for_update()

        product = queryset.filter(pk=pk).first()
        if product is None:
            return None
        return ProductSnapshot.from_product(product)

    def decrement_stock(self, product_id, quantity: int) -> bool:
        pk = coerce_uuid(product_id)
        if pk is None or quantity <= 0:
            return False

        updated = Product.objects.filter(pk=pk, is_active=True, stock_quantity__gte=quantity).update(
            stock_quantity=F("stock_quantity") - quantity, updated_at=timezone.now()
        )
        if updated:
            logger.debug(f"Decremented stock of product {pk} by {quantity}")
        else:
            logger.info(f"Stock decrement of {quantity} rejected for product {pk}")
        return updated == 1

    def increment_stock(self, product_id, quantity: int) -> bool:
        pk = coerce_uuid(product_id)
        if pk is None or quantity <= 0:
            return False

        updated = Product.objects.filter(pk=pk).update(
            stock_quantity=F("stock_quantity") + quantity, updated_at=timezone.now()
        )
        if updated:
            logger.debug(f"Returned {quantity} units to stock of product {pk}")
        return updated == 1
