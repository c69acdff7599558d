"""
InventoryService - Stock Management

Moves product stock for order creation and cancellation. Every decrement is a
single conditional UPDATE issued through the catalog gateway, so two checkouts
racing for the last unit can never both succeed and stock never goes negative.
"""

import logging
from typing import Iterable, List

from django.utils import timezone

from marketplace.catalog.domain.services.catalog_gateway import CatalogGateway, ProductSnapshot
from marketplace.infra.observability.metrics import stock_reservation_failures, stock_restocked_units
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, internal_error, service_err, service_ok

logger = logging.getLogger(__name__)


class InventoryService(BaseService):
    """
    Service for taking stock out of and returning it to the catalog.
    """

    def __init__(self, catalog_gateway: CatalogGateway):
        super().__init__()
        self.catalog = catalog_gateway

    @BaseService.log_performance
    def reserve_stock(self, product_id, quantity: int) -> ServiceResult[ProductSnapshot]:
        """
        Take ``quantity`` units of a product out of stock.

        The product is read first so callers get a precise error, then the
        decrement is applied conditionally. A read that saw enough stock but
        loses the conditional update to a concurrent checkout is still an
        insufficient-stock failure.

        Args:
            product_id: UUID of the product
            quantity: Units to take (>= 1)

        Returns:
            ServiceResult with the product snapshot read before the decrement
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        try:
            product = self.catalog.get(product_id)
            if product is None:
                stock_reservation_failures.inc()
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
            if not product.is_active:
                stock_reservation_failures.inc()
                return service_err(ErrorCodes.PRODUCT_INACTIVE, f"Product {product.name} is not available")

            if product.stock < quantity or not self.catalog.decrement_stock(product_id, quantity):
                stock_reservation_failures.inc()
                return service_err(
                    ErrorCodes.INSUFFICIENT_STOCK,
                    f"Insufficient stock for product {product.name}. Requested: {quantity}",
                )

            self.logger.info(f"Stock reserved: product={product.id}, quantity={quantity}")
            return service_ok(product)

        except Exception as e:
            stock_reservation_failures.inc()
            self.logger.error(f"Error reserving stock for product {product_id}: {e}", exc_info=True)
            return internal_error("reserving stock")

    @BaseService.log_performance
    def release_stock(self, product_id, quantity: int, reason: str = "order_cancelled") -> ServiceResult[int]:
        """
        Return ``quantity`` units to stock.

        Args:
            product_id: UUID of the product
            quantity: Units to return
            reason: Reason for release (for audit logging)
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        try:
            if not self.catalog.increment_stock(product_id, quantity):
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            stock_restocked_units.labels(reason=reason).inc(quantity)
            self.logger.info(f"Stock released: product={product_id}, quantity={quantity}, reason={reason}")
            return service_ok(quantity)

        except Exception as e:
            self.logger.error(f"Error releasing stock for product {product_id}: {e}", exc_info=True)
            return internal_error("releasing stock")

    def release_order_items(self, items: Iterable, reason: str) -> ServiceResult[List]:
        """
        Return the quantities of order items to stock, each at most once.

        Items whose ``restocked_at`` is already set are skipped. Returned items
        get ``restocked_at`` stamped and saved. Must run inside the caller's
        transaction so a failure part way leaves nothing half restored.

        Returns:
            ServiceResult with the list of items restocked by this call
        """
        restocked = []
        now = timezone.now()
        for item in items:
            if item.restocked_at is not None:
                continue

            result = self.release_stock(item.product_id, item.quantity, reason=reason)
            if not result.ok:
                return result

            item.restocked_at = now
            item.save(update_fields=["restocked_at"])
            restocked.append(item)

        return service_ok(restocked)
