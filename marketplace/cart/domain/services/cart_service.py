"""
CartService - Shopping Cart Operations

Handles shopping cart operations including add, remove, update, and clear.
Stock ceilings are checked against product rows locked for the length of the
mutation, so a quantity is accepted only against stock as it is at commit time.

Pricing policy: the price stored on a cart item when it is added is the price
used for every total shown for that item. Re-adding a product refreshes it.
"""

import logging
from typing import Dict, List, Optional

from django.db import transaction

from marketplace.cart.domain.models.cart import Cart, CartItem
from marketplace.cart.domain.services.pricing_service import PricingService, money
from marketplace.catalog.domain.services.catalog_gateway import CatalogGateway
from marketplace.conf import order_setting
from marketplace.infra.observability.metrics import cart_operations_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, internal_error, service_err, service_ok

logger = logging.getLogger(__name__)


def _valid_quantity(quantity) -> bool:
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


class CartService(BaseService):
    """
    Service for managing shopping cart operations.

    Responsibilities:
    - Get a customer's cart (inactive products filtered out)
    - Add items to cart (with stock validation)
    - Remove items from cart
    - Update item quantities
    - Clear cart
    - Calculate cart totals

    Dependencies:
    - CatalogGateway: product state and row locks
    - PricingService: cart totals
    """

    def __init__(self, catalog_gateway: CatalogGateway, pricing_service: Optional[PricingService] = None):
        """
        Initialize CartService.

        Args:
            catalog_gateway: Product lookup (injected)
            pricing_service: Service for price calculations (injected)
        """
        super().__init__()
        self.catalog = catalog_gateway
        self.pricing_service = pricing_service or PricingService()

    @BaseService.log_performance
    def get_cart(self, customer_id) -> ServiceResult[Dict]:
        """
        Get a customer's shopping cart with items and totals.

        Items whose product is no longer active are left out of the view. They
        stay stored unless ``CART_PRUNE_INACTIVE`` is enabled, in which case
        they are deleted here. A customer without a cart gets an empty view;
        no cart row is created.

        Returns:
            ServiceResult with cart data including items and totals

        Example:
            >>> result = cart_service.get_cart(principal.id)
            >>> if result.ok:
            ...     total = result.value["totals"]["final_amount"]
        """
        try:
            cart = Cart.objects.filter(user_id=customer_id).first()
            if cart is None:
                return service_ok(self._build_view(None, customer_id, []))

            items = list(cart.items.select_related("product"))
            active = [item for item in items if item.product.is_active]
            inactive = [item for item in items if not item.product.is_active]

            if inactive and order_setting("CART_PRUNE_INACTIVE"):
                CartItem.objects.filter(pk__in=[item.pk for item in inactive]).delete()
                self.logger.info(f"Pruned {len(inactive)} inactive items from cart of customer {customer_id}")

            return service_ok(self._build_view(cart, customer_id, active))

        except Exception as e:
            self.logger.error(f"Error getting cart for customer {customer_id}: {e}", exc_info=True)
            return internal_error("loading the cart")

    @BaseService.log_performance
    def add_item(self, customer_id, product_id, quantity: int = 1) -> ServiceResult[Dict]:
        """
        Add item to cart (with stock validation).

        Fails OUT_OF_STOCK when the quantity already in the cart plus
        ``quantity`` exceeds the product's stock. The item's price snapshot is
        set to the product's effective price as of this call.

        Example:
            >>> result = cart_service.add_item(principal.id, product_id, quantity=2)
        """
        if not _valid_quantity(quantity):
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be a positive integer")

        try:
            with transaction.atomic():
                product = self.catalog.get(product_id, lock=True)
                if product is None:
                    return self._failed("add", ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
                if not product.is_active:
                    return self._failed("add", ErrorCodes.PRODUCT_INACTIVE, f"Product {product.name} is not available")

                cart = Cart.objects.select_for_update().filter(user_id=customer_id).first()
                existing = None
                if cart is not None:
                    existing = CartItem.objects.filter(cart=cart, product_id=product.id).first()
                existing_quantity = existing.quantity if existing else 0

                if existing_quantity + quantity > product.stock:
                    return self._failed(
                        "add",
                        ErrorCodes.OUT_OF_STOCK,
                        f"Cannot add {quantity} of {product.name}. "
                        f"Cart has {existing_quantity}, stock: {product.stock}",
                    )

                if cart is None:
                    cart, _ = Cart.objects.get_or_create(user_id=customer_id)

                if existing:
                    existing.quantity = existing_quantity + quantity
                    existing.price = product.effective_price
                    existing.save(update_fields=["quantity", "price", "updated_at"])
                    self.logger.info(
                        f"Updated cart item for customer {customer_id}: {product.name} "
                        f"quantity {existing_quantity} -> {existing.quantity}"
                    )
                else:
                    CartItem.objects.create(
                        cart=cart, product_id=product.id, quantity=quantity, price=product.effective_price
                    )
                    self.logger.info(f"Added to cart for customer {customer_id}: {quantity}x {product.name}")

                cart.save(update_fields=["updated_at"])

        except Exception as e:
            cart_operations_total.labels(operation="add", status="error").inc()
            self.logger.error(f"Error adding to cart for customer {customer_id}: {e}", exc_info=True)
            return internal_error("adding to the cart")

        cart_operations_total.labels(operation="add", status="success").inc()
        return self.get_cart(customer_id)

    @BaseService.log_performance
    def update_item(self, customer_id, product_id, quantity: int) -> ServiceResult[Dict]:
        """
        Set the quantity of an item already in the cart.

        Fails ITEM_NOT_IN_CART when the product is not in the cart and
        OUT_OF_STOCK when ``quantity`` exceeds the product's stock. The price
        snapshot is left as it was.
        """
        if not _valid_quantity(quantity):
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be a positive integer")

        try:
            with transaction.atomic():
                product = self.catalog.get(product_id, lock=True)
                item = None
                if product is not None:
                    item = (
                        CartItem.objects.select_for_update()
                        .filter(cart__user_id=customer_id, product_id=product.id)
                        .first()
                    )
                if item is None:
                    return self._failed("update", ErrorCodes.ITEM_NOT_IN_CART, f"Product {product_id} not in cart")
                if not product.is_active:
                    return self._failed("update", ErrorCodes.PRODUCT_INACTIVE, f"Product {product.name} is not available")

                if quantity > product.stock:
                    return self._failed(
                        "update",
                        ErrorCodes.OUT_OF_STOCK,
                        f"Insufficient stock for {product.name}. Requested: {quantity}, available: {product.stock}",
                    )

                old_quantity = item.quantity
                item.quantity = quantity
                item.save(update_fields=["quantity", "updated_at"])
                self.logger.info(
                    f"Updated cart quantity for customer {customer_id}: {product.name} {old_quantity} -> {quantity}"
                )

        except Exception as e:
            cart_operations_total.labels(operation="update", status="error").inc()
            self.logger.error(f"Error updating cart quantity for customer {customer_id}: {e}", exc_info=True)
            return internal_error("updating the cart")

        cart_operations_total.labels(operation="update", status="success").inc()
        return self.get_cart(customer_id)

    @BaseService.log_performance
    def remove_item(self, customer_id, product_id) -> ServiceResult[Dict]:
        try:
            product = self.catalog.get(product_id)
            deleted = 0
            if product is not None:
                deleted, _ = CartItem.objects.filter(cart__user_id=customer_id, product_id=product.id).delete()

            if not deleted:
                return self._failed("remove", ErrorCodes.ITEM_NOT_IN_CART, f"Product {product_id} not in cart")

            self.logger.info(f"Removed product {product_id} from cart of customer {customer_id}")

        except Exception as e:
            cart_operations_total.labels(operation="remove", status="error").inc()
            self.logger.error(f"Error removing from cart for customer {customer_id}: {e}", exc_info=True)
            return internal_error("removing from the cart")

        cart_operations_total.labels(operation="remove", status="success").inc()
        return self.get_cart(customer_id)

    @BaseService.log_performance
    def clear_cart(self, customer_id) -> ServiceResult[bool]:
        """Remove every item. The cart itself is kept; clearing a missing cart succeeds."""
        try:
            deleted, _ = CartItem.objects.filter(cart__user_id=customer_id).delete()
            self.logger.info(f"Cleared cart for customer {customer_id}: {deleted} items removed")
            cart_operations_total.labels(operation="clear", status="success").inc()
            return service_ok(True)

        except Exception as e:
            cart_operations_total.labels(operation="clear", status="error").inc()
            self.logger.error(f"Error clearing cart for customer {customer_id}: {e}", exc_info=True)
            return internal_error("clearing the cart")

    def checkout_lines(self, customer_id) -> List[Dict]:
        """(product_id, quantity) lines of the active items in the cart, in insertion order."""
        items = CartItem.objects.filter(cart__user_id=customer_id, product__is_active=True).order_by("id")
        return [{"product_id": item.product_id, "quantity": item.quantity} for item in items]

    def _failed(self, operation: str, code: str, detail: str) -> ServiceResult:
        cart_operations_total.labels(operation=operation, status="rejected").inc()
        return service_err(code, detail)

    def _build_view(self, cart: Optional[Cart], customer_id, items: List[CartItem]) -> Dict:
        lines = []
        for item in items:
            product = item.product
            lines.append(
                {
                    "product_id": str(product.id),
                    "product_title": product.name,
                    "product_image": product.image_url,
                    "seller_id": str(product.seller_id),
                    "quantity": item.quantity,
                    "price": money(item.price),
                    "subtotal": self.pricing_service.line_subtotal(item.price, item.quantity),
                    "added_at": item.added_at,
                }
            )

        total_price = self.pricing_service.sum_lines((item.price, item.quantity) for item in items)
        totals_result = self.pricing_service.calculate_order_totals(total_price)
        if not totals_result.ok:
            self.logger.warning(f"Failed to calculate cart totals for customer {customer_id}: {totals_result.error}")
        totals = totals_result.value if totals_result.ok else {}
        if totals and not items:
            # Nothing to ship yet
            totals = {**totals, "shipping_charge": money(0), "final_amount": money(0)}

        return {
            "id": cart.id if cart else None,
            "customer_id": str(customer_id),
            "items": lines,
            "total_items": sum(item.quantity for item in items),
            "total_price": total_price,
            "totals": totals,
            "updated_at": cart.updated_at if cart else None,
        }
