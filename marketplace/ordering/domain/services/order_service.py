"""
OrderService - Order Lifecycle Management

Turns line items into a persisted order and serves the customer side of the
order lifecycle (listing, lookup, cancellation). Orchestrates the inventory,
cart and pricing services.

Creation is all-or-nothing: stock is taken line by line with conditional
decrements, every decrement is recorded, and any failure before the order is
committed returns all recorded quantities to stock before the error is
returned.
"""

import logging
import secrets
import time
from collections.abc import Mapping
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from authentication.principal import Principal
from infrastructure.notifications import NotificationFactory, NotificationServiceInterface
from marketplace.cart.domain.models.cart import CartItem
from marketplace.cart.domain.services.cart_service import CartService
from marketplace.cart.domain.services.inventory_service import InventoryService
from marketplace.cart.domain.services.pricing_service import PricingService, money
from marketplace.conf import order_setting
from marketplace.domain.events.order_events import OrderPlacedEvent, OrderReceivedEvent, OrderStatusChangedEvent
from marketplace.infra.events.dispatch import dispatch_on_commit
from marketplace.infra.observability.metrics import order_status_transitions_total, order_value, orders_placed_total
from marketplace.infra.observability.tracing import tracer
from marketplace.ordering.domain.models.order import Order, OrderItem
from marketplace.ordering.domain.models.shipping_address import InvalidShippingAddress, ShippingAddress
from marketplace.ordering.domain.state_machine import is_valid_status
from marketplace.services.base import (
    BaseService,
    ErrorCodes,
    ServiceResult,
    internal_error,
    paginate,
    service_err,
    service_ok,
    validate_page,
)

logger = logging.getLogger(__name__)

ORDER_NUMBER_ATTEMPTS = 3
DEFAULT_CANCELLATION_REASON = "Cancelled by customer"


class OrderService(BaseService):
    """
    Service for creating orders and for the customer's view of them.
    """

    def __init__(
        self,
        inventory_service: InventoryService,
        cart_service: CartService,
        pricing_service: Optional[PricingService] = None,
        notifier: Optional[NotificationServiceInterface] = None,
    ):
        """
        Initialize OrderService.

        Args:
            inventory_service: Service for stock management (injected)
            cart_service: Service for cart operations (injected)
            pricing_service: Service for price calculations (injected)
            notifier: Notification sender (injected)
        """
        super().__init__()
        self.inventory_service = inventory_service
        self.cart_service = cart_service
        self.pricing_service = pricing_service or PricingService()
        self.notifier = notifier or NotificationFactory.create()

    @BaseService.log_performance
    def create_order(
        self,
        principal: Principal,
        items: Sequence[Mapping],
        shipping_address,
        payment_method: str = Order.PAYMENT_METHOD_COD,
        notes: str = "",
        clear_cart: bool = False,
    ) -> ServiceResult[Order]:
        """
        Create an order from explicit line items.

        Args:
            principal: Customer placing the order
            items: ``[{"product_id": ..., "quantity": int >= 1}, ...]``
            shipping_address: Mapping with every ShippingAddress field
            payment_method: ``cod`` (payment pending) or ``card`` (paid at creation)
            notes: Free-text customer notes
            clear_cart: Empty the customer's cart once the order is committed

        Returns:
            ServiceResult with the persisted Order

        Example:
            >>> result = order_service.create_order(
            ...     principal,
            ...     items=[{"product_id": product.id, "quantity": 2}],
            ...     shipping_address=address,
            ... )
        """
        lines_error = self._validate_lines(items)
        if lines_error:
            return lines_error

        try:
            address = ShippingAddress.parse(shipping_address)
        except InvalidShippingAddress as e:
            return service_err(ErrorCodes.INVALID_SHIPPING_ADDRESS, str(e))

        if payment_method not in dict(Order.PAYMENT_METHOD_CHOICES):
            return service_err(ErrorCodes.INVALID_PAYMENT_METHOD, f"Unsupported payment method '{payment_method}'")

        with tracer.start_as_current_span("order_create") as span:
            span.set_attribute("customer.id", str(principal.id))
            span.set_attribute("order.lines", len(items))

            reservations: List[Dict] = []
            try:
                # Step 1: Take stock line by line
                with tracer.start_as_current_span("reserve_stock"):
                    for line in items:
                        reserve_result = self.inventory_service.reserve_stock(line["product_id"], line["quantity"])
                        if not reserve_result.ok:
                            self._rollback_reservations(reservations)
                            orders_placed_total.labels(status="rejected").inc()
                            return reserve_result
                        reservations.append({"product": reserve_result.value, "quantity": line["quantity"]})

                # Step 2: Calculate totals from the prices read at reservation
                total_amount = self.pricing_service.sum_lines(
                    (r["product"].effective_price, r["quantity"]) for r in reservations
                )
                totals_result = self.pricing_service.calculate_order_totals(total_amount)
                if not totals_result.ok:
                    self._rollback_reservations(reservations)
                    orders_placed_total.labels(status="failure").inc()
                    return totals_result

                # Step 3: Persist order and items in one transaction
                with tracer.start_as_current_span("persist_order"):
                    order = self._persist_order(
                        principal, reservations, address, payment_method, notes, totals_result.value
                    )

            except Exception as e:
                self.logger.error(f"Error creating order for customer {principal.id}: {e}", exc_info=True)
                span.record_exception(e)
                self._rollback_reservations(reservations)
                orders_placed_total.labels(status="failure").inc()
                return internal_error("creating the order")

            span.set_attribute("order.number", order.order_number)
            span.set_attribute("order.final_amount", str(order.final_amount))

        if clear_cart:
            clear_result = self.cart_service.clear_cart(principal.id)
            if not clear_result.ok:
                # The order stands; the cart can be cleared by hand
                self.logger.warning(f"Failed to clear cart after order {order.order_number}: {clear_result.error}")

        seller_ids = sorted({str(r["product"].seller_id) for r in reservations})
        event = OrderPlacedEvent(
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(principal.id),
            seller_ids=seller_ids,
            final_amount=order.final_amount,
        )
        dispatch_on_commit(self.notifier, event, [principal.id])
        dispatch_on_commit(self.notifier, OrderReceivedEvent.from_placed(event), seller_ids)

        orders_placed_total.labels(status="success").inc()
        order_value.observe(float(order.final_amount))

        self.logger.info(
            f"Created order {order.order_number} for customer {principal.id}: "
            f"{len(reservations)} items, final ${order.final_amount}"
        )
        return service_ok(order)

    @BaseService.log_performance
    def checkout_cart(
        self,
        principal: Principal,
        shipping_address,
        payment_method: str = Order.PAYMENT_METHOD_COD,
        notes: str = "",
    ) -> ServiceResult[Order]:
        """Create an order from the active items of the customer's cart, then clear the cart."""
        try:
            lines = self.cart_service.checkout_lines(principal.id)
        except Exception as e:
            self.logger.error(f"Error reading cart of customer {principal.id}: {e}", exc_info=True)
            return internal_error("reading the cart")

        if not lines:
            return service_err(ErrorCodes.CART_EMPTY, "Cannot create order from empty cart")

        return self.create_order(
            principal, lines, shipping_address, payment_method=payment_method, notes=notes, clear_cart=True
        )

    @BaseService.log_performance
    def list_orders(
        self, principal: Principal, status: Optional[str] = None, page: int = 1, page_size: Optional[int] = None
    ) -> ServiceResult[Dict]:
        """
        The customer's orders, newest first.

        Args:
            status: Only orders in this status; None or ``"all"`` for every order
        """
        if status == "all":
            status = None
        if status is not None and not is_valid_status(status):
            return service_err(ErrorCodes.INVALID_STATUS, f"Unknown order status '{status}'")

        page_size = page_size or order_setting("DEFAULT_PAGE_SIZE")
        page_error = validate_page(page, page_size, order_setting("MAX_PAGE_SIZE"))
        if page_error:
            return page_error

        try:
            queryset = Order.objects.filter(customer_id=principal.id).prefetch_related("items")
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size))

        except Exception as e:
            self.logger.error(f"Error listing orders for customer {principal.id}: {e}", exc_info=True)
            return internal_error("listing orders")

    @BaseService.log_performance
    def get_order(self, principal: Principal, order_ref) -> ServiceResult[Order]:
        """Order by UUID or order number. Orders of other customers are not found."""
        try:
            order = Order.objects.matching(order_ref).filter(customer_id=principal.id).prefetch_related("items").first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_ref} not found")
            return service_ok(order)

        except Exception as e:
            self.logger.error(f"Error getting order {order_ref}: {e}", exc_info=True)
            return internal_error("loading the order")

    @BaseService.log_performance
    def customer_summary(self, principal: Principal) -> ServiceResult[Dict]:
        """
        Dashboard figures for one customer.

        ``total_spent`` is the final amount of every order that was not
        cancelled; ``cart_items`` counts the cart lines whose product is still
        active, the same lines the cart view shows.

        Returns:
            ServiceResult with ``stats`` (total_orders, pending_orders,
            delivered_orders, cart_items, total_spent) and ``recent_orders``
        """
        try:
            orders = Order.objects.filter(customer_id=principal.id)
            figures = orders.aggregate(
                total_orders=Count("id"),
                pending_orders=Count("id", filter=Q(status=Order.STATUS_PENDING)),
                delivered_orders=Count("id", filter=Q(status=Order.STATUS_DELIVERED)),
                total_spent=Sum("final_amount", filter=~Q(status=Order.STATUS_CANCELLED)),
            )
            figures["total_spent"] = money(figures["total_spent"] or 0)
            figures["cart_items"] = CartItem.objects.filter(
                cart__user_id=principal.id, product__is_active=True
            ).count()

            recent_orders = list(
                orders.prefetch_related("items").order_by("-created_at")[: order_setting("RECENT_ORDERS_LIMIT")]
            )
            return service_ok({"stats": figures, "recent_orders": recent_orders})

        except Exception as e:
            self.logger.error(f"Error computing summary for customer {principal.id}: {e}", exc_info=True)
            return internal_error("computing the order summary")

    @BaseService.log_performance
    def cancel_order(self, principal: Principal, order_ref, reason: str = "") -> ServiceResult[Order]:
        """
        Customer cancellation of a pending order.

        Every item not yet restocked goes back to stock in the same
        transaction as the status change. Cancelling an already cancelled
        order is a no-op.

        Example:
            >>> result = order_service.cancel_order(principal, "ORD17000000000001234", reason="Changed my mind")
        """
        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().matching(order_ref).filter(customer_id=principal.id).first()
                if order is None:
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_ref} not found")

                if order.status == Order.STATUS_CANCELLED:
                    self.logger.info(f"Order {order.order_number} already cancelled, skipping")
                    return service_ok(order)

                if order.status != Order.STATUS_PENDING:
                    return service_err(
                        ErrorCodes.ORDER_CANNOT_CANCEL, f"Cannot cancel order in status '{order.status}'"
                    )

                release_result = self.inventory_service.release_order_items(
                    order.items.all(), reason="customer_cancellation"
                )
                if not release_result.ok:
                    transaction.set_rollback(True)
                    return release_result

                previous_status = order.status
                order.status = Order.STATUS_CANCELLED
                order.cancellation_reason = (reason or "").strip() or DEFAULT_CANCELLATION_REASON
                order.cancelled_by_id = principal.id
                if order.cancelled_at is None:
                    order.cancelled_at = timezone.now()
                order.save(
                    update_fields=["status", "cancellation_reason", "cancelled_by", "cancelled_at", "updated_at"]
                )
                seller_ids = sorted({str(item.seller_id) for item in order.items.all()})

        except Exception as e:
            self.logger.error(f"Error cancelling order {order_ref}: {e}", exc_info=True)
            return internal_error("cancelling the order")

        order_status_transitions_total.labels(from_status=previous_status, to_status=order.status).inc()
        self.logger.info(f"Cancelled order {order.order_number} by customer {principal.id}: {order.cancellation_reason}")

        dispatch_on_commit(
            self.notifier,
            OrderStatusChangedEvent(
                order_id=str(order.id),
                order_number=order.order_number,
                from_status=previous_status,
                to_status=order.status,
                actor_id=str(principal.id),
                reason=order.cancellation_reason,
            ),
            seller_ids,
        )
        return service_ok(order)

    def _validate_lines(self, items) -> Optional[ServiceResult]:
        if not isinstance(items, (list, tuple)) or not items:
            return service_err(ErrorCodes.INVALID_ORDER_ITEMS, "Order must contain at least one item")

        for index, line in enumerate(items):
            if not isinstance(line, Mapping) or not line.get("product_id"):
                return service_err(ErrorCodes.INVALID_ORDER_ITEMS, f"Item {index} has no product_id")
            quantity = line.get("quantity")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                return service_err(ErrorCodes.INVALID_QUANTITY, f"Item {index} quantity must be a positive integer")
        return None

    def _persist_order(
        self,
        principal: Principal,
        reservations: List[Dict],
        address: ShippingAddress,
        payment_method: str,
        notes: str,
        totals: Dict,
    ) -> Order:
        now = timezone.now()
        prepaid = payment_method != Order.PAYMENT_METHOD_COD

        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            order_number = self._generate_order_number()
            try:
                with transaction.atomic():
                    order = Order.objects.create(
                        order_number=order_number,
                        customer_id=principal.id,
                        status=Order.STATUS_PENDING,
                        payment_method=payment_method,
                        payment_status=Order.PAYMENT_PAID if prepaid else Order.PAYMENT_PENDING,
                        paid_at=now if prepaid else None,
                        total_amount=totals["total_amount"],
                        shipping_charge=totals["shipping_charge"],
                        tax_amount=totals["tax_amount"],
                        discount_amount=totals["discount_amount"],
                        final_amount=totals["final_amount"],
                        shipping_address=address.to_dict(),
                        estimated_delivery=now + timedelta(days=order_setting("ESTIMATED_DELIVERY_DAYS")),
                        notes=notes or "",
                    )
                    OrderItem.objects.bulk_create(
                        [
                            OrderItem(
                                order=order,
                                product_id=r["product"].id,
                                seller_id=r["product"].seller_id,
                                quantity=r["quantity"],
                                price=r["product"].effective_price,
                                product_title=r["product"].name,
                                product_image=r["product"].image,
                            )
                            for r in reservations
                        ]
                    )
                return order
            except IntegrityError:
                if attempt == ORDER_NUMBER_ATTEMPTS or not Order.objects.filter(order_number=order_number).exists():
                    raise
                self.logger.warning(f"Order number {order_number} already taken, retrying ({attempt})")

    def _generate_order_number(self) -> str:
        """Prefix, milliseconds since the epoch and four random digits."""
        return f"{order_setting('ORDER_NUMBER_PREFIX')}{int(time.time() * 1000)}{secrets.randbelow(10000):04d}"

    def _rollback_reservations(self, reservations: List[Dict]) -> None:
        """
        Return every recorded decrement to stock (rollback helper).

        A failed release is logged and the loop continues; the caller still
        reports its original error.
        """
        if not reservations:
            return

        self.logger.warning(f"Rolling back {len(reservations)} stock reservations")

        for reservation in reservations:
            product_id = reservation["product"].id
            quantity = reservation["quantity"]

            release_result = self.inventory_service.release_stock(
                product_id, quantity, reason="order_creation_rollback"
            )
            if not release_result.ok:
                self.logger.error(
                    f"Failed to release stock during rollback: "
                    f"product={product_id}, quantity={quantity}, error={release_result.error}"
                )

