"""
OrderFulfillmentService - Seller-side Order State Machine

Sellers progress the orders they have items in: processing, shipped,
delivered, or cancelled, following ``state_machine.ORDER_TRANSITIONS``. Order
status is order-level, so any seller owning at least one item may drive it;
the order row is locked for the length of every transition so concurrent
sellers are applied one after the other.

Seller cancellation restock scope is set by ``CANCELLATION_RESTOCK_SCOPE``:
``"order"`` returns every item of the order to stock, ``"seller"`` only the
cancelling seller's items. Items are never restocked twice.
"""

import logging
from typing import Dict, Optional

from django.db import transaction
from django.utils import timezone

from infrastructure.notifications import NotificationFactory, NotificationServiceInterface
from marketplace.cart.domain.services.inventory_service import InventoryService
from marketplace.conf import RESTOCK_SCOPE_SELLER, order_setting
from marketplace.domain.events.order_events import OrderStatusChangedEvent, PaymentStatusChangedEvent
from marketplace.infra.events.dispatch import dispatch_on_commit
from marketplace.infra.observability.metrics import order_status_transitions_total, payment_status_transitions_total
from marketplace.ordering.domain.models.order import Order
from marketplace.ordering.domain.state_machine import (
    TIMESTAMP_FIELDS,
    can_transition,
    can_transition_payment,
    is_valid_payment_status,
    is_valid_status,
)
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


class OrderFulfillmentService(BaseService):
    """
    Service for the seller's view of orders and their status transitions.
    """

    def __init__(
        self, inventory_service: InventoryService, notifier: Optional[NotificationServiceInterface] = None
    ):
        super().__init__()
        self.inventory_service = inventory_service
        self.notifier = notifier or NotificationFactory.create()

    @BaseService.log_performance
    def list_seller_orders(
        self, seller_id, status: Optional[str] = None, page: int = 1, page_size: Optional[int] = None
    ) -> ServiceResult[Dict]:
        """
        Orders holding at least one of the seller's items, newest first.

        Each order carries ``seller_items`` (only this seller's items) and
        ``seller_subtotal``.
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
            queryset = Order.objects.for_seller(seller_id)
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size))

        except Exception as e:
            self.logger.error(f"Error listing orders for seller {seller_id}: {e}", exc_info=True)
            return internal_error("listing seller orders")

    @BaseService.log_performance
    def get_seller_order(self, seller_id, order_ref) -> ServiceResult[Order]:
        try:
            order = Order.objects.for_seller(seller_id).matching(order_ref).first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_ref} not found")
            return service_ok(order)

        except Exception as e:
            self.logger.error(f"Error getting order {order_ref} for seller {seller_id}: {e}", exc_info=True)
            return internal_error("loading the order")

    @BaseService.log_performance
    def transition(self, seller_id, order_ref, new_status: str, reason: Optional[str] = None) -> ServiceResult[Order]:
        """
        Move an order to ``new_status`` on behalf of a seller.

        Fails:
            - INVALID_STATUS: unknown status value
            - ORDER_NOT_FOUND: no order, or none of its items belong to the seller
            - INVALID_STATUS_TRANSITION: not allowed from the current status
            - CANCELLATION_REASON_REQUIRED: cancelling without a reason
            - PAYMENT_REQUIRED: delivering an order that is not paid

        Requesting the current status is a no-op. The lifecycle timestamp of
        the new status is set only if it is still empty.

        Example:
            >>> result = fulfillment_service.transition(seller.id, order.order_number, "shipped")
        """
        if not is_valid_status(new_status):
            return service_err(ErrorCodes.INVALID_STATUS, f"Unknown order status '{new_status}'")

        reason = (reason or "").strip()
        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().matching(order_ref).first()
                if order is None or not order.items.filter(seller_id=seller_id).exists():
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_ref} not found")

                previous_status = order.status
                if new_status == previous_status:
                    self.logger.info(f"Order {order.order_number} already {new_status}, skipping")
                    return self.get_seller_order(seller_id, order.pk)

                if not can_transition(previous_status, new_status):
                    return service_err(
                        ErrorCodes.INVALID_STATUS_TRANSITION,
                        f"Cannot change order status from '{previous_status}' to '{new_status}'",
                    )

                if new_status == Order.STATUS_CANCELLED and not reason:
                    return service_err(ErrorCodes.CANCELLATION_REASON_REQUIRED, "A cancellation reason is required")

                if new_status == Order.STATUS_DELIVERED and order.payment_status != Order.PAYMENT_PAID:
                    return service_err(
                        ErrorCodes.PAYMENT_REQUIRED, "Order cannot be delivered before its payment is received"
                    )

                update_fields = ["status", "updated_at"]
                order.status = new_status

                timestamp_field = TIMESTAMP_FIELDS.get(new_status)
                if timestamp_field and getattr(order, timestamp_field) is None:
                    setattr(order, timestamp_field, timezone.now())
                    update_fields.append(timestamp_field)

                if new_status == Order.STATUS_CANCELLED:
                    items = order.items.all()
                    if order_setting("CANCELLATION_RESTOCK_SCOPE") == RESTOCK_SCOPE_SELLER:
                        items = items.filter(seller_id=seller_id)

                    release_result = self.inventory_service.release_order_items(items, reason="seller_cancellation")
                    if not release_result.ok:
                        transaction.set_rollback(True)
                        return release_result

                    order.cancellation_reason = reason
                    order.cancelled_by_id = seller_id
                    update_fields += ["cancellation_reason", "cancelled_by"]

                order.save(update_fields=update_fields)

        except Exception as e:
            self.logger.error(f"Error changing status of order {order_ref}: {e}", exc_info=True)
            return internal_error("updating the order status")

        order_status_transitions_total.labels(from_status=previous_status, to_status=new_status).inc()
        self.logger.info(
            f"Order {order.order_number} moved {previous_status} -> {new_status} by seller {seller_id}"
        )

        dispatch_on_commit(
            self.notifier,
            OrderStatusChangedEvent(
                order_id=str(order.id),
                order_number=order.order_number,
                from_status=previous_status,
                to_status=new_status,
                actor_id=str(seller_id),
                reason=reason,
            ),
            [order.customer_id],
        )
        return self.get_seller_order(seller_id, order.pk)

    @BaseService.log_performance
    def update_payment_status(self, seller_id, order_ref, new_payment_status: str) -> ServiceResult[Order]:
        """
        Change the payment label of an order on behalf of a seller.

        Allowed: pending -> paid, pending -> failed, paid -> failed. Marking
        ``paid`` needs the order to be in one of
        ``PAYMENT_CAPTURE_ORDER_STATUSES``. ``paid_at`` is set once.
        """
        if not is_valid_payment_status(new_payment_status):
            return service_err(ErrorCodes.INVALID_STATUS, f"Unknown payment status '{new_payment_status}'")

        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().matching(order_ref).first()
                if order is None or not order.items.filter(seller_id=seller_id).exists():
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_ref} not found")

                previous_status = order.payment_status
                if new_payment_status == previous_status:
                    return self.get_seller_order(seller_id, order.pk)

                if not can_transition_payment(previous_status, new_payment_status):
                    return service_err(
                        ErrorCodes.INVALID_STATUS_TRANSITION,
                        f"Cannot change payment status from '{previous_status}' to '{new_payment_status}'",
                    )

                capture_statuses = order_setting("PAYMENT_CAPTURE_ORDER_STATUSES")
                if new_payment_status == Order.PAYMENT_PAID and order.status not in capture_statuses:
                    return service_err(
                        ErrorCodes.PAYMENT_NOT_CAPTURABLE,
                        f"Payment can only be marked paid when the order is {' or '.join(capture_statuses)}",
                    )

                update_fields = ["payment_status", "updated_at"]
                order.payment_status = new_payment_status
                if new_payment_status == Order.PAYMENT_PAID and order.paid_at is None:
                    order.paid_at = timezone.now()
                    update_fields.append("paid_at")
                order.save(update_fields=update_fields)

        except Exception as e:
            self.logger.error(f"Error changing payment status of order {order_ref}: {e}", exc_info=True)
            return internal_error("updating the payment status")

        payment_status_transitions_total.labels(from_status=previous_status, to_status=new_payment_status).inc()
        self.logger.info(
            f"Order {order.order_number} payment {previous_status} -> {new_payment_status} by seller {seller_id}"
        )

        dispatch_on_commit(
            self.notifier,
            PaymentStatusChangedEvent(
                order_id=str(order.id),
                order_number=order.order_number,
                from_status=previous_status,
                to_status=new_payment_status,
                actor_id=str(seller_id),
            ),
            [order.customer_id],
        )
        return self.get_seller_order(seller_id, order.pk)
