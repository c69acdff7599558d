"""
RevenueService - Seller Statistics

Per-seller revenue and order figures. An order counts as the seller's order
when it holds at least one of the seller's items; revenue counts only the
seller's own item subtotals, and only for orders that are delivered and paid.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Optional

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.utils import timezone

from marketplace.cart.domain.services.pricing_service import money
from marketplace.catalog.domain.models.catalog import Product
from marketplace.conf import order_setting
from marketplace.ordering.domain.models.order import Order, OrderItem
from marketplace.services.base import BaseService, ServiceResult, internal_error, service_ok

logger = logging.getLogger(__name__)

LINE_TOTAL = ExpressionWrapper(F("price") * F("quantity"), output_field=DecimalField(max_digits=14, decimal_places=2))


class RevenueService(BaseService):
    """
    Service for seller dashboards.

    ``total_revenue`` and ``order_status_counts`` are plain values so other
    services can reuse them; ``seller_stats`` and ``order_summary`` wrap them
    in ServiceResults for the API.
    """

    def total_revenue(self, seller_id, since: Optional[datetime] = None) -> Decimal:
        """Sum of price x quantity of the seller's items in delivered, paid orders."""
        items = OrderItem.objects.filter(
            seller_id=seller_id,
            order__status=Order.STATUS_DELIVERED,
            order__payment_status=Order.PAYMENT_PAID,
        )
        if since is not None:
            items = items.filter(order__created_at__gte=since)

        total = items.aggregate(total=Sum(LINE_TOTAL))["total"]
        return money(total or 0)

    def order_status_counts(self, seller_id, since: Optional[datetime] = None) -> Dict[str, int]:
        """Number of the seller's orders per status, every status present."""
        orders = Order.objects.filter(items__seller_id=seller_id)
        if since is not None:
            orders = orders.filter(created_at__gte=since)

        counts = {status: 0 for status, _ in Order.STATUS_CHOICES}
        rows = orders.order_by().values("status").annotate(count=Count("id", distinct=True))
        for row in rows:
            counts[row["status"]] = row["count"]
        return counts

    @BaseService.log_performance
    def order_summary(self, seller_id) -> ServiceResult[Dict]:
        """Status counts and all-time revenue, shown next to the seller's order list."""
        try:
            counts = self.order_status_counts(seller_id)
            return service_ok(
                {
                    "total_orders": sum(counts.values()),
                    "by_status": counts,
                    "total_revenue": self.total_revenue(seller_id),
                }
            )
        except Exception as e:
            self.logger.error(f"Error summarising orders of seller {seller_id}: {e}", exc_info=True)
            return internal_error("summarising seller orders")

    @BaseService.log_performance
    def seller_stats(self, seller_id, now: Optional[datetime] = None) -> ServiceResult[Dict]:
        """
        Dashboard figures for one seller.

        Args:
            seller_id: Seller whose figures to compute
            now: Reference time for the trailing windows (defaults to now)

        Returns:
            ServiceResult with products, orders, revenue, window,
            recent_orders and low_stock_products blocks
        """
        try:
            now = now or timezone.now()
            window_days = order_setting("STATS_WINDOW_DAYS")
            window_start = now - timedelta(days=window_days)
            threshold = order_setting("LOW_STOCK_THRESHOLD")

            products = Product.objects.filter(seller_id=seller_id)
            product_counts = products.aggregate(
                total=Count("id"),
                active=Count("id", filter=Q(is_active=True)),
                low_stock=Count("id", filter=Q(is_active=True, stock_quantity__lt=threshold)),
            )

            all_time = self.order_status_counts(seller_id)
            windowed = self.order_status_counts(seller_id, since=window_start)

            recent_orders = list(
                Order.objects.for_seller(seller_id)
                .filter(created_at__gte=now - timedelta(days=order_setting("RECENT_ORDERS_DAYS")))
                .order_by("-created_at")[: order_setting("RECENT_ORDERS_LIMIT")]
            )

            low_stock_products = list(
                products.filter(is_active=True, stock_quantity__lt=threshold)
                .order_by("stock_quantity", "name")
                .values("id", "name", "stock_quantity")[: order_setting("LOW_STOCK_LIMIT")]
            )

            return service_ok(
                {
                    "products": product_counts,
                    "orders": {"total": sum(all_time.values()), "by_status": all_time},
                    "revenue": {
                        "total": self.total_revenue(seller_id),
                        "window": self.total_revenue(seller_id, since=window_start),
                        "window_days": window_days,
                    },
                    "window": {
                        "days": window_days,
                        "pending": windowed[Order.STATUS_PENDING],
                        "processing": windowed[Order.STATUS_PROCESSING],
                        "completed": windowed[Order.STATUS_DELIVERED],
                    },
                    "recent_orders": recent_orders,
                    "low_stock_products": low_stock_products,
                }
            )

        except Exception as e:
            self.logger.error(f"Error computing stats for seller {seller_id}: {e}", exc_info=True)
            return internal_error("computing seller statistics")
