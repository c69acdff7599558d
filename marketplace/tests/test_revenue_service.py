from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from marketplace.models import Order
from marketplace.ordering.domain.services import RevenueService
from marketplace.tests.factories import OrderFactory, OrderItemFactory, ProductFactory, SellerFactory


class RevenueServiceTest(TestCase):
    def setUp(self):
        self.seller = SellerFactory()
        self.other_seller = SellerFactory()
        self.product = ProductFactory(seller=self.seller, price=Decimal("10.00"), stock_quantity=50)
        self.other_product = ProductFactory(seller=self.other_seller, price=Decimal("99.00"), stock_quantity=50)
        self.service = RevenueService()

    def make_order(self, status, payment_status, quantity=1, price=Decimal("10.00"), with_other=False):
        order = OrderFactory(status=status, payment_status=payment_status)
        OrderItemFactory(order=order, product=self.product, quantity=quantity, price=price)
        if with_other:
            OrderItemFactory(order=order, product=self.other_product, quantity=1, price=Decimal("99.00"))
        return order

    def test_revenue_counts_delivered_and_paid_only(self):
        self.make_order("delivered", "paid", quantity=2)
        self.make_order("delivered", "pending", quantity=5)
        self.make_order("shipped", "paid", quantity=7)
        self.make_order("cancelled", "failed", quantity=3)

        self.assertEqual(self.service.total_revenue(self.seller.id), Decimal("20.00"))

    def test_revenue_counts_only_seller_items(self):
        self.make_order("delivered", "paid", quantity=3, with_other=True)

        self.assertEqual(self.service.total_revenue(self.seller.id), Decimal("30.00"))
        self.assertEqual(self.service.total_revenue(self.other_seller.id), Decimal("99.00"))

    def test_revenue_uses_frozen_item_price(self):
        self.make_order("delivered", "paid", quantity=1, price=Decimal("7.25"))
        self.product.price = Decimal("100.00")
        self.product.save()

        self.assertEqual(self.service.total_revenue(self.seller.id), Decimal("7.25"))

    def test_revenue_without_orders(self):
        self.assertEqual(self.service.total_revenue(self.seller.id), Decimal("0.00"))

    def test_revenue_since(self):
        old = self.make_order("delivered", "paid", quantity=4)
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=60))
        self.make_order("delivered", "paid", quantity=1)

        since = timezone.now() - timedelta(days=30)
        self.assertEqual(self.service.total_revenue(self.seller.id, since=since), Decimal("10.00"))
        self.assertEqual(self.service.total_revenue(self.seller.id), Decimal("50.00"))

    def test_status_counts_include_every_status(self):
        self.make_order("pending", "pending")
        self.make_order("pending", "pending")
        self.make_order("delivered", "paid")

        counts = self.service.order_status_counts(self.seller.id)

        self.assertEqual(
            counts, {"pending": 2, "processing": 0, "shipped": 0, "delivered": 1, "cancelled": 0}
        )

    def test_status_counts_count_orders_not_items(self):
        order = self.make_order("processing", "pending")
        OrderItemFactory(order=order, product=ProductFactory(seller=self.seller))

        self.assertEqual(self.service.order_status_counts(self.seller.id)["processing"], 1)

    def test_order_summary(self):
        self.make_order("delivered", "paid", quantity=2)
        self.make_order("pending", "pending")

        result = self.service.order_summary(self.seller.id)

        self.assertTrue(result.ok)
        self.assertEqual(result.value["total_orders"], 2)
        self.assertEqual(result.value["by_status"]["pending"], 1)
        self.assertEqual(result.value["total_revenue"], Decimal("20.00"))


class SellerStatsTest(TestCase):
    def setUp(self):
        self.seller = SellerFactory()
        self.service = RevenueService()
        self.product = ProductFactory(seller=self.seller, name="Plenty", stock_quantity=50)
        self.low = ProductFactory(seller=self.seller, name="Scarce", stock_quantity=2)
        self.lower = ProductFactory(seller=self.seller, name="Almost gone", stock_quantity=1)
        ProductFactory(seller=self.seller, stock_quantity=0, is_active=False)
        ProductFactory(stock_quantity=1)

    def add_order(self, status, payment_status, days_ago=0, quantity=1):
        order = OrderFactory(status=status, payment_status=payment_status)
        OrderItemFactory(order=order, product=self.product, quantity=quantity, price=Decimal("10.00"))
        if days_ago:
            Order.objects.filter(pk=order.pk).update(created_at=timezone.now() - timedelta(days=days_ago))
        return order

    def test_product_counts(self):
        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual(stats["products"], {"total": 4, "active": 3, "low_stock": 2})

    def test_low_stock_products_lowest_first(self):
        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual([p["name"] for p in stats["low_stock_products"]], ["Almost gone", "Scarce"])
        self.assertEqual(stats["low_stock_products"][0]["stock_quantity"], 1)

    @override_settings(MARKETPLACE_ORDERS={"LOW_STOCK_THRESHOLD": 2})
    def test_low_stock_threshold_follows_settings(self):
        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual(stats["products"]["low_stock"], 1)

    def test_order_counts_and_window(self):
        self.add_order("pending", "pending")
        self.add_order("processing", "pending")
        self.add_order("delivered", "paid", quantity=3)
        self.add_order("delivered", "paid", days_ago=45, quantity=2)

        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual(stats["orders"]["total"], 4)
        self.assertEqual(stats["orders"]["by_status"]["delivered"], 2)
        self.assertEqual(stats["window"], {"days": 30, "pending": 1, "processing": 1, "completed": 1})
        self.assertEqual(stats["revenue"]["total"], Decimal("50.00"))
        self.assertEqual(stats["revenue"]["window"], Decimal("30.00"))
        self.assertEqual(stats["revenue"]["window_days"], 30)

    def test_recent_orders(self):
        recent = self.add_order("pending", "pending", days_ago=1)
        self.add_order("pending", "pending", days_ago=10)

        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual([o.pk for o in stats["recent_orders"]], [recent.pk])
        self.assertEqual(len(stats["recent_orders"][0].seller_items), 1)

    @override_settings(MARKETPLACE_ORDERS={"RECENT_ORDERS_LIMIT": 2})
    def test_recent_orders_limit(self):
        for _ in range(3):
            self.add_order("pending", "pending")

        stats = self.service.seller_stats(self.seller.id).value

        self.assertEqual(len(stats["recent_orders"]), 2)

    def test_stats_for_new_seller(self):
        stats = self.service.seller_stats(SellerFactory().id).value

        self.assertEqual(stats["products"], {"total": 0, "active": 0, "low_stock": 0})
        self.assertEqual(stats["orders"]["total"], 0)
        self.assertEqual(stats["revenue"]["total"], Decimal("0.00"))
        self.assertEqual(stats["recent_orders"], [])
        self.assertEqual(stats["low_stock_products"], [])
