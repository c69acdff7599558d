from decimal import Decimal

from django.test import TestCase

from authentication.principal import Principal
from infrastructure.notifications import MockNotificationService
from marketplace.cart.domain.services import CartService, InventoryService, PricingService
from marketplace.catalog.domain.services import DjangoCatalogGateway
from marketplace.models import Order
from marketplace.ordering.domain.services import OrderFulfillmentService, OrderService, RevenueService
from marketplace.tests.factories import ProductFactory, SellerFactory, UserFactory, shipping_address


class CheckoutFlowTest(TestCase):
    """Cart to delivered order across two sellers, through the services wired as in production."""

    def setUp(self):
        gateway = DjangoCatalogGateway()
        pricing = PricingService()
        inventory = InventoryService(catalog_gateway=gateway)
        self.notifier = MockNotificationService()

        self.cart_service = CartService(catalog_gateway=gateway, pricing_service=pricing)
        self.order_service = OrderService(
            inventory_service=inventory, cart_service=self.cart_service, pricing_service=pricing, notifier=self.notifier
        )
        self.fulfillment = OrderFulfillmentService(inventory_service=inventory, notifier=self.notifier)
        self.revenue = RevenueService()

        self.customer = UserFactory()
        self.principal = Principal.from_user(self.customer)
        self.seller_a = SellerFactory()
        self.seller_b = SellerFactory()
        self.lamp = ProductFactory(seller=self.seller_a, price=Decimal("12.50"), stock_quantity=6)
        self.rug = ProductFactory(seller=self.seller_b, price=Decimal("45.00"), stock_quantity=2)

    def checkout(self):
        self.cart_service.add_item(self.customer.id, self.lamp.id, 2)
        self.cart_service.add_item(self.customer.id, self.rug.id, 1)
        result = self.order_service.checkout_cart(self.principal, shipping_address())
        self.assertTrue(result.ok, result.error)
        return result.value

    def test_two_sellers_one_order(self):
        order = self.checkout()

        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(order.total_amount, Decimal("70.00"))

        view_a = self.fulfillment.get_seller_order(self.seller_a.id, order.id).value
        view_b = self.fulfillment.get_seller_order(self.seller_b.id, order.id).value

        self.assertEqual([item.product_id for item in view_a.seller_items], [self.lamp.id])
        self.assertEqual(view_a.seller_subtotal, Decimal("25.00"))
        self.assertEqual([item.product_id for item in view_b.seller_items], [self.rug.id])
        self.assertEqual(view_b.seller_subtotal, Decimal("45.00"))

    def test_lifecycle_to_revenue(self):
        order = self.checkout()

        for status in ("processing", "shipped"):
            self.assertTrue(self.fulfillment.transition(self.seller_a.id, order.id, status).ok)
        self.assertTrue(self.fulfillment.update_payment_status(self.seller_b.id, order.id, "paid").ok)
        delivered = self.fulfillment.transition(self.seller_b.id, order.id, "delivered")

        self.assertTrue(delivered.ok)
        self.assertEqual(self.revenue.total_revenue(self.seller_a.id), Decimal("25.00"))
        self.assertEqual(self.revenue.total_revenue(self.seller_b.id), Decimal("45.00"))

    def test_create_then_cancel_restores_stock(self):
        order = self.checkout()
        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.stock_quantity, 4)

        result = self.order_service.cancel_order(self.principal, order.order_number, reason="customer request")

        self.assertTrue(result.ok)
        self.lamp.refresh_from_db()
        self.rug.refresh_from_db()
        self.assertEqual(self.lamp.stock_quantity, 6)
        self.assertEqual(self.rug.stock_quantity, 2)
        self.assertEqual(self.revenue.order_status_counts(self.seller_a.id)["cancelled"], 1)

    def test_sold_out_product_cannot_be_added_again(self):
        self.checkout()

        result = self.cart_service.add_item(self.customer.id, self.rug.id, 2)

        self.assertEqual(result.error, "out_of_stock")
