"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from django.test import TestCase

from infrastructure.container import ServiceContainer, container, get_notifications
from infrastructure.notifications import (
    EventBusNotificationService,
    MockNotificationService,
    NotificationServiceInterface,
)
from marketplace.cart.domain.services import CartService, InventoryService, PricingService
from marketplace.catalog.domain.services import DjangoCatalogGateway
from marketplace.ordering.domain.services import OrderFulfillmentService, OrderService, RevenueService


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        """Set up test fixtures."""
        # Reset container before each test
        container.reset()

    def test_container_is_singleton(self):
        """Test that ServiceContainer is a singleton."""
        container1 = ServiceContainer()
        container2 = ServiceContainer()

        self.assertIs(container1, container2)
        self.assertIs(container1, container)

    def test_get_notification_service(self):
        """Tests run with the mock notification backend."""
        notifications = container.notifications()

        self.assertIsInstance(notifications, NotificationServiceInterface)
        self.assertIsInstance(notifications, MockNotificationService)

        # Second call should return cached instance
        self.assertIs(notifications, container.notifications())

    def test_notifications_with_explicit_backend(self):
        """Test getting notifications with explicit backend."""
        notifications = container.notifications("event_bus")
        self.assertIsInstance(notifications, EventBusNotificationService)

    def test_domain_services_are_wired(self):
        """Services share the gateway, pricing and notifier held by the container."""
        order_service = container.order_service()
        fulfillment_service = container.fulfillment_service()

        self.assertIsInstance(order_service, OrderService)
        self.assertIsInstance(fulfillment_service, OrderFulfillmentService)
        self.assertIsInstance(container.catalog_gateway(), DjangoCatalogGateway)
        self.assertIsInstance(container.revenue_service(), RevenueService)

        self.assertIsInstance(order_service.inventory_service, InventoryService)
        self.assertIsInstance(order_service.cart_service, CartService)
        self.assertIsInstance(order_service.pricing_service, PricingService)
        self.assertIs(order_service.inventory_service, fulfillment_service.inventory_service)
        self.assertIs(order_service.cart_service, container.cart_service())
        self.assertIs(order_service.pricing_service, container.pricing_service())
        self.assertIs(order_service.notifier, container.notifications())
        self.assertIs(container.cart_service().catalog, container.catalog_gateway())

    def test_reset_container(self):
        """Test resetting container clears cached instances."""
        order_service1 = container.order_service()
        notifications1 = container.notifications()

        # Reset container
        container.reset()

        # Should be different instances
        self.assertIsNot(order_service1, container.order_service())
        self.assertIsNot(notifications1, container.notifications())


class ConvenienceFunctionsTest(TestCase):
    """Test convenience functions for service access."""

    def setUp(self):
        """Set up test fixtures."""
        container.reset()

    def test_get_notifications_function(self):
        """Test get_notifications convenience function."""
        notifications = get_notifications()

        self.assertIsInstance(notifications, MockNotificationService)
        self.assertIs(notifications, container.notifications())
