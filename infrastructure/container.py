"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure and domain service
dependencies. Services receive their collaborators through their constructors;
this container is the one place that decides which implementations are wired
together.

Usage:
    from infrastructure.container import container

    cart_service = container.cart_service()
    order_service = container.order_service()
"""

import logging
from typing import Optional

from .notifications import NotificationFactory, NotificationServiceInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure and domain dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._notifications: Optional[NotificationServiceInterface] = None

        # Domain Services
        self._catalog_gateway = None
        self._pricing_service = None
        self._inventory_service = None
        self._cart_service = None
        self._order_service = None
        self._fulfillment_service = None
        self._revenue_service = None

    def notifications(self, backend: Optional[str] = None) -> NotificationServiceInterface:
        """
        Get notification service instance.

        Args:
            backend: Notification backend type ('event_bus' or 'mock')
                    If None, uses configuration from settings

        Returns:
            NotificationServiceInterface implementation (cached)
        """
        if self._notifications is None or backend is not None:
            self._notifications = NotificationFactory.create(backend)
            logger.debug(f"Created notification service: {type(self._notifications).__name__}")

        return self._notifications

    def catalog_gateway(self):
        """Get CatalogGateway instance."""
        if self._catalog_gateway is None:
            from marketplace.catalog.domain.services import DjangoCatalogGateway

            self._catalog_gateway = DjangoCatalogGateway()
            logger.debug("Created DjangoCatalogGateway")
        return self._catalog_gateway

    def pricing_service(self):
        """Get PricingService instance."""
        if self._pricing_service is None:
            from marketplace.cart.domain.services import PricingService

            self._pricing_service = PricingService()
            logger.debug("Created PricingService")
        return self._pricing_service

    def inventory_service(self):
        """Get InventoryService instance."""
        if self._inventory_service is None:
            from marketplace.cart.domain.services import InventoryService

            self._inventory_service = InventoryService(catalog_gateway=self.catalog_gateway())
            logger.debug("Created InventoryService")
        return self._inventory_service

    def cart_service(self):
        """Get CartService instance."""
        if self._cart_service is None:
            from marketplace.cart.domain.services import CartService

            self._cart_service = CartService(
                catalog_gateway=self.catalog_gateway(), pricing_service=self.pricing_service()
            )
            logger.debug("Created CartService")
        return self._cart_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from marketplace.ordering.domain.services import OrderService

            self._order_service = OrderService(
                inventory_service=self.inventory_service(),
                cart_service=self.cart_service(),
                pricing_service=self.pricing_service(),
                notifier=self.notifications(),
            )
            logger.debug("Created OrderService")
        return self._order_service

    def fulfillment_service(self):
        """Get OrderFulfillmentService instance."""
        if self._fulfillment_service is None:
            from marketplace.ordering.domain.services import OrderFulfillmentService

            self._fulfillment_service = OrderFulfillmentService(
                inventory_service=self.inventory_service(), notifier=self.notifications()
            )
            logger.debug("Created OrderFulfillmentService")
        return self._fulfillment_service

    def revenue_service(self):
        """Get RevenueService instance."""
        if self._revenue_service is None:
            from marketplace.ordering.domain.services import RevenueService

            self._revenue_service = RevenueService()
            logger.debug("Created RevenueService")
        return self._revenue_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._clear()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()


# Convenience functions for quick access
def get_notifications() -> NotificationServiceInterface:
    """Get notification service from global container."""
    return container.notifications()
