"""
Marketplace Service Layer

Shared primitives for the marketplace domain services: the ServiceResult
pattern, the error taxonomy, the BaseService class and pagination helpers.

The services themselves live with their bounded context:

- marketplace.catalog.domain.services: CatalogGateway, DjangoCatalogGateway
- marketplace.cart.domain.services: CartService, InventoryService, PricingService
- marketplace.ordering.domain.services: OrderService, OrderFulfillmentService, RevenueService

and are wired together by ``infrastructure.container``.

Usage:
    from infrastructure.container import container

    result = container.cart_service().add_item(principal.id, product_id, quantity=2)

    if result.ok:
        cart = result.value
    else:
        kind = result.kind
"""

from .base import (
    BaseService,
    ErrorCodes,
    ErrorKinds,
    ServiceResult,
    error_kind,
    internal_error,
    paginate,
    service_err,
    service_ok,
    validate_page,
)

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    "internal_error",
    "paginate",
    "validate_page",
    # Error taxonomy
    "ErrorCodes",
    "ErrorKinds",
    "error_kind",
]
