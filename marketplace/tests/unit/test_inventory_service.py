from decimal import Decimal
from unittest.mock import Mock

import pytest

from marketplace.cart.domain.services.inventory_service import InventoryService
from marketplace.catalog.domain.services.catalog_gateway import CatalogGateway, ProductSnapshot
from marketplace.services.base import ErrorCodes


def snapshot(**overrides):
    values = {
        "id": "6f1c2f6e-3a0e-4b43-9d3c-2a54d9d4f001",
        "name": "Test Product",
        "price": Decimal("10.00"),
        "discount_price": None,
        "stock": 10,
        "seller_id": "6f1c2f6e-3a0e-4b43-9d3c-2a54d9d4f002",
        "is_active": True,
    }
    values.update(overrides)
    return ProductSnapshot(**values)


@pytest.mark.unit
class TestInventoryServiceUnit:
    def setup_method(self):
        self.gateway = Mock(spec=CatalogGateway)
        self.service = InventoryService(catalog_gateway=self.gateway)
        self.product_id = "6f1c2f6e-3a0e-4b43-9d3c-2a54d9d4f001"

    def test_reserve_stock_success(self):
        self.gateway.get.return_value = snapshot()
        self.gateway.decrement_stock.return_value = True

        result = self.service.reserve_stock(self.product_id, quantity=2)

        assert result.ok
        assert result.value.name == "Test Product"
        self.gateway.decrement_stock.assert_called_once_with(self.product_id, 2)

    def test_reserve_stock_insufficient(self):
        self.gateway.get.return_value = snapshot(stock=1)

        result = self.service.reserve_stock(self.product_id, quantity=2)

        assert not result.ok
        assert result.error == ErrorCodes.INSUFFICIENT_STOCK
        self.gateway.decrement_stock.assert_not_called()

    def test_reserve_stock_lost_race(self):
        # The read saw enough stock but the conditional update matched no row
        self.gateway.get.return_value = snapshot(stock=1)
        self.gateway.decrement_stock.return_value = False

        result = self.service.reserve_stock(self.product_id, quantity=1)

        assert not result.ok
        assert result.error == ErrorCodes.INSUFFICIENT_STOCK

    def test_reserve_stock_product_not_found(self):
        self.gateway.get.return_value = None

        result = self.service.reserve_stock(self.product_id, quantity=1)

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_reserve_stock_inactive_product(self):
        self.gateway.get.return_value = snapshot(is_active=False)

        result = self.service.reserve_stock(self.product_id, quantity=1)

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_INACTIVE
        self.gateway.decrement_stock.assert_not_called()

    def test_reserve_stock_invalid_quantity(self):
        result = self.service.reserve_stock(self.product_id, quantity=0)

        assert not result.ok
        assert result.error == ErrorCodes.INVALID_QUANTITY
        self.gateway.get.assert_not_called()

    def test_reserve_stock_gateway_error(self):
        self.gateway.get.side_effect = RuntimeError("database is gone")

        result = self.service.reserve_stock(self.product_id, quantity=1)

        assert not result.ok
        assert result.error == ErrorCodes.INTERNAL_ERROR
        assert "database" not in result.error_detail

    def test_release_stock_success(self):
        self.gateway.increment_stock.return_value = True

        result = self.service.release_stock(self.product_id, quantity=3, reason="test")

        assert result.ok
        assert result.value == 3
        self.gateway.increment_stock.assert_called_once_with(self.product_id, 3)

    def test_release_stock_missing_product(self):
        self.gateway.increment_stock.return_value = False

        result = self.service.release_stock(self.product_id, quantity=3)

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_release_order_items_skips_restocked(self):
        self.gateway.increment_stock.return_value = True
        fresh = Mock(product_id="p1", quantity=2, restocked_at=None)
        done = Mock(product_id="p2", quantity=5, restocked_at="2024-01-01")

        result = self.service.release_order_items([fresh, done], reason="test")

        assert result.ok
        assert result.value == [fresh]
        assert fresh.restocked_at is not None
        fresh.save.assert_called_once_with(update_fields=["restocked_at"])
        done.save.assert_not_called()
        self.gateway.increment_stock.assert_called_once_with("p1", 2)

    def test_release_order_items_stops_on_failure(self):
        self.gateway.increment_stock.return_value = False
        item = Mock(product_id="p1", quantity=2, restocked_at=None)

        result = self.service.release_order_items([item], reason="test")

        assert not result.ok
        item.save.assert_not_called()
