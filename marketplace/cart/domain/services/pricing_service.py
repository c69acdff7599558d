"""
PricingService - Price Calculations

Handles order and cart totals: line subtotals, shipping, tax and the final
amount. All calculations use Decimal for precision (no floating point errors).
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Tuple

from marketplace.conf import order_setting
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Quantize to two places, rounding half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingService(BaseService):
    """
    Service for calculating totals.

    Used by both the cart view and order creation so a cart shows exactly the
    amounts its checkout will be charged. Thresholds and rates come from
    ``MARKETPLACE_ORDERS`` at call time.

    All methods are stateless (pure functions) for easy testing.
    """

    def line_subtotal(self, price: Decimal, quantity: int) -> Decimal:
        return money(Decimal(str(price)) * quantity)

    def sum_lines(self, lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
        """Sum of ``price * quantity`` over (price, quantity) pairs."""
        total = Decimal("0")
        for price, quantity in lines:
            total += self.line_subtotal(price, quantity)
        return money(total)

    def shipping_charge(self, total_amount: Decimal) -> Decimal:
        """Free at or above the threshold, flat charge below it."""
        if total_amount >= order_setting("FREE_SHIPPING_THRESHOLD"):
            return money(0)
        return money(order_setting("FLAT_SHIPPING_CHARGE"))

    def tax_amount(self, total_amount: Decimal) -> Decimal:
        return money(Decimal(str(total_amount)) * Decimal(str(order_setting("TAX_RATE"))))

    @BaseService.log_performance
    def calculate_order_totals(
        self, total_amount: Decimal, discount_amount: Decimal = Decimal("0")
    ) -> ServiceResult[Dict[str, Decimal]]:
        """
        Calculate the monetary breakdown of an order.

        Args:
            total_amount: Sum of the line subtotals
            discount_amount: Discount to subtract (never negative)

        Returns:
            ServiceResult with total_amount, shipping_charge, tax_amount,
            discount_amount and final_amount

        Example:
            >>> result = pricing_service.calculate_order_totals(Decimal("40.00"))
            >>> result.value["final_amount"]
            Decimal('54.00')
        """
        try:
            total_amount = money(total_amount)
            discount_amount = money(discount_amount)

            if total_amount < 0:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Total amount cannot be negative")
            if discount_amount < 0:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Discount amount cannot be negative")

            shipping = self.shipping_charge(total_amount)
            tax = self.tax_amount(total_amount)
            final_amount = money(total_amount + shipping + tax - discount_amount)

            return service_ok(
                {
                    "total_amount": total_amount,
                    "shipping_charge": shipping,
                    "tax_amount": tax,
                    "discount_amount": discount_amount,
                    "final_amount": final_amount,
                }
            )

        except Exception as e:
            self.logger.error(f"Error calculating order totals for {total_amount}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, "An unexpected error occurred while calculating totals")
