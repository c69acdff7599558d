"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type),
the BaseService class for all marketplace services, and the error taxonomy
shared by services and views.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKinds:
    """Caller-facing error categories. Every error code belongs to exactly one."""

    INVALID_REQUEST = "InvalidRequest"
    NOT_FOUND = "NotFound"
    INSUFFICIENT_STOCK = "InsufficientStock"
    FORBIDDEN = "Forbidden"
    PRECONDITION_FAILED = "PreconditionFailed"
    INTERNAL = "Internal"


# Common error codes for marketplace services
class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Product errors
    PRODUCT_NOT_FOUND = "product_not_found"
    PRODUCT_INACTIVE = "product_inactive"

    # Cart errors
    CART_EMPTY = "cart_empty"
    INVALID_QUANTITY = "invalid_quantity"
    ITEM_NOT_IN_CART = "item_not_in_cart"
    OUT_OF_STOCK = "out_of_stock"

    # Order errors
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_ORDER_ITEMS = "invalid_order_items"
    INVALID_SHIPPING_ADDRESS = "invalid_shipping_address"
    INVALID_PAYMENT_METHOD = "invalid_payment_method"
    INVALID_STATUS = "invalid_status"
    CANCELLATION_REASON_REQUIRED = "cancellation_reason_required"
    INVALID_STATUS_TRANSITION = "invalid_status_transition"
    ORDER_CANNOT_CANCEL = "order_cannot_cancel"
    PAYMENT_REQUIRED = "payment_required"
    PAYMENT_NOT_CAPTURABLE = "payment_not_capturable"

    # Inventory errors
    INSUFFICIENT_STOCK = "insufficient_stock"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_PAGINATION = "invalid_pagination"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"

    # Internal errors
    INTERNAL_ERROR = "internal_error"


ERROR_KINDS: Dict[str, str] = {
    ErrorCodes.PRODUCT_NOT_FOUND: ErrorKinds.NOT_FOUND,
    ErrorCodes.PRODUCT_INACTIVE: ErrorKinds.NOT_FOUND,
    ErrorCodes.CART_EMPTY: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_QUANTITY: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.ITEM_NOT_IN_CART: ErrorKinds.NOT_FOUND,
    ErrorCodes.OUT_OF_STOCK: ErrorKinds.INSUFFICIENT_STOCK,
    ErrorCodes.ORDER_NOT_FOUND: ErrorKinds.NOT_FOUND,
    ErrorCodes.INVALID_ORDER_ITEMS: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_SHIPPING_ADDRESS: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_PAYMENT_METHOD: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_STATUS: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.CANCELLATION_REASON_REQUIRED: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_STATUS_TRANSITION: ErrorKinds.FORBIDDEN,
    ErrorCodes.ORDER_CANNOT_CANCEL: ErrorKinds.FORBIDDEN,
    ErrorCodes.PAYMENT_REQUIRED: ErrorKinds.PRECONDITION_FAILED,
    ErrorCodes.PAYMENT_NOT_CAPTURABLE: ErrorKinds.PRECONDITION_FAILED,
    ErrorCodes.INSUFFICIENT_STOCK: ErrorKinds.INSUFFICIENT_STOCK,
    ErrorCodes.VALIDATION_ERROR: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.INVALID_PAGINATION: ErrorKinds.INVALID_REQUEST,
    ErrorCodes.PERMISSION_DENIED: ErrorKinds.FORBIDDEN,
    ErrorCodes.INTERNAL_ERROR: ErrorKinds.INTERNAL,
}


def error_kind(code: Optional[str]) -> str:
    """Map an error code to its taxonomy kind; unknown codes are Internal."""
    return ERROR_KINDS.get(code, ErrorKinds.INTERNAL)


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Inspired by Rust's Result<T, E> type, this provides a clean way to handle
    service operation outcomes without exceptions for expected failures.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)

    Examples:
        >>> result = service_ok(order)
        >>> if not result.ok:
        ...     print(result.kind)  # "NotFound", "Forbidden", ...
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    @property
    def kind(self) -> Optional[str]:
        """Taxonomy kind of the error, None for successful results."""
        if self.ok:
            return None
        return error_kind(self.error)

    def to_dict(self) -> dict:
        """
        Convert to the API response envelope.

        Returns:
            ``{"success": True, "data": ...}`` or
            ``{"success": False, "message": ..., "error": {"kind": ..., "code": ...}}``
        """
        if self.ok:
            return {"success": True, "data": self.value}
        return {
            "success": False,
            "message": self.error_detail,
            "error": {"kind": self.kind, "code": self.error},
        }


def service_ok(value: T) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Args:
        value: The success value

    Returns:
        ServiceResult with ok=True and the value
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "product_not_found", "invalid_quantity")
        error_detail: Human-readable error message

    Returns:
        ServiceResult with ok=False and error information

    Example:
        >>> return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


def internal_error(action: str) -> ServiceResult:
    """Failed result for unexpected errors. The message never carries exception text."""
    return service_err(ErrorCodes.INTERNAL_ERROR, f"An unexpected error occurred while {action}")


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class CartService(BaseService):
            def __init__(self, catalog_gateway):
                super().__init__()
                self.catalog = catalog_gateway

            @BaseService.log_performance
            def get_cart(self, customer_id):
                self.logger.info(f"Loading cart for {customer_id}")
                # ... implementation
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and the error code of failed results.

        Example:
            @BaseService.log_performance
            def expensive_operation(self):
                # ... operation
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                # Log based on result type
                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


def paginate(queryset, page: int, page_size: int) -> Dict[str, Any]:
    """
    Slice a queryset into one page.

    Returns:
        Dict with results (list), count, page, page_size, num_pages,
        has_next and has_previous
    """
    offset = (page - 1) * page_size
    total_count = queryset.count()
    results = list(queryset[offset : offset + page_size])
    num_pages = (total_count + page_size - 1) // page_size

    return {
        "results": results,
        "count": total_count,
        "page": page,
        "page_size": page_size,
        "num_pages": num_pages,
        "has_next": page < num_pages,
        "has_previous": page > 1,
    }


def validate_page(page, page_size, max_page_size: int) -> Optional[ServiceResult]:
    """Error result for out-of-range pagination, None when the values are usable."""
    if not isinstance(page, int) or page < 1:
        return service_err(ErrorCodes.INVALID_PAGINATION, "Page must be a positive integer")
    if not isinstance(page_size, int) or not 1 <= page_size <= max_page_size:
        return service_err(ErrorCodes.INVALID_PAGINATION, f"Page size must be between 1 and {max_page_size}")
    return None
