import pytest
from rest_framework import status

from marketplace.api.responses import error_response, success_response, validation_error_response
from marketplace.services.base import (
    ErrorCodes,
    ErrorKinds,
    error_kind,
    internal_error,
    service_err,
    service_ok,
    validate_page,
)


@pytest.mark.unit
class TestServiceResult:
    def test_ok_result(self):
        result = service_ok({"id": 1})

        assert result.ok
        assert result.kind is None
        assert result.to_dict() == {"success": True, "data": {"id": 1}}

    def test_error_result_envelope(self):
        result = service_err(ErrorCodes.ORDER_NOT_FOUND, "Order X not found")

        assert not result.ok
        assert result.kind == ErrorKinds.NOT_FOUND
        assert result.to_dict() == {
            "success": False,
            "message": "Order X not found",
            "error": {"kind": "NotFound", "code": "order_not_found"},
        }

    def test_detail_defaults_to_code(self):
        assert service_err(ErrorCodes.CART_EMPTY).error_detail == ErrorCodes.CART_EMPTY

    def test_internal_error_hides_exception_text(self):
        result = internal_error("creating the order")

        assert result.kind == ErrorKinds.INTERNAL
        assert result.error_detail == "An unexpected error occurred while creating the order"

    @pytest.mark.parametrize(
        "code,kind",
        [
            (ErrorCodes.OUT_OF_STOCK, ErrorKinds.INSUFFICIENT_STOCK),
            (ErrorCodes.INSUFFICIENT_STOCK, ErrorKinds.INSUFFICIENT_STOCK),
            (ErrorCodes.PRODUCT_INACTIVE, ErrorKinds.NOT_FOUND),
            (ErrorCodes.INVALID_STATUS_TRANSITION, ErrorKinds.FORBIDDEN),
            (ErrorCodes.ORDER_CANNOT_CANCEL, ErrorKinds.FORBIDDEN),
            (ErrorCodes.PAYMENT_REQUIRED, ErrorKinds.PRECONDITION_FAILED),
            (ErrorCodes.INVALID_SHIPPING_ADDRESS, ErrorKinds.INVALID_REQUEST),
            ("something_new", ErrorKinds.INTERNAL),
        ],
    )
    def test_error_kinds(self, code, kind):
        assert error_kind(code) == kind


@pytest.mark.unit
class TestValidatePage:
    def test_valid(self):
        assert validate_page(1, 10, 100) is None

    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (1, 101), ("1", 10)])
    def test_invalid(self, page, page_size):
        result = validate_page(page, page_size, 100)

        assert result is not None
        assert result.error == ErrorCodes.INVALID_PAGINATION


@pytest.mark.unit
class TestResponses:
    @pytest.mark.parametrize(
        "code,http_status",
        [
            (ErrorCodes.VALIDATION_ERROR, status.HTTP_400_BAD_REQUEST),
            (ErrorCodes.INVALID_STATUS_TRANSITION, status.HTTP_403_FORBIDDEN),
            (ErrorCodes.ORDER_NOT_FOUND, status.HTTP_404_NOT_FOUND),
            (ErrorCodes.INSUFFICIENT_STOCK, status.HTTP_409_CONFLICT),
            (ErrorCodes.PAYMENT_REQUIRED, status.HTTP_412_PRECONDITION_FAILED),
            (ErrorCodes.INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR),
        ],
    )
    def test_error_status_by_kind(self, code, http_status):
        response = error_response(service_err(code, "failed"))

        assert response.status_code == http_status
        assert response.data["success"] is False
        assert response.data["error"]["code"] == code

    def test_success_response(self):
        response = success_response({"a": 1}, http_status=status.HTTP_201_CREATED)

        assert response.status_code == 201
        assert response.data == {"success": True, "data": {"a": 1}}

    def test_validation_error_response_carries_field_errors(self):
        response = validation_error_response({"quantity": ["Ensure this value is greater than or equal to 1."]})

        assert response.status_code == 400
        assert response.data["error"] == {"kind": "InvalidRequest", "code": "validation_error"}
        assert "quantity" in response.data["errors"]
