from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler

from marketplace.services.base import ErrorCodes, ErrorKinds


def _kind_for_status(status_code: int) -> str:
    if status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        return ErrorKinds.FORBIDDEN
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorKinds.NOT_FOUND
    if status_code >= 500:
        return ErrorKinds.INTERNAL
    return ErrorKinds.INVALID_REQUEST


def envelope_exception_handler(exc, context):
    """
    DRF exception handler that wraps framework errors (authentication,
    permissions, unknown routes, malformed bodies) in the marketplace envelope.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            "success": False,
            "message": "Invalid request data",
            "error": {"kind": ErrorKinds.INVALID_REQUEST, "code": ErrorCodes.VALIDATION_ERROR},
            "errors": response.data,
        }
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    response.data = {
        "success": False,
        "message": str(detail) if detail else "Request failed",
        "error": {
            "kind": _kind_for_status(response.status_code),
            "code": getattr(exc, "default_code", ErrorCodes.INTERNAL_ERROR),
        },
    }
    return response
