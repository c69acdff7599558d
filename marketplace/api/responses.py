"""
Response envelope helpers shared by every marketplace view.

Success: ``{"success": true, "data": ...}``
Failure: ``{"success": false, "message": ..., "error": {"kind": ..., "code": ...}}``
"""

from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ErrorKinds, ServiceResult

HTTP_STATUS_BY_KIND = {
    ErrorKinds.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKinds.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKinds.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKinds.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
    ErrorKinds.PRECONDITION_FAILED: status.HTTP_412_PRECONDITION_FAILED,
    ErrorKinds.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def success_response(data, http_status: int = status.HTTP_200_OK) -> Response:
    return Response({"success": True, "data": data}, status=http_status)


def error_response(result: ServiceResult) -> Response:
    """Failed service result as an envelope with the HTTP status of its kind."""
    http_status = HTTP_STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_dict(), status=http_status)


def validation_error_response(errors) -> Response:
    """Request serializer errors, reported as InvalidRequest with the field errors attached."""
    return Response(
        {
            "success": False,
            "message": "Invalid request data",
            "error": {"kind": ErrorKinds.INVALID_REQUEST, "code": ErrorCodes.VALIDATION_ERROR},
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )
