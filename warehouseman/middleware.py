"""
Error handling middleware — translates exceptions into JSON responses.

Add to MIDDLEWARE in front of the API views:
    'warehouseman.middleware.ErrorHandlingMiddleware'

WarehouseError  -> {"type": "WarehouseError", "code", "message", "data"}
anything else   -> {"type": "Exception", "id", "data": {"message": ...}}, 500
"""

import logging
import uuid

from django.core.exceptions import BadRequest, PermissionDenied, SuspiciousOperation
from django.http import Http404, JsonResponse

from warehouseman.conf import warehouseman_settings
from warehouseman.exceptions import WarehouseError


# Django turns these into 4xx responses itself
PASSTHROUGH = (Http404, PermissionDenied, SuspiciousOperation, BadRequest)


# Codes not listed answer 400
STATUS_BY_CODE = {
    'NOT_FOUND': 404,
    'ITEM_NOT_FOUND': 404,
    'DUPLICATE_NUMBER': 409,
    'DUPLICATE_NAME': 409,
    'IN_USE': 409,
    'SIGNED_DOCUMENT_IMMUTABLE': 409,
    'REVOKED_DOCUMENT_IMMUTABLE': 409,
    'INVALID_TRANSITION': 409,
    'NESTED_TRANSACTION': 409,
    'INSUFFICIENT_STOCK': 422,
    'BALANCE_NOT_FOUND': 422,
}


class ErrorHandlingMiddleware:
    """Last line between the services and the HTTP client."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger(warehouseman_settings.LOGGER_NAME)

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, PASSTHROUGH):
            return None

        if isinstance(exception, WarehouseError):
            status = STATUS_BY_CODE.get(exception.code, 400)
            self.logger.info(
                "request.rejected",
                extra={"path": request.path, "code": exception.code, "status": status},
            )
            return JsonResponse(
                {'type': 'WarehouseError', **exception.as_dict()},
                status=status,
            )

        event_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex
        self.logger.exception(
            "request.failed",
            extra={"path": request.path, "event_id": event_id},
        )
        return JsonResponse(
            {
                'type': 'Exception',
                'id': event_id,
                'data': {'message': f"Internal server error ID = {event_id}"},
            },
            status=500,
        )
