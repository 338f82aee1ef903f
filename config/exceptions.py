"""
API-wide exception handling.

Service-layer errors are translated inside each view. This handler only
covers failures that can surface from any endpoint, chiefly the database
becoming unreachable mid-request.
"""

import logging

from django.db import InterfaceError, OperationalError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class StorageUnavailable(APIException):
    """The ledger store could not be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is temporarily unavailable. Please retry the request.'
    default_code = 'storage_unavailable'


def api_exception_handler(exc, context):
    """DRF exception handler that maps storage outages to 503 responses."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        view = context.get('view')
        logger.error(
            "Storage unavailable while handling %s: %s",
            view.__class__.__name__ if view else 'request',
            exc,
        )
        exc = StorageUnavailable()

    response = exception_handler(exc, context)
    if isinstance(exc, StorageUnavailable) and response is not None:
        response.data = {'error': str(exc.detail)}
    return response
