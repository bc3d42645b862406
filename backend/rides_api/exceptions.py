import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.errors import DispatchError, NoDriverAvailable, NotFound

logger = logging.getLogger(__name__)


def status_for(exc: DispatchError) -> int:
    # No matching driver is reported as "not found", the rest are client errors.
    if isinstance(exc, (NotFound, NoDriverAvailable)):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


def dispatch_exception_handler(exc, context):
    """
    Turns dispatch-core errors into {"error": code, "message": text} responses
    and gives DRF's own validation errors the same shape.
    """
    if isinstance(exc, DispatchError):
        view = context.get("view")
        logger.warning("%s rejected: %s (%s)", type(view).__name__ if view else "request", exc.message, exc.code)
        return Response({"error": exc.code, "message": exc.message}, status=status_for(exc))

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, exceptions.ValidationError):
        response.data = {
            "error": "validation_error",
            "message": "Missing or invalid fields",
            "fields": response.data,
        }
    return response
