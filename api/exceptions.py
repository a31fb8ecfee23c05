# api/exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from matching.exceptions import (
    Conflict,
    Forbidden,
    InvalidTransition,
    MatchingError,
    MatchValidationError,
    NotFound,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    MatchValidationError: status.HTTP_400_BAD_REQUEST,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
}


def matching_exception_handler(exc, context):
    """
    DRF exception handler: matching errors become {"error", "code"} bodies
    with their status code, everything else goes through DRF's default.
    """
    if not isinstance(exc, MatchingError):
        return exception_handler(exc, context)

    status_code = STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = {'error': str(exc), 'code': exc.code}
    if isinstance(exc, InvalidTransition):
        body['current_status'] = exc.current
        body['requested_status'] = exc.requested

    view = context.get('view')
    logger.warning(f"{type(exc).__name__} in {type(view).__name__ if view else 'view'}: {exc}")
    return Response(body, status=status_code)
