"""
JSON API decorators.

json_engine_errors translates the booking engine's exception hierarchy into
HTTP statuses; views raise freely and never build error responses by hand.
The auth decorators answer 401/403 in JSON instead of redirecting.
"""
import json
import logging
from functools import wraps

from django.http import JsonResponse

from apps.availability.exceptions import (
    BookingEngineError,
    InvalidRequestError,
    LedgerError,
    NotFoundError,
    SlotConflictError,
)

logger = logging.getLogger(__name__)

ERROR_STATUSES = (
    (InvalidRequestError, 400),
    (NotFoundError, 404),
    (SlotConflictError, 409),
    (LedgerError, 503),
)


def error_response(message: str, status: int) -> JsonResponse:
    return JsonResponse({'success': False, 'error': message}, status=status)


def status_for(exc: BookingEngineError) -> int:
    for exc_type, status in ERROR_STATUSES:
        if isinstance(exc, exc_type):
            return status
    return 500


def json_engine_errors(view_func):
    """Map BookingEngineError subclasses to 400/404/409/503 JSON responses."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except BookingEngineError as exc:
            status = status_for(exc)
            if status >= 500:
                logger.exception('Booking engine failure on %s', request.path)
                return error_response('Availability is temporarily unavailable. Please retry.', status)
            return error_response(str(exc), status)
    return wrapper


def json_login_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response('Authentication required.', 401)
        return view_func(request, *args, **kwargs)
    return wrapper


def json_staff_required(view_func):
    """Require is_authenticated + is_staff."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response('Authentication required.', 401)
        if not request.user.is_staff:
            return error_response('Staff access required.', 403)
        return view_func(request, *args, **kwargs)
    return wrapper


def request_payload(request) -> dict:
    """POST fields from a JSON body or a form-encoded one."""
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError:
            raise InvalidRequestError('Request body is not valid JSON.')
        if not isinstance(payload, dict):
            raise InvalidRequestError('Request body must be a JSON object.')
        return payload
    return request.POST.dict()
