"""
Booking JSON endpoints.

Clients create and cancel their own bookings; staff enter walk-in/phone
bookings and drive the status of any booking in the salon. All writes go
through apps.bookings.workflow, never straight to the models.
"""
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.availability.catalog import get_salon
from apps.availability.engine import to_iso
from apps.availability.exceptions import InvalidRequestError, NotFoundError
from apps.core.decorators import (
    json_engine_errors,
    json_login_required,
    json_staff_required,
    request_payload,
)
from . import workflow
from .models import BookingKind, BookingStatus

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _require(payload, name):
    value = payload.get(name)
    if value in (None, ''):
        raise InvalidRequestError(f"Missing field: {name}")
    return value


def _optional_text(payload, name) -> str:
    value = payload.get(name)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise InvalidRequestError(f"{name} must be a string.")
    return value


def _serialize(booking) -> dict:
    return {
        'id': str(booking.id),
        'kind': booking.KIND,
        'reference': booking.id_short,
        'salon_id': str(booking.salon_id),
        'employee_id': str(booking.employee_id),
        'service_id': str(booking.service_id),
        'start_at': to_iso(booking.start_at),
        'end_at': to_iso(booking.end_at),
        'status': booking.status,
    }


def _ok(booking, status=200) -> JsonResponse:
    return JsonResponse({'success': True, 'data': _serialize(booking)}, status=status)


def _booking_for(request, kind, booking_id):
    """Staff see every booking of the salon; clients only their own."""
    payload = request_payload(request)
    salon = get_salon(_require(payload, 'salon_id'))
    booking = workflow.get_booking(salon, kind, booking_id)
    if not request.user.is_staff:
        if kind != BookingKind.CLIENT or booking.client_id != request.user.pk:
            raise NotFoundError(f"Booking {booking_id} not found.")
    return booking, payload


# ─────────────────────────────────────────────────────────────────────────────
# Creation
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
@json_login_required
@json_engine_errors
def api_create(request):
    """
    POST /bookings/api/create/
      salon_id, service_id, start_at (ISO)[, employee_id][, notes]
    """
    payload = request_payload(request)
    salon = get_salon(_require(payload, 'salon_id'))
    booking = workflow.create_client_booking(
        salon,
        request.user,
        _require(payload, 'service_id'),
        _require(payload, 'start_at'),
        employee_id=payload.get('employee_id') or None,
        notes=_optional_text(payload, 'notes'),
    )
    return _ok(booking, status=201)


@require_POST
@json_staff_required
@json_engine_errors
def api_staff_create(request):
    """
    POST /bookings/api/staff/create/
      salon_id, service_id, start_at (ISO), client_full_name, client_phone
      [, employee_id][, status=REQUESTED|CONFIRMED][, notes]
    """
    payload = request_payload(request)
    salon = get_salon(_require(payload, 'salon_id'))
    booking = workflow.create_staff_booking(
        salon,
        request.user,
        _require(payload, 'service_id'),
        _require(payload, 'start_at'),
        client_full_name=_require(payload, 'client_full_name'),
        client_phone=_require(payload, 'client_phone'),
        employee_id=payload.get('employee_id') or None,
        notes=_optional_text(payload, 'notes'),
        status=payload.get('status') or BookingStatus.CONFIRMED,
    )
    return _ok(booking, status=201)


# ─────────────────────────────────────────────────────────────────────────────
# Lifecycle
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
@json_login_required
@json_engine_errors
def api_cancel(request, kind, booking_id):
    booking, payload = _booking_for(request, kind, booking_id)
    changed_by = 'staff' if request.user.is_staff else 'client'
    workflow.cancel_booking(booking, changed_by=changed_by, reason=_optional_text(payload, 'reason'))
    return _ok(booking)


@require_POST
@json_staff_required
@json_engine_errors
def api_confirm(request, kind, booking_id):
    booking, _ = _booking_for(request, kind, booking_id)
    workflow.confirm_booking(booking, changed_by=request.user.get_username())
    return _ok(booking)


@require_POST
@json_staff_required
@json_engine_errors
def api_complete(request, kind, booking_id):
    booking, _ = _booking_for(request, kind, booking_id)
    workflow.complete_booking(booking, changed_by=request.user.get_username())
    return _ok(booking)


@require_POST
@json_staff_required
@json_engine_errors
def api_reschedule(request, kind, booking_id):
    """
    POST /bookings/api/<kind>/<uuid>/reschedule/
      salon_id, start_at (ISO)[, employee_id]
    """
    booking, payload = _booking_for(request, kind, booking_id)
    workflow.reschedule_booking(
        booking,
        _require(payload, 'start_at'),
        employee_id=payload.get('employee_id') or None,
        changed_by=request.user.get_username(),
    )
    return _ok(booking)
