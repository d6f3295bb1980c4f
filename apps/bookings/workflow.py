"""
Booking workflow — the only writer of the booking ledger.

Public API:
  create_client_booking(salon, client, service_id, start_at, employee_id=None, notes='')
  create_staff_booking(salon, created_by, service_id, start_at, client_full_name, client_phone, ...)
  reschedule_booking(booking, start_at, employee_id=None, changed_by='staff')
  confirm_booking(booking, changed_by)
  complete_booking(booking, changed_by)
  cancel_booking(booking, changed_by, reason='')
  get_booking(salon, kind, booking_id)

Every create/reschedule re-checks the slot with the authoritative
is_slot_available() inside the same transaction that inserts the row.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.availability.catalog import as_uuid
from apps.availability.engine import AvailabilityService, parse_moment, to_iso
from apps.availability.exceptions import (
    InvalidRequestError,
    InvalidTransitionError,
    NoEmployeeAvailableError,
    NotFoundError,
    SlotConflictError,
)
from apps.employees.models import Employee
from .models import (
    ACTIVE_SLOT_CONSTRAINT,
    ALLOWED_TRANSITIONS,
    BOOKING_MODELS,
    BookingKind,
    BookingStatus,
    BookingStatusLog,
    ClientBooking,
    StaffBooking,
)

logger = logging.getLogger(__name__)

STAFF_INITIAL_STATUSES = (BookingStatus.REQUESTED, BookingStatus.CONFIRMED)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _lock_employee(salon, employee_id) -> Employee:
    """
    Row lock on the employee: concurrent commits for the same employee
    queue here until the first transaction ends.
    """
    employee = (
        Employee.objects
        .select_for_update()
        .filter(id=as_uuid(employee_id, 'employee id'), salon=salon, is_active=True)
        .first()
    )
    if employee is None:
        raise NotFoundError(f"Employee {employee_id} not found.")
    return employee


def _resolve_employee(engine, service, start, employee_id) -> Employee:
    if employee_id is None:
        employee_id = engine.find_available_employee(service.id, start, service.duration_minutes)
        if employee_id is None:
            raise NoEmployeeAvailableError(
                "No employee is available for this service at the requested time."
            )
    employee = _lock_employee(engine.salon, employee_id)
    if not engine.catalog.is_eligible(employee, service):
        raise InvalidRequestError(
            f"{employee.full_name} does not perform {service.name}."
        )
    return employee


def _holds_active_slot(booking) -> bool:
    """True if another active booking of the same kind owns (employee, start_at)."""
    return (
        type(booking).objects
        .filter(employee_id=booking.employee_id, start_at=booking.start_at)
        .exclude(status=BookingStatus.CANCELLED)
        .exclude(pk=booking.pk)
        .exists()
    )


def _save_guarded(booking, **save_kwargs):
    """
    Save in a savepoint so the outer transaction survives a constraint
    violation. Only a clash on the active (employee, start_at) constraint
    becomes SlotConflictError; any other integrity failure propagates.
    """
    try:
        with transaction.atomic():
            booking.save(**save_kwargs)
    except IntegrityError as exc:
        constraint = ACTIVE_SLOT_CONSTRAINT % {'class': type(booking).__name__.lower()}
        if constraint not in str(exc) and not _holds_active_slot(booking):
            raise
        logger.warning('Booking blocked by storage constraint: employee=%s start=%s',
                       booking.employee_id, to_iso(booking.start_at))
        raise SlotConflictError(
            "This slot was just taken by another booking. Please choose a different time."
        )


def _log_creation(booking, changed_by: str, reason: str):
    BookingStatusLog.objects.create(
        booking_kind=booking.KIND,
        booking_id=booking.id,
        from_status='',
        to_status=booking.status,
        changed_by=changed_by,
        reason=reason,
    )


@transaction.atomic
def _commit_booking(engine, booking, service, start, employee_id, changed_by: str, reason: str):
    """
    Assign → lock → re-check → insert, all in one transaction.

    Raises:
      NoEmployeeAvailableError — auto-assignment found nobody free
      SlotConflictError        — the re-check or the storage constraint failed
      InvalidRequestError      — employee does not perform the service
    """
    employee = _resolve_employee(engine, service, start, employee_id)

    if not engine.is_slot_available(employee.id, start, service.duration_minutes):
        logger.warning('Booking blocked: employee=%s start=%s service=%s is no longer free',
                       employee.id, to_iso(start), service.id)
        raise SlotConflictError(
            "This slot is no longer available. Please choose a different time."
        )

    booking.employee = employee
    booking.set_interval(start, service.duration_minutes)
    _save_guarded(booking)
    _log_creation(booking, changed_by, reason)

    logger.info('%s booking %s created: employee=%s start=%s status=%s',
                booking.KIND, booking.id_short, employee.id, to_iso(start), booking.status)
    return booking


# ── Core: Booking Creation ────────────────────────────────────────────────────

def create_client_booking(salon, client, service_id, start_at, employee_id=None,
                          notes: str = '', engine=None) -> ClientBooking:
    """
    Client-initiated booking, REQUESTED until staff confirm it.
    The start must lie in the future.
    """
    engine = engine or AvailabilityService(salon)
    service = engine.catalog.get_service(service_id)
    start = parse_moment(start_at)
    if start <= timezone.now():
        raise InvalidRequestError("Bookings must start in the future.")

    booking = ClientBooking(
        salon=salon,
        service=service,
        client=client,
        status=BookingStatus.REQUESTED,
        notes=notes,
    )
    return _commit_booking(engine, booking, service, start, employee_id,
                           changed_by='client', reason='Booking requested by client')


def create_staff_booking(salon, created_by, service_id, start_at, client_full_name: str,
                         client_phone: str, employee_id=None, notes: str = '',
                         status=BookingStatus.CONFIRMED, engine=None) -> StaffBooking:
    """
    Staff-entered booking for a walk-in or phone client.
    May be placed in the past (entering a visit after the fact).
    """
    if status not in STAFF_INITIAL_STATUSES:
        raise InvalidRequestError(f"Staff bookings cannot start as {status}.")
    if not client_full_name or not client_phone:
        raise InvalidRequestError("Client name and phone are required.")

    engine = engine or AvailabilityService(salon)
    service = engine.catalog.get_service(service_id)
    start = parse_moment(start_at)

    booking = StaffBooking(
        salon=salon,
        service=service,
        created_by=created_by,
        client_full_name=client_full_name,
        client_phone=client_phone,
        status=status,
        notes=notes,
    )
    changed_by = getattr(created_by, 'username', None) or 'staff'
    return _commit_booking(engine, booking, service, start, employee_id,
                           changed_by=changed_by, reason='Booking entered by staff')


@transaction.atomic
def reschedule_booking(booking, start_at, employee_id=None, changed_by: str = 'staff', engine=None):
    """
    Move an active booking to a new start (and optionally a new employee).
    The booking's own interval never counts as a conflict.
    """
    if not ALLOWED_TRANSITIONS[booking.status]:
        raise InvalidTransitionError(f"Cannot reschedule a {booking.status} booking.")

    engine = engine or AvailabilityService(booking.salon)
    service = booking.service
    start = parse_moment(start_at)
    employee = _resolve_employee(engine, service, start,
                                 booking.employee_id if employee_id is None else employee_id)

    exclude = (booking.id, booking.KIND)
    if not engine.is_slot_available(employee.id, start, service.duration_minutes, exclude=exclude):
        raise SlotConflictError(
            "The new time is not available. Please choose a different time."
        )

    previous = to_iso(booking.start_at)
    booking.employee = employee
    booking.set_interval(start, service.duration_minutes)
    _save_guarded(booking, update_fields=['employee', 'start_at', 'end_at', 'updated_at'])

    logger.info('%s booking %s rescheduled by %s: %s -> %s (employee %s)',
                booking.KIND, booking.id_short, changed_by, previous, to_iso(start), employee.id)
    return booking


# ── Status transitions ────────────────────────────────────────────────────────

@transaction.atomic
def confirm_booking(booking, changed_by: str = 'staff'):
    booking.confirm(changed_by=changed_by)
    return booking


@transaction.atomic
def complete_booking(booking, changed_by: str = 'staff'):
    booking.complete(changed_by=changed_by)
    return booking


@transaction.atomic
def cancel_booking(booking, changed_by: str = 'staff', reason: str = ''):
    """Cancelled bookings stop blocking their slot immediately."""
    booking.cancel(changed_by=changed_by, reason=reason)
    logger.info('%s booking %s cancelled by %s', booking.KIND, booking.id_short, changed_by)
    return booking


def get_booking(salon, kind, booking_id):
    if kind not in BookingKind.values:
        raise InvalidRequestError(f"Unknown booking kind: {kind!r}")
    booking_id = as_uuid(booking_id, 'booking id')
    booking = (
        BOOKING_MODELS[kind].objects
        .select_related('salon', 'employee', 'service')
        .filter(id=booking_id, salon=salon)
        .first()
    )
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found.")
    return booking
