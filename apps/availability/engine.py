"""
Availability engine — pure business logic, no HTTP/request awareness.

Public API (AvailabilityService, one instance per salon):
  list_slots(service_id, day, employee_id=None)
  nearest_slot(service_id, employee_id=None, preferred_at=None)
  find_available_employee(service_id, start, duration_minutes)
  is_slot_available(employee_id, start, duration_minutes, exclude=None)

Timestamps come back as ISO-8601 strings in the salon's time zone.
Only `is_slot_available` is authoritative; the listings go through a
short-lived cache and may be stale for up to AVAILABILITY_CACHE_TTL.
"""
import logging
from datetime import date as date_type, datetime, timedelta

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.bookings.models import BookingKind
from .cache import AvailabilityCache
from .catalog import ServiceCatalog, as_uuid
from .conflicts import ConflictChecker
from .exceptions import InvalidRequestError
from .holidays import HolidayCalendar
from .ledger import BookingLedger, LedgerRef
from .schedule import ScheduleProvider
from .slots import fits_window, generate_slots, local_moment

logger = logging.getLogger(__name__)


# ── Input helpers ─────────────────────────────────────────────────────────────

def parse_day(value) -> date_type:
    """Accepts a date, an aware/naive datetime or 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return parse_moment(value).astimezone(timezone.get_current_timezone()).date()
    if isinstance(value, date_type):
        return value
    try:
        parsed = parse_date(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidRequestError(f"Malformed date: {value!r} (expected YYYY-MM-DD)")
    return parsed


def parse_moment(value) -> datetime:
    """Accepts a datetime or an ISO-8601 string; naive values are salon-local."""
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = parse_datetime(value) if isinstance(value, str) else None
        except ValueError:
            moment = None
        if moment is None:
            raise InvalidRequestError(f"Malformed date/time: {value!r}")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def parse_duration(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidRequestError(f"Malformed duration: {value!r}")
    try:
        minutes = int(value)
    except ValueError:
        raise InvalidRequestError(f"Malformed duration: {value!r}")
    if minutes <= 0:
        raise InvalidRequestError('Duration must be a positive number of minutes.')
    return minutes


def parse_exclude(value):
    """None, a LedgerRef, an (id, kind) pair or {'id': ..., 'kind': ...}."""
    if value is None:
        return None
    if isinstance(value, dict):
        booking_id, kind = value.get('id'), value.get('kind')
    else:
        try:
            booking_id, kind = value
        except (TypeError, ValueError):
            raise InvalidRequestError(f"Malformed booking reference: {value!r}")
    if kind not in BookingKind.values:
        raise InvalidRequestError(f"Unknown booking kind: {kind!r}")
    return LedgerRef(as_uuid(booking_id, 'booking id'), kind)


def to_iso(moment: datetime) -> str:
    return timezone.localtime(moment).isoformat()


# ── Core: Availability Service ────────────────────────────────────────────────

class AvailabilityService:
    """
    Orchestrates schedule, holidays, slot generation and the conflict check
    for one salon. Collaborators are injectable; defaults read the ORM.
    """

    def __init__(self, salon, schedule=None, holidays=None, ledger=None,
                 catalog=None, cache=None, granularity_minutes=None,
                 horizon_days=None):
        self.salon = salon
        self.schedule = schedule or ScheduleProvider()
        self.holidays = holidays or HolidayCalendar(salon)
        self.checker = ConflictChecker(ledger or BookingLedger())
        self.catalog = catalog or ServiceCatalog(salon)
        self.cache = cache or AvailabilityCache()
        self.granularity_minutes = (
            settings.SLOT_GRANULARITY_MINUTES if granularity_minutes is None else granularity_minutes
        )
        self.horizon_days = horizon_days or settings.NEAREST_SLOT_HORIZON_DAYS

    # ── Listing ───────────────────────────────────────────────────────────────

    def list_slots(self, service_id, day, employee_id=None) -> list:
        """
        Ascending ISO start times at which the service can be booked on `day`,
        by `employee_id` or, when omitted, by any eligible employee.

        Times earlier today are not dropped, so the listing for a date stays
        the same all day. Client bookings still must start in the future;
        callers showing today's slots to clients should use nearest_slot or
        filter on the current time themselves.
        """
        service = self.catalog.get_service(service_id)
        day = parse_day(day)

        if employee_id is not None:
            employee = self.catalog.get_employee(employee_id)
            employee_id = employee.id
            if self.catalog.is_eligible(employee, service):
                employees = [employee]
            else:
                logger.debug('Employee %s does not offer service %s', employee.id, service.id)
                employees = []
        else:
            employees = self.catalog.employees_for(service)

        cached = self.cache.get_slots(service.id, employee_id, day)
        if cached is not None:
            return cached

        stamp = self.cache.stamp([e.id for e in employees], day)
        closure = self.holidays.is_closed(day)
        starts = set()
        if closure.closed:
            logger.info('Salon %s closed on %s (%s), no slots', self.salon.id, day, closure.name)
        else:
            for employee in employees:
                starts.update(self._free_starts(employee.id, service.duration_minutes, day))

        slots = [to_iso(start) for start in sorted(starts)]
        self.cache.set_slots(service.id, employee_id, day, slots, stamp)

        logger.debug(
            'Availability computed: service=%s employee=%s date=%s slots=%d employees_checked=%d',
            service.id, employee_id, day, len(slots), len(employees),
        )
        return slots

    def _free_starts(self, employee_id, duration_minutes: int, day: date_type) -> list:
        window = self.schedule.get_window(employee_id, day.weekday())
        if window is None:
            return []
        candidates = [
            local_moment(day, t)
            for t in generate_slots(window, duration_minutes, self.granularity_minutes)
        ]
        return self.checker.free_starts(employee_id, candidates, duration_minutes)

    def nearest_slot(self, service_id, employee_id=None, preferred_at=None):
        """
        First slot at or after `preferred_at` (default: now), scanning day by
        day up to the horizon. None when the horizon holds no slot.
        """
        preferred = timezone.now() if preferred_at is None else parse_moment(preferred_at)
        first_day = timezone.localtime(preferred).date()

        for offset in range(self.horizon_days):
            day = first_day + timedelta(days=offset)
            for slot in self.list_slots(service_id, day, employee_id):
                if offset > 0 or datetime.fromisoformat(slot) >= preferred:
                    logger.info('Nearest slot for service %s: %s (%d days ahead)',
                                service_id, slot, offset)
                    return slot

        logger.warning('No available slots for service %s in the next %d days',
                       service_id, self.horizon_days)
        return None

    # ── Commit-time checks ────────────────────────────────────────────────────

    def find_available_employee(self, service_id, start, duration_minutes):
        """
        First eligible employee (ascending id) who works over the slot and has
        nothing booked in it. Returns the employee id or None.
        """
        service = self.catalog.get_service(service_id)
        start = parse_moment(start)
        duration_minutes = parse_duration(duration_minutes)

        for employee in self.catalog.employees_for(service):
            if self._slot_is_valid(employee.id, start, duration_minutes):
                logger.info('Available employee found: employee=%s service=%s start=%s',
                            employee.id, service.id, to_iso(start))
                return employee.id

        logger.warning('No available employee found: service=%s start=%s duration=%d',
                       service.id, to_iso(start), duration_minutes)
        return None

    def is_slot_available(self, employee_id, start, duration_minutes, exclude=None) -> bool:
        """
        Authoritative, uncached check: working window, break, holiday and the
        unified ledger. `exclude` skips the booking being moved.
        """
        employee = self.catalog.get_employee(employee_id)
        start = parse_moment(start)
        duration_minutes = parse_duration(duration_minutes)
        exclude = parse_exclude(exclude)
        return self._slot_is_valid(employee.id, start, duration_minutes, exclude)

    def _slot_is_valid(self, employee_id, start: datetime, duration_minutes: int, exclude=None) -> bool:
        local = timezone.localtime(start)
        closure = self.holidays.is_closed(local.date())
        if closure.closed:
            logger.debug('Slot %s blocked by holiday %s', local.isoformat(), closure.name)
            return False

        window = self.schedule.get_window(employee_id, local.weekday())
        if window is None or not fits_window(window, local.time(), duration_minutes):
            logger.debug('Slot %s outside working hours of employee %s', local.isoformat(), employee_id)
            return False

        return self.checker.is_free(employee_id, start, duration_minutes, exclude)
