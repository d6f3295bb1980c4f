"""
Availability JSON endpoints — thin wrappers over AvailabilityService.

Every endpoint is salon-scoped by the `salon_id` query parameter.
Engine exceptions become HTTP statuses in json_engine_errors.
"""
import logging

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from apps.core.decorators import json_engine_errors
from .catalog import get_salon
from .engine import AvailabilityService, parse_duration, parse_moment
from .exceptions import InvalidRequestError
from .holidays import HolidayCalendar

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _param(request, name, required=True):
    value = request.GET.get(name) or None
    if value is None and required:
        raise InvalidRequestError(f"Missing parameter: {name}")
    return value


def _service_for(request):
    return AvailabilityService(get_salon(_param(request, 'salon_id')))


def _ok(data) -> JsonResponse:
    return JsonResponse({'success': True, 'data': data})


def _duration(request, engine, service_id) -> int:
    raw = _param(request, 'duration', required=False)
    if raw is None:
        return engine.catalog.duration_of(service_id)
    return parse_duration(raw)


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
@json_engine_errors
def api_slots(request):
    """
    GET /availability/api/slots/?salon_id=&service_id=&date=YYYY-MM-DD[&employee_id=]
    """
    engine = _service_for(request)
    day = _param(request, 'date')
    slots = engine.list_slots(
        _param(request, 'service_id'), day, _param(request, 'employee_id', required=False),
    )
    return _ok({'date': day, 'slots': slots, 'count': len(slots)})


@require_GET
@json_engine_errors
def api_nearest(request):
    """
    GET /availability/api/nearest/?salon_id=&service_id=[&employee_id=][&preferred_at=ISO]
    """
    engine = _service_for(request)
    slot = engine.nearest_slot(
        _param(request, 'service_id'),
        employee_id=_param(request, 'employee_id', required=False),
        preferred_at=_param(request, 'preferred_at', required=False),
    )
    if slot is None:
        return JsonResponse({
            'success': False,
            'data': None,
            'message': f'No available slots in the next {engine.horizon_days} days.',
        })
    return _ok({'slot': slot})


@require_GET
@json_engine_errors
def api_check(request):
    """
    GET /availability/api/check/?salon_id=&service_id=&start=ISO[&employee_id=][&duration=]
                                [&exclude_id=&exclude_kind=]

    Without employee_id the check auto-assigns: available means some
    eligible employee is free, and that employee is returned. An employee
    who does not perform the service is never available for it.
    """
    engine = _service_for(request)
    service_id = _param(request, 'service_id')
    start = parse_moment(_param(request, 'start'))
    duration = _duration(request, engine, service_id)
    employee_id = _param(request, 'employee_id', required=False)

    if employee_id is None:
        employee_id = engine.find_available_employee(service_id, start, duration)
        available = employee_id is not None
    else:
        employee = engine.catalog.get_employee(employee_id)
        service = engine.catalog.get_service(service_id)
        exclude_id = _param(request, 'exclude_id', required=False)
        exclude = (exclude_id, _param(request, 'exclude_kind')) if exclude_id else None
        available = (
            engine.catalog.is_eligible(employee, service)
            and engine.is_slot_available(employee.id, start, duration, exclude=exclude)
        )

    return _ok({
        'available': available,
        'employee_id': str(employee_id) if employee_id else None,
        'start': timezone.localtime(start).isoformat(),
        'duration': duration,
    })


@require_GET
@json_engine_errors
def api_assign(request):
    """
    GET /availability/api/assign/?salon_id=&service_id=&start=ISO[&duration=]
    """
    engine = _service_for(request)
    service_id = _param(request, 'service_id')
    duration = _duration(request, engine, service_id)
    employee_id = engine.find_available_employee(service_id, _param(request, 'start'), duration)
    return _ok({'employee_id': str(employee_id) if employee_id else None})


@require_GET
@json_engine_errors
def api_holidays(request):
    """
    GET /availability/api/holidays/?salon_id=[&year=YYYY]
    """
    salon = get_salon(_param(request, 'salon_id'))
    year = _param(request, 'year', required=False) or str(timezone.localdate().year)
    if not year.isdigit():
        raise InvalidRequestError(f"Malformed year: {year!r}")

    calendar = HolidayCalendar(salon)
    return _ok({
        'policy': calendar.policy or None,
        'holidays': [
            {'date': day.isoformat(), 'name': name}
            for day, name in calendar.occurrences(int(year))
        ],
    })
