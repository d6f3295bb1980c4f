"""
Slot generation — pure functions over wall-clock times.

Public API:
  generate_slots(window, duration_minutes, granularity_minutes)
  fits_window(window, start_time, duration_minutes)
  overlaps(a_start, a_end, b_start, b_end)

Nothing here touches the database; every function is restartable and
returns the same answer for the same arguments.
"""
from datetime import datetime, time as time_type, date as date_type
from django.utils import timezone


# ── Time helpers ──────────────────────────────────────────────────────────────

def time_to_minutes(t: time_type) -> int:
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time_type:
    return time_type(minutes // 60, minutes % 60)


def local_moment(day: date_type, t: time_type) -> datetime:
    """Aware datetime for a salon wall-clock time on `day`."""
    return timezone.make_aware(datetime.combine(day, t))


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """True if half-open [a_start, a_end) intersects [b_start, b_end)."""
    return a_start < b_end and b_start < a_end


# ── Window checks ─────────────────────────────────────────────────────────────

def _fits(window, start_min, end_min) -> bool:
    """Both bounds in minutes since midnight (may be fractional)."""
    if start_min < time_to_minutes(window.start) or end_min > time_to_minutes(window.end):
        return False
    if window.has_break:
        # Touching the break boundary is fine; any shared instant is not.
        return not overlaps(start_min, end_min,
                            time_to_minutes(window.break_start),
                            time_to_minutes(window.break_end))
    return True


def fits_window(window, start_time: time_type, duration_minutes: int) -> bool:
    """
    True if [start_time, start_time + duration) lies inside the working window
    and does not intersect the break. Intervals running past midnight never fit.
    """
    start_min = time_to_minutes(start_time) + (start_time.second + start_time.microsecond / 1e6) / 60
    return _fits(window, start_min, start_min + duration_minutes)


# ── Core: Slot Generation ─────────────────────────────────────────────────────

def generate_slots(window, duration_minutes: int, granularity_minutes: int = None) -> list:
    """
    Every start time t, stepping by `granularity_minutes` from window.start,
    such that [t, t + duration) fits the window and misses the break.

    A falsy granularity steps by the service duration. Returns an ascending
    list of `datetime.time`; empty when the service is longer than the window.
    """
    if duration_minutes <= 0:
        raise ValueError('duration_minutes must be positive')
    step = granularity_minutes or duration_minutes
    if step <= 0:
        raise ValueError('granularity_minutes must be positive')

    window_end = time_to_minutes(window.end)
    slots = []
    current = time_to_minutes(window.start)

    while current + duration_minutes <= window_end:
        if _fits(window, current, current + duration_minutes):
            slots.append(minutes_to_time(current))
        current += step

    return slots
