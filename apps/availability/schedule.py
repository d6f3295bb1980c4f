"""
Schedule provider — an employee's working and break window for a weekday.
"""
from datetime import time as time_type
from typing import NamedTuple, Optional

from apps.employees.models import WorkingHour


class Window(NamedTuple):
    start: time_type
    end: time_type
    break_start: Optional[time_type] = None
    break_end: Optional[time_type] = None

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None


class ScheduleProvider:
    """Reads WorkingHour rows. Unknown employees are the caller's concern."""

    def get_window(self, employee_id, weekday: int) -> Optional[Window]:
        """Window for `weekday` (0 = Monday), or None for a day off."""
        row = WorkingHour.objects.filter(employee_id=employee_id, weekday=weekday).first()
        if row is None or not row.is_working_day:
            return None
        if row.has_break:
            return Window(row.start_time, row.end_time, row.break_start, row.break_end)
        return Window(row.start_time, row.end_time)
