"""
Holiday calendar — decides whether a salon is closed on a calendar date.

Holidays are stored as recurring (month, day) rows and materialized per
year on demand. Only rows of the salon's active policy kind count; a salon
without a policy never closes for holidays.
"""
import calendar
from datetime import date as date_type
from typing import NamedTuple, Optional

from apps.holidays.models import Holiday


class ClosureStatus(NamedTuple):
    closed: bool
    name: Optional[str] = None


OPEN = ClosureStatus(closed=False)


class HolidayCalendar:

    def __init__(self, salon):
        self.salon = salon
        self._entries = None

    @property
    def policy(self) -> str:
        return self.salon.holiday_policy or ''

    def _load(self) -> dict:
        # One read per calendar instance; scans over many days reuse it.
        if self._entries is None:
            self._entries = {}
            if self.policy:
                rows = Holiday.objects.filter(salon=self.salon, kind=self.policy).order_by('month', 'day')
                for month, day, name in rows.values_list('month', 'day', 'name'):
                    self._entries.setdefault((month, day), name)
        return self._entries

    def is_closed(self, day: date_type) -> ClosureStatus:
        name = self._load().get((day.month, day.day))
        if name is None:
            return OPEN
        return ClosureStatus(closed=True, name=name)

    def occurrences(self, year: int) -> list:
        """Materialize the active holidays for one year as (date, name) pairs."""
        result = []
        for (month, day), name in sorted(self._load().items()):
            if month == 2 and day == 29 and not calendar.isleap(year):
                continue
            result.append((date_type(year, month, day), name))
        return result
