# apps/availability/tests/test_holidays.py
import datetime

from django.test import TestCase

from apps.availability.holidays import HolidayCalendar
from apps.core.tests.factories import HolidayFactory, SalonFactory
from apps.holidays.models import HolidayKind
from apps.salons.models import HolidayPolicy


class HolidayCalendarTestCase(TestCase):
    def setUp(self):
        self.salon = SalonFactory(holiday_policy=HolidayPolicy.STANDARD)
        HolidayFactory(salon=self.salon, month=1, day=1, kind=HolidayKind.STANDARD)
        HolidayFactory(salon=self.salon, month=7, day=30, kind=HolidayKind.CUSTOM, name="Salon anniversary")

    def test_recurs_every_year(self):
        calendar = HolidayCalendar(self.salon)

        for year in (2024, 2030, 2051):
            status = calendar.is_closed(datetime.date(year, 1, 1))
            self.assertTrue(status.closed)
            self.assertEqual(status.name, "New Year's Day")

    def test_open_day(self):
        status = HolidayCalendar(self.salon).is_closed(datetime.date(2030, 1, 2))

        self.assertFalse(status.closed)
        self.assertIsNone(status.name)

    def test_only_active_kind_counts(self):
        self.assertFalse(HolidayCalendar(self.salon).is_closed(datetime.date(2030, 7, 30)).closed)

        self.salon.holiday_policy = HolidayPolicy.CUSTOM

        calendar = HolidayCalendar(self.salon)
        self.assertTrue(calendar.is_closed(datetime.date(2030, 7, 30)).closed)
        self.assertFalse(calendar.is_closed(datetime.date(2030, 1, 1)).closed)

    def test_no_policy_means_open(self):
        self.salon.holiday_policy = HolidayPolicy.NONE

        self.assertFalse(HolidayCalendar(self.salon).is_closed(datetime.date(2030, 1, 1)).closed)

    def test_other_salons_holidays_are_ignored(self):
        other = SalonFactory()

        self.assertFalse(HolidayCalendar(other).is_closed(datetime.date(2030, 1, 1)).closed)

    def test_occurrences_skip_feb_29_outside_leap_years(self):
        HolidayFactory(salon=self.salon, month=2, day=29, name="Leap Day")
        calendar = HolidayCalendar(self.salon)

        self.assertEqual(
            [day for day, _ in calendar.occurrences(2030)],
            [datetime.date(2030, 1, 1)],
        )
        self.assertEqual(
            [day for day, _ in calendar.occurrences(2028)],
            [datetime.date(2028, 1, 1), datetime.date(2028, 2, 29)],
        )
