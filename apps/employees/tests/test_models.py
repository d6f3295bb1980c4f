# apps/employees/tests/test_models.py
from datetime import time

from django.core.exceptions import ValidationError
from django.test import TestCase

from apps.availability.schedule import ScheduleProvider, Window
from apps.core.tests.factories import EmployeeFactory, HolidayFactory, WorkingHourFactory
from apps.employees.models import WorkingHour


class WorkingHourTestCase(TestCase):
    def setUp(self):
        self.employee = EmployeeFactory()

    def hours(self, start=time(9, 0), end=time(18, 0), break_start=None, break_end=None):
        return WorkingHour(
            employee=self.employee, weekday=0, start_time=start, end_time=end,
            break_start=break_start, break_end=break_end,
        )

    def test_valid_entries(self):
        self.hours().full_clean()
        self.hours(break_start=time(12, 0), break_end=time(13, 0)).full_clean()
        self.hours(start=None, end=None).full_clean()

    def test_start_must_precede_end(self):
        with self.assertRaises(ValidationError):
            self.hours(start=time(18, 0), end=time(9, 0)).full_clean()
        with self.assertRaises(ValidationError):
            self.hours(start=time(9, 0), end=time(9, 0)).full_clean()

    def test_half_set_window_or_break(self):
        with self.assertRaises(ValidationError):
            self.hours(end=None).full_clean()
        with self.assertRaises(ValidationError):
            self.hours(break_start=time(12, 0)).full_clean()

    def test_break_strictly_inside_window(self):
        for break_start, break_end in ((time(9, 0), time(10, 0)),
                                       (time(17, 0), time(18, 0)),
                                       (time(13, 0), time(12, 0)),
                                       (time(8, 0), time(10, 0))):
            with self.assertRaises(ValidationError):
                self.hours(break_start=break_start, break_end=break_end).full_clean()

    def test_day_off_cannot_have_break(self):
        with self.assertRaises(ValidationError):
            self.hours(start=None, end=None, break_start=time(12, 0), break_end=time(13, 0)).full_clean()


class ScheduleProviderTestCase(TestCase):
    def setUp(self):
        self.employee = EmployeeFactory()
        self.provider = ScheduleProvider()

    def test_window_with_break(self):
        WorkingHourFactory(employee=self.employee, weekday=2)

        window = self.provider.get_window(self.employee.id, 2)

        self.assertEqual(window, Window(time(9, 0), time(18, 0), time(12, 0), time(13, 0)))
        self.assertTrue(window.has_break)

    def test_window_without_break(self):
        WorkingHourFactory(employee=self.employee, weekday=3, break_start=None, break_end=None)

        window = self.provider.get_window(self.employee.id, 3)

        self.assertFalse(window.has_break)

    def test_missing_or_empty_row_is_day_off(self):
        WorkingHourFactory(employee=self.employee, weekday=5, start_time=None, end_time=None,
                           break_start=None, break_end=None)

        self.assertIsNone(self.provider.get_window(self.employee.id, 4))
        self.assertIsNone(self.provider.get_window(self.employee.id, 5))


class HolidayModelTestCase(TestCase):
    def test_leap_day_is_a_valid_recurring_date(self):
        HolidayFactory.build(month=2, day=29, salon=EmployeeFactory().salon).full_clean()

    def test_impossible_dates(self):
        salon = EmployeeFactory().salon
        for month, day in ((2, 30), (4, 31), (13, 1), (0, 10), (1, 0)):
            with self.assertRaises(ValidationError):
                HolidayFactory.build(month=month, day=day, salon=salon).full_clean()
