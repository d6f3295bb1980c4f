# apps/bookings/tests/test_workflow.py
import datetime
import uuid
from unittest.mock import patch

from django.core.cache import cache
from django.db import IntegrityError
from django.test import TestCase

from apps.availability.engine import AvailabilityService
from apps.availability.exceptions import (
    InvalidRequestError,
    InvalidTransitionError,
    NoEmployeeAvailableError,
    NotFoundError,
    SlotConflictError,
)
from apps.availability.tests.test_engine import MONDAY, NEW_YEAR, at
from apps.bookings import workflow
from apps.bookings.models import (
    BookingKind,
    BookingStatus,
    BookingStatusLog,
    ClientBooking,
    StaffBooking,
)
from apps.core.tests.factories import (
    ClientBookingFactory,
    EmployeeFactory,
    HolidayFactory,
    SalonFactory,
    ServiceFactory,
    StaffUserFactory,
    UserFactory,
    weekly_hours,
)


class WorkflowTestMixin:
    def setUp(self):
        cache.clear()
        self.salon = SalonFactory()
        self.service = ServiceFactory(salon=self.salon, duration_minutes=30)
        self.employee = EmployeeFactory(salon=self.salon, services=[self.service])
        weekly_hours(self.employee, weekdays=range(6))
        self.client_user = UserFactory()
        self.staff_user = StaffUserFactory()

    def client_booking(self, start, employee=None, **kwargs):
        employee_id = (employee or self.employee).id
        return workflow.create_client_booking(
            self.salon, self.client_user, self.service.id, start, employee_id=employee_id, **kwargs,
        )

    def staff_booking(self, start, employee=None, **kwargs):
        kwargs.setdefault("employee_id", (employee or self.employee).id)
        return workflow.create_staff_booking(
            self.salon, self.staff_user, self.service.id, start,
            client_full_name="Amina Tazi", client_phone="0612345678", **kwargs,
        )

    def active_count(self):
        return sum(
            model.objects.filter(employee=self.employee).exclude(status=BookingStatus.CANCELLED).count()
            for model in (ClientBooking, StaffBooking)
        )


class CreateBookingTestCase(WorkflowTestMixin, TestCase):
    def test_client_booking_is_requested(self):
        booking = self.client_booking(at(10, 0))

        self.assertEqual(booking.status, BookingStatus.REQUESTED)
        self.assertEqual(booking.employee, self.employee)
        self.assertEqual(booking.end_at - booking.start_at, datetime.timedelta(minutes=30))
        log = BookingStatusLog.objects.get(booking_id=booking.id)
        self.assertEqual((log.from_status, log.to_status), ("", BookingStatus.REQUESTED))
        self.assertEqual(log.booking_kind, BookingKind.CLIENT)

    def test_client_booking_must_be_in_the_future(self):
        with self.assertRaises(InvalidRequestError):
            self.client_booking(datetime.datetime(2020, 1, 6, 10, 0, tzinfo=datetime.timezone.utc))

    def test_staff_booking_defaults_to_confirmed_and_may_be_in_the_past(self):
        past_monday = datetime.datetime(2020, 1, 6, 10, 0, tzinfo=datetime.timezone.utc)

        booking = self.staff_booking(past_monday)

        self.assertEqual(booking.status, BookingStatus.CONFIRMED)
        self.assertEqual(booking.created_by, self.staff_user)

    def test_staff_booking_initial_status(self):
        booking = self.staff_booking(at(10, 0), status=BookingStatus.REQUESTED)

        self.assertEqual(booking.status, BookingStatus.REQUESTED)
        with self.assertRaises(InvalidRequestError):
            self.staff_booking(at(11, 0), status=BookingStatus.COMPLETED)

    def test_staff_booking_requires_client_details(self):
        with self.assertRaises(InvalidRequestError):
            workflow.create_staff_booking(
                self.salon, self.staff_user, self.service.id, at(10, 0),
                client_full_name="", client_phone="0612345678", employee_id=self.employee.id,
            )

    def test_same_slot_twice_conflicts(self):
        self.client_booking(at(10, 0))

        with self.assertRaises(SlotConflictError):
            self.client_booking(at(10, 0))
        self.assertEqual(self.active_count(), 1)

    def test_overlapping_start_conflicts(self):
        self.client_booking(at(10, 0))

        with self.assertRaises(SlotConflictError):
            self.client_booking(at(10, 15))

    def test_staff_and_client_bookings_share_one_ledger(self):
        self.staff_booking(at(10, 0))

        with self.assertRaises(SlotConflictError):
            self.client_booking(at(10, 0))

        self.client_booking(at(11, 0))
        with self.assertRaises(SlotConflictError):
            self.staff_booking(at(11, 0))

    def test_outside_working_hours_or_on_break(self):
        for start in (at(8, 30), at(12, 0), at(17, 45)):
            with self.assertRaises(SlotConflictError):
                self.client_booking(start)
        self.assertEqual(self.active_count(), 0)

    def test_holiday(self):
        HolidayFactory(salon=self.salon, month=1, day=1)

        with self.assertRaises(SlotConflictError):
            self.client_booking(at(10, 0, day=NEW_YEAR))

    def test_ineligible_employee(self):
        other = EmployeeFactory(salon=self.salon)
        weekly_hours(other, weekdays=[0])

        with self.assertRaises(InvalidRequestError):
            self.client_booking(at(10, 0), employee=other)

    def test_unknown_service_and_employee(self):
        with self.assertRaises(NotFoundError):
            workflow.create_client_booking(self.salon, self.client_user, uuid.uuid4(), at(10, 0))
        with self.assertRaises(NotFoundError):
            workflow.create_client_booking(
                self.salon, self.client_user, self.service.id, at(10, 0), employee_id=uuid.uuid4(),
            )

    def test_employee_of_another_salon(self):
        foreign = EmployeeFactory(services=[self.service])
        weekly_hours(foreign, weekdays=[0])

        with self.assertRaises(NotFoundError):
            self.client_booking(at(10, 0), employee=foreign)


class AutoAssignTestCase(WorkflowTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        second = EmployeeFactory(salon=self.salon, services=[self.service])
        weekly_hours(second, weekdays=range(6))
        self.first, self.second = sorted([self.employee, second], key=lambda e: e.id)

    def book_any(self, start):
        return workflow.create_client_booking(self.salon, self.client_user, self.service.id, start)

    def test_assigns_first_free_employee(self):
        first = self.book_any(at(14, 0))
        second = self.book_any(at(14, 0))

        self.assertEqual(first.employee, self.first)
        self.assertEqual(second.employee, self.second)

    def test_no_employee_left(self):
        self.book_any(at(14, 0))
        self.book_any(at(14, 0))

        with self.assertRaises(NoEmployeeAvailableError):
            self.book_any(at(14, 0))

    def test_no_employee_is_a_conflict(self):
        self.assertTrue(issubclass(NoEmployeeAvailableError, SlotConflictError))


class RaceTestCase(WorkflowTestMixin, TestCase):
    def test_second_commit_loses(self):
        """Two clients who both saw 10:00 as free: exactly one booking survives"""
        engine = AvailabilityService(self.salon)
        self.assertIn(at(10, 0).isoformat(), engine.list_slots(self.service.id, MONDAY, self.employee.id))

        winner = self.client_booking(at(10, 0))
        with self.assertRaises(SlotConflictError):
            workflow.create_client_booking(
                self.salon, UserFactory(), self.service.id, at(10, 0), employee_id=self.employee.id,
            )

        self.assertEqual(self.active_count(), 1)
        self.assertEqual(ClientBooking.objects.get(employee=self.employee), winner)

    def test_storage_constraint_backs_up_the_recheck(self):
        """A stale re-check still cannot insert a second active booking at the same start"""
        ClientBookingFactory(salon=self.salon, employee=self.employee, service=self.service,
                             start_at=at(10, 0), status=BookingStatus.CONFIRMED)

        with patch.object(AvailabilityService, "is_slot_available", return_value=True):
            with self.assertRaises(SlotConflictError):
                self.client_booking(at(10, 0))

        self.assertEqual(self.active_count(), 1)
        self.assertEqual(BookingStatusLog.objects.count(), 0)

    def test_rival_commits_between_recheck_and_insert(self):
        """Both attempts pass the re-check before either inserts: the later insert loses"""
        real_check = AvailabilityService.is_slot_available
        rivals = []

        def check_then_rival_commits(engine, *args, **kwargs):
            free = real_check(engine, *args, **kwargs)
            if not rivals:
                rivals.append(None)
                rivals[0] = workflow.create_client_booking(
                    self.salon, UserFactory(), self.service.id, at(10, 0), employee_id=self.employee.id,
                )
            return free

        with patch.object(AvailabilityService, "is_slot_available", autospec=True,
                          side_effect=check_then_rival_commits):
            with self.assertRaises(SlotConflictError):
                self.client_booking(at(10, 0))

        self.assertEqual(self.active_count(), 1)
        self.assertEqual(ClientBooking.objects.get(employee=self.employee), rivals[0])
        self.assertEqual(BookingStatusLog.objects.count(), 1)

    def test_rival_commits_after_auto_assignment(self):
        """The slot is re-checked after assignment, so a rival landing in between wins"""
        real_find = AvailabilityService.find_available_employee
        rivals = []

        def assign_then_rival_commits(engine, *args, **kwargs):
            employee_id = real_find(engine, *args, **kwargs)
            if not rivals:
                rivals.append(self.staff_booking(at(10, 0)))
            return employee_id

        with patch.object(AvailabilityService, "find_available_employee", autospec=True,
                          side_effect=assign_then_rival_commits):
            with self.assertRaises(SlotConflictError):
                workflow.create_client_booking(self.salon, self.client_user, self.service.id, at(10, 0))

        self.assertEqual(self.active_count(), 1)
        self.assertEqual(StaffBooking.objects.get(employee=self.employee), rivals[0])
        self.assertFalse(ClientBooking.objects.exists())

    def test_other_integrity_errors_are_not_reported_as_conflicts(self):
        with self.assertRaises(IntegrityError):
            self.client_booking(at(10, 0), notes=None)

        self.assertEqual(self.active_count(), 0)

    def test_cancelled_slot_can_be_rebooked(self):
        booking = self.client_booking(at(10, 0))
        workflow.cancel_booking(booking, changed_by="client")

        rebooked = self.client_booking(at(10, 0))

        self.assertEqual(rebooked.status, BookingStatus.REQUESTED)
        self.assertEqual(self.active_count(), 1)


class RescheduleTestCase(WorkflowTestMixin, TestCase):
    def test_move_to_free_slot(self):
        booking = self.client_booking(at(10, 0))

        workflow.reschedule_booking(booking, at(15, 0))

        booking.refresh_from_db()
        self.assertEqual(booking.start_at, at(15, 0))
        self.assertEqual(booking.end_at, at(15, 30))

    def test_overlapping_own_interval_is_allowed(self):
        booking = self.client_booking(at(10, 0))

        workflow.reschedule_booking(booking, at(10, 15))

        booking.refresh_from_db()
        self.assertEqual(booking.start_at, at(10, 15))

    def test_move_onto_another_booking(self):
        booking = self.client_booking(at(10, 0))
        self.staff_booking(at(15, 0))

        with self.assertRaises(SlotConflictError):
            workflow.reschedule_booking(booking, at(15, 0))
        booking.refresh_from_db()
        self.assertEqual(booking.start_at, at(10, 0))

    def test_move_to_another_employee(self):
        other = EmployeeFactory(salon=self.salon, services=[self.service])
        weekly_hours(other, weekdays=[0])
        booking = self.client_booking(at(10, 0))

        workflow.reschedule_booking(booking, at(10, 0), employee_id=other.id)

        booking.refresh_from_db()
        self.assertEqual(booking.employee, other)

    def test_terminal_booking_cannot_move(self):
        booking = self.client_booking(at(10, 0))
        workflow.cancel_booking(booking)

        with self.assertRaises(InvalidTransitionError):
            workflow.reschedule_booking(booking, at(15, 0))


class TransitionTestCase(WorkflowTestMixin, TestCase):
    def test_full_lifecycle_is_logged(self):
        booking = self.client_booking(at(10, 0))

        workflow.confirm_booking(booking, changed_by="reception")
        workflow.complete_booking(booking, changed_by="reception")

        booking.refresh_from_db()
        self.assertEqual(booking.status, BookingStatus.COMPLETED)
        transitions = list(
            BookingStatusLog.objects.filter(booking_id=booking.id)
            .values_list("from_status", "to_status")
        )
        self.assertCountEqual(transitions, [
            ("", BookingStatus.REQUESTED),
            (BookingStatus.REQUESTED, BookingStatus.CONFIRMED),
            (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        ])

    def test_requested_can_complete_directly(self):
        booking = self.client_booking(at(10, 0))

        workflow.complete_booking(booking)

        self.assertEqual(booking.status, BookingStatus.COMPLETED)

    def test_terminal_states_reject_transitions(self):
        cancelled = self.client_booking(at(10, 0))
        workflow.cancel_booking(cancelled, reason="client called")
        completed = self.staff_booking(at(11, 0))
        workflow.complete_booking(completed)

        for booking, step in ((cancelled, workflow.confirm_booking),
                              (cancelled, workflow.complete_booking),
                              (completed, workflow.cancel_booking),
                              (completed, workflow.confirm_booking)):
            with self.assertRaises(InvalidTransitionError):
                step(booking)

    def test_confirm_twice_is_rejected(self):
        booking = self.staff_booking(at(10, 0))

        with self.assertRaises(InvalidTransitionError):
            workflow.confirm_booking(booking)

    def test_cancel_records_reason(self):
        booking = self.client_booking(at(10, 0))

        workflow.cancel_booking(booking, changed_by="client", reason="running late")

        log = BookingStatusLog.objects.get(booking_id=booking.id, to_status=BookingStatus.CANCELLED)
        self.assertEqual(log.reason, "running late")
        self.assertEqual(log.changed_by, "client")


class GetBookingTestCase(WorkflowTestMixin, TestCase):
    def test_lookup(self):
        booking = self.staff_booking(at(10, 0))

        self.assertEqual(workflow.get_booking(self.salon, "staff", str(booking.id)), booking)

    def test_wrong_kind_or_salon(self):
        booking = self.staff_booking(at(10, 0))

        with self.assertRaises(NotFoundError):
            workflow.get_booking(self.salon, "client", booking.id)
        with self.assertRaises(NotFoundError):
            workflow.get_booking(SalonFactory(), "staff", booking.id)
        with self.assertRaises(InvalidRequestError):
            workflow.get_booking(self.salon, "walk-in", booking.id)
