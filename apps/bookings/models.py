"""
Bookings app models:
  - ClientBooking    : booking placed online by a registered client
  - StaffBooking     : booking entered by salon staff for a walk-in/phone client
  - BookingStatusLog : audit trail of state transitions for both kinds

Both booking kinds share the abstract `Booking` base and together form the
per-employee ledger read by the availability engine.
"""
from datetime import timedelta
from django.conf import settings
from django.db import models
from django.utils import timezone
from apps.core.models import UUIDModel, TimestampedModel
from apps.salons.models import Salon
from apps.services.models import Service
from apps.employees.models import Employee
from apps.availability.exceptions import InvalidTransitionError


# ── Booking State Machine ─────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    REQUESTED = 'REQUESTED', 'Requested'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    CANCELLED = 'CANCELLED', 'Cancelled'
    COMPLETED = 'COMPLETED', 'Completed'


class BookingKind(models.TextChoices):
    CLIENT = 'client', 'Client booking'
    STAFF  = 'staff',  'Staff booking'


ALLOWED_TRANSITIONS = {
    BookingStatus.REQUESTED: {BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

# One per concrete booking table: uq_clientbooking_..., uq_staffbooking_...
ACTIVE_SLOT_CONSTRAINT = 'uq_%(class)s_active_employee_start'


class Booking(UUIDModel, TimestampedModel):
    """
    Shared fields and transitions of both booking kinds.
    The interval is half-open: [start_at, end_at).
    """
    KIND = None

    salon = models.ForeignKey(Salon, on_delete=models.PROTECT, related_name='%(class)ss')
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='%(class)ss')
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='%(class)ss')

    start_at = models.DateTimeField(db_index=True)
    end_at = models.DateTimeField(db_index=True)

    status = models.CharField(
        max_length=20, choices=BookingStatus.choices,
        default=BookingStatus.REQUESTED, db_index=True,
    )
    notes = models.TextField(blank=True)

    class Meta:
        abstract = True
        ordering = ['-start_at']
        # DB-level guard: no two active bookings for the same employee+start
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'start_at'],
                condition=~models.Q(status='CANCELLED'),
                name=ACTIVE_SLOT_CONSTRAINT,
            )
        ]

    def __str__(self):
        return f"{self.KIND} #{self.id_short} | {self.employee.full_name} | {self.start_at:%Y-%m-%d %H:%M}"

    @property
    def id_short(self):
        return str(self.id)[:8].upper()

    @property
    def is_active(self):
        return self.status != BookingStatus.CANCELLED

    @property
    def local_date(self):
        """Salon-local calendar date the booking starts on."""
        return timezone.localtime(self.start_at).date()

    def set_interval(self, start_at, duration_minutes: int):
        self.start_at = start_at
        self.end_at = start_at + timedelta(minutes=duration_minutes)

    # ── State transition helpers ──────────────────────────────────────────────

    def confirm(self, changed_by='system'):
        self._transition(BookingStatus.CONFIRMED, changed_by)
        self.save(update_fields=['status', 'updated_at'])

    def complete(self, changed_by='staff'):
        """Mark service as delivered."""
        self._transition(BookingStatus.COMPLETED, changed_by)
        self.save(update_fields=['status', 'updated_at'])

    def cancel(self, changed_by='staff', reason=''):
        self._transition(BookingStatus.CANCELLED, changed_by, reason)
        self.save(update_fields=['status', 'updated_at'])

    def _transition(self, new_status, changed_by, reason=''):
        old_status = self.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise InvalidTransitionError(
                f"Cannot move a {old_status} booking to {new_status}."
            )
        self.status = new_status
        BookingStatusLog.objects.create(
            booking_kind=self.KIND,
            booking_id=self.id,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


class ClientBooking(Booking):
    KIND = BookingKind.CLIENT

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='salon_bookings',
    )

    class Meta(Booking.Meta):
        verbose_name = 'Client Booking'
        verbose_name_plural = 'Client Bookings'


class StaffBooking(Booking):
    KIND = BookingKind.STAFF

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='entered_bookings',
    )
    client_full_name = models.CharField(max_length=120)
    client_phone = models.CharField(max_length=40)

    class Meta(Booking.Meta):
        verbose_name = 'Staff Booking'
        verbose_name_plural = 'Staff Bookings'


BOOKING_MODELS = {
    BookingKind.CLIENT: ClientBooking,
    BookingKind.STAFF: StaffBooking,
}


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking_kind = models.CharField(max_length=10, choices=BookingKind.choices)
    booking_id = models.UUIDField(db_index=True)
    from_status = models.CharField(max_length=20, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='system / staff / client')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"{self.booking_kind} {str(self.booking_id)[:8]}: {self.from_status or '∅'} → {self.to_status}"
