"""
Booking ledger — one read view over both booking kinds.

A staff booking blocks a client slot and vice versa, so every query here
walks every model in BOOKING_MODELS.
"""
import logging
from datetime import datetime
from typing import NamedTuple, Optional

from django.db import DatabaseError

from apps.bookings.models import BOOKING_MODELS, BookingStatus
from .exceptions import LedgerError

logger = logging.getLogger(__name__)


class LedgerRef(NamedTuple):
    """Identifies one booking across both kinds."""
    id: object
    kind: str


class LedgerEntry(NamedTuple):
    id: object
    kind: str
    start: datetime
    end: datetime


class BookingLedger:

    def active_overlapping(self, employee_id, start: datetime, end: datetime,
                           exclude: Optional[LedgerRef] = None) -> list:
        """
        Non-cancelled bookings of `employee_id` intersecting [start, end),
        ordered by start. `exclude` drops the booking being re-checked.
        """
        entries = []
        try:
            for kind, model in BOOKING_MODELS.items():
                qs = (
                    model.objects
                    .filter(employee_id=employee_id, start_at__lt=end, end_at__gt=start)
                    .exclude(status=BookingStatus.CANCELLED)
                )
                if exclude is not None and exclude.kind == kind:
                    qs = qs.exclude(id=exclude.id)
                entries.extend(
                    LedgerEntry(pk, kind, s, e)
                    for pk, s, e in qs.values_list('id', 'start_at', 'end_at')
                )
        except DatabaseError as exc:
            raise LedgerError(f"Booking ledger read failed for employee {employee_id}") from exc

        entries.sort(key=lambda entry: entry.start)
        return entries
