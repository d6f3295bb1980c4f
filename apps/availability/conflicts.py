"""
Conflict checker — the authoritative "is this interval free" primitive.
"""
import logging
from datetime import datetime, timedelta

from .ledger import BookingLedger
from .slots import overlaps

logger = logging.getLogger(__name__)


class ConflictChecker:

    def __init__(self, ledger: BookingLedger = None):
        self.ledger = ledger or BookingLedger()

    def is_free(self, employee_id, start: datetime, duration_minutes: int, exclude=None) -> bool:
        end = start + timedelta(minutes=duration_minutes)
        conflicts = [
            entry for entry in self.ledger.active_overlapping(employee_id, start, end, exclude)
            if overlaps(start, end, entry.start, entry.end)
        ]
        if conflicts:
            logger.debug(
                'Conflict for employee %s at %s: %s booking %s (%s – %s)',
                employee_id, start.isoformat(), conflicts[0].kind, conflicts[0].id,
                conflicts[0].start.isoformat(), conflicts[0].end.isoformat(),
            )
        return not conflicts

    def free_starts(self, employee_id, starts: list, duration_minutes: int) -> list:
        """
        Filter candidate starts down to the free ones with a single ledger
        read covering all of them. Same answer as calling is_free per start.
        """
        if not starts:
            return []
        span = timedelta(minutes=duration_minutes)
        occupied = self.ledger.active_overlapping(employee_id, min(starts), max(starts) + span)
        return [
            start for start in starts
            if not any(overlaps(start, start + span, occ.start, occ.end) for occ in occupied)
        ]
