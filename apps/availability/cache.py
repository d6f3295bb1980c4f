"""
Short-lived read-through cache for slot listings.

Entries are keyed by (service, employee or 'any', date). Every (employee,
date) a listing was computed from has a generation counter; the entry
records the generations it saw, and a ledger write bumps the counter with
an atomic incr. An entry whose recorded generations no longer match is a
miss, so a write invalidates exactly the listings that employee/date feeds.
Never consulted by the commit-time check.
"""
import logging
import random
from datetime import date as date_type

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

KEY_PREFIX = 'availability'


class AvailabilityCache:

    def __init__(self, alias: str = None, ttl: int = None):
        self.alias = alias or settings.AVAILABILITY_CACHE_ALIAS
        self.ttl = settings.AVAILABILITY_CACHE_TTL if ttl is None else ttl

    @property
    def backend(self):
        return caches[self.alias]

    @staticmethod
    def slots_key(service_id, employee_id, day: date_type) -> str:
        return f"{KEY_PREFIX}:slots:{service_id}:{employee_id or 'any'}:{day.isoformat()}"

    @staticmethod
    def generation_key(employee_id, day: date_type) -> str:
        return f"{KEY_PREFIX}:gen:{employee_id}:{day.isoformat()}"

    def stamp(self, employee_ids, day: date_type):
        """
        Current generations of the given (employee, day) pairs, created on
        first use. Take the stamp before computing the listing: a write that
        lands in between makes the stored entry stale on arrival.
        Returns None when the cache is unavailable.
        """
        keys = [self.generation_key(employee_id, day) for employee_id in employee_ids]
        try:
            for key in keys:
                # Random seed: a counter recreated after eviction must not
                # line up with generations recorded before it.
                self.backend.add(key, random.getrandbits(48), None)
            current = self.backend.get_many(keys)
        except Exception:
            logger.warning('Availability cache stamp failed for %s', day, exc_info=True)
            return None
        if len(current) != len(keys):
            return None
        return current

    def get_slots(self, service_id, employee_id, day: date_type):
        """Cached listing, or None on a miss, a stale entry or a cache outage."""
        try:
            entry = self.backend.get(self.slots_key(service_id, employee_id, day))
            if entry is None:
                return None
            deps = entry['deps']
            if deps and self.backend.get_many(list(deps)) != deps:
                return None
        except Exception:
            logger.warning('Availability cache read failed', exc_info=True)
            return None
        return entry['slots']

    def set_slots(self, service_id, employee_id, day: date_type, slots: list, stamp) -> None:
        if stamp is None:
            return
        key = self.slots_key(service_id, employee_id, day)
        try:
            self.backend.set(key, {'slots': slots, 'deps': stamp}, self.ttl)
        except Exception:
            logger.warning('Availability cache write failed for %s', key, exc_info=True)

    def invalidate(self, employee_id, day: date_type) -> bool:
        """
        Stale every listing computed from (employee_id, day). Failures are
        logged and swallowed: the triggering ledger write must still succeed.
        Returns True when a counter was bumped.
        """
        key = self.generation_key(employee_id, day)
        try:
            self.backend.incr(key)
        except ValueError:
            # No counter, so no listing depends on this pair.
            return False
        except Exception:
            logger.exception('Availability cache invalidation failed for employee %s on %s',
                             employee_id, day)
            return False
        logger.debug('Invalidated availability listings for employee %s on %s', employee_id, day)
        return True

    def invalidate_many(self, pairs) -> int:
        return sum(self.invalidate(employee_id, day) for employee_id, day in pairs)
