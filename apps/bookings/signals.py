"""
Availability cache eviction on ledger writes.

Every save or delete of either booking kind evicts the cached listings for
the (employee, local date) pairs it touched, old and new, once the
transaction commits. A failed eviction never fails the write.
"""
import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver
from django.utils import timezone

from apps.availability.cache import AvailabilityCache
from .models import ClientBooking, StaffBooking

logger = logging.getLogger(__name__)


def _ledger_key(employee_id, start_at):
    return (employee_id, timezone.localtime(start_at).date())


def _evict_on_commit(pairs):
    pairs = {pair for pair in pairs if pair[0] is not None}
    if not pairs:
        return

    def evict():
        try:
            AvailabilityCache().invalidate_many(pairs)
        except Exception:
            logger.exception('Availability cache eviction failed for %s', pairs)

    transaction.on_commit(evict)


@receiver(pre_save, sender=ClientBooking)
@receiver(pre_save, sender=StaffBooking)
def remember_previous_slot(sender, instance, **kwargs):
    """Stash the stored (employee, date) so a move evicts the old day too."""
    instance._previous_ledger_key = None
    if instance._state.adding:
        return
    previous = (
        sender.objects
        .filter(pk=instance.pk)
        .values_list('employee_id', 'start_at')
        .first()
    )
    if previous is not None:
        instance._previous_ledger_key = _ledger_key(*previous)


@receiver(post_save, sender=ClientBooking)
@receiver(post_save, sender=StaffBooking)
def evict_after_save(sender, instance, **kwargs):
    pairs = [_ledger_key(instance.employee_id, instance.start_at)]
    previous = getattr(instance, '_previous_ledger_key', None)
    if previous is not None:
        pairs.append(previous)
    _evict_on_commit(pairs)


@receiver(post_delete, sender=ClientBooking)
@receiver(post_delete, sender=StaffBooking)
def evict_after_delete(sender, instance, **kwargs):
    _evict_on_commit([_ledger_key(instance.employee_id, instance.start_at)])
