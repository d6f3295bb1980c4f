"""
Base model mixins for salon records.

Salons, services and employees are retired rather than removed: bookings
keep their foreign keys, while the default manager (and with it every
availability lookup) stops seeing the retired row.
"""
import uuid
from django.db import models
from django.utils import timezone


class UUIDModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class RetiringQuerySet(models.QuerySet):
    def delete(self):
        """Bulk retire; returns the number of rows stamped."""
        return self.update(deleted_at=timezone.now())

    def hard_delete(self):
        return super().delete()


class RetiringManager(models.Manager.from_queryset(RetiringQuerySet)):
    """Default manager: retired rows are invisible."""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)

    def all_with_deleted(self):
        return super().get_queryset()


class SoftDeleteModel(models.Model):
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = RetiringManager()

    class Meta:
        abstract = True

    def delete(self, *args, **kwargs):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at'])


class BaseModel(UUIDModel, TimestampedModel, SoftDeleteModel):
    """UUID pk + timestamps + retirement, for salons, services and employees."""
    class Meta:
        abstract = True
