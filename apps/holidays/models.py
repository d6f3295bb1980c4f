"""
Holiday model — a recurring (month, day) closure for a salon.

A holiday occurs every year on the matching month/day. Only rows whose
`kind` equals the salon's `holiday_policy` close the calendar.
"""
import calendar

from django.core.exceptions import ValidationError
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel
from apps.salons.models import Salon


class HolidayKind(models.TextChoices):
    STANDARD = 'standard', 'Standard'
    CUSTOM   = 'custom',   'Custom'


class Holiday(UUIDModel, TimestampedModel):
    salon = models.ForeignKey(Salon, on_delete=models.CASCADE, related_name='holidays')
    month = models.PositiveSmallIntegerField()
    day = models.PositiveSmallIntegerField()
    kind = models.CharField(
        max_length=10, choices=HolidayKind.choices,
        default=HolidayKind.STANDARD, db_index=True,
    )
    name = models.CharField(max_length=180)

    class Meta:
        verbose_name = 'Holiday'
        verbose_name_plural = 'Holidays'
        ordering = ['month', 'day']
        constraints = [
            models.UniqueConstraint(
                fields=['salon', 'month', 'day', 'kind'],
                name='uq_salon_holiday_month_day_kind',
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.day:02d}/{self.month:02d}, {self.kind})"

    def clean(self):
        if not 1 <= (self.month or 0) <= 12:
            raise ValidationError({'month': 'Month must be between 1 and 12.'})
        # Leap year so that 29 February stays a valid recurring date
        if not 1 <= (self.day or 0) <= calendar.monthrange(2000, self.month)[1]:
            raise ValidationError({'day': 'Day does not exist in that month.'})
