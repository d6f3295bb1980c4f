"""
Salon model — the tenant every employee, service, holiday and booking
belongs to.
"""
from django.db import models
from apps.core.models import BaseModel


class HolidayPolicy(models.TextChoices):
    NONE     = '',         'No holidays'
    STANDARD = 'standard', 'Standard (public holidays)'
    CUSTOM   = 'custom',   'Custom'


class Salon(BaseModel):
    name = models.CharField(max_length=120)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=40, blank=True)
    email = models.EmailField(blank=True)

    # Which kind of Holiday rows currently closes the calendar
    holiday_policy = models.CharField(
        max_length=10, choices=HolidayPolicy.choices,
        default=HolidayPolicy.STANDARD, blank=True,
    )

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Salon'
        verbose_name_plural = 'Salons'
        ordering = ['name']

    def __str__(self):
        return self.name
