"""
Service model — a bookable treatment offered by a salon.

The availability engine only reads `duration_minutes`; everything else is
catalogue data.
"""
from django.db import models
from django.core.validators import MinValueValidator
from apps.core.models import BaseModel
from apps.salons.models import Salon


class Service(BaseModel):
    salon = models.ForeignKey(Salon, on_delete=models.CASCADE, related_name='services')
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text='Session duration in minutes',
    )
    price = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['name', 'duration_minutes']

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min)"
