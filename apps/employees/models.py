"""
Employee models: Employee profile and the weekly WorkingHour grid.
Each employee belongs to exactly one salon.
"""
from django.core.exceptions import ValidationError
from django.db import models
from apps.core.models import BaseModel, UUIDModel
from apps.salons.models import Salon
from apps.services.models import Service


WEEKDAY_CHOICES = [
    (0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'),
    (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday'),
]


class Employee(BaseModel):
    salon = models.ForeignKey(
        Salon,
        on_delete=models.CASCADE,
        related_name='employees',
    )
    full_name = models.CharField(max_length=120)
    phone = models.CharField(max_length=40, blank=True)
    note = models.TextField(blank=True)
    services = models.ManyToManyField(
        Service,
        related_name='employees',
        blank=True,
        help_text='Services this employee is qualified to perform',
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'
        ordering = ['salon', 'full_name']

    def __str__(self):
        return f"{self.full_name} — {self.salon.name}"


class WorkingHour(UUIDModel):
    """
    An employee's working window for one weekday, with an optional break.
    A missing row, or a row with empty start/end, is a day off.
    """
    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name='working_hours',
    )
    weekday = models.IntegerField(choices=WEEKDAY_CHOICES)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    break_start = models.TimeField(null=True, blank=True)
    break_end = models.TimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Working Hour'
        verbose_name_plural = 'Working Hours'
        unique_together = [('employee', 'weekday')]
        ordering = ['employee', 'weekday']

    def __str__(self):
        if not self.is_working_day:
            return f"{self.employee.full_name} — {self.get_weekday_display()} (off)"
        return (
            f"{self.employee.full_name} — {self.get_weekday_display()} "
            f"({self.start_time.strftime('%H:%M')}–{self.end_time.strftime('%H:%M')})"
        )

    @property
    def is_working_day(self):
        return self.start_time is not None and self.end_time is not None

    @property
    def has_break(self):
        return self.break_start is not None and self.break_end is not None

    def clean(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ValidationError('Start and end time must be set together.')
        if (self.break_start is None) != (self.break_end is None):
            raise ValidationError('Break start and end must be set together.')
        if not self.is_working_day:
            if self.has_break:
                raise ValidationError('A day off cannot have a break.')
            return
        if self.start_time >= self.end_time:
            raise ValidationError('Start time must be before end time.')
        if self.has_break and not (
            self.start_time < self.break_start < self.break_end < self.end_time
        ):
            raise ValidationError('Break must lie strictly inside the working window.')
