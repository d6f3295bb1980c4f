import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ('REQUESTED', 'Requested'),
    ('CONFIRMED', 'Confirmed'),
    ('CANCELLED', 'Cancelled'),
    ('COMPLETED', 'Completed'),
]


def booking_fields(related_name):
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('start_at', models.DateTimeField(db_index=True)),
        ('end_at', models.DateTimeField(db_index=True)),
        ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='REQUESTED', max_length=20)),
        ('notes', models.TextField(blank=True)),
        ('employee', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name=related_name, to='employees.employee')),
        ('salon', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name=related_name, to='salons.salon')),
        ('service', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name=related_name, to='services.service')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('employees', '0001_initial'),
        ('salons', '0001_initial'),
        ('services', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='BookingStatusLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('booking_kind', models.CharField(choices=[('client', 'Client booking'), ('staff', 'Staff booking')], max_length=10)),
                ('booking_id', models.UUIDField(db_index=True)),
                ('from_status', models.CharField(blank=True, choices=STATUS_CHOICES, max_length=20)),
                ('to_status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('changed_by', models.CharField(help_text='system / staff / client', max_length=80)),
                ('reason', models.TextField(blank=True)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Booking Status Log',
                'verbose_name_plural': 'Booking Status Logs',
                'ordering': ['changed_at'],
            },
        ),
        migrations.CreateModel(
            name='ClientBooking',
            fields=booking_fields('clientbookings') + [
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='salon_bookings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Client Booking',
                'verbose_name_plural': 'Client Bookings',
                'ordering': ['-start_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StaffBooking',
            fields=booking_fields('staffbookings') + [
                ('client_full_name', models.CharField(max_length=120)),
                ('client_phone', models.CharField(max_length=40)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='entered_bookings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Staff Booking',
                'verbose_name_plural': 'Staff Bookings',
                'ordering': ['-start_at'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='clientbooking',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'CANCELLED'), _negated=True), fields=('employee', 'start_at'), name='uq_clientbooking_active_employee_start'),
        ),
        migrations.AddConstraint(
            model_name='staffbooking',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'CANCELLED'), _negated=True), fields=('employee', 'start_at'), name='uq_staffbooking_active_employee_start'),
        ),
    ]
