"""
Seed management command.

Populates the database with demo data:
  - 1 salon (standard holiday policy)
  - 4 services
  - 3 employees with service assignments and weekly hours (lunch break 12:00–13:00)
  - New Year's Day as a standard holiday

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from datetime import time

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.bookings.models import BookingStatusLog, ClientBooking, StaffBooking
from apps.employees.models import Employee, WorkingHour
from apps.holidays.models import Holiday, HolidayKind
from apps.salons.models import HolidayPolicy, Salon
from apps.services.models import Service


class Command(BaseCommand):
    help = 'Seed a demo salon with services, employees, working hours and a holiday'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing data before creating fresh records',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            BookingStatusLog.objects.all().delete()
            ClientBooking.objects.all().delete()
            StaffBooking.objects.all().delete()
            WorkingHour.objects.all().delete()
            Holiday.objects.all().delete()
            Employee.objects.all_with_deleted().hard_delete()
            Service.objects.all_with_deleted().hard_delete()
            Salon.objects.all_with_deleted().hard_delete()

        self.stdout.write('Seeding salon...')
        salon, _ = Salon.objects.get_or_create(
            name='Atlas Beauty Lounge',
            defaults={
                'address': '12 Boulevard Zerktouni, Casablanca',
                'phone': '+212 522 000 000',
                'email': 'contact@atlasbeauty.example',
                'holiday_policy': HolidayPolicy.STANDARD,
            }
        )
        self.stdout.write(self.style.SUCCESS(f'  ✔ Salon: {salon.name}'))

        # ── Services ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding services...')
        services_data = [
            {'name': 'Haircut',         'duration_minutes': 30, 'price': 120, 'description': 'Wash, cut and blow-dry.'},
            {'name': 'Colouring',       'duration_minutes': 90, 'price': 450, 'description': 'Full colour with toner and styling.'},
            {'name': 'Manicure',        'duration_minutes': 45, 'price': 150, 'description': 'Shaping, cuticle care and polish.'},
            {'name': 'Facial',          'duration_minutes': 60, 'price': 300, 'description': 'Cleansing facial with mask and massage.'},
        ]
        services = {}
        for svc in services_data:
            service, _ = Service.objects.get_or_create(
                salon=salon, name=svc['name'],
                defaults={
                    'duration_minutes': svc['duration_minutes'],
                    'price': svc['price'],
                    'description': svc['description'],
                }
            )
            services[svc['name']] = service
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(services)} services created'))

        # ── Employees ─────────────────────────────────────────────────────────
        self.stdout.write('Seeding employees...')
        employees_data = [
            {'full_name': 'Salma Idrissi', 'services': ['Haircut', 'Colouring']},
            {'full_name': 'Youssef Alami', 'services': ['Haircut']},
            {'full_name': 'Nadia Bennani', 'services': ['Manicure', 'Facial']},
        ]
        employees = []
        for e in employees_data:
            employee, _ = Employee.objects.get_or_create(salon=salon, full_name=e['full_name'])
            employee.services.set([services[name] for name in e['services']])
            employees.append(employee)
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(employees)} employees created'))

        # ── Working hours (Mon–Sat, 09:00–18:00, lunch 12:00–13:00) ───────────
        self.stdout.write('Seeding working hours...')
        working_days = [0, 1, 2, 3, 4, 5]  # Monday to Saturday
        for employee in employees:
            for day in working_days:
                WorkingHour.objects.get_or_create(
                    employee=employee, weekday=day,
                    defaults={
                        'start_time': time(9, 0), 'end_time': time(18, 0),
                        'break_start': time(12, 0), 'break_end': time(13, 0),
                    }
                )
        self.stdout.write(self.style.SUCCESS('  ✔ Working hours set (Mon–Sat, 09:00–18:00)'))

        # ── Holidays ──────────────────────────────────────────────────────────
        Holiday.objects.get_or_create(
            salon=salon, month=1, day=1, kind=HolidayKind.STANDARD,
            defaults={'name': "New Year's Day"},
        )
        self.stdout.write(self.style.SUCCESS("  ✔ Standard holiday: New Year's Day"))

        self.stdout.write(self.style.SUCCESS(
            f'\n✅ Seed complete! Salon id: {salon.id}'
        ))
