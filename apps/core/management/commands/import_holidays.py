"""
Import public holidays for a salon from the Nager.Date API.

Each holiday is stored as a recurring `standard` (month, day) entry:
created when missing, renamed when the feed's name changed.

Usage:
    python manage.py import_holidays <salon_id>
    python manage.py import_holidays <salon_id> --year 2026 --country MA
"""
import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.availability.catalog import get_salon
from apps.availability.exceptions import BookingEngineError
from apps.holidays.client import HolidayFeedError, fetch_public_holidays
from apps.holidays.models import Holiday, HolidayKind

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Import public holidays for a salon as recurring standard holidays'

    def add_arguments(self, parser):
        parser.add_argument('salon_id', help='Salon to import holidays for')
        parser.add_argument('--year', type=int, default=None,
                            help='Calendar year to fetch (default: current year)')
        parser.add_argument('--country', default='MA',
                            help='ISO 3166-1 alpha-2 country code (default: MA)')

    def handle(self, *args, **options):
        try:
            salon = get_salon(options['salon_id'])
        except BookingEngineError as e:
            raise CommandError(str(e))

        year = options['year'] or timezone.localdate().year
        country = options['country']
        self.stdout.write(f'Importing {country} holidays for {year} into {salon.name}...')

        try:
            feed = fetch_public_holidays(year, country)
        except HolidayFeedError as e:
            logger.error('Holiday import failed: salon=%s year=%s error=%s', salon.id, year, e)
            raise CommandError(str(e))

        if not feed:
            self.stdout.write(self.style.WARNING(f'No holidays found for {year}'))
            return

        imported, updated, skipped = self._store(salon, feed)

        logger.info('Holiday import completed: salon=%s year=%s imported=%d updated=%d skipped=%d',
                    salon.id, year, imported, updated, skipped)
        self.stdout.write(self.style.SUCCESS(
            f'✔ Imported {imported} new holidays, updated {updated}, skipped {skipped}'
        ))

    @transaction.atomic
    def _store(self, salon, feed):
        imported = updated = skipped = 0
        for entry in feed:
            day = self._date_of(entry)
            if day is None:
                self.stdout.write(self.style.WARNING(f'  Skipping entry without a valid date: {entry!r}'))
                skipped += 1
                continue

            name = entry.get('localName') or entry.get('name') or 'Unknown Holiday'
            holiday, created = Holiday.objects.get_or_create(
                salon=salon, month=day.month, day=day.day, kind=HolidayKind.STANDARD,
                defaults={'name': name},
            )
            if created:
                imported += 1
                self.stdout.write(f'  Imported {day.isoformat()} - {name}')
            elif holiday.name != name:
                holiday.name = name
                holiday.save(update_fields=['name', 'updated_at'])
                updated += 1
                self.stdout.write(f'  Updated {day.isoformat()} - {name}')
        return imported, updated, skipped

    @staticmethod
    def _date_of(entry):
        if not isinstance(entry, dict) or not isinstance(entry.get('date'), str):
            return None
        try:
            return parse_date(entry['date'][:10])
        except ValueError:
            return None
