"""
Management command to list active, unpaid rentals that are overdue or due soon.

Usage:
    python manage.py overdue_rentals
    python manage.py overdue_rentals --within-days 7
    python manage.py overdue_rentals --mark-ended

Can be added to crontab to run every morning:
    0 8 * * * cd /path/to/project && python manage.py overdue_rentals
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.conf import settings
from django.utils import timezone

from core.constants import RentalStatus
from rentals.models import Rental
from rentals.services import RentalService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'List active, unpaid rentals that are overdue or due within N days'

    def add_arguments(self, parser):
        parser.add_argument(
            '--within-days',
            type=int,
            default=None,
            help='Days ahead that count as "due soon" (default: RENTAL_DUE_SOON_DAYS)',
        )
        parser.add_argument(
            '--mark-ended',
            action='store_true',
            help='Set overdue rentals to "ended"',
        )

    def handle(self, *args, **options):
        within_days = options['within_days']
        if within_days is not None and within_days < 0:
            raise CommandError('--within-days must be zero or positive')
        mark_ended = options['mark_ended']
        now = timezone.now()
        currency = getattr(settings, 'RENTAL_CURRENCY', 'THB')

        self.stdout.write(f"\n{'='*60}")
        self.stdout.write(f"  RENTALS NEEDING ATTENTION - {timezone.localdate():%d %b %Y}")
        self.stdout.write(f"{'='*60}\n")

        rentals = (
            Rental.objects.needing_attention(now, within_days)
            .select_related('apartment')
            .prefetch_related('members__tenant')
        )

        overdue_ids = []
        for rental in rentals:
            payment = rental.payment_description(now)
            line = (
                f"  {rental.apartment.name} - {rental.tenant_names or 'no tenants'} - "
                f"due {rental.due_date:%d %b %Y} - {currency} {rental.price} ({payment.timing})"
            )
            if payment.is_overdue:
                overdue_ids.append(rental.id)
                self.stdout.write(self.style.ERROR(line))
            else:
                self.stdout.write(self.style.WARNING(line))

        due_soon_count = len(rentals) - len(overdue_ids)

        ended_count = 0
        if mark_ended and overdue_ids:
            service = RentalService()
            for rental_id in overdue_ids:
                service.set_status(rental_id, RentalStatus.ENDED)
                ended_count += 1
            logger.info(f"Marked {ended_count} overdue rentals as ended")

        # Summary
        self.stdout.write(f"\n{'='*60}")
        self.stdout.write("  SUMMARY")
        self.stdout.write(f"{'='*60}")
        self.stdout.write(f"  Overdue: {len(overdue_ids)}")
        self.stdout.write(f"  Due soon: {due_soon_count}")
        if mark_ended:
            self.stdout.write(self.style.SUCCESS(f"  Marked ended: {ended_count}"))
        self.stdout.write(f"{'='*60}\n")
