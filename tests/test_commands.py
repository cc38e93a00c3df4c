"""
Tests for the rental management commands
"""
from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from apartments.models import Apartment
from core.constants import PaymentStatus, RentalStatus
from core.dto import RentalDTO
from rentals.models import Rental
from rentals.services import RentalService
from tenants.models import Tenant
from tests.helpers import make_apartment, make_tenant


class OverdueRentalsCommandTest(TestCase):

    def setUp(self):
        service = RentalService()
        today = timezone.localdate()
        self.overdue = service.create_rental(
            make_apartment('Garden Room A1').id,
            RentalDTO(due_date=today - timedelta(days=2), tenant_ids=[make_tenant('Somchai Prasert').id])
        )
        self.due_soon = service.create_rental(
            make_apartment('Family Suite B1').id,
            RentalDTO(due_date=today + timedelta(days=5), tenant_ids=[make_tenant('Malee Wongsawat').id])
        )

    def run_command(self, *args):
        out = StringIO()
        call_command('overdue_rentals', *args, stdout=out)
        return out.getvalue()

    def test_lists_overdue_rentals(self):
        output = self.run_command()
        self.assertIn('Garden Room A1 - Somchai Prasert', output)
        self.assertIn('2 days overdue', output)
        self.assertNotIn('Family Suite B1', output)
        self.assertIn('Overdue: 1', output)
        self.assertIn('Due soon: 0', output)

    def test_within_days_widens_due_soon_window(self):
        output = self.run_command('--within-days', '7')
        self.assertIn('Family Suite B1', output)
        self.assertIn('Due soon: 1', output)

    def test_mark_ended(self):
        output = self.run_command('--mark-ended')
        self.assertIn('Marked ended: 1', output)
        self.overdue.refresh_from_db()
        self.due_soon.refresh_from_db()
        self.assertEqual(self.overdue.status, RentalStatus.ENDED)
        self.assertEqual(self.due_soon.status, RentalStatus.ACTIVE)

    def test_negative_window_is_rejected(self):
        with self.assertRaises(CommandError):
            self.run_command('--within-days', '-1')


class CreateSampleDataCommandTest(TestCase):

    def test_creates_rentals_in_every_state(self):
        call_command('create_sample_data', stdout=StringIO())

        self.assertEqual(Apartment.objects.count(), 5)
        self.assertEqual(Tenant.objects.count(), 6)
        statuses = set(Rental.objects.values_list('status', flat=True))
        self.assertEqual(statuses, {
            RentalStatus.ACTIVE, RentalStatus.COMPLETED, RentalStatus.CANCELLED
        })
        self.assertTrue(Rental.objects.filter(payment_status=PaymentStatus.LATE).exists())
        self.assertEqual(Rental.objects.overdue().count(), 1)

    def test_is_idempotent_and_clear_resets(self):
        call_command('create_sample_data', stdout=StringIO())
        count = Rental.objects.count()

        call_command('create_sample_data', stdout=StringIO())
        self.assertEqual(Rental.objects.count(), count)

        call_command('create_sample_data', '--clear', stdout=StringIO())
        self.assertEqual(Rental.objects.count(), count)
        self.assertEqual(Apartment.objects.count(), 5)
