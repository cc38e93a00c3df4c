"""
Management command to create sample data for demos
Creates apartments, tenants and rentals in every lifecycle state
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from core.dto import PaymentDTO, RentalDTO
from apartments.models import Apartment
from tenants.models import Tenant
from rentals.models import Rental
from rentals.services import RentalService

APARTMENTS = [
    ("Garden Room A1", Decimal('4500.00'), 1, "Ground floor studio facing the garden."),
    ("Garden Room A2", Decimal('4500.00'), 1, "Ground floor studio next to the parking."),
    ("Family Suite B1", Decimal('8500.00'), 2, "Two bedrooms with a small kitchen."),
    ("Family Suite B2", Decimal('9000.00'), 3, "Corner unit with balcony."),
    ("Rooftop Loft C1", Decimal('12000.00'), 2, "Top floor, shared rooftop terrace."),
]

TENANTS = [
    ("Somchai Prasert", "08123456789", "somchai@example.com"),
    ("Malee Wongsawat", "08234567890", "malee@example.com"),
    ("Anan Chaiyaporn", "08345678901", ""),
    ("Ploy Srisuk", "08456789012", "ploy@example.com"),
    ("Niran Thongdee", "", "niran@example.com"),
    ("Kanya Rattanakul", "08567890123", ""),
]


class Command(BaseCommand):
    help = 'Create sample data: 5 apartments, 6 tenants and rentals in every state'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete all apartments, tenants and rentals first',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            Rental.objects.all().delete()
            Apartment.objects.all().delete()
            Tenant.objects.all().delete()
            self.stdout.write(self.style.WARNING('Cleared existing apartments, tenants and rentals'))

        apartments = []
        for name, price, rooms, description in APARTMENTS:
            apartment, created = Apartment.objects.get_or_create(
                name=name,
                defaults={'base_price': price, 'room_count': rooms, 'description': description}
            )
            apartments.append(apartment)
            if created:
                self.stdout.write(self.style.SUCCESS(f'Created apartment: {apartment.name}'))

        tenants = []
        today = timezone.localdate()
        for index, (full_name, phone, email) in enumerate(TENANTS):
            tenant, created = Tenant.objects.get_or_create(
                full_name=full_name,
                defaults={
                    'phone_number': phone,
                    'email': email,
                    'move_in_date': today - timedelta(days=30 * (index + 1)),
                }
            )
            tenants.append(tenant)
            if created:
                self.stdout.write(self.style.SUCCESS(f'Created tenant: {tenant.full_name}'))

        if Rental.objects.exists():
            self.stdout.write(self.style.WARNING('Rentals already exist - skipping rental creation (use --clear)'))
            return

        service = RentalService()
        now = timezone.now()

        # Paid on time last month, renewed for this month (due soon)
        first = service.create_rental(
            apartments[0].id,
            RentalDTO(due_date=today - timedelta(days=28), tenant_ids=[tenants[0].id]),
            now=now - timedelta(days=40),
        )
        service.record_payment(first.id, PaymentDTO(next_due_date=today + timedelta(days=2)), now=now - timedelta(days=30))

        # Two tenants sharing a suite, payment overdue
        service.create_rental(
            apartments[2].id,
            RentalDTO(due_date=today - timedelta(days=5), tenant_ids=[tenants[1].id, tenants[2].id]),
            now=now - timedelta(days=35),
        )

        # Paid late, not renewed
        late = service.create_rental(
            apartments[3].id,
            RentalDTO(due_date=today - timedelta(days=20), tenant_ids=[tenants[3].id]),
            now=now - timedelta(days=50),
        )
        service.record_payment(late.id, PaymentDTO(renew=False), now=now - timedelta(days=15))

        # Cancelled booking
        cancelled = service.create_rental(
            apartments[4].id,
            RentalDTO(due_date=today + timedelta(days=10), tenant_ids=[tenants[4].id]),
            now=now,
        )
        service.cancel_rental(cancelled.id, reason='Tenant changed plans')

        # Current rental due next month
        service.create_rental(
            apartments[4].id,
            RentalDTO(due_date=today + timedelta(days=25), tenant_ids=[tenants[5].id], price=Decimal('11500.00')),
            now=now,
        )

        self.stdout.write(self.style.SUCCESS(f'\n✅ Created {Rental.objects.count()} rentals'))
