"""
Tests for RentalService - assignment, membership, status changes and payments
"""
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase

from core.constants import PaymentStatus, RentalStatus
from core.dto import NewTenantDTO, PaymentDTO, RentalDTO
from core.exceptions import BusinessLogicError, ConflictError, NotFoundError, ValidationError
from rentals.models import Rental, RentalMember
from rentals.repositories import RentalRepository
from rentals.services import RentalService
from tenants.models import Tenant
from tests.helpers import bangkok, make_apartment, make_tenant


class RentalServiceTestCase(TestCase):

    def setUp(self):
        self.service = RentalService()
        self.apartment = make_apartment()
        self.somchai = make_tenant('Somchai Prasert')
        self.malee = make_tenant('Malee Wongsawat')
        self.now = bangkok(2024, 3, 1, 10)

    def create_rental(self, tenant_ids=None, **fields):
        data = RentalDTO(due_date=date(2024, 3, 10), tenant_ids=tenant_ids or [self.somchai.id], **fields)
        return self.service.create_rental(self.apartment.id, data, now=self.now)


class CreateRentalTests(RentalServiceTestCase):

    def test_creates_active_unpaid_rental_with_members(self):
        rental = self.create_rental([self.somchai.id, self.malee.id])

        self.assertEqual(rental.status, RentalStatus.ACTIVE)
        self.assertEqual(rental.payment_status, PaymentStatus.UNPAID)
        self.assertEqual(rental.assigned_date, self.now)
        self.assertEqual(rental.price, Decimal('4500.00'))
        self.assertEqual(
            set(rental.members.values_list('tenant_id', flat=True)),
            {self.somchai.id, self.malee.id}
        )

    def test_explicit_price_overrides_base_price(self):
        rental = self.create_rental(price=Decimal('4000.00'))
        self.assertEqual(rental.price, Decimal('4000.00'))

    def test_creates_new_tenants(self):
        rental = self.create_rental(new_tenants=[
            NewTenantDTO(full_name='  Anan Chaiyaporn ', phone_number='08345678901')
        ])

        anan = Tenant.objects.get(full_name='Anan Chaiyaporn')
        self.assertTrue(rental.members.filter(tenant=anan).exists())

    def test_requires_at_least_one_tenant(self):
        data = RentalDTO(due_date=date(2024, 3, 10))
        with self.assertRaises(ValidationError) as ctx:
            self.service.create_rental(self.apartment.id, data)
        self.assertEqual(ctx.exception.message, 'Please select at least one tenant')

    def test_second_active_rental_is_a_conflict(self):
        self.create_rental()
        with self.assertRaises(ConflictError):
            self.create_rental([self.malee.id])
        self.assertEqual(Rental.objects.count(), 1)

    def test_unknown_apartment(self):
        with self.assertRaises(NotFoundError):
            self.service.create_rental(999999, RentalDTO(due_date=date(2024, 3, 10), tenant_ids=[self.somchai.id]))

    def test_unknown_tenant_rolls_back(self):
        with self.assertRaises(NotFoundError):
            self.create_rental([999999])
        self.assertFalse(Rental.objects.exists())

    def test_invalid_new_tenant_phone_rolls_back(self):
        with self.assertRaises(ValidationError) as ctx:
            self.create_rental(new_tenants=[NewTenantDTO(full_name='Ploy', phone_number='0812')])
        self.assertEqual(ctx.exception.message, 'Phone must be exactly 11 digits')
        self.assertFalse(Rental.objects.exists())
        self.assertFalse(Tenant.objects.filter(full_name='Ploy').exists())


class MembershipTests(RentalServiceTestCase):

    def test_add_members(self):
        rental = self.create_rental()
        self.service.add_members(rental.id, tenant_ids=[self.malee.id])
        self.assertEqual(rental.members.count(), 2)

    def test_add_existing_member_is_a_conflict(self):
        rental = self.create_rental()
        with self.assertRaises(ConflictError):
            self.service.add_members(rental.id, tenant_ids=[self.somchai.id])

    def test_cannot_add_to_cancelled_rental(self):
        rental = self.create_rental()
        self.service.cancel_rental(rental.id)
        with self.assertRaises(BusinessLogicError):
            self.service.add_members(rental.id, tenant_ids=[self.malee.id])

    def test_remove_member(self):
        rental = self.create_rental([self.somchai.id, self.malee.id])
        self.service.remove_member(rental.id, self.malee.id)
        self.assertEqual(list(rental.members.values_list('tenant_id', flat=True)), [self.somchai.id])

    def test_remove_non_member(self):
        rental = self.create_rental()
        with self.assertRaises(NotFoundError):
            self.service.remove_member(rental.id, self.malee.id)

    def test_remove_only_while_active(self):
        rental = self.create_rental()
        self.service.mark_paid(rental.id, now=self.now)
        with self.assertRaises(BusinessLogicError):
            self.service.remove_member(rental.id, self.somchai.id)


class StatusTests(RentalServiceTestCase):

    def test_update_rental(self):
        rental = self.create_rental()
        self.service.update_rental(rental.id, due_date=date(2024, 3, 15), price=Decimal('4200.00'))
        rental.refresh_from_db()
        self.assertEqual(rental.due_date, date(2024, 3, 15))
        self.assertEqual(rental.price, Decimal('4200.00'))

    def test_cannot_edit_completed_rental(self):
        rental = self.create_rental()
        self.service.mark_paid(rental.id, now=self.now)
        with self.assertRaises(BusinessLogicError):
            self.service.update_rental(rental.id, price=Decimal('1.00'))

    def test_cannot_edit_cancelled_rental(self):
        rental = self.create_rental()
        self.service.cancel_rental(rental.id)
        with self.assertRaises(BusinessLogicError) as ctx:
            self.service.update_rental(rental.id, due_date=date(2024, 3, 20))
        self.assertEqual(ctx.exception.code, 'RENTAL_CLOSED')
        rental.refresh_from_db()
        self.assertEqual(rental.due_date, date(2024, 3, 10))

    def test_cancel_and_activate(self):
        rental = self.create_rental()
        cancelled = self.service.cancel_rental(rental.id, reason='Changed plans', now=self.now)
        self.assertEqual(cancelled.status, RentalStatus.CANCELLED)
        self.assertEqual(cancelled.cancelled_at, self.now)
        self.assertEqual(cancelled.cancellation_reason, 'Changed plans')

        activated = self.service.activate_rental(rental.id)
        self.assertEqual(activated.status, RentalStatus.ACTIVE)
        self.assertIsNone(activated.cancelled_at)

    def test_cancel_requires_active(self):
        rental = self.create_rental()
        self.service.set_status(rental.id, RentalStatus.ENDED)
        with self.assertRaises(BusinessLogicError):
            self.service.cancel_rental(rental.id)

    def test_activate_requires_cancelled(self):
        rental = self.create_rental()
        with self.assertRaises(BusinessLogicError):
            self.service.activate_rental(rental.id)

    def test_activate_conflicts_with_other_active_rental(self):
        first = self.create_rental()
        self.service.cancel_rental(first.id)
        self.create_rental([self.malee.id])
        with self.assertRaises(ConflictError):
            self.service.activate_rental(first.id)

    def test_set_status_rejects_unknown_status(self):
        rental = self.create_rental()
        with self.assertRaises(ValidationError):
            self.service.set_status(rental.id, 'archived')

    def test_set_status_to_active_conflicts(self):
        first = self.create_rental()
        self.service.set_status(first.id, RentalStatus.ENDED)
        self.create_rental([self.malee.id])
        with self.assertRaises(ConflictError):
            self.service.set_status(first.id, RentalStatus.ACTIVE)


class PaymentTests(RentalServiceTestCase):

    def test_mark_paid_on_time(self):
        rental = self.create_rental()
        paid_at = bangkok(2024, 3, 9, 15)
        rental = self.service.mark_paid(rental.id, now=paid_at)

        self.assertEqual(rental.payment_status, PaymentStatus.PAID)
        self.assertEqual(rental.status, RentalStatus.COMPLETED)
        self.assertEqual(rental.paid_at, paid_at)

    def test_mark_paid_after_due_is_late(self):
        rental = self.create_rental()
        rental = self.service.mark_paid(rental.id, now=bangkok(2024, 3, 12))
        self.assertEqual(rental.payment_status, PaymentStatus.LATE)

    def test_cannot_pay_twice(self):
        rental = self.create_rental()
        self.service.mark_paid(rental.id, now=self.now)
        with self.assertRaises(ConflictError):
            self.service.mark_paid(rental.id, now=self.now)

    def test_cannot_pay_cancelled_rental(self):
        rental = self.create_rental()
        self.service.cancel_rental(rental.id)
        with self.assertRaises(BusinessLogicError):
            self.service.mark_paid(rental.id)

    def test_record_payment_renews_with_same_members(self):
        rental = self.create_rental([self.somchai.id, self.malee.id])
        paid_at = bangkok(2024, 3, 8)

        paid, renewal = self.service.record_payment(rental.id, PaymentDTO(), now=paid_at)

        self.assertEqual(paid.status, RentalStatus.COMPLETED)
        self.assertEqual(renewal.status, RentalStatus.ACTIVE)
        self.assertEqual(renewal.payment_status, PaymentStatus.UNPAID)
        self.assertEqual(renewal.due_date, date(2024, 4, 10))
        self.assertEqual(renewal.price, paid.price)
        self.assertEqual(renewal.assigned_date, paid_at)
        self.assertEqual(
            set(renewal.members.values_list('tenant_id', flat=True)),
            {self.somchai.id, self.malee.id}
        )

    def test_record_payment_with_chosen_members_and_due_date(self):
        rental = self.create_rental([self.somchai.id, self.malee.id])
        payment = PaymentDTO(
            next_due_date=date(2024, 4, 1),
            tenant_ids=[self.malee.id],
            new_tenants=[NewTenantDTO(full_name='Kanya Rattanakul')],
        )

        _, renewal = self.service.record_payment(rental.id, payment, now=self.now)

        self.assertEqual(renewal.due_date, date(2024, 4, 1))
        names = set(renewal.members.values_list('tenant__full_name', flat=True))
        self.assertEqual(names, {'Malee Wongsawat', 'Kanya Rattanakul'})

    def test_record_payment_without_renewal(self):
        rental = self.create_rental()
        paid, renewal = self.service.record_payment(rental.id, PaymentDTO(renew=False), now=self.now)
        self.assertIsNone(renewal)
        self.assertEqual(Rental.objects.count(), 1)

    def test_renewal_without_members_rolls_back_payment(self):
        rental = self.create_rental()
        with self.assertRaises(ValidationError):
            self.service.record_payment(rental.id, PaymentDTO(tenant_ids=[]), now=self.now)

        rental.refresh_from_db()
        self.assertEqual(rental.payment_status, PaymentStatus.UNPAID)
        self.assertEqual(rental.status, RentalStatus.ACTIVE)
        self.assertEqual(Rental.objects.count(), 1)

    def test_failed_renewal_rolls_back_everything(self):
        rental = self.create_rental()
        payment = PaymentDTO(tenant_ids=[999999])
        with self.assertRaises(NotFoundError):
            self.service.record_payment(rental.id, payment, now=self.now)

        rental.refresh_from_db()
        self.assertEqual(rental.payment_status, PaymentStatus.UNPAID)
        self.assertIsNone(rental.paid_at)
        self.assertEqual(Rental.objects.count(), 1)
        self.assertEqual(RentalMember.objects.count(), 1)

    def test_renewal_refused_while_another_rental_is_active(self):
        ended = self.create_rental()
        self.service.set_status(ended.id, RentalStatus.ENDED)
        self.create_rental([self.malee.id])

        with self.assertRaises(ConflictError) as ctx:
            self.service.record_payment(ended.id, PaymentDTO(), now=self.now)

        self.assertEqual(ctx.exception.code, 'ACTIVE_RENTAL_EXISTS')
        ended.refresh_from_db()
        self.assertEqual(ended.status, RentalStatus.ENDED)
        self.assertEqual(ended.payment_status, PaymentStatus.UNPAID)
        self.assertIsNone(ended.paid_at)
        self.assertEqual(Rental.objects.count(), 2)


class OneActiveRentalTests(RentalServiceTestCase):

    def build_rental(self, **fields):
        return Rental(apartment=self.apartment, due_date=date(2024, 4, 10), price=Decimal('4500.00'), **fields)

    def test_database_refuses_second_active_rental(self):
        self.build_rental().save()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self.build_rental().save()
        self.assertEqual(Rental.objects.active().count(), 1)

    def test_closed_rentals_do_not_count(self):
        self.build_rental(status=RentalStatus.COMPLETED).save()
        self.build_rental(status=RentalStatus.CANCELLED).save()
        self.build_rental().save()
        self.assertEqual(Rental.objects.filter(apartment=self.apartment).count(), 3)

    def test_model_validation_reports_second_active_rental(self):
        self.create_rental()
        with self.assertRaises(DjangoValidationError) as ctx:
            self.build_rental().full_clean()
        self.assertIn('This apartment already has an active rental', ctx.exception.messages)

    def test_repository_create_maps_violation_to_conflict(self):
        self.create_rental()
        repo = RentalRepository(Rental)
        with self.assertRaises(ConflictError) as ctx:
            repo.create(apartment=self.apartment, due_date=date(2024, 4, 10), price=Decimal('4500.00'))
        self.assertEqual(ctx.exception.code, 'ACTIVE_RENTAL_EXISTS')
        self.assertEqual(Rental.objects.count(), 1)

    def test_repository_update_maps_violation_to_conflict(self):
        first = self.create_rental()
        self.service.cancel_rental(first.id)
        self.create_rental([self.malee.id])

        with self.assertRaises(ConflictError):
            RentalRepository(Rental).update(Rental.objects.get(id=first.id), status=RentalStatus.ACTIVE)

        first.refresh_from_db()
        self.assertEqual(first.status, RentalStatus.CANCELLED)
