"""
API tests for rental groups: assignment, membership, status and payment flows
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.dto import RentalDTO
from rentals.lifecycle import next_due_date
from rentals.models import Rental
from rentals.services import RentalService
from tests.helpers import make_apartment, make_tenant

pytestmark = pytest.mark.django_db


@pytest.fixture
def apartment():
    return make_apartment('Garden Room A1', base_price='4500.00')


@pytest.fixture
def somchai():
    return make_tenant('Somchai Prasert')


@pytest.fixture
def malee():
    return make_tenant('Malee Wongsawat')


@pytest.fixture
def rental(apartment, somchai):
    data = RentalDTO(due_date=timezone.localdate() + timedelta(days=10), tenant_ids=[somchai.id])
    return RentalService().create_rental(apartment.id, data)


class TestCreateRental:

    def test_assign_existing_and_new_tenants(self, api_client, apartment, somchai):
        due_date = timezone.localdate() + timedelta(days=30)
        response = api_client.post('/api/rentals/', {
            'apartment': apartment.id,
            'due_date': due_date.isoformat(),
            'tenant_ids': [somchai.id],
            'new_tenants': [{'full_name': 'Anan Chaiyaporn', 'phone_number': '08345678901'}],
        }, format='json')

        assert response.status_code == 201
        assert response.data['status'] == 'active'
        assert response.data['payment_status'] == 'unpaid'
        assert response.data['price'] == '4500.00'
        names = [member['tenant']['full_name'] for member in response.data['members']]
        assert sorted(names) == ['Anan Chaiyaporn', 'Somchai Prasert']
        anan = next(m['tenant'] for m in response.data['members'] if m['tenant']['full_name'] == 'Anan Chaiyaporn')
        assert anan['move_in_date'] == timezone.localdate().isoformat()

    def test_requires_a_tenant(self, api_client, apartment):
        response = api_client.post('/api/rentals/', {
            'apartment': apartment.id,
            'due_date': '2030-01-01',
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'TENANTS_REQUIRED'
        assert response.data['detail'] == 'Please select at least one tenant'

    def test_invalid_new_tenant_phone(self, api_client, apartment):
        response = api_client.post('/api/rentals/', {
            'apartment': apartment.id,
            'due_date': '2030-01-01',
            'new_tenants': [{'full_name': 'Anan', 'phone_number': '123'}],
        }, format='json')

        assert response.status_code == 400
        assert 'Phone must be exactly 11 digits' in str(response.data['new_tenants'])

    def test_second_active_rental_conflicts(self, api_client, apartment, malee, rental):
        response = api_client.post('/api/rentals/', {
            'apartment': apartment.id,
            'due_date': '2030-01-01',
            'tenant_ids': [malee.id],
        }, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'ACTIVE_RENTAL_EXISTS'

    def test_unknown_apartment(self, api_client, somchai):
        response = api_client.post('/api/rentals/', {
            'apartment': 999999,
            'due_date': '2030-01-01',
            'tenant_ids': [somchai.id],
        }, format='json')
        assert response.status_code == 404


class TestRentalEdits:

    def test_list_filters(self, api_client, rental, somchai):
        assert api_client.get('/api/rentals/', {'status': 'active'}).data['count'] == 1
        assert api_client.get('/api/rentals/', {'status': 'cancelled'}).data['count'] == 0
        assert api_client.get('/api/rentals/', {'tenant': somchai.id}).data['count'] == 1

    def test_edit_due_date_and_price(self, api_client, rental):
        response = api_client.patch(f'/api/rentals/{rental.id}/', {
            'due_date': '2030-02-01',
            'price': '4200.00',
        }, format='json')

        assert response.status_code == 200
        assert response.data['due_date'] == '2030-02-01'
        assert response.data['price'] == '4200.00'

    def test_add_and_remove_member(self, api_client, rental, malee):
        response = api_client.post(f'/api/rentals/{rental.id}/members/', {'tenant_ids': [malee.id]}, format='json')
        assert response.status_code == 201
        assert len(response.data['members']) == 2

        response = api_client.delete(f'/api/rentals/{rental.id}/members/{malee.id}/')
        assert response.status_code == 200
        assert len(response.data['members']) == 1

    def test_add_existing_member_conflicts(self, api_client, rental, somchai):
        response = api_client.post(f'/api/rentals/{rental.id}/members/', {'tenant_ids': [somchai.id]}, format='json')
        assert response.status_code == 409

    def test_remove_member_from_completed_rental(self, api_client, rental, somchai):
        RentalService().mark_paid(rental.id)
        response = api_client.delete(f'/api/rentals/{rental.id}/members/{somchai.id}/')
        assert response.status_code == 422
        assert response.data['code'] == 'RENTAL_NOT_ACTIVE'

    def test_cancel_then_activate(self, api_client, rental):
        response = api_client.post(f'/api/rentals/{rental.id}/cancel/', {'reason': 'Changed plans'}, format='json')
        assert response.status_code == 200
        assert response.data['status'] == 'cancelled'
        assert response.data['cancelled_at'] is not None
        assert response.data['phase'] == 'cancelled'

        response = api_client.post(f'/api/rentals/{rental.id}/activate/')
        assert response.status_code == 200
        assert response.data['status'] == 'active'
        assert response.data['cancelled_at'] is None

    def test_set_status(self, api_client, rental):
        response = api_client.post(f'/api/rentals/{rental.id}/set-status/', {'status': 'ended'}, format='json')
        assert response.status_code == 200
        assert response.data['status'] == 'ended'

    def test_set_status_rejects_unknown_value(self, api_client, rental):
        response = api_client.post(f'/api/rentals/{rental.id}/set-status/', {'status': 'archived'}, format='json')
        assert response.status_code == 400
        assert response.data['code'] == 'INVALID_STATUS'
        assert 'archived' in response.data['detail']
        rental.refresh_from_db()
        assert rental.status == 'active'

    def test_missing_rental(self, api_client):
        response = api_client.post('/api/rentals/999999/cancel/', {}, format='json')
        assert response.status_code == 404
        assert response.data['code'] == 'NOT_FOUND'


class TestPayment:

    def test_pay_and_renew(self, api_client, rental, somchai):
        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {}, format='json')

        assert response.status_code == 200
        paid = response.data['rental']
        renewal = response.data['renewal']
        assert paid['status'] == 'completed'
        assert paid['payment_status'] == 'paid'
        assert paid['payment']['status'] == 'PAID'
        assert renewal['status'] == 'active'
        assert renewal['payment_status'] == 'unpaid'
        assert renewal['price'] == paid['price']
        assert renewal['due_date'] == next_due_date(rental.due_date).isoformat()
        assert [m['tenant']['id'] for m in renewal['members']] == [somchai.id]

    def test_pay_without_renewal(self, api_client, rental):
        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {'renew': False}, format='json')

        assert response.status_code == 200
        assert response.data['renewal'] is None
        assert Rental.objects.count() == 1

    def test_pay_overdue_rental_is_late(self, api_client, apartment, somchai):
        rental = RentalService().create_rental(
            apartment.id,
            RentalDTO(due_date=timezone.localdate() - timedelta(days=3), tenant_ids=[somchai.id])
        )

        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {'renew': False}, format='json')

        assert response.data['rental']['payment_status'] == 'late'
        assert response.data['rental']['payment']['status'] == 'LATE PAYMENT'

    def test_pay_twice_conflicts(self, api_client, rental):
        api_client.post(f'/api/rentals/{rental.id}/pay/', {'renew': False}, format='json')
        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {'renew': False}, format='json')
        assert response.status_code == 409

    def test_failed_renewal_leaves_rental_unpaid(self, api_client, rental):
        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {'tenant_ids': [999999]}, format='json')

        assert response.status_code == 404
        rental.refresh_from_db()
        assert rental.payment_status == 'unpaid'
        assert rental.status == 'active'
        assert Rental.objects.count() == 1

    def test_renew_with_custom_due_date_and_price_kept(self, api_client, rental, malee):
        response = api_client.post(f'/api/rentals/{rental.id}/pay/', {
            'next_due_date': '2031-05-05',
            'tenant_ids': [malee.id],
        }, format='json')

        renewal = response.data['renewal']
        assert renewal['due_date'] == '2031-05-05'
        assert Decimal(renewal['price']) == Decimal('4500.00')
        assert [m['tenant']['full_name'] for m in renewal['members']] == ['Malee Wongsawat']
