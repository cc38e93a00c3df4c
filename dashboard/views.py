"""
Dashboard API

Business-wide metrics for the back office: occupancy, tenants, money
expected and received, and the rentals that need attention.
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Sum
from django.utils import timezone

from core.constants import RentalStatus
from apartments.models import Apartment
from tenants.models import Tenant
from rentals.models import Rental, RentalMember
from rentals.serializers import RentalSerializer
from rentals.lifecycle import due_soon_days, format_amount


def dashboard_metrics(now=None):
    """
    Summary metrics of the whole business.

    Returns:
        dict with apartment, tenant, payment and attention counters
    """
    now = now or timezone.now()

    # 1. Apartment metrics
    total_apartments = Apartment.objects.count()
    occupied_apartments = Apartment.objects.filter(
        rentals__status=RentalStatus.ACTIVE
    ).distinct().count()

    # 2. Tenant metrics
    total_tenants = Tenant.objects.count()
    active_tenants = RentalMember.objects.filter(
        rental__status=RentalStatus.ACTIVE
    ).values('tenant').distinct().count()

    # 3. Payment metrics
    expected_payments = Rental.objects.active().aggregate(total=Sum('price'))['total']
    received_payments = Rental.objects.settled().aggregate(total=Sum('price'))['total']

    return {
        # Apartment metrics
        'total_apartments': total_apartments,
        'occupied_apartments': occupied_apartments,
        'available_apartments': total_apartments - occupied_apartments,

        # Tenant metrics
        'total_tenants': total_tenants,
        'active_tenants': active_tenants,

        # Payment metrics
        'expected_payments': format_amount(expected_payments),
        'received_payments': format_amount(received_payments),

        # Attention
        'due_soon_count': Rental.objects.due_soon(now).count(),
        'overdue_count': Rental.objects.overdue(now).count(),
        'due_soon_days': due_soon_days(),
    }


class DashboardViewSet(viewsets.ViewSet):
    """
    ViewSet for dashboard operations.
    """

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Get dashboard summary metrics"""
        return Response(dashboard_metrics())

    @action(detail=False, methods=['get'])
    def attention(self, request):
        """Active, unpaid rentals that are overdue or due soon, earliest due first"""
        rentals = Rental.objects.needing_attention().select_related('apartment').prefetch_related('members__tenant')
        serializer = RentalSerializer(rentals, many=True, context={'request': request})
        return Response(serializer.data)
