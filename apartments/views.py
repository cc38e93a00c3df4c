from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db import transaction
import logging

from core.constants import RentalStatus
from core.exceptions import ValidationError as AppValidationError
from api.pagination import RentalPagination
from rentals.repositories import RentalRepository
from rentals.models import Rental
from rentals.serializers import RentalSerializer, PaymentHistorySerializer
from tenants.repositories import TenantRepository
from tenants.models import Tenant
from tenants.serializers import TenantListSerializer
from .models import Apartment
from .repositories import ApartmentRepository
from .serializers import ApartmentSerializer, ApartmentListSerializer
from .utils import export_payment_history

logger = logging.getLogger(__name__)


class ApartmentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the apartment inventory
    Detail actions back the apartment page: rentals, payment history, tenant picker
    """
    lookup_value_regex = r'[0-9]+'
    search_fields = ['name']
    ordering_fields = ['name', 'base_price', 'room_count', 'created_at']
    ordering = ['-created_at', '-id']

    def get_serializer_class(self):
        if self.action == 'list':
            return ApartmentListSerializer
        return ApartmentSerializer

    def get_queryset(self):
        """Apartments with active-rental count and next due date annotated"""
        return Apartment.objects.with_rental_stats()

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        """Update apartment with row-level locking"""
        ApartmentRepository(Apartment).lock(kwargs.get('pk'))
        return super().update(request, *args, **kwargs)

    def perform_create(self, serializer):
        apartment = serializer.save()
        logger.info(f"Apartment created: {apartment.name} (id={apartment.id})")

    def perform_destroy(self, instance):
        logger.info(f"Apartment deleted: {instance.name} (id={instance.id})")
        instance.delete()

    @action(detail=True, methods=['get'])
    def rentals(self, request, pk=None):
        """
        Rental groups of this apartment, newest first
        ?status=all|active|completed|ended|cancelled, 5 per page by default
        """
        apartment = self.get_object()
        status_filter = request.query_params.get('status', 'all')
        if status_filter != 'all' and status_filter not in RentalStatus.VALUES:
            raise AppValidationError(
                message=f'Invalid status filter: {status_filter}',
                code='INVALID_STATUS',
                details={'field': 'status', 'choices': ['all'] + RentalStatus.VALUES}
            )

        rentals = RentalRepository(Rental).get_by_apartment(apartment.id, status_filter)
        paginator = RentalPagination()
        page = paginator.paginate_queryset(rentals, request, view=self)
        serializer = RentalSerializer(page, many=True, context=self.get_serializer_context())
        return paginator.get_paginated_response(serializer.data)

    @action(detail=True, methods=['get'], url_path='payment-history')
    def payment_history(self, request, pk=None):
        """Paid rentals of this apartment, latest payment first, with totals"""
        apartment = self.get_object()
        repo = ApartmentRepository(Apartment)
        rentals = repo.get_payment_history(apartment)
        return Response({
            'summary': repo.get_payment_summary(apartment),
            'results': PaymentHistorySerializer(rentals, many=True).data,
        })

    @action(detail=True, methods=['get'], url_path='payment-history/csv')
    def payment_history_csv(self, request, pk=None):
        """Payment history as a CSV download"""
        apartment = self.get_object()
        rentals = ApartmentRepository(Apartment).get_payment_history(apartment)
        return export_payment_history(apartment, rentals)

    @action(detail=True, methods=['get'], url_path='available-tenants')
    def available_tenants(self, request, pk=None):
        """Tenants that can still be added to a rental of this apartment"""
        apartment = self.get_object()
        tenants = TenantRepository(Tenant).get_available_for(apartment)
        return Response(TenantListSerializer(tenants, many=True).data)
