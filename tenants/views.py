from rest_framework import viewsets
from rest_framework.decorators import action
from django.db import transaction
import logging

from core.dto import NewTenantDTO
from core.repositories import BaseRepository
from rentals.repositories import RentalRepository
from rentals.models import Rental
from rentals.serializers import RentalSerializer
from .models import Tenant
from .serializers import TenantSerializer, TenantListSerializer
from .services import TenantService

logger = logging.getLogger(__name__)


class TenantViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Tenant management
    Deleting a tenant removes their rental memberships
    """
    lookup_value_regex = r'[0-9]+'
    search_fields = ['full_name']
    ordering_fields = ['full_name', 'created_at', 'move_in_date']
    ordering = ['-created_at', '-id']

    def get_serializer_class(self):
        if self.action == 'list':
            return TenantListSerializer
        return TenantSerializer

    def get_queryset(self):
        return Tenant.objects.all()

    def perform_create(self, serializer):
        """Create through the service so validation and logging match rental flows"""
        tenant = TenantService().create_tenant(NewTenantDTO(**serializer.validated_data))
        serializer.instance = tenant

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        """Update tenant with row-level locking"""
        BaseRepository(Tenant).lock(kwargs.get('pk'))
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        logger.info(f"Tenant deleted: {instance.full_name} (id={instance.id})")
        instance.delete()

    @action(detail=True, methods=['get'])
    def rentals(self, request, pk=None):
        """Rental groups this tenant belongs to"""
        tenant = self.get_object()
        rentals = RentalRepository(Rental).get_by_tenant(tenant.id)
        page = self.paginate_queryset(rentals)
        serializer = RentalSerializer(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)
