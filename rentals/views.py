from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Rental
from .serializers import (
    RentalSerializer,
    RentalCreateSerializer,
    RentalUpdateSerializer,
    RentalMembersInputSerializer,
    RentalStatusSerializer,
    RentalCancelSerializer,
    PaymentSerializer,
    new_tenant_dtos,
)
from .services import RentalService


class RentalViewSet(mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    """
    ViewSet for rental groups
    Every write goes through RentalService (atomic, row-locked)
    """
    serializer_class = RentalSerializer
    lookup_value_regex = r'[0-9]+'
    search_fields = ['apartment__name', 'members__tenant__full_name']
    ordering_fields = ['due_date', 'assigned_date', 'paid_at', 'created_at']
    ordering = ['-created_at', '-id']

    def get_queryset(self):
        """
        Optional filters: ?status=, ?payment_status=, ?apartment=, ?tenant=
        """
        queryset = Rental.objects.with_members()

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.with_status(status_filter)

        payment_status = self.request.query_params.get('payment_status')
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)

        apartment_id = self.request.query_params.get('apartment')
        if apartment_id and apartment_id.isdigit():
            queryset = queryset.filter(apartment_id=apartment_id)

        tenant_id = self.request.query_params.get('tenant')
        if tenant_id and tenant_id.isdigit():
            queryset = queryset.filter(id__in=Rental.objects.filter(members__tenant_id=tenant_id).values('id'))

        return queryset

    def _respond(self, rental_id, status_code=status.HTTP_200_OK):
        """Serialize the rental as it is now, members included"""
        serializer = self.get_serializer(Rental.objects.with_members().get(id=rental_id))
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        """Assign tenants to an apartment (new active, unpaid rental)"""
        serializer = RentalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rental = RentalService().create_rental(serializer.validated_data['apartment'], serializer.to_dto())
        return self._respond(rental.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Edit rental: due date and price"""
        serializer = RentalUpdateSerializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        rental = RentalService().update_rental(
            kwargs.get('pk'),
            due_date=serializer.validated_data.get('due_date'),
            price=serializer.validated_data.get('price'),
        )
        return self._respond(rental.id)

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    @action(detail=True, methods=['post'])
    def members(self, request, pk=None):
        """Add existing and/or new tenants to this rental"""
        serializer = RentalMembersInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        RentalService().add_members(
            pk,
            tenant_ids=serializer.validated_data.get('tenant_ids'),
            new_tenants=new_tenant_dtos(serializer.validated_data.get('new_tenants')),
        )
        return self._respond(pk, status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'members/(?P<tenant_id>[0-9]+)')
    def remove_member(self, request, pk=None, tenant_id=None):
        """Remove a tenant from this (active) rental"""
        RentalService().remove_member(pk, int(tenant_id))
        return self._respond(pk)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = RentalCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rental = RentalService().cancel_rental(pk, reason=serializer.validated_data.get('reason', ''))
        return self._respond(rental.id)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        """Re-activate a cancelled rental"""
        rental = RentalService().activate_rental(pk)
        return self._respond(rental.id)

    @action(detail=True, methods=['post'], url_path='set-status')
    def set_status(self, request, pk=None):
        serializer = RentalStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rental = RentalService().set_status(pk, serializer.validated_data['status'])
        return self._respond(rental.id)

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """
        Record the payment of this rental
        With renew=true (default) the next period is opened in the same transaction
        """
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rental, renewal = RentalService().record_payment(pk, serializer.to_dto())
        return Response({
            'rental': self._respond(rental.id).data,
            'renewal': self._respond(renewal.id).data if renewal else None,
        })

