from rest_framework import serializers
from core.dto import NewTenantDTO, PaymentDTO, RentalDTO
from core.validators import RentalValidator
from apartments.serializers import run_validator
from tenants.serializers import NewTenantSerializer, TenantListSerializer
from .models import Rental, RentalMember


class RentalMemberSerializer(serializers.ModelSerializer):
    """Tenant of a rental group"""
    tenant = TenantListSerializer(read_only=True)

    class Meta:
        model = RentalMember
        fields = ['id', 'tenant', 'added_at']


class RentalSerializer(serializers.ModelSerializer):
    """Serializer for Rental with its members and derived payment state"""
    apartment_name = serializers.CharField(source='apartment.name', read_only=True)
    members = RentalMemberSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()
    phase = serializers.SerializerMethodField()

    class Meta:
        model = Rental
        fields = [
            'id', 'apartment', 'apartment_name', 'assigned_date', 'due_date', 'price',
            'payment_status', 'status', 'paid_at', 'cancelled_at', 'cancellation_reason',
            'members', 'payment', 'phase', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def _now(self):
        return self.context.get('now')

    def get_payment(self, obj):
        """Payment badge: label, timing, warning"""
        return obj.payment_description(self._now()).as_dict()

    def get_phase(self, obj):
        return obj.phase(self._now())


class PaymentHistorySerializer(serializers.ModelSerializer):
    """Row of an apartment's payment history"""
    tenant_names = serializers.ReadOnlyField()

    class Meta:
        model = Rental
        fields = ['id', 'due_date', 'price', 'payment_status', 'paid_at', 'tenant_names']


def new_tenant_dtos(items):
    return [NewTenantDTO(**dict(item)) for item in items or []]


class RentalMembersInputSerializer(serializers.Serializer):
    """Existing tenant ids and/or new tenants"""
    tenant_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    new_tenants = NewTenantSerializer(many=True, required=False, default=list)


class RentalCreateSerializer(RentalMembersInputSerializer):
    """Assign tenants to an apartment"""
    apartment = serializers.IntegerField(min_value=1)
    due_date = serializers.DateField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, default=None)

    def validate_price(self, value):
        if value is None:
            return value
        return run_validator(RentalValidator.validate_price, value)

    def to_dto(self) -> RentalDTO:
        data = self.validated_data
        return RentalDTO(
            due_date=data['due_date'],
            price=data.get('price'),
            tenant_ids=list(data.get('tenant_ids') or []),
            new_tenants=new_tenant_dtos(data.get('new_tenants')),
        )


class RentalUpdateSerializer(serializers.Serializer):
    """Edit rental: due date and price"""
    due_date = serializers.DateField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)

    def validate_price(self, value):
        return run_validator(RentalValidator.validate_price, value)


class RentalStatusSerializer(serializers.Serializer):
    # Validated by RentalService.set_status (INVALID_STATUS)
    status = serializers.CharField()


class RentalCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentSerializer(serializers.Serializer):
    """
    Record a payment.

    ``renew`` (default true) opens the next period. ``tenant_ids`` omitted
    means "same members as the paid rental".
    """
    renew = serializers.BooleanField(required=False, default=True)
    next_due_date = serializers.DateField(required=False, allow_null=True, default=None)
    tenant_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, allow_null=True)
    new_tenants = NewTenantSerializer(many=True, required=False, default=list)

    def to_dto(self) -> PaymentDTO:
        data = self.validated_data
        tenant_ids = data.get('tenant_ids')
        return PaymentDTO(
            renew=data.get('renew', True),
            next_due_date=data.get('next_due_date'),
            tenant_ids=None if tenant_ids is None else list(tenant_ids),
            new_tenants=new_tenant_dtos(data.get('new_tenants')),
        )
