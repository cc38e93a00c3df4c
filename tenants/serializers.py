from django.utils import timezone
from rest_framework import serializers
from core.validators import TenantValidator
from apartments.serializers import run_validator
from .models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    """Serializer for Tenant"""
    has_active_rental = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = [
            'id', 'full_name', 'contact_info', 'phone_number', 'email',
            'move_in_date', 'has_active_rental', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_has_active_rental(self, obj):
        """Check if tenant belongs to an active rental group"""
        return obj.active_rentals.exists()

    def validate_full_name(self, value):
        run_validator(TenantValidator.validate_full_name, value)
        return value.strip()

    def validate_phone_number(self, value):
        return run_validator(TenantValidator.validate_phone_number, value)

    def validate_email(self, value):
        return run_validator(TenantValidator.validate_email, value)


class TenantListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view and rental members"""

    class Meta:
        model = Tenant
        fields = ['id', 'full_name', 'phone_number', 'email', 'move_in_date']


class NewTenantSerializer(serializers.Serializer):
    """A tenant created on the fly while assigning or renewing a rental"""
    full_name = serializers.CharField(max_length=255)
    contact_info = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    phone_number = serializers.CharField(required=False, allow_blank=True, default='')
    email = serializers.CharField(max_length=254, required=False, allow_blank=True, default='')
    move_in_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate_full_name(self, value):
        run_validator(TenantValidator.validate_full_name, value)
        return value.strip()

    def validate_phone_number(self, value):
        return run_validator(TenantValidator.validate_phone_number, value)

    def validate_email(self, value):
        return run_validator(TenantValidator.validate_email, value)

    def validate(self, attrs):
        # New tenants move in today unless told otherwise
        if attrs.get('move_in_date') is None:
            attrs['move_in_date'] = timezone.localdate()
        return attrs
