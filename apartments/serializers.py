from rest_framework import serializers
from core.exceptions import ValidationError as AppValidationError
from core.validators import ApartmentValidator
from .models import Apartment


def run_validator(validator, value):
    """Turn an application validation error into a field error"""
    try:
        validator(value)
    except AppValidationError as exc:
        raise serializers.ValidationError(exc.message)
    return value


class ApartmentSerializer(serializers.ModelSerializer):
    """Serializer for Apartment"""
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    room_count = serializers.IntegerField(required=False)
    status = serializers.ReadOnlyField()
    has_active_rental = serializers.ReadOnlyField()
    next_payment_due = serializers.ReadOnlyField()

    class Meta:
        model = Apartment
        fields = [
            'id', 'name', 'description', 'base_price', 'room_count',
            'status', 'has_active_rental', 'next_payment_due',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'name': {'allow_blank': True}}

    def validate_name(self, value):
        run_validator(ApartmentValidator.validate_name, value)
        return value.strip()

    def validate_base_price(self, value):
        return run_validator(ApartmentValidator.validate_base_price, value)

    def validate_room_count(self, value):
        return run_validator(ApartmentValidator.validate_room_count, value)


class ApartmentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    status = serializers.ReadOnlyField()
    next_payment_due = serializers.ReadOnlyField()

    class Meta:
        model = Apartment
        fields = ['id', 'name', 'base_price', 'room_count', 'status', 'next_payment_due', 'created_at']
