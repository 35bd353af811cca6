"""
Serializers for Product API endpoints.
"""

from rest_framework import serializers

from api.v1.common import (
    ActivationSerializer,
    ActiveInstanceSerializer,
    InstanceIdentitySerializer,
    LicenseKeySerializer,
    SeatValueField,
)


class ActivateLicenseRequestSerializer(InstanceIdentitySerializer):
    """Serializer for activate license request."""

    product_slug = serializers.SlugField(required=True, max_length=100)
    instance_metadata = serializers.DictField(required=False, allow_empty=True, default=dict)


class DeactivateSeatRequestSerializer(InstanceIdentitySerializer):
    """Serializer for deactivate seat request."""

    product_slug = serializers.SlugField(required=True, max_length=100)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class ActivationLookupSerializer(InstanceIdentitySerializer):
    """Query parameters of the activation status endpoint."""

    product = serializers.SlugField(required=True, max_length=100)


class ProductSeatsQuerySerializer(serializers.Serializer):
    product = serializers.SlugField(required=True, max_length=100)


class SeatChangeSerializer(serializers.Serializer):
    """Serializer for SeatChangeDTO."""

    activation = ActivationSerializer()
    license_id = serializers.UUIDField()
    seats_before = serializers.IntegerField()
    seats_after = serializers.IntegerField()
    seats_remaining = SeatValueField()
    reactivated = serializers.BooleanField()
    message = serializers.CharField()


class EntitlementSerializer(serializers.Serializer):
    """Serializer for EntitlementDTO."""

    product_id = serializers.UUIDField()
    product_slug = serializers.CharField()
    product_name = serializers.CharField()
    product_description = serializers.CharField()
    license_id = serializers.UUIDField()
    status = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
    max_seats = serializers.IntegerField(allow_null=True)
    supports_seats = serializers.BooleanField()
    seats_total = serializers.IntegerField(allow_null=True)
    seats_used = serializers.IntegerField()
    seats_available = serializers.IntegerField(allow_null=True)
    usage_percentage = serializers.FloatField(allow_null=True)
    activations = ActiveInstanceSerializer(many=True)


class ProductSeatUsageSerializer(serializers.Serializer):
    product_slug = serializers.CharField()
    product_name = serializers.CharField()
    total = serializers.IntegerField()
    used = serializers.IntegerField()
    available = serializers.IntegerField(allow_null=True)


class KeySeatUsageSerializer(serializers.Serializer):
    total_seats = serializers.IntegerField()
    used_seats = serializers.IntegerField()
    available_seats = serializers.IntegerField()
    usage_percentage = serializers.FloatField()
    products = ProductSeatUsageSerializer(many=True)


class LicenseKeyStatusSerializer(serializers.Serializer):
    """Serializer for LicenseKeyStatusDTO."""

    license_key = LicenseKeySerializer()
    overall_status = serializers.CharField()
    is_valid = serializers.BooleanField()
    entitlements = EntitlementSerializer(many=True)
    seat_usage = KeySeatUsageSerializer()
    summary = serializers.DictField(child=serializers.IntegerField())
