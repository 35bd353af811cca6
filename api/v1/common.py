"""
Serializers and helpers shared by the brand and product APIs.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from core.domain.value_objects import InstanceIdentity, InstanceType


@extend_schema_field(OpenApiTypes.STR)
class SeatValueField(serializers.Field):
    """A seat count, or ``"unlimited"`` for uncapped licenses."""

    def to_representation(self, value):
        return value


class ErrorSerializer(serializers.Serializer):
    """Serializer documenting the error envelope."""

    code = serializers.CharField()
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorSerializer()


class InstanceIdentitySerializer(serializers.Serializer):
    """Identity fields of an instance; at least one identifier is required."""

    instance_id = serializers.CharField(required=False, allow_blank=True, max_length=255)
    instance_url = serializers.CharField(required=False, allow_blank=True, max_length=500)
    machine_id = serializers.CharField(required=False, allow_blank=True, max_length=255)
    instance_type = serializers.ChoiceField(
        choices=[instance_type.value for instance_type in InstanceType], required=False
    )

    def to_identity(self) -> InstanceIdentity:
        """Build the identity value object; raises the domain ValidationError."""
        data = self.validated_data
        return InstanceIdentity(
            instance_id=data.get("instance_id"),
            instance_url=data.get("instance_url"),
            machine_id=data.get("machine_id"),
            instance_type=data.get("instance_type"),
        )


class LicenseKeySerializer(serializers.Serializer):
    """Serializer for LicenseKeyDTO."""

    id = serializers.UUIDField()
    key = serializers.CharField()
    brand_id = serializers.UUIDField()
    customer_email = serializers.EmailField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    license_key_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    product_slug = serializers.CharField()
    product_name = serializers.CharField()
    status = serializers.CharField()
    is_valid = serializers.BooleanField()
    max_seats = serializers.IntegerField(allow_null=True)
    supports_seats = serializers.BooleanField()
    seats_used = serializers.IntegerField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class LicenseKeyWithLicensesSerializer(serializers.Serializer):
    """Serializer for LicenseKeyWithLicensesDTO."""

    license_key = LicenseKeySerializer()
    licenses = LicenseSerializer(many=True)


class ActiveInstanceSerializer(serializers.Serializer):
    """Serializer for ActiveInstanceDTO."""

    instance_id = serializers.CharField(allow_null=True)
    instance_type = serializers.CharField(allow_null=True)
    instance_url = serializers.CharField(allow_null=True)
    machine_id = serializers.CharField(allow_null=True)
    activated_at = serializers.DateTimeField()
    last_checked_at = serializers.DateTimeField(allow_null=True)


class ActivationSerializer(serializers.Serializer):
    """Serializer for ActivationDTO."""

    id = serializers.UUIDField()
    license_id = serializers.UUIDField()
    instance_id = serializers.CharField(allow_null=True)
    instance_type = serializers.CharField(allow_null=True)
    instance_url = serializers.CharField(allow_null=True)
    machine_id = serializers.CharField(allow_null=True)
    instance_metadata = serializers.DictField()
    status = serializers.CharField()
    is_active = serializers.BooleanField()
    activated_at = serializers.DateTimeField()
    last_checked_at = serializers.DateTimeField(allow_null=True)
    deactivated_at = serializers.DateTimeField(allow_null=True)
    deactivation_reason = serializers.CharField(allow_null=True)


class SeatUsageSerializer(serializers.Serializer):
    """Serializer for SeatUsageDTO."""

    license_id = serializers.UUIDField()
    product_slug = serializers.CharField()
    supports_seats = serializers.BooleanField()
    total = SeatValueField()
    used = serializers.IntegerField()
    available = SeatValueField()
    usage_percentage = SeatValueField()
    active_instances = ActiveInstanceSerializer(many=True)
