"""
Serializers for Brand API endpoints.
"""

from rest_framework import serializers

from api.v1.common import LicenseKeySerializer, LicenseSerializer
from licenses.domain.license import MAX_RENEWAL_DAYS, MIN_RENEWAL_DAYS


class CreateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for create license key request."""

    customer_email = serializers.EmailField(required=True)


class UpdateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for update license key request."""

    customer_email = serializers.EmailField(required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide customer_email or is_active")
        return attrs


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for attaching a license to a license key."""

    product_id = serializers.UUIDField(required=True)
    max_seats = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class ProvisionLicenseRequestSerializer(serializers.Serializer):
    """Serializer for provision license request."""

    customer_email = serializers.EmailField(required=True)
    products = serializers.ListField(child=serializers.UUIDField(), required=True, min_length=1)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    max_seats = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class RenewLicenseRequestSerializer(serializers.Serializer):
    """Serializer for renew license request; exactly one field is required."""

    days = serializers.IntegerField(
        required=False, min_value=MIN_RENEWAL_DAYS, max_value=MAX_RENEWAL_DAYS
    )
    expires_at = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if ("days" in attrs) == ("expires_at" in attrs):
            raise serializers.ValidationError("Provide exactly one of days or expires_at")
        return attrs


class ForceDeactivateRequestSerializer(serializers.Serializer):
    """Serializer for releasing every seat of a license."""

    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class CreateProductRequestSerializer(serializers.Serializer):
    """Serializer for create product request."""

    name = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    max_seats = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class ProductSerializer(serializers.Serializer):
    """Serializer for ProductDTO."""

    id = serializers.UUIDField()
    brand_id = serializers.UUIDField()
    name = serializers.CharField()
    slug = serializers.CharField()
    description = serializers.CharField()
    max_seats = serializers.IntegerField(allow_null=True)
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class BrandStatisticsSerializer(serializers.Serializer):
    """Serializer for BrandStatisticsDTO."""

    brand_id = serializers.UUIDField()
    products = serializers.IntegerField()
    active_products = serializers.IntegerField()
    license_keys = serializers.IntegerField()
    active_license_keys = serializers.IntegerField()
    licenses = serializers.IntegerField()
    valid_licenses = serializers.IntegerField()
    total_seats = serializers.IntegerField()


class LicenseSummarySerializer(serializers.Serializer):
    """Serializer for BrandLicenseSummaryDTO."""

    total = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    expired = serializers.IntegerField()


class LicenseListSerializer(serializers.Serializer):
    """Serializer for LicenseListDTO."""

    licenses = LicenseSerializer(many=True)
    summary = LicenseSummarySerializer()


class ForceDeactivationSerializer(serializers.Serializer):
    """Serializer for ForceDeactivationDTO."""

    license_id = serializers.UUIDField()
    deactivated_count = serializers.IntegerField()
    reason = serializers.CharField()


class CustomerQuerySerializer(serializers.Serializer):
    """Query parameters of the customer endpoints."""

    email = serializers.EmailField(required=True)


class ProductAccessQuerySerializer(CustomerQuerySerializer):
    product = serializers.SlugField(required=True)
    all_brands = serializers.BooleanField(required=False, default=False)


class BrandRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    slug = serializers.CharField()


class CustomerLicenseKeySerializer(serializers.Serializer):
    license_key = LicenseKeySerializer()
    brand = BrandRefSerializer(allow_null=True)
    licenses = LicenseSerializer(many=True)


class ProductSummarySerializer(serializers.Serializer):
    brand_id = serializers.UUIDField()
    brand_name = serializers.CharField()
    product_slug = serializers.CharField()
    product_name = serializers.CharField()
    licenses_count = serializers.IntegerField()
    total_seats = serializers.IntegerField()
    active_seats = serializers.IntegerField()


class CustomerLicensesSerializer(serializers.Serializer):
    """Serializer for CustomerLicensesDTO."""

    customer_email = serializers.EmailField()
    total_license_keys = serializers.IntegerField()
    total_licenses = serializers.IntegerField()
    brands_count = serializers.IntegerField()
    brands = BrandRefSerializer(many=True)
    license_keys = CustomerLicenseKeySerializer(many=True)
    licenses_summary = serializers.DictField(child=serializers.IntegerField())
    products_summary = ProductSummarySerializer(many=True)


class CustomerBrandLicensesSerializer(serializers.Serializer):
    """Serializer for CustomerBrandLicensesDTO."""

    customer_email = serializers.EmailField()
    brand = BrandRefSerializer()
    license_keys_count = serializers.IntegerField()
    licenses_count = serializers.IntegerField()
    license_keys = CustomerLicenseKeySerializer(many=True)
    licenses_summary = serializers.DictField(child=serializers.IntegerField())
    products_summary = ProductSummarySerializer(many=True)


class ProductAccessSerializer(serializers.Serializer):
    """Serializer for ProductAccessDTO."""

    customer_email = serializers.EmailField()
    product_slug = serializers.CharField()
    has_access = serializers.BooleanField()
    licenses = LicenseSerializer(many=True)
