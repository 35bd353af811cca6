"""
LicenseKey, License and AuditLog models.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class LicenseKey(models.Model):
    """
    A license key that can contain multiple licenses.
    Given to customers to activate products.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey("brands.Brand", on_delete=models.CASCADE, related_name="license_keys")
    key = models.CharField(max_length=100, unique=True)
    key_hash = models.CharField(max_length=64, db_index=True, help_text="SHA-256 of the key")
    customer_email = models.EmailField(max_length=255, db_index=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "license_keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer_email", "brand"]),
        ]

    def __str__(self):
        return f"{self.key[:8]}... ({self.customer_email})"


class License(models.Model):
    """
    A license grants access to a specific product.
    Multiple licenses can be associated with one license key.
    """

    STATUS_CHOICES = [
        ("valid", "Valid"),
        ("suspended", "Suspended"),
        ("cancelled", "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.ForeignKey(
        LicenseKey, on_delete=models.CASCADE, related_name="licenses"
    )
    product = models.ForeignKey("products.Product", on_delete=models.CASCADE, related_name="licenses")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="valid")
    max_seats = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Maximum concurrent activations; empty means unlimited",
    )
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["license_key", "product"]),
            models.Index(fields=["license_key", "status"]),
            models.Index(fields=["status", "expires_at"]),
        ]

    def __str__(self):
        return f"{self.product.name} ({self.status})"

    @property
    def is_valid(self) -> bool:
        """
        Check if license is currently valid.

        Returns:
            True if license is valid and not expired
        """
        if self.status != "valid":
            return False
        if self.expires_at and self.expires_at <= timezone.now():
            return False
        return True


class AuditLog(models.Model):
    """
    Immutable audit trail of license and activation changes.

    Written by the audit event handler from domain events.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(
        "brands.Brand", null=True, on_delete=models.CASCADE, related_name="audit_logs"
    )
    event_id = models.UUIDField(unique=True)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=64)
    changes = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(max_length=255, default="system", help_text="Who performed the action")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["brand", "entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
