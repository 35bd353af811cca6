"""
Brand and API Key models.
"""

import hashlib
import secrets
import uuid

from django.db import models
from django.utils import timezone


def hash_api_key(raw_key: str) -> str:
    """Return the SHA-256 hex digest stored for an API key."""
    return hashlib.sha256(raw_key.encode()).hexdigest()


class Brand(models.Model):
    """
    A tenant of the service (e.g., RankMath, WP Rocket).
    Each brand has isolated data access.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Brand display name")
    slug = models.SlugField(
        max_length=100,
        unique=True,
        help_text="URL-safe identifier",
    )
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "brands"
        ordering = ["name"]

    def clean(self):
        """Validate brand fields."""
        from django.core.exceptions import ValidationError

        if not self.name or not self.name.strip():
            raise ValidationError("Name is required")

    def save(self, *args, **kwargs):
        """Save brand with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    def generate_api_key(self, scope="full"):
        """
        Generate a new API key for this brand.

        Args:
            scope: API key scope ('full' or 'read')

        Returns:
            ApiKey instance with _raw_key attribute set
        """
        return ApiKey.objects.create(brand=self, scope=scope)


class ApiKey(models.Model):
    """
    API keys for brand authentication.

    Only a hash of the key is stored; the raw key is available once,
    right after creation, as ``_raw_key``.
    """

    SCOPE_CHOICES = [
        ("full", "Full Access"),
        ("read", "Read Only"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(Brand, on_delete=models.CASCADE, related_name="api_keys")
    key_prefix = models.CharField(max_length=8, editable=False)
    key_hash = models.CharField(max_length=64, editable=False, unique=True)
    scope = models.CharField(max_length=20, choices=SCOPE_CHOICES, default="full")
    expires_at = models.DateTimeField(null=True, blank=True)
    revoked_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "api_keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["brand", "scope"]),
        ]

    def __str__(self):
        return f"{self.brand.name} - {self.key_prefix}..."

    def save(self, *args, **kwargs):
        """Generate API key on first save."""
        if not self.key_hash:
            raw_key = secrets.token_urlsafe(32)
            self.key_prefix = raw_key[:8]
            self.key_hash = hash_api_key(raw_key)
            self._raw_key = raw_key
        self.full_clean()
        super().save(*args, **kwargs)

    def verify_key(self, raw_key: str) -> bool:
        """
        Verify a raw API key against the stored hash.

        Args:
            raw_key: The raw API key to verify

        Returns:
            True if key matches, False otherwise
        """
        return secrets.compare_digest(self.key_hash, hash_api_key(raw_key))

    def is_valid(self) -> bool:
        """
        Check if the API key can still be used.

        Returns:
            False if the key was revoked or has expired
        """
        if self.revoked_at is not None:
            return False
        if self.expires_at and self.expires_at < timezone.now():
            return False
        return True

    def mark_used(self):
        """Update last_used_at timestamp."""
        self.last_used_at = timezone.now()
        self.save(update_fields=["last_used_at"])
