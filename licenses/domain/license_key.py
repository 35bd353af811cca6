"""
LicenseKey domain entity.

This is the core domain entity representing a license key.
It contains business logic and is independent of infrastructure.
"""

import hashlib
import secrets
import string
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.domain.value_objects import Email

LICENSE_KEY_LENGTH = 32
LICENSE_KEY_ALPHABET = string.ascii_letters + string.digits


def generate_license_key() -> str:
    """
    Generate an opaque license key token.

    Returns:
        32 random characters from [A-Za-z0-9]
    """
    return "".join(secrets.choice(LICENSE_KEY_ALPHABET) for _ in range(LICENSE_KEY_LENGTH))


def hash_license_key(key: str) -> str:
    """Return the SHA-256 hex digest stored next to a key."""
    return hashlib.sha256(key.encode()).hexdigest()


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    The token a customer receives. One key holds licenses for several
    products of the same brand. The customer email is a plain value and
    is how a customer is recognised across brands.
    """

    id: uuid.UUID
    brand_id: uuid.UUID
    key: str
    key_hash: str
    customer_email: Email
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license key entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValidationError("License key cannot be empty")
        if len(self.key) > 100:
            raise ValidationError("License key too long")
        if not self.key_hash or len(self.key_hash) != 64:
            raise ValidationError("Invalid key hash")
        if not self.brand_id:
            raise ValidationError("Brand ID is required")

    @classmethod
    def create(
        cls,
        brand_id: uuid.UUID,
        customer_email: str,
        license_key_id: Optional[uuid.UUID] = None,
    ) -> "LicenseKey":
        """
        Create a new LicenseKey entity with a fresh token.

        Args:
            brand_id: Brand UUID
            customer_email: Customer email address
            license_key_id: Optional UUID (generated if not provided)

        Returns:
            LicenseKey entity instance

        Raises:
            ValidationError: If the email is malformed
        """
        now = utc_now()
        key = generate_license_key()
        return cls(
            id=license_key_id or uuid.uuid4(),
            brand_id=brand_id,
            key=key,
            key_hash=hash_license_key(key),
            customer_email=Email(customer_email),
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def verify_key(self, raw_key: str) -> bool:
        """
        Verify a raw license key against the stored hash.

        Args:
            raw_key: The raw license key to verify

        Returns:
            True if key matches, False otherwise
        """
        return secrets.compare_digest(self.key_hash, hash_license_key(raw_key))

    def change_email(self, customer_email: str) -> "LicenseKey":
        """Return a copy owned by another customer email."""
        return replace(self, customer_email=Email(customer_email), updated_at=utc_now())

    def set_active(self, is_active: bool) -> "LicenseKey":
        """Return a copy with the active flag toggled."""
        if self.is_active == is_active:
            return self
        return replace(self, is_active=is_active, updated_at=utc_now())
