"""
License domain events.

Domain events represent something that happened in the license domain.
Every event names the owning brand and the license key so audit and cache
handlers never need to look them up again.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseKeyCreated(DomainEvent):
    """Event raised when a license key is created."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        customer_email: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeyCreated event.

        Args:
            license_key_id: License key UUID
            brand_id: Brand UUID
            customer_email: Customer email
            occurred_at: When the event occurred
        """
        super().__init__(**self._envelope(license_key_id, occurred_at))
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.customer_email = customer_email


class LicenseKeyUpdated(DomainEvent):
    """Event raised when a key changes owner email or active flag."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        customer_email: str,
        is_active: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(license_key_id, occurred_at))
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.customer_email = customer_email
        self.is_active = is_active


class LicenseCreated(DomainEvent):
    """Event raised when a license is attached to a license key."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        product_id: uuid.UUID,
        max_seats: Optional[int],
        expires_at: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseCreated event.

        Args:
            license_id: License UUID
            license_key_id: License key UUID
            brand_id: Brand UUID
            product_id: Product UUID
            max_seats: Seat cap (None = unlimited)
            expires_at: Expiration datetime
            occurred_at: When the event occurred
        """
        super().__init__(**self._envelope(license_id, occurred_at))
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.product_id = product_id
        self.max_seats = max_seats
        self.expires_at = expires_at


class LicenseStatusChanged(DomainEvent):
    """Base for lifecycle transitions of a single license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        previous_status: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(license_id, occurred_at))
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.previous_status = previous_status


class LicenseRenewed(LicenseStatusChanged):
    """Event raised when a license is renewed."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        previous_status: str,
        previous_expiration: Optional[datetime],
        new_expiration: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseRenewed event.

        Args:
            license_id: License UUID
            license_key_id: License key UUID
            brand_id: Brand UUID
            previous_status: Status before the renewal
            previous_expiration: Expiration before the renewal
            new_expiration: New expiration datetime
            occurred_at: When the event occurred
        """
        super().__init__(license_id, license_key_id, brand_id, previous_status, occurred_at)
        self.previous_expiration = previous_expiration
        self.new_expiration = new_expiration


class LicenseSuspended(LicenseStatusChanged):
    """Event raised when a license is suspended."""


class LicenseResumed(LicenseStatusChanged):
    """Event raised when a license is resumed."""


class LicenseCancelled(LicenseStatusChanged):
    """Event raised when a license is cancelled."""
