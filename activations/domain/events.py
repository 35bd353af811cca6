"""
Activation domain events.

Domain events represent something that happened in the activation domain.
Seat-changing events carry the seat counts before and after the change.
"""
import uuid
from datetime import datetime
from typing import Dict, Optional

from core.domain.events import DomainEvent
from core.domain.value_objects import InstanceIdentity


def identity_payload(identity: InstanceIdentity) -> Dict[str, Optional[str]]:
    """Flatten an identity for event payloads and audit records."""
    return {
        "instance_id": identity.instance_id,
        "instance_url": identity.instance_url,
        "machine_id": identity.machine_id,
        "instance_type": identity.instance_type.value if identity.instance_type else None,
    }


class LicenseActivated(DomainEvent):
    """Event raised when an instance takes a seat."""

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        identity: InstanceIdentity,
        seats_before: int,
        seats_after: int,
        reactivated: bool = False,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            activation_id: Activation UUID
            license_id: License UUID
            license_key_id: License key UUID
            brand_id: Brand UUID
            identity: Instance identity
            seats_before: Active seats before the activation
            seats_after: Active seats after the activation
            reactivated: True when an existing row was brought back
            occurred_at: When the event occurred
        """
        super().__init__(**self._envelope(license_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.identity = identity_payload(identity)
        self.seats_before = seats_before
        self.seats_after = seats_after
        self.reactivated = reactivated


class SeatDeactivated(DomainEvent):
    """Event raised when an instance releases its seat."""

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        identity: InstanceIdentity,
        seats_before: int,
        seats_after: int,
        reason: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(license_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.identity = identity_payload(identity)
        self.seats_before = seats_before
        self.seats_after = seats_after
        self.reason = reason


class SeatsForceDeactivated(DomainEvent):
    """Event raised when a brand releases every seat of a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        deactivated_count: int,
        reason: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(license_id, occurred_at))
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.deactivated_count = deactivated_count
        self.reason = reason


class ActivationsExpired(DomainEvent):
    """Event raised when the expiry sweep frees the seats of a lapsed license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key_id: uuid.UUID,
        brand_id: uuid.UUID,
        expired_count: int,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(license_id, occurred_at))
        self.license_id = license_id
        self.license_key_id = license_key_id
        self.brand_id = brand_id
        self.expired_count = expired_count
