"""
Activation domain entity.

This is the core domain entity representing a license activation.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Optional

from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.domain.value_objects import ActivationStatus, InstanceIdentity

MAX_DEACTIVATION_REASON_LENGTH = 255


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    One running instance holding (or having held) a seat of a license.
    Rows are never deleted; a deactivated or expired activation is
    brought back to ACTIVE when the same instance activates again.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    identity: InstanceIdentity
    status: ActivationStatus
    activated_at: datetime
    last_checked_at: datetime
    deactivated_at: Optional[datetime] = None
    deactivation_reason: Optional[str] = None
    instance_metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValidationError("License ID is required")
        if not isinstance(self.identity, InstanceIdentity):
            raise ValidationError("Instance identity is required")

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        instance_metadata: Optional[Dict] = None,
        activation_id: Optional[uuid.UUID] = None,
        current_time: Optional[datetime] = None,
    ) -> "Activation":
        """
        Create a new ACTIVE Activation.

        Args:
            license_id: License UUID
            identity: Identity of the instance
            instance_metadata: Optional free-form metadata
            activation_id: Optional UUID (generated if not provided)
            current_time: Activation time (defaults to now)

        Returns:
            Activation entity instance
        """
        now = current_time or utc_now()
        return cls(
            id=activation_id or uuid.uuid4(),
            license_id=license_id,
            identity=identity,
            status=ActivationStatus.ACTIVE,
            activated_at=now,
            last_checked_at=now,
            instance_metadata=instance_metadata or {},
        )

    @property
    def is_active(self) -> bool:
        return self.status == ActivationStatus.ACTIVE

    def reactivate(
        self,
        identity: Optional[InstanceIdentity] = None,
        instance_metadata: Optional[Dict] = None,
        current_time: Optional[datetime] = None,
    ) -> "Activation":
        """
        Return an ACTIVE copy with the deactivation details cleared.

        Args:
            identity: Identity presented now; only its instance type is
                taken over, the stored identifiers stay as they are
            instance_metadata: Replacement metadata, if given
            current_time: Reactivation time (defaults to now)

        Returns:
            New Activation instance
        """
        now = current_time or utc_now()
        stored = self.identity
        if identity is not None and identity.instance_type is not None:
            stored = replace(stored, instance_type=identity.instance_type)
        return replace(
            self,
            identity=stored,
            status=ActivationStatus.ACTIVE,
            activated_at=now,
            last_checked_at=now,
            deactivated_at=None,
            deactivation_reason=None,
            instance_metadata=instance_metadata if instance_metadata is not None else self.instance_metadata,
        )

    def deactivate(
        self, reason: Optional[str] = None, current_time: Optional[datetime] = None
    ) -> "Activation":
        """
        Return a DEACTIVATED copy, freeing the seat.

        Args:
            reason: Optional human-readable reason
            current_time: Deactivation time (defaults to now)

        Returns:
            New Activation instance
        """
        if reason and len(reason) > MAX_DEACTIVATION_REASON_LENGTH:
            raise ValidationError("Deactivation reason too long")
        now = current_time or utc_now()
        return replace(
            self,
            status=ActivationStatus.DEACTIVATED,
            deactivated_at=now,
            deactivation_reason=reason or None,
        )

    def expire(self, current_time: Optional[datetime] = None) -> "Activation":
        """Return an EXPIRED copy after its license ran out."""
        return replace(
            self,
            status=ActivationStatus.EXPIRED,
            deactivated_at=current_time or utc_now(),
            deactivation_reason="License expired",
        )

    def touch(self, current_time: Optional[datetime] = None) -> "Activation":
        """Return a copy with ``last_checked_at`` refreshed."""
        return replace(self, last_checked_at=current_time or utc_now())
