"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from activations.domain.activation import Activation
from activations.domain.services import UNLIMITED, SeatChange, SeatUsage
from licenses.application.dto.license_dto import ActiveInstanceDTO
from licenses.domain.license import License


@dataclass
class ActivationDTO:
    """DTO for activation information."""

    id: uuid.UUID
    license_id: uuid.UUID
    instance_id: Optional[str]
    instance_type: Optional[str]
    instance_url: Optional[str]
    machine_id: Optional[str]
    instance_metadata: Dict
    status: str
    is_active: bool
    activated_at: datetime
    last_checked_at: Optional[datetime]
    deactivated_at: Optional[datetime] = None
    deactivation_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, activation: Activation) -> "ActivationDTO":
        identity = activation.identity
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            instance_id=identity.instance_id,
            instance_type=str(identity.instance_type) if identity.instance_type else None,
            instance_url=identity.instance_url,
            machine_id=identity.machine_id,
            instance_metadata=dict(activation.instance_metadata or {}),
            status=activation.status.value,
            is_active=activation.is_active,
            activated_at=activation.activated_at,
            last_checked_at=activation.last_checked_at,
            deactivated_at=activation.deactivated_at,
            deactivation_reason=activation.deactivation_reason,
        )


@dataclass
class SeatChangeDTO:
    """
    DTO for activate and deactivate responses.

    ``seats_remaining`` is ``"unlimited"`` for uncapped licenses.
    """

    activation: ActivationDTO
    license_id: uuid.UUID
    seats_before: int
    seats_after: int
    seats_remaining: Union[int, str]
    reactivated: bool
    message: str

    @classmethod
    def from_change(cls, license: License, change: SeatChange, message: str) -> "SeatChangeDTO":
        if license.supports_seats:
            remaining: Union[int, str] = max(0, license.max_seats - change.seats_after)
        else:
            remaining = UNLIMITED
        return cls(
            activation=ActivationDTO.from_entity(change.activation),
            license_id=license.id,
            seats_before=change.seats_before,
            seats_after=change.seats_after,
            seats_remaining=remaining,
            reactivated=change.reactivated,
            message=message,
        )


@dataclass
class ForceDeactivationDTO:
    """DTO for the result of releasing every seat of a license."""

    license_id: uuid.UUID
    deactivated_count: int
    reason: str


@dataclass
class SeatUsageDTO:
    """DTO for seat usage of one license."""

    license_id: uuid.UUID
    product_slug: str
    supports_seats: bool
    total: Union[int, str]
    used: int
    available: Union[int, str]
    usage_percentage: Union[float, str]
    active_instances: List[ActiveInstanceDTO] = field(default_factory=list)

    @classmethod
    def from_usage(cls, license: License, product_slug: str, usage: SeatUsage) -> "SeatUsageDTO":
        return cls(
            license_id=license.id,
            product_slug=product_slug,
            supports_seats=usage.supports_seats,
            total=usage.total,
            used=usage.used,
            available=usage.available,
            usage_percentage=usage.usage_percentage,
            active_instances=[
                ActiveInstanceDTO.from_entity(activation)
                for activation in usage.active_activations
            ],
        )
