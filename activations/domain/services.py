"""
Activation domain services.

The seat rules are pure: callers load the license, the matching
activations and the current seat count (under a lock) and the
SeatManager decides what happens.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Union

from activations.domain.activation import Activation
from core.domain.clock import utc_now
from core.domain.exceptions import (
    ActivationNotFoundError,
    AlreadyActivatedError,
    LicenseNotUsableError,
    NoAvailableSeatsError,
    NotCurrentlyActiveError,
)
from core.domain.value_objects import InstanceIdentity
from licenses.domain.license import License

UNLIMITED = "unlimited"
DEFAULT_FORCE_DEACTIVATION_REASON = "Administrative deactivation"


@dataclass(frozen=True)
class SeatChange:
    """Result of a seat-changing operation with the counts around it."""

    activation: Activation
    seats_before: int
    seats_after: int
    reactivated: bool = False


@dataclass(frozen=True)
class SeatUsage:
    """
    Seat usage snapshot of one license.

    For uncapped licenses ``total``, ``available`` and
    ``usage_percentage`` are all ``"unlimited"``.
    """

    supports_seats: bool
    total: Union[int, str]
    used: int
    available: Union[int, str]
    usage_percentage: Union[float, str]
    active_activations: List[Activation] = field(default_factory=list)


def pick_match(matches: Sequence[Activation]) -> Optional[Activation]:
    """
    Pick the activation an identity lookup refers to.

    An ACTIVE match wins; otherwise the most recently activated one.
    """
    if not matches:
        return None
    active = [activation for activation in matches if activation.is_active]
    pool = active or list(matches)
    return max(pool, key=lambda activation: activation.activated_at)


def usage_percentage(used: int, total: int) -> float:
    if total <= 0:
        return 0
    return round(used / total * 100, 2)


class SeatManager:
    """Domain service for managing license seats."""

    @staticmethod
    def activate(
        license: License,
        identity: InstanceIdentity,
        matches: Sequence[Activation],
        seats_used: int,
        instance_metadata: Optional[Dict] = None,
        current_time: Optional[datetime] = None,
    ) -> SeatChange:
        """
        Decide an activation request.

        Args:
            license: License being activated
            identity: Identity presented by the instance
            matches: Stored activations matching ``identity``
            seats_used: Current number of ACTIVE activations
            instance_metadata: Optional metadata to store
            current_time: Current time (defaults to now)

        Returns:
            SeatChange holding the new or reactivated activation

        Raises:
            LicenseNotUsableError: License suspended, cancelled or expired
            AlreadyActivatedError: The instance already holds a seat
            NoAvailableSeatsError: Every seat is taken
        """
        now = current_time or utc_now()
        if not license.is_valid(now):
            raise LicenseNotUsableError()

        existing = pick_match(matches)
        if existing is not None and existing.is_active:
            raise AlreadyActivatedError()

        if license.supports_seats and seats_used >= license.max_seats:
            raise NoAvailableSeatsError()

        if existing is not None:
            activation = existing.reactivate(identity, instance_metadata, now)
        else:
            activation = Activation.create(
                license_id=license.id,
                identity=identity,
                instance_metadata=instance_metadata,
                current_time=now,
            )
        return SeatChange(
            activation=activation,
            seats_before=seats_used,
            seats_after=seats_used + 1,
            reactivated=existing is not None,
        )

    @staticmethod
    def deactivate(
        matches: Sequence[Activation],
        seats_used: int,
        reason: Optional[str] = None,
        current_time: Optional[datetime] = None,
    ) -> SeatChange:
        """
        Decide a deactivation request.

        Raises:
            ActivationNotFoundError: No activation matches the identity
            NotCurrentlyActiveError: The matching activation holds no seat
        """
        existing = pick_match(matches)
        if existing is None:
            raise ActivationNotFoundError()
        if not existing.is_active:
            raise NotCurrentlyActiveError()
        return SeatChange(
            activation=existing.deactivate(reason, current_time),
            seats_before=seats_used,
            seats_after=max(0, seats_used - 1),
        )

    @staticmethod
    def seat_usage(license: License, active_activations: Sequence[Activation]) -> SeatUsage:
        """
        Compute the seat usage of a license.

        Args:
            license: License entity
            active_activations: Its ACTIVE activations

        Returns:
            SeatUsage snapshot
        """
        used = len(active_activations)
        if not license.supports_seats:
            return SeatUsage(
                supports_seats=False,
                total=UNLIMITED,
                used=used,
                available=UNLIMITED,
                usage_percentage=UNLIMITED,
                active_activations=list(active_activations),
            )
        total = license.max_seats
        return SeatUsage(
            supports_seats=True,
            total=total,
            used=used,
            available=max(0, total - used),
            usage_percentage=usage_percentage(used, total),
            active_activations=list(active_activations),
        )
