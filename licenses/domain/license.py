"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Optional

from brands.domain.product import validate_seat_cap
from core.domain.clock import utc_now
from core.domain.exceptions import InvalidTransitionError, ValidationError
from core.domain.value_objects import LicenseStatus

MIN_RENEWAL_DAYS = 1
MAX_RENEWAL_DAYS = 3650

RENEW = "renew"
SUSPEND = "suspend"
RESUME = "resume"
CANCEL = "cancel"

# Lifecycle operations allowed from each stored status.
ALLOWED_TRANSITIONS: Dict[LicenseStatus, FrozenSet[str]] = {
    LicenseStatus.VALID: frozenset({RENEW, SUSPEND, CANCEL}),
    LicenseStatus.SUSPENDED: frozenset({RENEW, SUSPEND, RESUME, CANCEL}),
    LicenseStatus.CANCELLED: frozenset({CANCEL}),
}


def can_transition(status: LicenseStatus, operation: str) -> bool:
    """
    Check the transition table.

    Args:
        status: Current stored status
        operation: One of renew, suspend, resume, cancel

    Returns:
        True if the operation is allowed from ``status``
    """
    return operation in ALLOWED_TRANSITIONS.get(status, frozenset())


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Grants one license key access to one product. ``max_seats`` is the
    enforced seat cap (None = unlimited). Expiry by time is never stored;
    ``is_valid`` derives it from ``expires_at``.
    """

    id: uuid.UUID
    license_key_id: uuid.UUID
    product_id: uuid.UUID
    status: LicenseStatus
    max_seats: Optional[int]
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key_id:
            raise ValidationError("License key ID is required")
        if not self.product_id:
            raise ValidationError("Product ID is required")
        validate_seat_cap(self.max_seats)

    @classmethod
    def create(
        cls,
        license_key_id: uuid.UUID,
        product_id: uuid.UUID,
        max_seats: Optional[int] = None,
        expires_at: Optional[datetime] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new License entity in VALID status.

        Args:
            license_key_id: License key UUID
            product_id: Product UUID
            max_seats: Seat cap (None = unlimited)
            expires_at: Optional expiration datetime
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        now = utc_now()
        return cls(
            id=license_id or uuid.uuid4(),
            license_key_id=license_key_id,
            product_id=product_id,
            status=LicenseStatus.VALID,
            max_seats=max_seats,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )

    @property
    def supports_seats(self) -> bool:
        return self.max_seats is not None

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """True once ``expires_at`` has passed, whatever the status."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (current_time or utc_now())

    def is_valid(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if license is currently usable.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if status is VALID and the license has not expired
        """
        return self.status == LicenseStatus.VALID and not self.is_expired(current_time)

    def _require(self, operation: str) -> None:
        if not can_transition(self.status, operation):
            raise InvalidTransitionError(
                f"Cannot {operation} a {self.status.value} license"
            )

    def renew(
        self,
        days: Optional[int] = None,
        target_date: Optional[datetime] = None,
        current_time: Optional[datetime] = None,
    ) -> "License":
        """
        Return a renewed copy with status VALID.

        Exactly one of ``days`` or ``target_date`` is given. ``days``
        extends the current expiration, or starts from now when the
        license never expired. The seat cap is left unchanged.

        Args:
            days: Days to extend by (1..3650)
            target_date: New expiration, must be in the future
            current_time: Current time (defaults to now)

        Returns:
            New License instance

        Raises:
            InvalidTransitionError: If the license is cancelled
            ValidationError: If the period is missing or out of range
        """
        self._require(RENEW)
        now = current_time or utc_now()

        if (days is None) == (target_date is None):
            raise ValidationError("Provide either days or target_date")

        if days is not None:
            if isinstance(days, bool) or not isinstance(days, int):
                raise ValidationError("Renewal days must be an integer")
            if not MIN_RENEWAL_DAYS <= days <= MAX_RENEWAL_DAYS:
                raise ValidationError(
                    f"Renewal days must be between {MIN_RENEWAL_DAYS} and {MAX_RENEWAL_DAYS}"
                )
            base = self.expires_at or now
            new_expiration = base + timedelta(days=days)
        else:
            if target_date <= now:
                raise ValidationError("Expiration date must be in the future")
            new_expiration = target_date

        return replace(
            self,
            status=LicenseStatus.VALID,
            expires_at=new_expiration,
            updated_at=now,
        )

    def suspend(self) -> "License":
        """
        Return a suspended copy. Activations keep their seats.

        Raises:
            InvalidTransitionError: If the license is cancelled
        """
        self._require(SUSPEND)
        if self.status == LicenseStatus.SUSPENDED:
            return self
        return replace(self, status=LicenseStatus.SUSPENDED, updated_at=utc_now())

    def resume(self) -> "License":
        """
        Return a copy back in VALID status.

        Raises:
            InvalidTransitionError: Unless the license is suspended
        """
        self._require(RESUME)
        return replace(self, status=LicenseStatus.VALID, updated_at=utc_now())

    def cancel(self) -> "License":
        """Return a cancelled copy. Cancelling twice changes nothing."""
        self._require(CANCEL)
        if self.status == LicenseStatus.CANCELLED:
            return self
        return replace(self, status=LicenseStatus.CANCELLED, updated_at=utc_now())
