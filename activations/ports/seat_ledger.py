"""
Seat ledger port (interface).

The ledger owns every write that changes how many seats a license has
in use. Each operation is atomic with respect to other operations on
the same license: the seat count it checks is the count it changes.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from activations.domain.services import SeatChange
from core.domain.value_objects import InstanceIdentity


class SeatLedger(ABC):
    """Abstract, concurrency-safe store of seat-changing operations."""

    @abstractmethod
    async def activate(
        self,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        instance_metadata: Optional[Dict] = None,
    ) -> SeatChange:
        """
        Claim a seat of a license for an instance.

        The license is re-read inside the same unit of work, so a
        concurrent suspension or cap change is honoured.

        Args:
            license_id: License UUID
            identity: Instance identity
            instance_metadata: Optional metadata to store

        Returns:
            SeatChange with the stored activation

        Raises:
            LicenseNotUsableError, AlreadyActivatedError,
            NoAvailableSeatsError
        """

    @abstractmethod
    async def deactivate(
        self,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        reason: Optional[str] = None,
    ) -> SeatChange:
        """
        Release the seat an instance holds.

        Raises:
            ActivationNotFoundError, NotCurrentlyActiveError
        """

    @abstractmethod
    async def deactivate_all(self, license_id: uuid.UUID, reason: str) -> int:
        """
        Release every seat of a license.

        Returns:
            Number of activations deactivated
        """

    @abstractmethod
    async def expire_lapsed(
        self, current_time: datetime, dry_run: bool = False
    ) -> List[Dict]:
        """
        Mark ACTIVE activations of time-expired licenses as EXPIRED.

        Args:
            current_time: Reference time
            dry_run: Only report what would change

        Returns:
            One dict per affected license with ``license_id``,
            ``license_key_id``, ``brand_id`` and ``count``
        """
