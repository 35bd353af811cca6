"""
Activation repository port (interface).

Read access to activations. Every seat-changing write goes through the
SeatLedger port instead.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import uuid

from activations.domain.activation import Activation
from core.domain.value_objects import InstanceIdentity


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_identity(
        self, license_id: uuid.UUID, identity: InstanceIdentity
    ) -> Optional[Activation]:
        """
        Find the activation of a license matching an instance identity.

        Only the identity fields that were supplied are compared. An
        ACTIVE match is preferred over inactive ones.

        Args:
            license_id: License UUID
            identity: Instance identity used as lookup

        Returns:
            Activation entity or None if not found
        """

    @abstractmethod
    async def find_active_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find ACTIVE activations of a license, oldest first.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """

    @abstractmethod
    async def record_check(self, activation: Activation) -> bool:
        """
        Store the ``last_checked_at`` of an activation that is still ACTIVE.

        Args:
            activation: Activation carrying the new check time

        Returns:
            False if the activation stopped being active meanwhile
        """

    @abstractmethod
    async def count_active_by_licenses(
        self, license_ids: List[uuid.UUID]
    ) -> Dict[uuid.UUID, int]:
        """
        Count ACTIVE activations per license.

        Args:
            license_ids: License UUIDs

        Returns:
            Mapping license id to active count (missing ids count 0)
        """
