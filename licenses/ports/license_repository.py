"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple
import uuid

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    A license belongs to a brand through its license key; scoped lookups
    filter on that relation.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """

    @abstractmethod
    async def find_by_id(
        self, brand_id: uuid.UUID, license_id: uuid.UUID
    ) -> Optional[License]:
        """
        Find a license of a brand by ID.

        Args:
            brand_id: Owning brand UUID
            license_id: License UUID

        Returns:
            License entity or None if missing or owned by another brand
        """

    @abstractmethod
    async def apply_transition(
        self,
        brand_id: uuid.UUID,
        license_id: uuid.UUID,
        transition: Callable[[License], License],
    ) -> Optional[Tuple[License, License]]:
        """
        Apply a state change to a license of a brand as one unit.

        No other change of the same license may interleave between
        reading it and writing the result. Nothing is written when
        ``transition`` returns the license unchanged or raises.

        Args:
            brand_id: Owning brand UUID
            license_id: License UUID
            transition: Maps the current license to its new state

        Returns:
            ``(before, after)`` or None if missing or owned by another brand
        """

    @abstractmethod
    async def find_by_license_key(self, license_key_id: uuid.UUID) -> List[License]:
        """
        Find all licenses for a license key, oldest first.

        Args:
            license_key_id: License key UUID

        Returns:
            List of License entities
        """

    @abstractmethod
    async def find_by_license_keys(self, license_key_ids: List[uuid.UUID]) -> List[License]:
        """
        Find all licenses held by any of the given license keys.

        Args:
            license_key_ids: License key UUIDs

        Returns:
            List of License entities
        """

    @abstractmethod
    async def find_by_license_key_and_product(
        self, license_key_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[License]:
        """
        Find the license a key holds for a product.

        When the key holds several licenses for the product, the newest
        one is returned.

        Args:
            license_key_id: License key UUID
            product_id: Product UUID

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def list_by_brand(
        self,
        brand_id: uuid.UUID,
        status: Optional[LicenseStatus] = None,
        product_slug: Optional[str] = None,
    ) -> List[License]:
        """
        List the licenses of a brand, newest first.

        Args:
            brand_id: Brand UUID
            status: Optional status filter
            product_slug: Optional product slug filter

        Returns:
            List of License entities
        """
