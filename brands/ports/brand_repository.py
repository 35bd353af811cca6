"""
Brand repository port (interface).

This defines the contract for brand persistence operations.
Implementations are in the infrastructure layer.
"""

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from brands.domain.brand import Brand


class BrandRepository(ABC):
    """
    Abstract repository for Brand entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, brand: Brand) -> Brand:
        """
        Save a brand entity.

        Args:
            brand: Brand entity to save

        Returns:
            Saved brand entity
        """

    @abstractmethod
    async def find_by_id(self, brand_id: uuid.UUID) -> Optional[Brand]:
        """
        Find a brand by ID.

        Args:
            brand_id: Brand UUID

        Returns:
            Brand entity or None if not found
        """

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[Brand]:
        """
        Find a brand by slug.

        Args:
            slug: Brand slug

        Returns:
            Brand entity or None if not found
        """

    @abstractmethod
    async def find_by_api_key(self, raw_key: str) -> Optional[Brand]:
        """
        Resolve a brand from a raw API key.

        Args:
            raw_key: API key as presented by the caller

        Returns:
            Brand owning a non-expired key, or None
        """

    @abstractmethod
    async def rotate_api_key(self, brand_id: uuid.UUID) -> Tuple[str, int]:
        """
        Revoke every API key of the brand and issue a new one.

        Args:
            brand_id: Brand UUID

        Returns:
            Tuple of (new raw key, number of revoked keys)
        """

    @abstractmethod
    async def list_all(self, active_only: bool = False) -> List[Brand]:
        """
        List brands ordered by name.

        Args:
            active_only: Skip deactivated brands

        Returns:
            List of Brand entities
        """
