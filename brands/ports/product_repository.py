"""
Product repository port (interface).

Every lookup takes the owning brand explicitly; there is no way to fetch
a product without naming its brand.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from brands.domain.product import Product


class ProductRepository(ABC):
    """Abstract repository for Product entities."""

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """

    @abstractmethod
    async def find_by_id(
        self, brand_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[Product]:
        """
        Find a product of a brand by ID.

        Args:
            brand_id: Owning brand UUID
            product_id: Product UUID

        Returns:
            Product entity or None if missing or owned by another brand
        """

    @abstractmethod
    async def find_by_slug(
        self, brand_id: uuid.UUID, slug: str
    ) -> Optional[Product]:
        """
        Find a product of a brand by slug.

        Args:
            brand_id: Owning brand UUID
            slug: Product slug

        Returns:
            Product entity or None if not found
        """

    @abstractmethod
    async def list_by_brand(
        self, brand_id: uuid.UUID, active_only: bool = False
    ) -> List[Product]:
        """
        List the products of a brand.

        Args:
            brand_id: Brand UUID
            active_only: Skip deactivated products

        Returns:
            List of Product entities
        """

    @abstractmethod
    async def find_many(self, product_ids: List[uuid.UUID]) -> List[Product]:
        """
        Load products by ID regardless of brand.

        Only for read models that already resolved ownership through
        licenses they are allowed to see.

        Args:
            product_ids: Product UUIDs

        Returns:
            List of Product entities found
        """
