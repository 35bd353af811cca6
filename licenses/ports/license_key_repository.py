"""
LicenseKey repository port (interface).

This defines the contract for license key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import uuid

from licenses.domain.license_key import LicenseKey


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey entities.

    Brand-originated lookups take the brand explicitly. ``find_by_key``
    is unscoped because the raw token is itself the credential of the
    product-facing API.
    """

    @abstractmethod
    async def save(self, license_key: LicenseKey) -> LicenseKey:
        """
        Save a license key entity.

        Args:
            license_key: LicenseKey entity to save

        Returns:
            Saved license key entity
        """

    @abstractmethod
    async def find_by_id(
        self, brand_id: uuid.UUID, license_key_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        """
        Find a license key of a brand by ID.

        Args:
            brand_id: Owning brand UUID
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if missing or owned by another brand
        """

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by its raw token.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """

    @abstractmethod
    async def find_by_customer_email(
        self, brand_id: uuid.UUID, email: str
    ) -> List[LicenseKey]:
        """
        Find license keys by customer email within one brand.

        Args:
            brand_id: Brand UUID
            email: Customer email

        Returns:
            List of LicenseKey entities, newest first
        """

    @abstractmethod
    async def find_by_customer_email_across_brands(self, email: str) -> List[LicenseKey]:
        """
        Find license keys by customer email in every active brand.

        Only the customer aggregation read model may call this.

        Args:
            email: Customer email

        Returns:
            List of LicenseKey entities, newest first
        """

    @abstractmethod
    async def count_by_brand(self, brand_id: uuid.UUID) -> Dict[str, int]:
        """
        Count the license keys of a brand.

        Returns:
            Dict with ``total`` and ``active``
        """
