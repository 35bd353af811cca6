"""
Brand DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from brands.domain.brand import Brand
from brands.domain.product import Product


@dataclass
class BrandDTO:
    """DTO for brand information."""

    id: uuid.UUID
    name: str
    slug: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, brand: Brand) -> "BrandDTO":
        return cls(
            id=brand.id,
            name=brand.name,
            slug=str(brand.slug),
            is_active=brand.is_active,
            created_at=brand.created_at,
        )


@dataclass
class BrandCredentialDTO:
    """
    A brand together with a freshly issued API key.

    The raw key is only ever returned here; it is stored hashed.
    """

    brand: BrandDTO
    api_key: str
    revoked_keys: int = 0


@dataclass
class ProductDTO:
    """DTO for product information."""

    id: uuid.UUID
    brand_id: uuid.UUID
    name: str
    slug: str
    description: str
    max_seats: Optional[int]
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductDTO":
        return cls(
            id=product.id,
            brand_id=product.brand_id,
            name=product.name,
            slug=str(product.slug),
            description=product.description,
            max_seats=product.max_seats,
            is_active=product.is_active,
            created_at=product.created_at,
        )


@dataclass
class BrandStatisticsDTO:
    """Catalog and license counts of a brand."""

    brand_id: uuid.UUID
    products: int
    active_products: int
    license_keys: int
    active_license_keys: int
    licenses: int
    valid_licenses: int
    total_seats: int
