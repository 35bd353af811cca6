"""
Brand ownership lookups shared by the application handlers.

Every helper takes the acting brand explicitly and raises the matching
NotFound error both when the entity is missing and when another brand
owns it.
"""
import uuid

from brands.domain.product import Product
from brands.ports.product_repository import ProductRepository
from core.domain.exceptions import (
    LicenseKeyNotFoundError,
    LicenseNotFoundError,
    ProductNotFoundError,
)
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository


async def require_license_key(
    repository: LicenseKeyRepository, brand_id: uuid.UUID, license_key_id: uuid.UUID
) -> LicenseKey:
    license_key = await repository.find_by_id(brand_id, license_key_id)
    if license_key is None:
        raise LicenseKeyNotFoundError(f"License key {license_key_id} not found")
    return license_key


async def require_license(
    repository: LicenseRepository, brand_id: uuid.UUID, license_id: uuid.UUID
) -> License:
    license = await repository.find_by_id(brand_id, license_id)
    if license is None:
        raise LicenseNotFoundError(f"License {license_id} not found")
    return license


async def require_product(
    repository: ProductRepository, brand_id: uuid.UUID, product_id: uuid.UUID
) -> Product:
    product = await repository.find_by_id(brand_id, product_id)
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product
