"""
Resolution of the license a product-facing request refers to.

Products authenticate with the raw license key and name themselves by
slug. The product is looked up inside the brand that owns the key, so
a key can never reach another brand's catalog.
"""
from dataclasses import dataclass

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


@dataclass(frozen=True)
class ResolvedLicense:
    license_key: LicenseKey
    product: Product
    license: License


async def resolve_license(
    license_key_repository: LicenseKeyRepository,
    product_repository: ProductRepository,
    license_repository: LicenseRepository,
    raw_key: str,
    product_slug: str,
) -> ResolvedLicense:
    """
    Resolve a raw license key and product slug to a license.

    When a key holds several licenses of the product the newest wins.

    Raises:
        LicenseKeyNotFoundError: If the key does not exist
        ProductNotFoundError: If the key's brand has no such product
        LicenseNotFoundError: If the key holds no license for it
    """
    license_key = await license_key_repository.find_by_key(raw_key)
    if license_key is None:
        raise LicenseKeyNotFoundError("Invalid license key")

    product = await product_repository.find_by_slug(license_key.brand_id, product_slug)
    if product is None:
        raise ProductNotFoundError(f"Product {product_slug} not found")

    license = await license_repository.find_by_license_key_and_product(
        license_key.id, product.id
    )
    if license is None:
        raise LicenseNotFoundError(f"License not found for product {product_slug}")
    return ResolvedLicense(license_key=license_key, product=product, license=license)
