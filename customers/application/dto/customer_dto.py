"""
Customer DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from brands.domain.brand import Brand
from licenses.application.dto.license_dto import LicenseDTO, LicenseKeyDTO


@dataclass
class BrandRefDTO:
    """Short brand reference."""

    id: uuid.UUID
    name: str
    slug: str

    @classmethod
    def from_entity(cls, brand: Brand) -> "BrandRefDTO":
        return cls(id=brand.id, name=brand.name, slug=str(brand.slug))


@dataclass
class CustomerLicenseKeyDTO:
    """A license key of the customer with its licenses."""

    license_key: LicenseKeyDTO
    brand: Optional[BrandRefDTO]
    licenses: List[LicenseDTO]


@dataclass
class ProductSummaryDTO:
    """Per-product totals of a customer's licenses."""

    brand_id: uuid.UUID
    brand_name: str
    product_slug: str
    product_name: str
    licenses_count: int
    total_seats: int
    active_seats: int


@dataclass
class CustomerLicensesDTO:
    """Every license of a customer across active brands."""

    customer_email: str
    total_license_keys: int
    total_licenses: int
    brands_count: int
    brands: List[BrandRefDTO]
    license_keys: List[CustomerLicenseKeyDTO]
    licenses_summary: Dict[str, int]
    products_summary: List[ProductSummaryDTO]


@dataclass
class CustomerBrandLicensesDTO:
    """Licenses of a customer within one brand."""

    customer_email: str
    brand: BrandRefDTO
    license_keys_count: int
    licenses_count: int
    license_keys: List[CustomerLicenseKeyDTO]
    licenses_summary: Dict[str, int]
    products_summary: List[ProductSummaryDTO]


@dataclass
class ProductAccessDTO:
    """Whether a customer may use a product."""

    customer_email: str
    product_slug: str
    has_access: bool
    licenses: List[LicenseDTO]
