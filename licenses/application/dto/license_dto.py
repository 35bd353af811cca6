"""
License DTOs for API responses.

DTOs are plain dataclasses so they can be cached as they are.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from brands.domain.product import Product
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey

SeatValue = Union[int, float, str, None]


@dataclass
class LicenseKeyDTO:
    """DTO for license key information."""

    id: uuid.UUID
    key: str
    brand_id: uuid.UUID
    customer_email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, license_key: LicenseKey) -> "LicenseKeyDTO":
        return cls(
            id=license_key.id,
            key=license_key.key,
            brand_id=license_key.brand_id,
            customer_email=str(license_key.customer_email),
            is_active=license_key.is_active,
            created_at=license_key.created_at,
            updated_at=license_key.updated_at,
        )


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    license_key_id: uuid.UUID
    product_id: uuid.UUID
    product_slug: str
    product_name: str
    status: str
    is_valid: bool
    max_seats: Optional[int]
    supports_seats: bool
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    seats_used: Optional[int] = None

    @classmethod
    def from_entity(
        cls,
        license: License,
        product: Optional[Product],
        seats_used: Optional[int] = None,
    ) -> "LicenseDTO":
        """
        Build the DTO from a license and its product.

        Args:
            license: License entity
            product: Its product (None if it could not be loaded)
            seats_used: Active activation count, when known

        Returns:
            LicenseDTO
        """
        return cls(
            id=license.id,
            license_key_id=license.license_key_id,
            product_id=license.product_id,
            product_slug=str(product.slug) if product else "",
            product_name=product.name if product else "",
            status=license.status.value,
            is_valid=license.is_valid(),
            max_seats=license.max_seats,
            supports_seats=license.supports_seats,
            expires_at=license.expires_at,
            created_at=license.created_at,
            updated_at=license.updated_at,
            seats_used=seats_used,
        )


@dataclass
class LicenseKeyWithLicensesDTO:
    """DTO for a license key and every license it holds."""

    license_key: LicenseKeyDTO
    licenses: List[LicenseDTO]


@dataclass
class ActiveInstanceDTO:
    """An instance currently holding a seat."""

    instance_id: Optional[str]
    instance_type: Optional[str]
    instance_url: Optional[str]
    machine_id: Optional[str]
    activated_at: datetime
    last_checked_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, activation) -> "ActiveInstanceDTO":
        identity = activation.identity
        return cls(
            instance_id=identity.instance_id,
            instance_type=str(identity.instance_type) if identity.instance_type else None,
            instance_url=identity.instance_url,
            machine_id=identity.machine_id,
            activated_at=activation.activated_at,
            last_checked_at=activation.last_checked_at,
        )


@dataclass
class EntitlementDTO:
    """One usable license of a key, with its product and seats."""

    product_id: uuid.UUID
    product_slug: str
    product_name: str
    product_description: str
    license_id: uuid.UUID
    status: str
    expires_at: Optional[datetime]
    max_seats: Optional[int]
    supports_seats: bool
    seats_total: Optional[int]
    seats_used: int
    seats_available: Optional[int]
    usage_percentage: Optional[float]
    activations: List[ActiveInstanceDTO] = field(default_factory=list)


@dataclass
class ProductSeatUsageDTO:
    """Seat usage of one product within a license key."""

    product_slug: str
    product_name: str
    total: int
    used: int
    available: Optional[int]


@dataclass
class KeySeatUsageDTO:
    """Seat usage across the usable licenses of a key."""

    total_seats: int
    used_seats: int
    available_seats: int
    usage_percentage: float
    products: List[ProductSeatUsageDTO]


@dataclass
class LicenseKeyStatusDTO:
    """DTO for the product-facing license key status."""

    license_key: LicenseKeyDTO
    overall_status: str
    is_valid: bool
    entitlements: List[EntitlementDTO]
    seat_usage: KeySeatUsageDTO
    summary: Dict[str, int]


@dataclass
class BrandLicenseSummaryDTO:
    """Counts of a brand's licenses by stored status."""

    total: int
    by_status: Dict[str, int]
    expired: int


@dataclass
class LicenseListDTO:
    """DTO for a filtered list of a brand's licenses."""

    licenses: List[LicenseDTO]
    summary: BrandLicenseSummaryDTO
