"""
License creation handlers.

Handles attaching a license to an existing key and provisioning a key
together with its licenses.
"""

import logging
from datetime import datetime
from typing import List, Optional

from brands.domain.product import Product, validate_seat_cap
from brands.ports.product_repository import ProductRepository
from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.infrastructure.events import event_bus
from licenses.application.commands.create_license import (
    CreateLicenseCommand,
    ProvisionLicenseCommand,
)
from licenses.application.dto.license_dto import (
    LicenseDTO,
    LicenseKeyDTO,
    LicenseKeyWithLicensesDTO,
)
from licenses.application.services.ownership import require_license_key, require_product
from licenses.domain.events import LicenseCreated, LicenseKeyCreated
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


def _check_inputs(expires_at: Optional[datetime], max_seats: Optional[int]) -> None:
    validate_seat_cap(max_seats)
    if expires_at is not None and expires_at <= utc_now():
        raise ValidationError("Expiration date must be in the future")


async def _attach_license(
    license_repository: LicenseRepository,
    license_key: LicenseKey,
    product: Product,
    max_seats: Optional[int],
    expires_at: Optional[datetime],
) -> License:
    license = License.create(
        license_key_id=license_key.id,
        product_id=product.id,
        max_seats=max_seats if max_seats is not None else product.max_seats,
        expires_at=expires_at,
    )
    saved = await license_repository.save(license)
    await event_bus.publish(
        LicenseCreated(
            license_id=saved.id,
            license_key_id=license_key.id,
            brand_id=license_key.brand_id,
            product_id=product.id,
            max_seats=saved.max_seats,
            expires_at=saved.expires_at,
        )
    )
    return saved


class CreateLicenseHandler:
    """Handler for CreateLicenseCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository

    async def handle(self, command: CreateLicenseCommand) -> LicenseDTO:
        """
        Handle create license command.

        The key and the product are both looked up inside the acting
        brand, so a key of one brand can never hold a product of another.

        Args:
            command: CreateLicenseCommand

        Returns:
            LicenseDTO of the new license

        Raises:
            LicenseKeyNotFoundError: If the key is missing or foreign
            ProductNotFoundError: If the product is missing or foreign
            ValidationError: If the seat cap or expiration is invalid
        """
        _check_inputs(command.expires_at, command.max_seats)
        license_key = await require_license_key(
            self.license_key_repository, command.brand_id, command.license_key_id
        )
        product = await require_product(
            self.product_repository, command.brand_id, command.product_id
        )
        license = await _attach_license(
            self.license_repository, license_key, product, command.max_seats, command.expires_at
        )
        logger.info(
            "License created",
            extra={
                "brand_id": str(command.brand_id),
                "license_id": str(license.id),
                "product_id": str(product.id),
            },
        )
        return LicenseDTO.from_entity(license, product, seats_used=0)


class ProvisionLicenseHandler:
    """Handler for ProvisionLicenseCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository

    async def handle(self, command: ProvisionLicenseCommand) -> LicenseKeyWithLicensesDTO:
        """
        Handle provision license command.

        Every product is resolved before anything is written, so an
        unknown product leaves no half-provisioned key behind.

        Args:
            command: ProvisionLicenseCommand

        Returns:
            LicenseKeyWithLicensesDTO with the key and its licenses

        Raises:
            ProductNotFoundError: If a product is missing or foreign
            ValidationError: If input is invalid
        """
        if not command.product_ids:
            raise ValidationError("At least one product is required")
        _check_inputs(command.expires_at, command.max_seats)

        products: List[Product] = []
        for product_id in dict.fromkeys(command.product_ids):
            products.append(
                await require_product(self.product_repository, command.brand_id, product_id)
            )

        license_key = await self.license_key_repository.save(
            LicenseKey.create(brand_id=command.brand_id, customer_email=command.customer_email)
        )
        await event_bus.publish(
            LicenseKeyCreated(
                license_key_id=license_key.id,
                brand_id=license_key.brand_id,
                customer_email=str(license_key.customer_email),
            )
        )

        license_dtos = []
        for product in products:
            license = await _attach_license(
                self.license_repository,
                license_key,
                product,
                command.max_seats,
                command.expires_at,
            )
            license_dtos.append(LicenseDTO.from_entity(license, product, seats_used=0))

        logger.info(
            "License key provisioned",
            extra={
                "brand_id": str(command.brand_id),
                "license_key_id": str(license_key.id),
                "licenses": len(license_dtos),
            },
        )
        return LicenseKeyWithLicensesDTO(
            license_key=LicenseKeyDTO.from_entity(license_key),
            licenses=license_dtos,
        )
