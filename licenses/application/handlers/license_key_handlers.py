"""
License key handlers.

Handlers for creating, updating and reading license keys of a brand.
"""
import logging

from brands.ports.product_repository import ProductRepository
from core.infrastructure.events import event_bus
from licenses.application.commands.create_license_key import CreateLicenseKeyCommand
from licenses.application.commands.update_license_key import UpdateLicenseKeyCommand
from licenses.application.dto.license_dto import (
    LicenseDTO,
    LicenseKeyDTO,
    LicenseKeyWithLicensesDTO,
)
from licenses.application.queries.brand_license_queries import GetLicenseKeyQuery
from licenses.application.services.ownership import require_license_key
from licenses.domain.events import LicenseKeyCreated, LicenseKeyUpdated
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class CreateLicenseKeyHandler:
    """Handler for CreateLicenseKeyCommand."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository

    async def handle(self, command: CreateLicenseKeyCommand) -> LicenseKeyDTO:
        """
        Handle create license key command.

        Args:
            command: CreateLicenseKeyCommand

        Returns:
            LicenseKeyDTO including the raw key

        Raises:
            ValidationError: If the email is malformed
        """
        license_key = await self.license_key_repository.save(
            LicenseKey.create(brand_id=command.brand_id, customer_email=command.customer_email)
        )
        logger.info(
            "License key created",
            extra={"brand_id": str(command.brand_id), "license_key_id": str(license_key.id)},
        )
        await event_bus.publish(
            LicenseKeyCreated(
                license_key_id=license_key.id,
                brand_id=license_key.brand_id,
                customer_email=str(license_key.customer_email),
            )
        )
        return LicenseKeyDTO.from_entity(license_key)


class UpdateLicenseKeyHandler:
    """Handler for UpdateLicenseKeyCommand."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository

    async def handle(self, command: UpdateLicenseKeyCommand) -> LicenseKeyDTO:
        """
        Handle update license key command.

        Raises:
            LicenseKeyNotFoundError: If the key is missing or foreign
            ValidationError: If the new email is malformed
        """
        license_key = await require_license_key(
            self.license_key_repository, command.brand_id, command.license_key_id
        )
        updated = license_key
        if command.customer_email is not None:
            updated = updated.change_email(command.customer_email)
        if command.is_active is not None:
            updated = updated.set_active(command.is_active)
        if updated is license_key:
            return LicenseKeyDTO.from_entity(license_key)

        saved = await self.license_key_repository.save(updated)
        await event_bus.publish(
            LicenseKeyUpdated(
                license_key_id=saved.id,
                brand_id=saved.brand_id,
                customer_email=str(saved.customer_email),
                is_active=saved.is_active,
            )
        )
        return LicenseKeyDTO.from_entity(saved)


class GetLicenseKeyHandler:
    """Handler for GetLicenseKeyQuery."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def handle(self, query: GetLicenseKeyQuery) -> LicenseKeyWithLicensesDTO:
        license_key = await require_license_key(
            self.license_key_repository, query.brand_id, query.license_key_id
        )
        licenses = await self.license_repository.find_by_license_key(license_key.id)
        products = {
            product.id: product
            for product in await self.product_repository.find_many(
                list({license.product_id for license in licenses})
            )
        }
        return LicenseKeyWithLicensesDTO(
            license_key=LicenseKeyDTO.from_entity(license_key),
            licenses=[
                LicenseDTO.from_entity(license, products.get(license.product_id))
                for license in licenses
            ],
        )
