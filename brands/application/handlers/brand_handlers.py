"""
Brand handlers.

Handlers for registering brands, toggling them and rotating their API
keys. These are operator actions run from management commands.
"""
import logging

from brands.application.commands.brand_commands import (
    CreateBrandCommand,
    RotateApiKeyCommand,
    SetBrandActiveCommand,
)
from brands.application.dto.brand_dto import BrandCredentialDTO, BrandDTO
from brands.domain.brand import Brand
from brands.domain.events import ApiKeyRotated, BrandActiveChanged, BrandCreated
from brands.ports.brand_repository import BrandRepository
from core.domain.exceptions import BrandNotFoundError, ValidationError
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)


async def _require_brand(repository: BrandRepository, brand_id) -> Brand:
    brand = await repository.find_by_id(brand_id)
    if brand is None:
        raise BrandNotFoundError(f"Brand {brand_id} not found")
    return brand


class CreateBrandHandler:
    """Handler for CreateBrandCommand."""

    def __init__(self, brand_repository: BrandRepository):
        """Initialize handler with repositories."""
        self.brand_repository = brand_repository

    async def handle(self, command: CreateBrandCommand) -> BrandCredentialDTO:
        """
        Handle create brand command.

        Args:
            command: CreateBrandCommand

        Returns:
            BrandCredentialDTO holding the one-time raw API key

        Raises:
            ValidationError: If the slug is taken or input is invalid
        """
        brand = Brand.create(name=command.name, slug=command.slug)
        if await self.brand_repository.find_by_slug(str(brand.slug)) is not None:
            raise ValidationError(f"Brand slug '{brand.slug}' already exists")

        brand = await self.brand_repository.save(brand)
        raw_key, _ = await self.brand_repository.rotate_api_key(brand.id)
        await event_bus.publish(BrandCreated(brand_id=brand.id, name=brand.name, slug=str(brand.slug)))
        logger.info("Brand created", extra={"brand_id": str(brand.id), "slug": str(brand.slug)})
        return BrandCredentialDTO(brand=BrandDTO.from_entity(brand), api_key=raw_key)


class SetBrandActiveHandler:
    """Handler for SetBrandActiveCommand."""

    def __init__(self, brand_repository: BrandRepository):
        """Initialize handler with repositories."""
        self.brand_repository = brand_repository

    async def handle(self, command: SetBrandActiveCommand) -> BrandDTO:
        brand = await _require_brand(self.brand_repository, command.brand_id)
        updated = brand.set_active(command.is_active)
        if updated is brand:
            return BrandDTO.from_entity(brand)

        updated = await self.brand_repository.save(updated)
        await event_bus.publish(BrandActiveChanged(brand_id=updated.id, is_active=updated.is_active))
        return BrandDTO.from_entity(updated)


class RotateApiKeyHandler:
    """Handler for RotateApiKeyCommand."""

    def __init__(self, brand_repository: BrandRepository):
        """Initialize handler with repositories."""
        self.brand_repository = brand_repository

    async def handle(self, command: RotateApiKeyCommand) -> BrandCredentialDTO:
        """
        Revoke every API key of a brand and issue a new one.

        Raises:
            BrandNotFoundError: If the brand does not exist
        """
        brand = await _require_brand(self.brand_repository, command.brand_id)
        raw_key, revoked = await self.brand_repository.rotate_api_key(brand.id)
        await event_bus.publish(
            ApiKeyRotated(brand_id=brand.id, key_prefix=raw_key[:8], revoked_count=revoked)
        )
        logger.info("API key rotated", extra={"brand_id": str(brand.id), "revoked": revoked})
        return BrandCredentialDTO(brand=BrandDTO.from_entity(brand), api_key=raw_key, revoked_keys=revoked)
