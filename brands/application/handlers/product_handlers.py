"""
Catalog handlers.
"""
import logging
from typing import List

from brands.application.commands.brand_commands import CreateProductCommand
from brands.application.dto.brand_dto import BrandStatisticsDTO, ProductDTO
from brands.application.queries.brand_queries import GetBrandStatisticsQuery, ListProductsQuery
from brands.domain.events import ProductCreated
from brands.domain.product import Product
from brands.ports.product_repository import ProductRepository
from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.infrastructure.events import event_bus
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class CreateProductHandler:
    """Handler for CreateProductCommand."""

    def __init__(self, product_repository: ProductRepository):
        """Initialize handler with repositories."""
        self.product_repository = product_repository

    async def handle(self, command: CreateProductCommand) -> ProductDTO:
        """
        Handle create product command.

        Args:
            command: CreateProductCommand

        Returns:
            ProductDTO

        Raises:
            ValidationError: If the slug is taken within the brand or
                input is invalid
        """
        product = Product.create(
            brand_id=command.brand_id,
            name=command.name,
            slug=command.slug,
            max_seats=command.max_seats,
            description=command.description,
        )
        existing = await self.product_repository.find_by_slug(command.brand_id, str(product.slug))
        if existing is not None:
            raise ValidationError(f"Product slug '{product.slug}' already exists")

        product = await self.product_repository.save(product)
        await event_bus.publish(
            ProductCreated(
                product_id=product.id,
                brand_id=product.brand_id,
                name=product.name,
                slug=str(product.slug),
                max_seats=product.max_seats,
            )
        )
        logger.info(
            "Product created",
            extra={"brand_id": str(product.brand_id), "product_id": str(product.id)},
        )
        return ProductDTO.from_entity(product)


class ListProductsHandler:
    """Handler for ListProductsQuery."""

    def __init__(self, product_repository: ProductRepository):
        """Initialize handler with repositories."""
        self.product_repository = product_repository

    async def handle(self, query: ListProductsQuery) -> List[ProductDTO]:
        products = await self.product_repository.list_by_brand(
            query.brand_id, active_only=query.active_only
        )
        return [ProductDTO.from_entity(product) for product in products]


class GetBrandStatisticsHandler:
    """Handler for GetBrandStatisticsQuery."""

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

    async def handle(self, query: GetBrandStatisticsQuery) -> BrandStatisticsDTO:
        """
        Count a brand's catalog and licenses.

        ``total_seats`` sums the caps of usable licenses; uncapped
        licenses add nothing.
        """
        now = utc_now()
        products = await self.product_repository.list_by_brand(query.brand_id)
        keys = await self.license_key_repository.count_by_brand(query.brand_id)
        licenses = await self.license_repository.list_by_brand(query.brand_id)
        valid = [license for license in licenses if license.is_valid(now)]
        return BrandStatisticsDTO(
            brand_id=query.brand_id,
            products=len(products),
            active_products=sum(1 for product in products if product.is_active),
            license_keys=keys["total"],
            active_license_keys=keys["active"],
            licenses=len(licenses),
            valid_licenses=len(valid),
            total_seats=sum(license.max_seats or 0 for license in valid),
        )
