"""
Django implementation of ProductRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from brands.domain.product import Product
from brands.ports.product_repository import ProductRepository
from core.domain.value_objects import ProductSlug
from products.infrastructure.models import Product as ProductModel


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Product model

        Returns:
            Product domain entity
        """
        return Product(
            id=model.id,
            brand_id=model.brand_id,
            name=model.name,
            slug=ProductSlug(model.slug),
            max_seats=model.max_seats,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
            description=model.description,
        )

    def _save_sync(self, product: Product) -> ProductModel:
        # pylint: disable=no-member
        model, created = ProductModel.objects.get_or_create(
            id=product.id,
            defaults={
                "brand_id": product.brand_id,
                "name": product.name,
                "slug": str(product.slug),
                "description": product.description,
                "max_seats": product.max_seats,
                "is_active": product.is_active,
                "created_at": product.created_at,
            },
        )
        if not created:
            model.name = product.name
            model.slug = str(product.slug)
            model.description = product.description
            model.max_seats = product.max_seats
            model.is_active = product.is_active
            model.save()
        return model

    async def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        model = await sync_to_async(self._save_sync)(product)
        return self._to_domain(model)

    async def find_by_id(
        self, brand_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[Product]:
        try:
            # pylint: disable=no-member
            model = await sync_to_async(ProductModel.objects.get)(
                id=product_id, brand_id=brand_id
            )
        except ProductModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    async def find_by_slug(self, brand_id: uuid.UUID, slug: str) -> Optional[Product]:
        try:
            # pylint: disable=no-member
            model = await sync_to_async(ProductModel.objects.get)(
                brand_id=brand_id, slug=slug
            )
        except ProductModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    async def list_by_brand(
        self, brand_id: uuid.UUID, active_only: bool = False
    ) -> List[Product]:
        # pylint: disable=no-member
        queryset = ProductModel.objects.filter(brand_id=brand_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        models = await sync_to_async(list)(queryset.order_by("name"))
        return [self._to_domain(model) for model in models]

    async def find_many(self, product_ids: List[uuid.UUID]) -> List[Product]:
        if not product_ids:
            return []
        # pylint: disable=no-member
        models = await sync_to_async(list)(ProductModel.objects.filter(id__in=product_ids))
        return [self._to_domain(model) for model in models]
