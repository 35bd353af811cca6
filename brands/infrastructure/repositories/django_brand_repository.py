"""
Django implementation of BrandRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.utils import timezone

from brands.domain.brand import Brand
from brands.infrastructure.models import ApiKey as ApiKeyModel
from brands.infrastructure.models import Brand as BrandModel
from brands.infrastructure.models import hash_api_key
from brands.ports.brand_repository import BrandRepository
from core.domain.value_objects import BrandSlug


class DjangoBrandRepository(BrandRepository):
    """
    Django ORM implementation of BrandRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: BrandModel) -> Brand:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Brand model

        Returns:
            Brand domain entity
        """
        return Brand(
            id=model.id,
            name=model.name,
            slug=BrandSlug(model.slug),
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _save_sync(self, brand: Brand) -> BrandModel:
        # pylint: disable=no-member
        model, created = BrandModel.objects.get_or_create(
            id=brand.id,
            defaults={
                "name": brand.name,
                "slug": str(brand.slug),
                "is_active": brand.is_active,
                "created_at": brand.created_at,
            },
        )
        if not created:
            model.name = brand.name
            model.slug = str(brand.slug)
            model.is_active = brand.is_active
            model.save()
        return model

    async def save(self, brand: Brand) -> Brand:
        """
        Save a brand entity.

        Args:
            brand: Brand entity to save

        Returns:
            Saved brand entity
        """
        model = await sync_to_async(self._save_sync)(brand)
        return self._to_domain(model)

    async def find_by_id(self, brand_id: uuid.UUID) -> Optional[Brand]:
        try:
            # pylint: disable=no-member
            model = await sync_to_async(BrandModel.objects.get)(id=brand_id)
        except BrandModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    async def find_by_slug(self, slug: str) -> Optional[Brand]:
        try:
            # pylint: disable=no-member
            model = await sync_to_async(BrandModel.objects.get)(slug=slug)
        except BrandModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    def _find_by_api_key_sync(self, raw_key: str) -> Optional[BrandModel]:
        # pylint: disable=no-member
        api_key = (
            ApiKeyModel.objects.select_related("brand")
            .filter(key_hash=hash_api_key(raw_key))
            .first()
        )
        if api_key is None or not api_key.is_valid():
            return None
        api_key.mark_used()
        return api_key.brand

    async def find_by_api_key(self, raw_key: str) -> Optional[Brand]:
        """
        Resolve a brand from a raw API key.

        Revoked and expired keys resolve to nothing. The brand's own
        active flag is left for the caller to check.

        Args:
            raw_key: API key as presented by the caller

        Returns:
            Brand entity or None
        """
        if not raw_key:
            return None
        model = await sync_to_async(self._find_by_api_key_sync)(raw_key)
        return self._to_domain(model) if model else None

    def _rotate_sync(self, brand_id: uuid.UUID) -> Tuple[str, int]:
        with transaction.atomic():
            # pylint: disable=no-member
            brand = BrandModel.objects.select_for_update().get(id=brand_id)
            revoked = ApiKeyModel.objects.filter(brand=brand, revoked_at__isnull=True).update(
                revoked_at=timezone.now()
            )
            new_key = brand.generate_api_key()
        return new_key._raw_key, revoked  # pylint: disable=protected-access

    async def rotate_api_key(self, brand_id: uuid.UUID) -> Tuple[str, int]:
        """
        Revoke every API key of the brand and issue a new one.

        Args:
            brand_id: Brand UUID

        Returns:
            Tuple of (new raw key, number of revoked keys)

        Raises:
            BrandModel.DoesNotExist: If the brand does not exist
        """
        return await sync_to_async(self._rotate_sync)(brand_id)

    async def list_all(self, active_only: bool = False) -> List[Brand]:
        # pylint: disable=no-member
        queryset = BrandModel.objects.all()
        if active_only:
            queryset = queryset.filter(is_active=True)
        models = await sync_to_async(list)(queryset.order_by("name"))
        return [self._to_domain(model) for model in models]
