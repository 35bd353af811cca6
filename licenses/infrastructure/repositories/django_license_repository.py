"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Callable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


def license_to_domain(model: LicenseModel) -> License:
    """Convert a Django License model to the domain entity."""
    return License(
        id=model.id,
        license_key_id=model.license_key_id,
        product_id=model.product_id,
        status=LicenseStatus(model.status),
        max_seats=model.max_seats,
        expires_at=model.expires_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Filters brand-scoped lookups through the license key
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return license_to_domain(model)

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model
        """
        model, created = LicenseModel.objects.get_or_create(
            id=license.id,
            defaults={
                "license_key_id": license.license_key_id,
                "product_id": license.product_id,
                "status": license.status.value,
                "max_seats": license.max_seats,
                "expires_at": license.expires_at,
                "created_at": license.created_at,
            },
        )
        if not created:
            model.status = license.status.value
            model.max_seats = license.max_seats
            model.expires_at = license.expires_at
        return model

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        model = self._to_model(license)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(
        self, brand_id: uuid.UUID, license_id: uuid.UUID
    ) -> Optional[License]:
        try:
            model = LicenseModel.objects.get(id=license_id, license_key__brand_id=brand_id)
        except LicenseModel.DoesNotExist:
            return None
        return self._to_domain(model)

    @sync_to_async
    def apply_transition(
        self,
        brand_id: uuid.UUID,
        license_id: uuid.UUID,
        transition: Callable[[License], License],
    ) -> Optional[Tuple[License, License]]:
        with transaction.atomic():
            model = (
                LicenseModel.objects.select_for_update()
                .filter(id=license_id, license_key__brand_id=brand_id)
                .first()
            )
            if model is None:
                return None
            before = self._to_domain(model)
            after = transition(before)
            if after is before:
                return before, before
            model.status = after.status.value
            model.max_seats = after.max_seats
            model.expires_at = after.expires_at
            model.save(update_fields=["status", "max_seats", "expires_at", "updated_at"])
            return before, self._to_domain(model)

    @sync_to_async
    def find_by_license_key(self, license_key_id: uuid.UUID) -> List[License]:
        models = LicenseModel.objects.filter(license_key_id=license_key_id).order_by("created_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_by_license_keys(self, license_key_ids: List[uuid.UUID]) -> List[License]:
        if not license_key_ids:
            return []
        models = LicenseModel.objects.filter(license_key_id__in=license_key_ids).order_by(
            "created_at"
        )
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_by_license_key_and_product(
        self, license_key_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[License]:
        model = (
            LicenseModel.objects.filter(license_key_id=license_key_id, product_id=product_id)
            .order_by("-created_at")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_by_brand(
        self,
        brand_id: uuid.UUID,
        status: Optional[LicenseStatus] = None,
        product_slug: Optional[str] = None,
    ) -> List[License]:
        """
        List the licenses of a brand, newest first.

        Args:
            brand_id: Brand UUID
            status: Optional status filter
            product_slug: Optional product slug filter

        Returns:
            List of License entities
        """
        queryset = LicenseModel.objects.filter(license_key__brand_id=brand_id)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if product_slug:
            queryset = queryset.filter(product__slug=product_slug)
        return [self._to_domain(model) for model in queryset.order_by("-created_at")]
