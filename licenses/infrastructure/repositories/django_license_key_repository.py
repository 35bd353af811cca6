"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async

from core.domain.value_objects import Email
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.models import (
    LicenseKey as LicenseKeyModel,
)
from licenses.ports.license_key_repository import LicenseKeyRepository


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """
    Django ORM implementation of LicenseKeyRepository.

    Email lookups are case-insensitive.
    """

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        return LicenseKey(
            id=model.id,
            brand_id=model.brand_id,
            key=model.key,
            key_hash=model.key_hash,
            customer_email=Email(model.customer_email),
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, license_key: LicenseKey) -> LicenseKeyModel:
        """
        Convert domain entity to Django model.

        Args:
            license_key: LicenseKey domain entity

        Returns:
            Django LicenseKey model
        """
        model, created = LicenseKeyModel.objects.get_or_create(
            id=license_key.id,
            defaults={
                "brand_id": license_key.brand_id,
                "key": license_key.key,
                "key_hash": license_key.key_hash,
                "customer_email": str(license_key.customer_email),
                "is_active": license_key.is_active,
                "created_at": license_key.created_at,
            },
        )
        if not created:
            model.customer_email = str(license_key.customer_email)
            model.is_active = license_key.is_active
        return model

    @sync_to_async
    def save(self, license_key: LicenseKey) -> LicenseKey:
        model = self._to_model(license_key)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(
        self, brand_id: uuid.UUID, license_key_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        try:
            model = LicenseKeyModel.objects.get(id=license_key_id, brand_id=brand_id)
        except LicenseKeyModel.DoesNotExist:
            return None
        return self._to_domain(model)

    @sync_to_async
    def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by key string.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """
        if not key:
            return None
        model = LicenseKeyModel.objects.filter(key=key).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_customer_email(
        self, brand_id: uuid.UUID, email: str
    ) -> List[LicenseKey]:
        models = LicenseKeyModel.objects.filter(
            brand_id=brand_id, customer_email__iexact=email
        ).order_by("-created_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_by_customer_email_across_brands(self, email: str) -> List[LicenseKey]:
        models = LicenseKeyModel.objects.filter(
            customer_email__iexact=email, brand__is_active=True
        ).order_by("-created_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_by_brand(self, brand_id: uuid.UUID) -> Dict[str, int]:
        queryset = LicenseKeyModel.objects.filter(brand_id=brand_id)
        return {
            "total": queryset.count(),
            "active": queryset.filter(is_active=True).count(),
        }
