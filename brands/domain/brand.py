"""
Brand domain entity.

A brand is a tenant: it owns products and license keys, and every
brand-originated operation is scoped to exactly one brand.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.domain.value_objects import BrandSlug


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Brand name cannot be empty")
    if len(name) > 255:
        raise ValidationError("Brand name too long")
    return name


@dataclass(frozen=True)
class Brand:
    """
    Brand domain entity.

    Deactivating a brand never deletes its data. Inactive brands are
    rejected at authentication time and skipped by cross-brand queries.
    """

    id: uuid.UUID
    name: str
    slug: BrandSlug
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        name: str,
        slug: str,
        brand_id: Optional[uuid.UUID] = None,
    ) -> "Brand":
        """
        Create a new Brand entity.

        Args:
            name: Brand display name
            slug: Brand slug (URL-safe identifier)
            brand_id: Optional UUID (generated if not provided)

        Returns:
            Brand entity instance
        """
        now = utc_now()
        return cls(
            id=brand_id or uuid.uuid4(),
            name=_clean_name(name),
            slug=BrandSlug(slug),
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def rename(self, new_name: str) -> "Brand":
        """Return a copy with a new display name."""
        return replace(self, name=_clean_name(new_name), updated_at=utc_now())

    def set_active(self, is_active: bool) -> "Brand":
        """Return a copy with the active flag toggled."""
        if self.is_active == is_active:
            return self
        return replace(self, is_active=is_active, updated_at=utc_now())
