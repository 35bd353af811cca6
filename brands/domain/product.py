"""
Product domain entity.

A product is a licensable offering owned by exactly one brand.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.domain.value_objects import ProductSlug


def validate_seat_cap(max_seats: Optional[int]) -> Optional[int]:
    """
    Validate an optional seat cap.

    Args:
        max_seats: Seat cap or None for unlimited

    Returns:
        The validated cap

    Raises:
        ValidationError: If the cap is not a positive integer
    """
    if max_seats is None:
        return None
    if isinstance(max_seats, bool) or not isinstance(max_seats, int) or max_seats < 1:
        raise ValidationError("Maximum seats must be at least 1")
    return max_seats


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    ``max_seats`` is only the default cap for new licenses; the cap that
    is enforced lives on each License.
    """

    id: uuid.UUID
    brand_id: uuid.UUID
    name: str
    slug: ProductSlug
    max_seats: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    description: str = ""

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValidationError("Product name cannot be empty")
        if len(self.name) > 255:
            raise ValidationError("Product name too long")
        if not self.brand_id:
            raise ValidationError("Brand ID is required")
        validate_seat_cap(self.max_seats)

    @classmethod
    def create(
        cls,
        brand_id: uuid.UUID,
        name: str,
        slug: str,
        max_seats: Optional[int] = None,
        description: str = "",
        product_id: Optional[uuid.UUID] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            brand_id: Brand UUID this product belongs to
            name: Product display name
            slug: Product slug, unique within the brand
            max_seats: Default seat cap for new licenses (None = unlimited)
            description: Optional description
            product_id: Optional UUID (generated if not provided)

        Returns:
            Product entity instance
        """
        now = utc_now()
        return cls(
            id=product_id or uuid.uuid4(),
            brand_id=brand_id,
            name=(name or "").strip(),
            slug=ProductSlug(slug),
            max_seats=max_seats,
            is_active=True,
            created_at=now,
            updated_at=now,
            description=description or "",
        )

    @property
    def supports_seats(self) -> bool:
        return self.max_seats is not None

    def rename(self, new_name: str) -> "Product":
        """Return a copy with a new display name."""
        return replace(self, name=(new_name or "").strip(), updated_at=utc_now())

    def set_active(self, is_active: bool) -> "Product":
        """Return a copy with the active flag toggled."""
        if self.is_active == is_active:
            return self
        return replace(self, is_active=is_active, updated_at=utc_now())
