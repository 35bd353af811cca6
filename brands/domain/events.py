"""
Brand domain events.

Domain events represent something that happened in the brand domain.
"""
import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class BrandCreated(DomainEvent):
    """Event raised when a brand is created."""

    def __init__(
        self,
        brand_id: uuid.UUID,
        name: str,
        slug: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(brand_id, occurred_at))
        self.brand_id = brand_id
        self.name = name
        self.slug = slug


class BrandActiveChanged(DomainEvent):
    """Event raised when a brand is activated or deactivated."""

    def __init__(
        self,
        brand_id: uuid.UUID,
        is_active: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(brand_id, occurred_at))
        self.brand_id = brand_id
        self.is_active = is_active


class ApiKeyRotated(DomainEvent):
    """Event raised when a brand's API credential is rotated."""

    def __init__(
        self,
        brand_id: uuid.UUID,
        key_prefix: str,
        revoked_count: int,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(**self._envelope(brand_id, occurred_at))
        self.brand_id = brand_id
        self.key_prefix = key_prefix
        self.revoked_count = revoked_count


class ProductCreated(DomainEvent):
    """Event raised when a product is created."""

    def __init__(
        self,
        product_id: uuid.UUID,
        brand_id: uuid.UUID,
        name: str,
        slug: str,
        max_seats: Optional[int],
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize ProductCreated event.

        Args:
            product_id: Product UUID
            brand_id: Brand UUID
            name: Product name
            slug: Product slug
            max_seats: Default seat cap
            occurred_at: When the event occurred
        """
        super().__init__(**self._envelope(product_id, occurred_at))
        self.product_id = product_id
        self.brand_id = brand_id
        self.name = name
        self.slug = slug
        self.max_seats = max_seats
