"""
Seat release commands.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import InstanceIdentity


@dataclass
class DeactivateSeatCommand:
    """Command to release the seat held by one instance."""

    license_key: str
    product_slug: str
    identity: InstanceIdentity
    reason: Optional[str] = None


@dataclass
class ForceDeactivateSeatsCommand:
    """Command to release every seat of a brand's license."""

    brand_id: uuid.UUID
    license_id: uuid.UUID
    reason: Optional[str] = None
