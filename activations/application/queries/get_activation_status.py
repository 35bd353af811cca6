"""
Activation read queries.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import InstanceIdentity


@dataclass
class GetActivationStatusQuery:
    """Query to get the activation of an instance."""

    license_key: str
    product_slug: str
    identity: InstanceIdentity


@dataclass
class GetSeatUsageQuery:
    """Query to get seat usage of a brand's license."""

    brand_id: uuid.UUID
    license_id: uuid.UUID


@dataclass
class GetProductSeatUsageQuery:
    """Query to get seat usage of the license a key holds for a product."""

    license_key: str
    product_slug: str
