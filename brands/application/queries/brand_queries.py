"""
Brand and catalog queries.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ListProductsQuery:
    """Query to list a brand's products."""

    brand_id: uuid.UUID
    active_only: bool = False


@dataclass
class GetBrandStatisticsQuery:
    """Query for a brand's catalog and license counts."""

    brand_id: uuid.UUID
