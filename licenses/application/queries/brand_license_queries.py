"""
Brand-scoped license read queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class GetLicenseKeyQuery:
    """Query to fetch a license key of a brand with its licenses."""

    brand_id: uuid.UUID
    license_key_id: uuid.UUID


@dataclass
class GetLicenseQuery:
    """Query to fetch a single license of a brand."""

    brand_id: uuid.UUID
    license_id: uuid.UUID


@dataclass
class ListBrandLicensesQuery:
    """
    Query to list a brand's licenses.

    ``status`` is a stored status value (valid, suspended, cancelled).
    """

    brand_id: uuid.UUID
    status: Optional[str] = None
    product_slug: Optional[str] = None
