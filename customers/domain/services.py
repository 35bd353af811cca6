"""
Customer aggregation domain service.

Pure computations over licenses already loaded for one customer.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from brands.domain.brand import Brand
from brands.domain.product import Product
from core.domain.clock import utc_now
from licenses.domain.license import License
from licenses.domain.services import LicenseStatusEvaluator


@dataclass(frozen=True)
class ProductSummary:
    """Licenses of one product of one brand held by a customer."""

    brand_id: uuid.UUID
    brand_name: str
    product_slug: str
    product_name: str
    licenses_count: int
    total_seats: int
    active_seats: int


class CustomerLicenseAggregator:
    """Domain service summarizing a customer's licenses."""

    @staticmethod
    def licenses_summary(
        licenses: Iterable[License], current_time: Optional[datetime] = None
    ) -> Dict[str, int]:
        """Counts by effective state, see ``LicenseStatusEvaluator.count_by_state``."""
        return LicenseStatusEvaluator.count_by_state(licenses, current_time or utc_now())

    @staticmethod
    def products_summary(
        licenses: Iterable[License],
        products: Mapping[uuid.UUID, Product],
        brands: Mapping[uuid.UUID, Brand],
        active_seats: Mapping[uuid.UUID, int],
    ) -> List[ProductSummary]:
        """
        Group licenses by brand and product slug.

        Uncapped licenses add nothing to ``total_seats`` but their
        active seats are counted.

        Args:
            licenses: Licenses of the customer
            products: Products by id
            brands: Brands by id
            active_seats: Active activation count by license id

        Returns:
            One ProductSummary per (brand, product slug), in first-seen order
        """
        groups: Dict[Tuple[uuid.UUID, str], Dict] = {}
        for license in licenses:
            product = products.get(license.product_id)
            if product is None:
                continue
            brand = brands.get(product.brand_id)
            key = (product.brand_id, str(product.slug))
            group = groups.setdefault(
                key,
                {
                    "brand_id": product.brand_id,
                    "brand_name": brand.name if brand else "",
                    "product_slug": str(product.slug),
                    "product_name": product.name,
                    "licenses_count": 0,
                    "total_seats": 0,
                    "active_seats": 0,
                },
            )
            group["licenses_count"] += 1
            group["total_seats"] += license.max_seats or 0
            group["active_seats"] += active_seats.get(license.id, 0)
        return [ProductSummary(**group) for group in groups.values()]

    @staticmethod
    def has_access(
        licenses: Iterable[License],
        products: Mapping[uuid.UUID, Product],
        product_slug: str,
        current_time: Optional[datetime] = None,
    ) -> List[License]:
        """Usable licenses whose product carries ``product_slug``."""
        now = current_time or utc_now()
        matching = []
        for license in licenses:
            product = products.get(license.product_id)
            if product is not None and str(product.slug) == product_slug and license.is_valid(now):
                matching.append(license)
        return matching
