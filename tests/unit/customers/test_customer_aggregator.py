"""
Unit tests for the customer license aggregator.
"""

import uuid
from datetime import datetime, timedelta, timezone

from brands.domain.brand import Brand
from brands.domain.product import Product
from customers.domain.services import CustomerLicenseAggregator
from licenses.domain.license import License

NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)


class TestCustomerLicenseAggregator:
    """Tests for CustomerLicenseAggregator."""

    def setup_method(self):
        self.rankmath = Brand.create(name="RankMath", slug="rankmath")
        self.rocket = Brand.create(name="WP Rocket", slug="wp-rocket")
        self.seo = Product.create(brand_id=self.rankmath.id, name="SEO", slug="pro", max_seats=3)
        self.cache = Product.create(brand_id=self.rocket.id, name="Cache", slug="pro")
        self.products = {self.seo.id: self.seo, self.cache.id: self.cache}
        self.brands = {self.rankmath.id: self.rankmath, self.rocket.id: self.rocket}

    def license_(self, product, max_seats=None, expires_at=None):
        return License.create(
            license_key_id=uuid.uuid4(),
            product_id=product.id,
            max_seats=max_seats,
            expires_at=expires_at,
        )

    def test_products_grouped_per_brand(self):
        """Products with the same slug in two brands stay apart."""
        first = self.license_(self.seo, max_seats=3)
        second = self.license_(self.seo, max_seats=2)
        unlimited = self.license_(self.cache)
        active = {first.id: 2, second.id: 1, unlimited.id: 7}

        summary = CustomerLicenseAggregator.products_summary(
            [first, second, unlimited], self.products, self.brands, active
        )

        assert len(summary) == 2
        seo, cache = summary
        assert (seo.brand_name, seo.licenses_count, seo.total_seats, seo.active_seats) == (
            "RankMath",
            2,
            5,
            3,
        )
        assert (cache.brand_name, cache.total_seats, cache.active_seats) == ("WP Rocket", 0, 7)

    def test_unknown_product_skipped(self):
        orphan = License.create(license_key_id=uuid.uuid4(), product_id=uuid.uuid4())
        assert CustomerLicenseAggregator.products_summary([orphan], self.products, self.brands, {}) == []

    def test_licenses_summary(self):
        licenses = [
            self.license_(self.seo),
            self.license_(self.seo, expires_at=NOW - timedelta(days=1)),
            self.license_(self.cache).suspend(),
        ]

        summary = CustomerLicenseAggregator.licenses_summary(licenses, NOW)

        assert summary["total_active"] == 1
        assert summary["total_expired"] == 1
        assert summary["total_suspended"] == 1

    def test_has_access_only_usable_licenses(self):
        usable = self.license_(self.seo)
        licenses = [
            usable,
            self.license_(self.seo).cancel(),
            self.license_(self.seo, expires_at=NOW - timedelta(days=1)),
        ]

        assert CustomerLicenseAggregator.has_access(licenses, self.products, "pro", NOW) == [usable]

    def test_has_access_unknown_slug(self):
        licenses = [self.license_(self.seo)]
        assert CustomerLicenseAggregator.has_access(licenses, self.products, "other", NOW) == []
