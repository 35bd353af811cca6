"""
Unit tests for license handlers, run against in-memory repositories.
"""

import uuid
from datetime import timedelta

import pytest

from activations.domain.activation import Activation

from brands.domain.brand import Brand
from brands.domain.product import Product
from core.domain.clock import utc_now
from core.domain.events import EventHandler
from core.domain.exceptions import (
    InvalidTransitionError,
    LicenseKeyNotFoundError,
    LicenseNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from core.domain.value_objects import InstanceIdentity, LicenseStatus
from fakes import (
    FakeActivationRepository,
    FakeLicenseKeyRepository,
    FakeLicenseRepository,
    FakeProductRepository,
)
from licenses.application.commands.cancel_license import CancelLicenseCommand
from licenses.application.commands.create_license import (
    CreateLicenseCommand,
    ProvisionLicenseCommand,
)
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.handlers.get_license_status_handler import GetLicenseKeyStatusHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    CancelLicenseHandler,
    RenewLicenseHandler,
    ResumeLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.application.handlers.provision_license_handler import (
    CreateLicenseHandler,
    ProvisionLicenseHandler,
)
from licenses.application.queries.get_license_status import GetLicenseKeyStatusQuery
from licenses.application.services.license_cache_service import status_ttl
from licenses.domain.events import (
    LicenseCreated,
    LicenseKeyCreated,
    LicenseRenewed,
    LicenseStatusChanged,
    LicenseSuspended,
)
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.fixture
def recorded(isolated_event_bus):
    """Events published while the test runs."""
    handler = RecordingHandler()
    for event_type in (LicenseKeyCreated, LicenseCreated, LicenseStatusChanged):
        isolated_event_bus.subscribe(event_type, handler)
    return handler.events


@pytest.fixture
def world():
    """Two brands with one product each and empty key and license stores."""
    brand = Brand.create(name="RankMath", slug="rankmath")
    other = Brand.create(name="WP Rocket", slug="wp-rocket")
    product = Product.create(brand_id=brand.id, name="RankMath Pro", slug="pro", max_seats=5)
    addon = Product.create(brand_id=brand.id, name="Addon", slug="addon")
    foreign = Product.create(brand_id=other.id, name="Rocket", slug="rocket")
    keys = FakeLicenseKeyRepository()
    return {
        "brand": brand,
        "product": product,
        "addon": addon,
        "foreign": foreign,
        "products": FakeProductRepository(product, addon, foreign),
        "keys": keys,
        "licenses": FakeLicenseRepository(keys),
        "activations": FakeActivationRepository(),
    }


def provision_handler(world):
    return ProvisionLicenseHandler(
        product_repository=world["products"],
        license_key_repository=world["keys"],
        license_repository=world["licenses"],
    )


async def seed_license(world, status=None, **kwargs) -> License:
    key = await world["keys"].save(
        LicenseKey.create(brand_id=world["brand"].id, customer_email="user@example.com")
    )
    license = License.create(license_key_id=key.id, product_id=world["product"].id, **kwargs)
    if status == LicenseStatus.SUSPENDED:
        license = license.suspend()
    elif status == LicenseStatus.CANCELLED:
        license = license.cancel()
    return await world["licenses"].save(license)


class TestProvisionLicenseHandler:
    """Tests for ProvisionLicenseHandler."""

    async def test_provision_license_success(self, world, recorded):
        """One key, one license per product, default seat caps."""
        expires_at = utc_now() + timedelta(days=365)

        result = await provision_handler(world).handle(
            ProvisionLicenseCommand(
                brand_id=world["brand"].id,
                customer_email="customer@example.com",
                product_ids=[world["product"].id, world["addon"].id],
                expires_at=expires_at,
            )
        )

        assert result.license_key.customer_email == "customer@example.com"
        assert len(result.license_key.key) == 32
        by_slug = {dto.product_slug: dto for dto in result.licenses}
        assert by_slug["pro"].max_seats == 5
        assert by_slug["addon"].max_seats is None
        assert all(dto.expires_at == expires_at for dto in result.licenses)
        assert [type(event) for event in recorded] == [
            LicenseKeyCreated,
            LicenseCreated,
            LicenseCreated,
        ]

    async def test_explicit_seat_cap_overrides_product_default(self, world, recorded):
        result = await provision_handler(world).handle(
            ProvisionLicenseCommand(
                brand_id=world["brand"].id,
                customer_email="customer@example.com",
                product_ids=[world["product"].id],
                max_seats=2,
            )
        )
        assert result.licenses[0].max_seats == 2

    async def test_duplicate_products_provisioned_once(self, world, recorded):
        result = await provision_handler(world).handle(
            ProvisionLicenseCommand(
                brand_id=world["brand"].id,
                customer_email="customer@example.com",
                product_ids=[world["product"].id, world["product"].id],
            )
        )
        assert len(result.licenses) == 1

    async def test_foreign_product_writes_nothing(self, world, recorded):
        with pytest.raises(ProductNotFoundError):
            await provision_handler(world).handle(
                ProvisionLicenseCommand(
                    brand_id=world["brand"].id,
                    customer_email="customer@example.com",
                    product_ids=[world["product"].id, world["foreign"].id],
                )
            )

        assert world["keys"].keys == {}
        assert world["licenses"].licenses == {}
        assert recorded == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"product_ids": []},
            {"customer_email": "not-an-email"},
            {"max_seats": 0},
            {"expires_at": "past"},
        ],
    )
    async def test_invalid_input(self, world, recorded, overrides):
        kwargs = {
            "brand_id": world["brand"].id,
            "customer_email": "customer@example.com",
            "product_ids": [world["product"].id],
        }
        kwargs.update(overrides)
        if kwargs.get("expires_at") == "past":
            kwargs["expires_at"] = utc_now() - timedelta(days=1)

        with pytest.raises(ValidationError):
            await provision_handler(world).handle(ProvisionLicenseCommand(**kwargs))


class TestCreateLicenseHandler:
    """Tests for CreateLicenseHandler."""

    async def test_attach_license_to_existing_key(self, world, recorded):
        key = await world["keys"].save(
            LicenseKey.create(brand_id=world["brand"].id, customer_email="user@example.com")
        )
        handler = CreateLicenseHandler(world["products"], world["keys"], world["licenses"])

        result = await handler.handle(
            CreateLicenseCommand(
                brand_id=world["brand"].id,
                license_key_id=key.id,
                product_id=world["addon"].id,
                max_seats=10,
            )
        )

        assert result.license_key_id == key.id
        assert result.max_seats == 10
        assert result.seats_used == 0

    async def test_key_of_another_brand(self, world, recorded):
        key = await world["keys"].save(
            LicenseKey.create(brand_id=uuid.uuid4(), customer_email="user@example.com")
        )
        handler = CreateLicenseHandler(world["products"], world["keys"], world["licenses"])

        with pytest.raises(LicenseKeyNotFoundError):
            await handler.handle(
                CreateLicenseCommand(
                    brand_id=world["brand"].id,
                    license_key_id=key.id,
                    product_id=world["product"].id,
                )
            )


class TestLifecycleHandlers:
    """Tests for renew, suspend, resume and cancel handlers."""

    def handler(self, world, handler_class):
        return handler_class(world["licenses"], world["keys"], world["products"])

    async def test_suspend(self, world, recorded):
        license = await seed_license(world)

        result = await self.handler(world, SuspendLicenseHandler).handle(
            SuspendLicenseCommand(brand_id=world["brand"].id, license_id=license.id)
        )

        assert result.status == "suspended"
        assert result.is_valid is False
        assert len(recorded) == 1
        assert isinstance(recorded[0], LicenseSuspended)
        assert recorded[0].previous_status == "valid"

    async def test_suspend_twice_publishes_once(self, world, recorded):
        license = await seed_license(world, status=LicenseStatus.SUSPENDED)

        await self.handler(world, SuspendLicenseHandler).handle(
            SuspendLicenseCommand(brand_id=world["brand"].id, license_id=license.id)
        )

        assert recorded == []

    async def test_resume(self, world, recorded):
        license = await seed_license(world, status=LicenseStatus.SUSPENDED)

        result = await self.handler(world, ResumeLicenseHandler).handle(
            ResumeLicenseCommand(brand_id=world["brand"].id, license_id=license.id)
        )

        assert result.status == "valid"

    async def test_renew_publishes_expirations(self, world, recorded):
        expires_at = utc_now() + timedelta(days=1)
        license = await seed_license(world, expires_at=expires_at)

        result = await self.handler(world, RenewLicenseHandler).handle(
            RenewLicenseCommand(brand_id=world["brand"].id, license_id=license.id, days=30)
        )

        assert result.expires_at == expires_at + timedelta(days=30)
        event = recorded[0]
        assert isinstance(event, LicenseRenewed)
        assert event.previous_expiration == expires_at
        assert event.new_expiration == result.expires_at

    async def test_renewals_accumulate(self, world, recorded):
        expires_at = utc_now() + timedelta(days=1)
        license = await seed_license(world, expires_at=expires_at)
        handler = self.handler(world, RenewLicenseHandler)

        for _ in range(2):
            await handler.handle(
                RenewLicenseCommand(brand_id=world["brand"].id, license_id=license.id, days=30)
            )

        stored = world["licenses"].licenses[license.id]
        assert stored.expires_at == expires_at + timedelta(days=60)
        assert [e.new_expiration for e in recorded] == [
            expires_at + timedelta(days=30),
            expires_at + timedelta(days=60),
        ]

    async def test_cancelled_license_cannot_be_renewed(self, world, recorded):
        license = await seed_license(world, status=LicenseStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            await self.handler(world, RenewLicenseHandler).handle(
                RenewLicenseCommand(brand_id=world["brand"].id, license_id=license.id, days=30)
            )

    async def test_license_of_another_brand(self, world, recorded):
        license = await seed_license(world)

        with pytest.raises(LicenseNotFoundError):
            await self.handler(world, CancelLicenseHandler).handle(
                CancelLicenseCommand(brand_id=uuid.uuid4(), license_id=license.id)
            )


class TestGetLicenseKeyStatusHandler:
    """Tests for GetLicenseKeyStatusHandler."""

    def handler(self, world):
        return GetLicenseKeyStatusHandler(
            world["keys"], world["licenses"], world["products"], world["activations"]
        )

    async def test_unknown_key(self, world):
        with pytest.raises(LicenseKeyNotFoundError):
            await self.handler(world).handle(GetLicenseKeyStatusQuery(license_key="nope"))

    async def test_status_of_active_key(self, world):
        license = await seed_license(world, max_seats=3)
        key = world["keys"].keys[license.license_key_id]

        result = await self.handler(world).handle(GetLicenseKeyStatusQuery(license_key=key.key))

        assert result.overall_status == "active"
        assert result.is_valid is True
        assert len(result.entitlements) == 1
        assert result.entitlements[0].seats_available == 3
        assert result.seat_usage.total_seats == 3
        assert result.summary["active_licenses"] == 1

    async def test_suspended_license_hidden_from_entitlements(self, world):
        license = await seed_license(world, status=LicenseStatus.SUSPENDED)
        key = world["keys"].keys[license.license_key_id]

        result = await self.handler(world).handle(GetLicenseKeyStatusQuery(license_key=key.key))

        assert result.overall_status == "partially_suspended"
        assert result.is_valid is False
        assert result.entitlements == []
        assert result.summary["total_products"] == 1

    async def test_cached_status_expires_with_license(self, world, monkeypatch):
        now = utc_now()
        license = await seed_license(world, expires_at=now + timedelta(hours=1))
        key = world["keys"].keys[license.license_key_id]
        query = GetLicenseKeyStatusQuery(license_key=key.key)

        assert (await self.handler(world).handle(query)).overall_status == "active"

        monkeypatch.setattr(
            "licenses.application.handlers.get_license_status_handler.utc_now",
            lambda: now + timedelta(hours=2),
        )
        result = await self.handler(world).handle(query)

        assert result.overall_status == "no_valid_licenses"
        assert result.is_valid is False
        assert result.entitlements == []

    async def test_seats_summed_across_products(self, world):
        lite = Product.create(brand_id=world["brand"].id, name="Lite", slug="lite", max_seats=3)
        await world["products"].save(lite)
        key = await world["keys"].save(
            LicenseKey.create(brand_id=world["brand"].id, customer_email="user@example.com")
        )
        for product, seats in ((world["product"], 5), (lite, 3)):
            license = await world["licenses"].save(
                License.create(license_key_id=key.id, product_id=product.id, max_seats=seats)
            )
            activation = Activation.create(
                license_id=license.id,
                identity=InstanceIdentity(instance_url=f"https://{product.slug}.example.com"),
            )
            world["activations"].activations[activation.id] = activation

        result = await self.handler(world).handle(GetLicenseKeyStatusQuery(license_key=key.key))

        assert result.seat_usage.total_seats == 8
        assert result.seat_usage.used_seats == 2
        assert result.seat_usage.available_seats == 6
        assert result.summary["total_seats"] == 8
        assert result.summary["used_seats"] == 2
        assert sorted(e.seats_used for e in result.entitlements) == [1, 1]


class TestStatusCacheTtl:
    """Cache lifetime of a computed license key status."""

    def test_no_expiry_uses_default(self, settings):
        settings.LICENSE_STATUS_CACHE_TTL = 300
        assert status_ttl(utc_now(), None) == 300

    def test_capped_at_next_expiry(self, settings):
        settings.LICENSE_STATUS_CACHE_TTL = 300
        now = utc_now()
        assert status_ttl(now, now + timedelta(seconds=10)) == 10

    def test_imminent_expiry_not_cached(self):
        now = utc_now()
        assert status_ttl(now, now + timedelta(milliseconds=500)) == 0
        assert status_ttl(now, now - timedelta(seconds=1)) == 0
