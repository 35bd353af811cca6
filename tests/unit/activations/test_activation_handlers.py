"""
Unit tests for seat handlers, run against in-memory repositories.
"""

from datetime import timedelta

import pytest

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.commands.deactivate_seats import (
    DeactivateSeatCommand,
    ForceDeactivateSeatsCommand,
)
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.deactivate_seat_handler import (
    DeactivateSeatHandler,
    ForceDeactivateSeatsHandler,
)
from activations.application.handlers.seat_query_handlers import GetActivationStatusHandler
from activations.application.queries.get_activation_status import GetActivationStatusQuery
from activations.domain.events import LicenseActivated, SeatDeactivated, SeatsForceDeactivated
from brands.domain.brand import Brand
from brands.domain.product import Product
from core.domain.clock import utc_now
from core.domain.events import EventHandler
from core.domain.exceptions import (
    ActivationNotFoundError,
    AlreadyActivatedError,
    LicenseKeyNotFoundError,
    LicenseNotFoundError,
    LicenseNotUsableError,
    NoAvailableSeatsError,
    NotCurrentlyActiveError,
    ProductNotFoundError,
)
from core.domain.value_objects import InstanceIdentity
from fakes import (
    FakeActivationRepository,
    FakeBrandRepository,
    FakeLicenseKeyRepository,
    FakeLicenseRepository,
    FakeProductRepository,
    FakeSeatLedger,
)
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey

SITE_A = InstanceIdentity(instance_url="https://a.example.com", instance_type="wordpress")
SITE_B = InstanceIdentity(instance_url="https://b.example.com", instance_type="wordpress")
SITE_C = InstanceIdentity(instance_url="https://c.example.com", instance_type="wordpress")


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.fixture
def recorded(isolated_event_bus):
    handler = RecordingHandler()
    for event_type in (LicenseActivated, SeatDeactivated, SeatsForceDeactivated):
        isolated_event_bus.subscribe(event_type, handler)
    return handler.events


class Setup:
    """A brand, a product and one key holding a two-seat license."""

    def __init__(self, max_seats=2, expires_at=None):
        self.brand = Brand.create(name="RankMath", slug="rankmath")
        self.product = Product.create(brand_id=self.brand.id, name="Pro", slug="pro")
        self.key = LicenseKey.create(brand_id=self.brand.id, customer_email="user@example.com")
        self.license = License.create(
            license_key_id=self.key.id,
            product_id=self.product.id,
            max_seats=max_seats,
            expires_at=expires_at,
        )
        self.brands = FakeBrandRepository(self.brand)
        self.keys = FakeLicenseKeyRepository(self.key)
        self.licenses = FakeLicenseRepository(self.keys, self.license)
        self.products = FakeProductRepository(self.product)
        self.activations = FakeActivationRepository()
        self.ledger = FakeSeatLedger(self.licenses, self.activations)

    async def activate(self, identity, product_slug="pro", key=None):
        handler = ActivateLicenseHandler(
            self.keys, self.licenses, self.products, self.ledger, self.brands
        )
        return await handler.handle(
            ActivateLicenseCommand(
                license_key=key or self.key.key, product_slug=product_slug, identity=identity
            )
        )

    async def deactivate(self, identity, reason=None):
        handler = DeactivateSeatHandler(self.keys, self.licenses, self.products, self.ledger)
        return await handler.handle(
            DeactivateSeatCommand(
                license_key=self.key.key, product_slug="pro", identity=identity, reason=reason
            )
        )


class TestActivateLicenseHandler:
    """Tests for ActivateLicenseHandler."""

    async def test_activate(self, recorded):
        setup = Setup()

        result = await setup.activate(SITE_A)

        assert result.message == "License activated"
        assert result.seats_after == 1
        assert result.seats_remaining == 1
        assert result.activation.instance_url == "https://a.example.com"
        assert isinstance(recorded[0], LicenseActivated)
        assert recorded[0].reactivated is False

    async def test_seats_run_out(self, recorded):
        setup = Setup(max_seats=2)
        await setup.activate(SITE_A)
        await setup.activate(SITE_B)

        with pytest.raises(NoAvailableSeatsError):
            await setup.activate(SITE_C)
        assert len(recorded) == 2

    async def test_already_activated(self, recorded):
        setup = Setup()
        await setup.activate(SITE_A)

        with pytest.raises(AlreadyActivatedError):
            await setup.activate(SITE_A)

    async def test_unlimited_license(self, recorded):
        setup = Setup(max_seats=None)
        result = await setup.activate(SITE_A)
        assert result.seats_remaining == "unlimited"

    async def test_reactivate_after_deactivation(self, recorded):
        setup = Setup(max_seats=1)
        first = await setup.activate(SITE_A)
        await setup.deactivate(SITE_A, reason="moved")

        again = await setup.activate(SITE_A)

        assert again.reactivated is True
        assert again.message == "License reactivated"
        assert again.activation.id == first.activation.id

    async def test_expired_license(self, recorded):
        setup = Setup(expires_at=utc_now() - timedelta(days=1))
        with pytest.raises(LicenseNotUsableError):
            await setup.activate(SITE_A)

    async def test_inactive_key(self, recorded):
        setup = Setup()
        await setup.keys.save(setup.key.set_active(False))

        with pytest.raises(LicenseNotUsableError):
            await setup.activate(SITE_A)

    async def test_inactive_brand(self, recorded):
        setup = Setup()
        await setup.brands.save(setup.brand.set_active(False))

        with pytest.raises(LicenseNotUsableError, match="Brand is inactive"):
            await setup.activate(SITE_A)
        assert recorded == []
        assert await setup.activations.find_active_by_license(setup.license.id) == []

    async def test_unknown_key(self, recorded):
        with pytest.raises(LicenseKeyNotFoundError):
            await Setup().activate(SITE_A, key="unknown")

    async def test_unknown_product(self, recorded):
        with pytest.raises(ProductNotFoundError):
            await Setup().activate(SITE_A, product_slug="missing")

    async def test_key_without_license_for_product(self, recorded):
        setup = Setup()
        other = Product.create(brand_id=setup.brand.id, name="Other", slug="other")
        await setup.products.save(other)

        with pytest.raises(LicenseNotFoundError):
            await setup.activate(SITE_A, product_slug="other")


class TestDeactivateSeatHandler:
    """Tests for DeactivateSeatHandler."""

    async def test_deactivate_frees_seat(self, recorded):
        setup = Setup(max_seats=1)
        await setup.activate(SITE_A)

        result = await setup.deactivate(SITE_A, reason="uninstalled")

        assert result.seats_after == 0
        assert result.activation.status == "deactivated"
        assert result.activation.deactivation_reason == "uninstalled"
        assert isinstance(recorded[-1], SeatDeactivated)
        await setup.activate(SITE_B)

    async def test_deactivate_unknown_instance(self, recorded):
        with pytest.raises(ActivationNotFoundError):
            await Setup().deactivate(SITE_A)

    async def test_deactivate_twice(self, recorded):
        setup = Setup()
        await setup.activate(SITE_A)
        await setup.deactivate(SITE_A)

        with pytest.raises(NotCurrentlyActiveError):
            await setup.deactivate(SITE_A)

    async def test_deactivate_on_suspended_license(self, recorded):
        setup = Setup()
        await setup.activate(SITE_A)
        await setup.licenses.save(setup.license.suspend())

        result = await setup.deactivate(SITE_A)

        assert result.activation.status == "deactivated"


class TestForceDeactivateSeatsHandler:
    """Tests for ForceDeactivateSeatsHandler."""

    async def test_force_deactivate(self, recorded):
        setup = Setup(max_seats=3)
        await setup.activate(SITE_A)
        await setup.activate(SITE_B)
        handler = ForceDeactivateSeatsHandler(setup.licenses, setup.ledger)

        result = await handler.handle(
            ForceDeactivateSeatsCommand(brand_id=setup.brand.id, license_id=setup.license.id)
        )

        assert result.deactivated_count == 2
        assert result.reason == "Administrative deactivation"
        assert await setup.activations.find_active_by_license(setup.license.id) == []
        assert isinstance(recorded[-1], SeatsForceDeactivated)

    async def test_force_deactivate_uncapped_license(self, recorded):
        setup = Setup(max_seats=None)
        await setup.activate(SITE_A)
        await setup.activate(SITE_B)
        handler = ForceDeactivateSeatsHandler(setup.licenses, setup.ledger)

        result = await handler.handle(
            ForceDeactivateSeatsCommand(brand_id=setup.brand.id, license_id=setup.license.id)
        )

        assert result.deactivated_count == 2
        assert await setup.activations.find_active_by_license(setup.license.id) == []
        assert (await setup.activate(SITE_C)).seats_remaining == "unlimited"

    async def test_nothing_to_deactivate(self, recorded):
        setup = Setup()
        handler = ForceDeactivateSeatsHandler(setup.licenses, setup.ledger)

        result = await handler.handle(
            ForceDeactivateSeatsCommand(
                brand_id=setup.brand.id, license_id=setup.license.id, reason="refund"
            )
        )

        assert result.deactivated_count == 0
        assert recorded == []


class TestGetActivationStatusHandler:
    """Tests for GetActivationStatusHandler."""

    async def test_lookup(self, recorded):
        setup = Setup()
        await setup.activate(SITE_A)
        handler = GetActivationStatusHandler(
            setup.keys, setup.licenses, setup.products, setup.activations
        )

        result = await handler.handle(
            GetActivationStatusQuery(license_key=setup.key.key, product_slug="pro", identity=SITE_A)
        )

        assert result.is_active is True

    async def test_lookup_unknown_instance(self, recorded):
        setup = Setup()
        handler = GetActivationStatusHandler(
            setup.keys, setup.licenses, setup.products, setup.activations
        )

        with pytest.raises(ActivationNotFoundError):
            await handler.handle(
                GetActivationStatusQuery(
                    license_key=setup.key.key, product_slug="pro", identity=SITE_B
                )
            )

    async def test_lookup_refreshes_last_checked(self, recorded, monkeypatch):
        setup = Setup()
        activated = (await setup.activate(SITE_A)).activation
        later = activated.activated_at + timedelta(hours=6)
        monkeypatch.setattr("activations.domain.activation.utc_now", lambda: later)
        handler = GetActivationStatusHandler(
            setup.keys, setup.licenses, setup.products, setup.activations
        )

        result = await handler.handle(
            GetActivationStatusQuery(license_key=setup.key.key, product_slug="pro", identity=SITE_A)
        )

        assert result.last_checked_at == later
        stored = setup.activations.activations[activated.id]
        assert stored.last_checked_at == later

    async def test_lookup_of_deactivated_seat_is_not_refreshed(self, recorded):
        setup = Setup()
        await setup.activate(SITE_A)
        released = (await setup.deactivate(SITE_A)).activation
        handler = GetActivationStatusHandler(
            setup.keys, setup.licenses, setup.products, setup.activations
        )

        result = await handler.handle(
            GetActivationStatusQuery(license_key=setup.key.key, product_slug="pro", identity=SITE_A)
        )

        assert result.is_active is False
        assert result.last_checked_at == released.last_checked_at
