"""
Pytest configuration and shared fixtures.

Database fixtures go through the async repositories with
``async_to_sync`` so every ORM call runs on the test thread and sees the
test transaction.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from activations.infrastructure.repositories.django_seat_ledger import DjangoSeatLedger
from brands.application.commands.brand_commands import CreateBrandCommand
from brands.application.handlers.brand_handlers import CreateBrandHandler
from brands.domain.product import Product
from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from brands.infrastructure.repositories.django_product_repository import DjangoProductRepository
from core.domain.clock import utc_now
from core.domain.value_objects import InstanceIdentity
from core.infrastructure.events import event_bus
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


def unique_slug(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def brand_repository():
    """Fixture for BrandRepository."""
    return DjangoBrandRepository()


@pytest.fixture
def product_repository():
    """Fixture for ProductRepository."""
    return DjangoProductRepository()


@pytest.fixture
def license_key_repository():
    """Fixture for LicenseKeyRepository."""
    return DjangoLicenseKeyRepository()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def seat_ledger():
    """Fixture for the row-locking SeatLedger."""
    return DjangoSeatLedger()


@pytest.fixture
def isolated_event_bus():
    """
    Run the test against an empty event bus.

    The subscriptions made at startup are restored afterwards.
    """
    saved = {event_type: list(handlers) for event_type, handlers in event_bus._handlers.items()}
    event_bus.clear()
    yield event_bus
    event_bus.clear()
    event_bus._handlers.update(saved)


@pytest.fixture
def identity():
    """Identity of a WordPress site."""
    return InstanceIdentity(instance_url="https://site-a.example.com", instance_type="wordpress")


@pytest.fixture
def brand_credentials(db, brand_repository):
    """A brand saved in database together with its raw API key."""
    handler = CreateBrandHandler(brand_repository)
    return async_to_sync(handler.handle)(
        CreateBrandCommand(name="RankMath", slug=unique_slug("rankmath"))
    )


@pytest.fixture
def db_brand(brand_credentials, brand_repository):
    """Domain Brand saved in database."""
    return async_to_sync(brand_repository.find_by_id)(brand_credentials.brand.id)


@pytest.fixture
def make_product(db, product_repository):
    """Factory saving a product of a brand."""

    def _make(brand, slug=None, max_seats=None, name="RankMath Pro"):
        product = Product.create(
            brand_id=brand.id,
            name=name,
            slug=slug or unique_slug("product"),
            max_seats=max_seats,
        )
        return async_to_sync(product_repository.save)(product)

    return _make


@pytest.fixture
def make_license_key(db, license_key_repository):
    """Factory saving a license key of a brand."""

    def _make(brand, customer_email="customer@example.com"):
        key = LicenseKey.create(brand_id=brand.id, customer_email=customer_email)
        return async_to_sync(license_key_repository.save)(key)

    return _make


@pytest.fixture
def make_license(db, license_repository):
    """Factory saving a license on a key."""

    def _make(license_key, product, max_seats=3, expires_at=None):
        license = License.create(
            license_key_id=license_key.id,
            product_id=product.id,
            max_seats=max_seats,
            expires_at=expires_at,
        )
        return async_to_sync(license_repository.save)(license)

    return _make


@pytest.fixture
def db_product(db_brand, make_product):
    """Product saved in database."""
    return make_product(db_brand, slug="rankmath-pro", max_seats=3)


@pytest.fixture
def db_license_key(db_brand, make_license_key):
    """LicenseKey saved in database."""
    return make_license_key(db_brand)


@pytest.fixture
def db_license(db_license_key, db_product, make_license):
    """License with three seats saved in database."""
    return make_license(
        db_license_key, db_product, max_seats=3, expires_at=utc_now() + timedelta(days=365)
    )


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def brand_client(api_client, brand_credentials):
    """API client authenticated as the brand."""
    api_client.credentials(HTTP_X_API_KEY=brand_credentials.api_key)
    return api_client


@pytest.fixture
def product_client(api_client, db_license_key):
    """API client authenticated with the customer's license key."""
    api_client.credentials(HTTP_X_LICENSE_KEY=db_license_key.key)
    return api_client
