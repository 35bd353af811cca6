"""
Concurrent seat activation and license renewal against PostgreSQL row locks.

SQLite serializes writers on the whole database and ignores
SELECT ... FOR UPDATE, so these tests only run on PostgreSQL. They
skip elsewhere unless REQUIRE_POSTGRES is set, in which case a
non-PostgreSQL database fails the run. The CI job sets both
DATABASE_URL and REQUIRE_POSTGRES.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.db import connection, connections

from activations.infrastructure.models import Activation as ActivationModel
from core.domain.exceptions import AlreadyActivatedError, NoAvailableSeatsError
from core.domain.value_objects import InstanceIdentity
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.handlers.license_lifecycle_handlers import RenewLicenseHandler
from licenses.infrastructure.models import License as LicenseModel

pytestmark = [
    pytest.mark.integration,
    pytest.mark.postgres,
    pytest.mark.django_db(transaction=True),
]

WORKERS = 10
REQUIRE_POSTGRES = os.environ.get("REQUIRE_POSTGRES", "").lower() in ("1", "true", "yes")


@pytest.fixture(autouse=True)
def postgres_only():
    if connection.vendor == "postgresql":
        return
    if REQUIRE_POSTGRES:
        pytest.fail(f"REQUIRE_POSTGRES is set but the test database is {connection.vendor}")
    pytest.skip("row locks need PostgreSQL")


def run_concurrently(fn, args):
    def call(arg):
        try:
            return async_to_sync(fn)(*arg)
        except (NoAvailableSeatsError, AlreadyActivatedError) as exc:
            return exc
        finally:
            connections.close_all()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(call, args))


def test_seat_cap_holds_under_concurrent_activations(db_license, seat_ledger):
    identities = [
        InstanceIdentity(instance_url=f"https://site-{n}.example.com") for n in range(WORKERS)
    ]

    results = run_concurrently(
        seat_ledger.activate, [(db_license.id, identity) for identity in identities]
    )

    rejected = [r for r in results if isinstance(r, NoAvailableSeatsError)]
    assert len(rejected) == WORKERS - 3
    assert ActivationModel.objects.filter(license_id=db_license.id, status="active").count() == 3


def test_same_instance_activated_once(db_license, seat_ledger):
    identity = InstanceIdentity(instance_id="shared-instance")

    results = run_concurrently(seat_ledger.activate, [(db_license.id, identity)] * WORKERS)

    duplicates = [r for r in results if isinstance(r, AlreadyActivatedError)]
    assert len(duplicates) == WORKERS - 1
    assert ActivationModel.objects.filter(license_id=db_license.id).count() == 1


def test_concurrent_renewals_all_apply(
    db_brand, db_license, license_repository, license_key_repository, product_repository
):
    handler = RenewLicenseHandler(license_repository, license_key_repository, product_repository)
    command = RenewLicenseCommand(brand_id=db_brand.id, license_id=db_license.id, days=30)

    run_concurrently(handler.handle, [(command,)] * WORKERS)

    stored = LicenseModel.objects.get(id=db_license.id)
    assert stored.expires_at == db_license.expires_at + timedelta(days=30 * WORKERS)
