"""
Integration tests for the row-locking seat ledger.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.core.management import call_command

from activations.infrastructure.models import Activation as ActivationModel
from core.domain.clock import utc_now
from core.domain.exceptions import (
    ActivationNotFoundError,
    AlreadyActivatedError,
    LicenseNotFoundError,
    NoAvailableSeatsError,
    NotCurrentlyActiveError,
)
from core.domain.value_objects import ActivationStatus, InstanceIdentity
from licenses.infrastructure.models import License as LicenseModel


def lapse(license, days=1):
    """Move the license expiration into the past, keeping its seats."""
    LicenseModel.objects.filter(id=license.id).update(expires_at=utc_now() - timedelta(days=days))


def site(n: int) -> InstanceIdentity:
    return InstanceIdentity(instance_url=f"https://site-{n}.example.com", instance_type="wordpress")


@pytest.mark.django_db
@pytest.mark.integration
class TestSeatLedger:
    """Integration tests for DjangoSeatLedger."""

    def test_capacity_enforced(self, db_license, seat_ledger):
        """A three-seat license takes three instances and refuses the fourth."""
        activate = async_to_sync(seat_ledger.activate)
        for n in range(3):
            activate(db_license.id, site(n))

        with pytest.raises(NoAvailableSeatsError):
            activate(db_license.id, site(3))

        assert ActivationModel.objects.filter(license_id=db_license.id, status="active").count() == 3

    def test_already_activated(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))

        with pytest.raises(AlreadyActivatedError):
            async_to_sync(seat_ledger.activate)(db_license.id, site(1))

    def test_identity_stored_with_blanks(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, InstanceIdentity(machine_id="m-1"))

        row = ActivationModel.objects.get(license_id=db_license.id)
        assert (row.instance_id, row.instance_url, row.machine_id) == ("", "", "m-1")

    def test_reactivation_reuses_the_row(self, db_license, seat_ledger):
        first = async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        async_to_sync(seat_ledger.deactivate)(db_license.id, site(1), "moving host")

        again = async_to_sync(seat_ledger.activate)(db_license.id, site(1), {"version": "2.0"})

        assert again.reactivated is True
        assert again.activation.id == first.activation.id
        row = ActivationModel.objects.get(license_id=db_license.id)
        assert row.status == "active"
        assert row.deactivated_at is None
        assert row.deactivation_reason == ""
        assert row.instance_metadata == {"version": "2.0"}

    def test_reactivation_needs_a_free_seat(self, db_license, seat_ledger):
        activate = async_to_sync(seat_ledger.activate)
        activate(db_license.id, site(0))
        async_to_sync(seat_ledger.deactivate)(db_license.id, site(0))
        for n in range(1, 4):
            activate(db_license.id, site(n))

        with pytest.raises(NoAvailableSeatsError):
            activate(db_license.id, site(0))

    def test_deactivate(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))

        change = async_to_sync(seat_ledger.deactivate)(db_license.id, site(1), "uninstalled")

        assert change.activation.status == ActivationStatus.DEACTIVATED
        assert (change.seats_before, change.seats_after) == (1, 0)
        row = ActivationModel.objects.get(license_id=db_license.id)
        assert row.deactivation_reason == "uninstalled"

    def test_deactivate_unknown(self, db_license, seat_ledger):
        with pytest.raises(ActivationNotFoundError):
            async_to_sync(seat_ledger.deactivate)(db_license.id, site(1))

    def test_deactivate_twice(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        async_to_sync(seat_ledger.deactivate)(db_license.id, site(1))

        with pytest.raises(NotCurrentlyActiveError):
            async_to_sync(seat_ledger.deactivate)(db_license.id, site(1))

    def test_deactivate_all(self, db_license, seat_ledger):
        for n in range(3):
            async_to_sync(seat_ledger.activate)(db_license.id, site(n))

        count = async_to_sync(seat_ledger.deactivate_all)(db_license.id, "refund")

        assert count == 3
        assert not ActivationModel.objects.filter(license_id=db_license.id, status="active").exists()
        assert set(
            ActivationModel.objects.filter(license_id=db_license.id).values_list(
                "deactivation_reason", flat=True
            )
        ) == {"refund"}

    def test_missing_license(self, seat_ledger, db):
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(seat_ledger.activate)(uuid.uuid4(), site(1))


@pytest.mark.django_db
@pytest.mark.integration
class TestExpireLapsed:
    """Integration tests for the expiry sweep."""

    def test_expire_lapsed(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        async_to_sync(seat_ledger.activate)(db_license.id, site(2))
        lapse(db_license)

        results = async_to_sync(seat_ledger.expire_lapsed)(utc_now())

        assert len(results) == 1
        assert results[0]["license_id"] == db_license.id
        assert results[0]["count"] == 2
        assert set(
            ActivationModel.objects.filter(license_id=db_license.id).values_list(
                "status", flat=True
            )
        ) == {"expired"}

    def test_expired_rows_record_reason_in_place(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        lapse(db_license)
        swept_at = utc_now()

        async_to_sync(seat_ledger.expire_lapsed)(swept_at)

        row = ActivationModel.objects.get(license_id=db_license.id)
        assert row.deactivation_reason == "License expired"
        assert row.deactivated_at == swept_at
        assert row.instance_url == "https://site-1.example.com"

    def test_dry_run_changes_nothing(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        lapse(db_license)

        results = async_to_sync(seat_ledger.expire_lapsed)(utc_now(), dry_run=True)

        assert results[0]["count"] == 1
        assert ActivationModel.objects.get(license_id=db_license.id).status == "active"

    def test_valid_license_untouched(self, db_license, seat_ledger):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))

        assert async_to_sync(seat_ledger.expire_lapsed)(utc_now()) == []

    def test_expired_instance_reactivates_after_renewal(
        self, db_brand, db_license, seat_ledger, license_repository
    ):
        first = async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        lapse(db_license)
        async_to_sync(seat_ledger.expire_lapsed)(utc_now())

        license = async_to_sync(license_repository.find_by_id)(db_brand.id, db_license.id)
        async_to_sync(license_repository.save)(license.renew(days=30))
        again = async_to_sync(seat_ledger.activate)(db_license.id, site(1))

        assert again.reactivated is True
        assert again.activation.id == first.activation.id

    def test_management_command(self, db_license, seat_ledger, capsys):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        lapse(db_license)

        call_command("expire_activations")

        assert "Expired 1 activation(s) on 1 license(s)" in capsys.readouterr().out
        assert ActivationModel.objects.get(license_id=db_license.id).status == "expired"

    def test_management_command_dry_run(self, db_license, seat_ledger, capsys):
        async_to_sync(seat_ledger.activate)(db_license.id, site(1))
        lapse(db_license)

        call_command("expire_activations", "--dry-run")

        assert "Would expire 1 activation(s)" in capsys.readouterr().out
        assert ActivationModel.objects.get(license_id=db_license.id).status == "active"
