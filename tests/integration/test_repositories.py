"""
Integration tests for repositories.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync

from activations.infrastructure.models import Activation as ActivationModel
from brands.domain.brand import Brand
from core.domain.clock import utc_now
from core.domain.value_objects import InstanceIdentity, LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel


@pytest.mark.django_db
@pytest.mark.integration
class TestBrandRepository:
    """Integration tests for BrandRepository."""

    def test_find_by_api_key(self, brand_credentials, brand_repository):
        brand = async_to_sync(brand_repository.find_by_api_key)(brand_credentials.api_key)

        assert brand is not None
        assert brand.id == brand_credentials.brand.id

    def test_unknown_api_key(self, brand_credentials, brand_repository):
        assert async_to_sync(brand_repository.find_by_api_key)("bogus") is None

    def test_rotate_revokes_old_key(self, brand_credentials, brand_repository):
        new_key, revoked = async_to_sync(brand_repository.rotate_api_key)(
            brand_credentials.brand.id
        )

        assert revoked == 1
        assert async_to_sync(brand_repository.find_by_api_key)(brand_credentials.api_key) is None
        assert async_to_sync(brand_repository.find_by_api_key)(new_key) is not None

    def test_find_by_slug(self, db_brand, brand_repository):
        found = async_to_sync(brand_repository.find_by_slug)(str(db_brand.slug))
        assert found.id == db_brand.id


@pytest.mark.django_db
@pytest.mark.integration
class TestProductRepository:
    """Integration tests for ProductRepository."""

    def test_save_and_find(self, db_product, product_repository):
        found = async_to_sync(product_repository.find_by_id)(db_product.brand_id, db_product.id)

        assert found is not None
        assert found.slug == db_product.slug
        assert found.max_seats == 3

    def test_find_scoped_to_brand(self, db_product, product_repository):
        assert async_to_sync(product_repository.find_by_id)(uuid.uuid4(), db_product.id) is None

    def test_same_slug_in_two_brands(
        self, db_brand, make_product, product_repository, brand_repository
    ):
        other = async_to_sync(brand_repository.save)(
            Brand.create(name="Other", slug=f"other-{uuid.uuid4().hex[:6]}")
        )
        make_product(db_brand, slug="pro")
        make_product(other, slug="pro")

        find = async_to_sync(product_repository.find_by_slug)
        assert find(db_brand.id, "pro").brand_id == db_brand.id
        assert find(other.id, "pro").brand_id == other.id


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseKeyRepository:
    """Integration tests for LicenseKeyRepository."""

    def test_find_by_key(self, db_license_key, license_key_repository):
        found = async_to_sync(license_key_repository.find_by_key)(db_license_key.key)

        assert found.id == db_license_key.id
        assert str(found.customer_email) == "customer@example.com"

    def test_find_by_key_empty(self, license_key_repository, db):
        assert async_to_sync(license_key_repository.find_by_key)("") is None

    def test_email_lookup_is_case_insensitive(
        self, db_brand, make_license_key, license_key_repository
    ):
        make_license_key(db_brand, customer_email="Mixed.Case@Example.com")

        found = async_to_sync(license_key_repository.find_by_customer_email)(
            db_brand.id, "mixed.case@example.com"
        )

        assert len(found) == 1

    def test_update_active_flag(self, db_license_key, license_key_repository):
        async_to_sync(license_key_repository.save)(db_license_key.set_active(False))

        found = async_to_sync(license_key_repository.find_by_key)(db_license_key.key)
        assert found.is_active is False

    def test_count_by_brand(self, db_brand, make_license_key, license_key_repository):
        make_license_key(db_brand)
        inactive = make_license_key(db_brand)
        async_to_sync(license_key_repository.save)(inactive.set_active(False))

        counts = async_to_sync(license_key_repository.count_by_brand)(db_brand.id)

        assert counts == {"total": 2, "active": 1}


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_save_and_find(self, db_brand, db_license, license_repository):
        found = async_to_sync(license_repository.find_by_id)(db_brand.id, db_license.id)

        assert found.status == LicenseStatus.VALID
        assert found.max_seats == 3
        assert found.expires_at == db_license.expires_at

    def test_find_scoped_to_brand(self, db_license, license_repository):
        assert async_to_sync(license_repository.find_by_id)(uuid.uuid4(), db_license.id) is None

    def test_status_update(self, db_brand, db_license, license_repository):
        async_to_sync(license_repository.save)(db_license.suspend())

        found = async_to_sync(license_repository.find_by_id)(db_brand.id, db_license.id)
        assert found.status == LicenseStatus.SUSPENDED

    def test_apply_transition(self, db_brand, db_license, license_repository):
        before, after = async_to_sync(license_repository.apply_transition)(
            db_brand.id, db_license.id, lambda license: license.renew(30)
        )

        assert after.expires_at == before.expires_at + timedelta(days=30)
        found = async_to_sync(license_repository.find_by_id)(db_brand.id, db_license.id)
        assert found.expires_at == after.expires_at

    def test_apply_transition_scoped_to_brand(self, db_license, license_repository):
        result = async_to_sync(license_repository.apply_transition)(
            uuid.uuid4(), db_license.id, lambda license: license.suspend()
        )

        assert result is None
        assert LicenseModel.objects.get(id=db_license.id).status == "valid"

    def test_apply_transition_without_change_writes_nothing(
        self, db_brand, db_license, license_repository
    ):
        updated_at = LicenseModel.objects.get(id=db_license.id).updated_at

        before, after = async_to_sync(license_repository.apply_transition)(
            db_brand.id, db_license.id, lambda license: license
        )

        assert after is before
        assert LicenseModel.objects.get(id=db_license.id).updated_at == updated_at

    def test_newest_license_wins_for_key_and_product(
        self, db_license_key, db_product, db_license, license_repository
    ):
        newer = License.create(
            license_key_id=db_license_key.id,
            product_id=db_product.id,
            max_seats=9,
            expires_at=utc_now() + timedelta(days=1),
        )
        async_to_sync(license_repository.save)(newer)

        found = async_to_sync(license_repository.find_by_license_key_and_product)(
            db_license_key.id, db_product.id
        )

        assert found.id == newer.id

    def test_list_by_brand_filters(
        self, db_brand, db_license, db_license_key, license_repository, make_license, make_product
    ):
        addon = make_product(db_brand, slug="addon")
        suspended = make_license(db_license_key, addon)
        async_to_sync(license_repository.save)(suspended.suspend())

        by_status = async_to_sync(license_repository.list_by_brand)(
            db_brand.id, status=LicenseStatus.SUSPENDED
        )
        by_product = async_to_sync(license_repository.list_by_brand)(
            db_brand.id, product_slug="rankmath-pro"
        )

        assert [license.id for license in by_status] == [suspended.id]
        assert [license.id for license in by_product] == [db_license.id]


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationRepository:
    """Integration tests for ActivationRepository."""

    def test_find_by_identity_and_counts(
        self, db_license, seat_ledger, activation_repository, identity
    ):
        async_to_sync(seat_ledger.activate)(db_license.id, identity)

        found = async_to_sync(activation_repository.find_by_identity)(db_license.id, identity)
        counts = async_to_sync(activation_repository.count_active_by_licenses)([db_license.id])

        assert found.is_active
        assert found.identity.instance_url == identity.instance_url
        assert counts == {db_license.id: 1}

    def test_identity_lookup_uses_supplied_fields_only(
        self, db_license, seat_ledger, activation_repository
    ):
        stored = InstanceIdentity(instance_id="site-1", machine_id="m-1")
        async_to_sync(seat_ledger.activate)(db_license.id, stored)

        by_id = InstanceIdentity(instance_id="site-1")
        by_other_machine = InstanceIdentity(instance_id="site-1", machine_id="m-2")

        assert async_to_sync(activation_repository.find_by_identity)(db_license.id, by_id) is not None
        assert (
            async_to_sync(activation_repository.find_by_identity)(db_license.id, by_other_machine)
            is None
        )

    def test_count_without_licenses(self, activation_repository, db):
        assert async_to_sync(activation_repository.count_active_by_licenses)([]) == {}

    def test_record_check(self, db_license, seat_ledger, activation_repository, identity):
        change = async_to_sync(seat_ledger.activate)(db_license.id, identity)
        checked = change.activation.touch(change.activation.activated_at + timedelta(hours=1))

        assert async_to_sync(activation_repository.record_check)(checked) is True
        row = ActivationModel.objects.get(id=checked.id)
        assert row.last_checked_at == checked.last_checked_at

    def test_record_check_skips_released_seat(
        self, db_license, seat_ledger, activation_repository, identity
    ):
        change = async_to_sync(seat_ledger.activate)(db_license.id, identity)
        async_to_sync(seat_ledger.deactivate)(db_license.id, identity)

        checked = change.activation.touch(change.activation.activated_at + timedelta(hours=1))

        assert async_to_sync(activation_repository.record_check)(checked) is False
        row = ActivationModel.objects.get(id=checked.id)
        assert row.status == "deactivated"
        assert row.last_checked_at == change.activation.last_checked_at
