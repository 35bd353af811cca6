"""
Unit tests for value objects.
"""

import pytest

from core.domain.exceptions import ValidationError
from core.domain.value_objects import (
    BrandSlug,
    Email,
    InstanceIdentity,
    InstanceType,
    ProductSlug,
)


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        email = Email("Customer@Example.com")
        assert str(email) == "Customer@Example.com"

    def test_surrounding_whitespace_is_stripped(self):
        assert Email("  user@example.com ").value == "user@example.com"

    @pytest.mark.parametrize("value", ["", "no-at-sign", "a@b", "two@@example.com", None])
    def test_invalid_email(self, value):
        with pytest.raises(ValidationError):
            Email(value)

    def test_email_equality(self):
        assert Email("user@example.com") == Email("user@example.com")
        assert Email("user@example.com") != Email("other@example.com")

    def test_email_hashable(self):
        assert len({Email("user@example.com"), Email("user@example.com")}) == 1


class TestSlugs:
    """Tests for slug value objects."""

    def test_valid_slug(self):
        assert str(ProductSlug("rankmath-pro")) == "rankmath-pro"
        assert str(BrandSlug("wp_rocket")) == "wp_rocket"

    @pytest.mark.parametrize("value", ["", "Upper", "with space", "-leading", "a" * 101])
    def test_invalid_slug(self, value):
        with pytest.raises(ValidationError):
            ProductSlug(value)

    def test_brand_and_product_slugs_differ(self):
        assert BrandSlug("same") != ProductSlug("same")


class TestInstanceIdentity:
    """Tests for InstanceIdentity value object."""

    def test_requires_one_identifier(self):
        with pytest.raises(ValidationError):
            InstanceIdentity(instance_type="wordpress")

    def test_blank_fields_count_as_absent(self):
        with pytest.raises(ValidationError):
            InstanceIdentity(instance_id="  ", instance_url="", machine_id=None)

    def test_instance_type_parsed_from_string(self):
        identity = InstanceIdentity(machine_id="m-1", instance_type="machine")
        assert identity.instance_type == InstanceType.MACHINE

    def test_unknown_instance_type(self):
        with pytest.raises(ValidationError):
            InstanceIdentity(machine_id="m-1", instance_type="toaster")

    def test_url_too_long(self):
        with pytest.raises(ValidationError):
            InstanceIdentity(instance_url="https://" + "a" * 500)

    def test_lookup_fields_only_supplied(self):
        identity = InstanceIdentity(instance_id="site-1", machine_id="  ")
        assert identity.lookup_fields() == {"instance_id": "site-1"}

    def test_matches_ignores_instance_type(self):
        lookup = InstanceIdentity(instance_url="https://a.example.com", instance_type="wordpress")
        stored = InstanceIdentity(instance_url="https://a.example.com", instance_type="app")
        assert lookup.matches(stored)

    def test_matches_requires_every_supplied_field(self):
        lookup = InstanceIdentity(instance_id="site-1", machine_id="m-1")
        stored = InstanceIdentity(instance_id="site-1", machine_id="m-2")
        assert not lookup.matches(stored)

    def test_partial_lookup_matches_richer_stored_identity(self):
        lookup = InstanceIdentity(instance_id="site-1")
        stored = InstanceIdentity(instance_id="site-1", machine_id="m-1")
        assert lookup.matches(stored)
