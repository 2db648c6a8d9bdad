"""Tests for the permission and URN value types."""

import pytest

from factories import product_data, role_data, tenant_data
from trusty.domain.organization_profile import NewOrganizationProfile, OrganizationProfile
from trusty.domain.permission import Permission, validate_permissions
from trusty.domain.product import NewProduct, Product
from trusty.domain.role import NewRole, Role
from trusty.domain.tenant import NewTenant, Tenant
from trusty.domain.urn import Urn


class TestPermission:

    def test_parse(self):
        permission = Permission.parse("document:read")
        assert permission.resource == "document"
        assert permission.action == "read"
        assert str(permission) == "document:read"

    @pytest.mark.parametrize("value", ["document", ":read", "document:", "a:b:c", ""])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            Permission.parse(value)

    def test_matching_is_case_sensitive(self):
        assert Permission.parse("Doc:Read") != Permission.parse("doc:read")

    def test_format_does_not_normalize(self):
        assert Permission.format(" res", "ACT") == " res:ACT"

    def test_validate_permissions_returns_list(self):
        values = ["a:b", "c:d"]
        assert validate_permissions(values) is values


class TestUrn:

    def test_round_trip(self):
        urn = Urn.parse("urn:abcd:t1:p1:role:r1")
        assert urn == Urn(namespace="abcd", tenant="t1", product="p1", kind="role", id="r1")
        assert str(urn) == "urn:abcd:t1:p1:role:r1"

    @pytest.mark.parametrize(
        "value",
        ["abcd:::product:1234", "urn:abcd::product:1234", "urn::::product:1234", "urn:abcd:::product:"],
    )
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            Urn.parse(value)

    def test_product_urn_has_empty_segments(self):
        product = Product.new_from_input(NewProduct(**product_data("1234", "abcd")))
        assert product.to_urn() == "urn:abcd:::product:1234"
        assert product.matches_urn("urn:abcd:::product:1234")
        assert not product.matches_urn("urn:other:::product:1234")
        assert not product.matches_urn("not-an-urn")

    def test_tenant_and_role_urns(self):
        tenant = Tenant.new_from_input(NewTenant(**tenant_data("abcd")))
        role = Role.new_from_input(NewRole(**role_data(tenant.id, "p1", "abcd")))

        assert tenant.to_urn() == f"urn:abcd:{tenant.id}::tenant:{tenant.id}"
        assert role.to_urn() == f"urn:abcd:{tenant.id}:p1:role:{role.id}"

    def test_organization_profile_urn(self):
        profile = OrganizationProfile.new_from_input(
            NewOrganizationProfile(
                namespace_id="abcd",
                tenant_id="t1",
                organization_name="Acme",
                organization_type="company",
                primary_contact_number="5550100",
                city="Springfield",
                state="IL",
            )
        )
        assert profile.to_urn() == f"urn:abcd:t1::organizationprofile:{profile.id}"
