"""Tests for the administration services over the in-memory store."""

import pytest

from factories import organization_profile_data, product_data, role_data, tenant_data, user_data
from trusty.core.exceptions import (
    MissingReferenceError,
    NotFoundError,
    NotModifiedError,
    UnauthorizedError,
    UniquenessViolationError,
    ValidationError,
)
from trusty.domain.context import CallerContext
from trusty.domain.kinds import EntityKind


class TestNamespaces:

    @pytest.mark.asyncio
    async def test_duplicate_namespace_leaves_first_unchanged(self, trusty):
        first = await trusty.namespaces.create({"id": "ns1"})

        with pytest.raises(ValidationError) as exc_info:
            await trusty.namespaces.create({"id": "ns1"})

        assert isinstance(exc_info.value, UniquenessViolationError)
        assert await trusty.namespaces.get("ns1") == first
        assert len(await trusty.namespaces.list()) == 1

    @pytest.mark.asyncio
    async def test_invalid_id(self, trusty):
        with pytest.raises(ValidationError):
            await trusty.namespaces.create({"id": "not valid"})

    @pytest.mark.asyncio
    async def test_delete_twice(self, trusty):
        await trusty.namespaces.create({"id": "ns1"})

        deleted = await trusty.namespaces.delete("ns1")
        assert deleted.id == "ns1"
        with pytest.raises(NotFoundError):
            await trusty.namespaces.delete("ns1")


class TestProducts:

    @pytest.mark.asyncio
    async def test_create_in_other_namespace_is_unauthorized(self, trusty, ctx):
        await trusty.namespaces.create({"id": "ns2"})
        with pytest.raises(UnauthorizedError):
            await trusty.products.create(ctx, product_data(namespace_id="ns2"))

    @pytest.mark.asyncio
    async def test_update_and_list(self, trusty, ctx, scenario):
        updated = await trusty.products.update(ctx, "p1", {"can_self_register": True})

        assert updated.can_self_register is True
        assert updated.timestamps.updated_at is not None
        assert [p.id for p in await trusty.products.list(ctx)] == ["p1"]

    @pytest.mark.asyncio
    async def test_product_of_other_namespace_is_invisible(self, trusty, scenario):
        other = CallerContext(namespace="ns2")
        with pytest.raises(NotFoundError):
            await trusty.products.get(other, "p1")


class TestTenants:

    @pytest.mark.asyncio
    async def test_create_in_missing_namespace_persists_nothing(self, trusty, store):
        ghost = CallerContext(namespace="ghost")
        with pytest.raises(ValidationError):
            await trusty.tenants.create(ghost, tenant_data("ghost"))
        assert await store.list(EntityKind.TENANT) == []

    @pytest.mark.asyncio
    async def test_update_with_unknown_product_leaves_stored_list(self, trusty, ctx, scenario):
        tenant_id = scenario.tenant.id
        with pytest.raises(MissingReferenceError):
            await trusty.tenants.update(ctx, tenant_id, {"subscribed_products": ["p1", "p9"]})

        stored = await trusty.tenants.get(ctx, tenant_id)
        assert stored.subscribed_products == ["p1"]

    @pytest.mark.asyncio
    async def test_update_returns_unchanged_entity_without_write(self, trusty, ctx, scenario):
        tenant = await trusty.tenants.update(ctx, scenario.tenant.id, {"name": "Tenant One"})
        assert tenant.timestamps.updated_at is None

    @pytest.mark.asyncio
    async def test_subscribe_to_product(self, trusty, ctx, scenario):
        await trusty.products.create(ctx, product_data("p2"))

        tenant = await trusty.tenants.subscribe_to_product(ctx, scenario.tenant.id, "p2")
        assert tenant.subscribed_products == ["p1", "p2"]
        with pytest.raises(NotModifiedError):
            await trusty.tenants.subscribe_to_product(ctx, scenario.tenant.id, "p2")

    @pytest.mark.asyncio
    async def test_subscribe_to_unknown_product(self, trusty, ctx, scenario):
        with pytest.raises(NotFoundError):
            await trusty.tenants.subscribe_to_product(ctx, scenario.tenant.id, "p9")

    @pytest.mark.asyncio
    async def test_other_namespace_is_unauthorized(self, trusty, scenario):
        other = CallerContext(namespace="ns2")
        with pytest.raises(UnauthorizedError):
            await trusty.tenants.get(other, scenario.tenant.id)
        with pytest.raises(UnauthorizedError):
            await trusty.tenants.delete(other, scenario.tenant.id)

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_caller(self, trusty, ctx, scenario):
        await trusty.namespaces.create({"id": "ns2"})
        await trusty.tenants.create(CallerContext(namespace="ns2"), tenant_data("ns2"))

        assert [t.id for t in await trusty.tenants.list(ctx)] == [scenario.tenant.id]


class TestRoles:

    @pytest.mark.asyncio
    async def test_update_permissions(self, trusty, ctx, scenario):
        role = await trusty.roles.update(
            ctx, scenario.role.id, {"permissions": ["res:act", "res:other"]}
        )
        assert role.permissions == ["res:act", "res:other"]

    @pytest.mark.asyncio
    async def test_update_to_unknown_tenant(self, trusty, ctx, scenario):
        with pytest.raises(MissingReferenceError):
            await trusty.roles.update(ctx, scenario.role.id, {"tenant_id": "nope"})
        assert (await trusty.roles.get(ctx, scenario.role.id)).tenant_id == scenario.tenant.id

    @pytest.mark.asyncio
    async def test_cannot_grant_inside_other_namespace_tenant(self, trusty, ctx, scenario):
        other_ctx = CallerContext(namespace="ns2")
        await trusty.namespaces.create({"id": "ns2"})
        await trusty.products.create(other_ctx, product_data("p1", "ns2"))
        other_tenant = await trusty.tenants.create(other_ctx, tenant_data("ns2"))

        with pytest.raises(MissingReferenceError):
            await trusty.roles.create(ctx, role_data(other_tenant.id))
        with pytest.raises(MissingReferenceError):
            await trusty.roles.update(ctx, scenario.role.id, {"tenant_id": other_tenant.id})
        with pytest.raises(MissingReferenceError):
            await trusty.users.update(
                ctx,
                scenario.user.external_provider.id,
                {"associated_tenants": [other_tenant.id]},
            )
        assert [r.id for r in await trusty.roles.list(ctx)] == [scenario.role.id]

    @pytest.mark.asyncio
    async def test_malformed_permission(self, trusty, ctx, scenario):
        with pytest.raises(ValidationError):
            await trusty.roles.create(ctx, role_data(scenario.tenant.id, permissions=["nocolon"]))


class TestUsers:

    @pytest.mark.asyncio
    async def test_duplicate_external_id(self, trusty, ctx, scenario):
        with pytest.raises(UniquenessViolationError):
            await trusty.users.create(ctx, user_data(email="other@example.com"))

    @pytest.mark.asyncio
    async def test_addressed_by_external_id(self, trusty, ctx, scenario):
        user = await trusty.users.get(ctx, "auth0-user-1")
        assert user.id == scenario.user.id

        updated = await trusty.users.update(ctx, "auth0-user-1", {"first_name": "Grace"})
        assert updated.first_name == "Grace"

    @pytest.mark.asyncio
    async def test_associate_with_tenant(self, trusty, ctx, scenario):
        await trusty.users.create(ctx, user_data("auth0-user-2", email="u2@example.com"))

        user = await trusty.users.associate_with_tenant(ctx, "auth0-user-2", scenario.tenant.id)
        assert user.associated_tenants == [scenario.tenant.id]
        with pytest.raises(NotModifiedError):
            await trusty.users.associate_with_tenant(ctx, "auth0-user-2", scenario.tenant.id)

    @pytest.mark.asyncio
    async def test_list_with_query(self, trusty, ctx, scenario):
        await trusty.users.create(ctx, user_data("auth0-user-2", is_active=False))

        everyone = await trusty.users.list(ctx)
        in_tenant = await trusty.users.list(ctx, {"associated_tenant": scenario.tenant.id})
        inactive = await trusty.users.list(ctx, {"is_active": False})

        assert len(everyone) == 2
        assert [u.id for u in in_tenant] == [scenario.user.id]
        assert [u.external_provider.id for u in inactive] == ["auth0-user-2"]

    @pytest.mark.asyncio
    async def test_user_info(self, trusty, ctx, scenario):
        info = await trusty.users.get_user_info(ctx, "auth0-user-1")

        assert [t.id for t in info.populated_tenants] == [scenario.tenant.id]
        assert [p.id for p in info.populated_tenants[0].populated_subscribed_products] == ["p1"]
        assert [r.id for r in info.populated_roles] == [scenario.role.id]

    @pytest.mark.asyncio
    async def test_user_info_in_other_namespace(self, trusty, scenario):
        with pytest.raises(UnauthorizedError):
            await trusty.users.get_user_info(CallerContext(namespace="ns2"), "auth0-user-1")

    @pytest.mark.asyncio
    async def test_delete_twice(self, trusty, ctx, scenario):
        deleted = await trusty.users.delete(ctx, "auth0-user-1")
        assert deleted.id == scenario.user.id
        with pytest.raises(NotFoundError):
            await trusty.users.delete(ctx, "auth0-user-1")


class TestOrganizationProfiles:

    @pytest.mark.asyncio
    async def test_lifecycle(self, trusty, ctx, scenario):
        profile = await trusty.organization_profiles.create(
            ctx, organization_profile_data(scenario.tenant.id)
        )
        updated = await trusty.organization_profiles.update(
            ctx, profile.id, {"registered_address_line_2": "Suite 100"}
        )

        assert updated.registered_address_line_2 == "Suite 100"
        assert [p.id for p in await trusty.organization_profiles.list(ctx)] == [profile.id]
        await trusty.organization_profiles.delete(ctx, profile.id)
        with pytest.raises(NotFoundError):
            await trusty.organization_profiles.get(ctx, profile.id)

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, trusty, ctx, scenario):
        with pytest.raises(MissingReferenceError):
            await trusty.organization_profiles.create(ctx, organization_profile_data("nope"))
