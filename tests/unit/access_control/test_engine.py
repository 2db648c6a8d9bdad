"""Unit tests for the access-control decision engine."""

from unittest.mock import AsyncMock

import pytest

from factories import role_data, user_data
from trusty.access_control.engine import AccessControlEngine
from trusty.core.exceptions import NotFoundError, StorageError
from trusty.domain.rbac import IsAllowedRequest
from trusty.domain.role import NewRole, Role
from trusty.domain.user import NewUser, User
from trusty.infrastructure.stores.memory_store import MemoryDocumentStore


def request_for(tenant, resource="res", action="act", external_user_id="auth0-user-1"):
    return IsAllowedRequest(
        external_user_id=external_user_id,
        tenant=tenant,
        product="p1",
        resource=resource,
        action=action,
    )


class TestAccessControlEngine:

    @pytest.mark.asyncio
    async def test_user_without_roles_is_denied_without_role_lookup(self):
        store = MemoryDocumentStore()
        await store.add(User.new_from_input(NewUser(**user_data())))
        store.find_roles_matching = AsyncMock(wraps=store.find_roles_matching)

        result = await AccessControlEngine(store).is_allowed(request_for("t1"))

        assert result.result is False
        store.find_roles_matching.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_role_in_tenant_grants(self):
        store = MemoryDocumentStore()
        role = Role.new_from_input(NewRole(**role_data("T", permissions=["resource1:action1"])))
        await store.add(role)
        await store.add(User.new_from_input(NewUser(**user_data(roles=[role.id]))))

        engine = AccessControlEngine(store)
        assert (await engine.is_allowed(request_for("T", "resource1", "action1"))).result is True
        assert (await engine.is_allowed(request_for("T", "resource1", "action2"))).result is False

    @pytest.mark.asyncio
    async def test_role_in_other_tenant_never_grants(self):
        store = MemoryDocumentStore()
        role = Role.new_from_input(NewRole(**role_data("other-tenant")))
        await store.add(role)
        await store.add(User.new_from_input(NewUser(**user_data(roles=[role.id]))))

        result = await AccessControlEngine(store).is_allowed(request_for("T"))
        assert result.result is False

    @pytest.mark.asyncio
    async def test_any_role_is_enough(self):
        store = MemoryDocumentStore()
        reader = Role.new_from_input(NewRole(**role_data("T", permissions=["doc:read"])))
        writer = Role.new_from_input(NewRole(**role_data("T", permissions=["doc:write"])))
        await store.add(reader)
        await store.add(writer)
        await store.add(User.new_from_input(NewUser(**user_data(roles=[reader.id, writer.id]))))

        engine = AccessControlEngine(store)
        assert (await engine.is_allowed(request_for("T", "doc", "read"))).result is True
        assert (await engine.is_allowed(request_for("T", "doc", "write"))).result is True
        assert (await engine.is_allowed(request_for("T", "doc", "delete"))).result is False

    @pytest.mark.asyncio
    async def test_permission_match_is_verbatim(self):
        store = MemoryDocumentStore()
        role = Role.new_from_input(NewRole(**role_data("T", permissions=["Doc:Read"])))
        await store.add(role)
        await store.add(User.new_from_input(NewUser(**user_data(roles=[role.id]))))

        result = await AccessControlEngine(store).is_allowed(request_for("T", "doc", "read"))
        assert result.result is False

    @pytest.mark.asyncio
    async def test_unknown_user_is_an_error(self):
        with pytest.raises(NotFoundError):
            await AccessControlEngine(MemoryDocumentStore()).is_allowed(request_for("T"))

    @pytest.mark.asyncio
    async def test_namespace_scoped_lookup(self):
        store = MemoryDocumentStore()
        role = Role.new_from_input(NewRole(**role_data("T")))
        await store.add(role)
        await store.add(User.new_from_input(NewUser(**user_data(roles=[role.id]))))
        engine = AccessControlEngine(store)

        assert (await engine.is_allowed(request_for("T"), namespace_id="ns1")).result is True
        with pytest.raises(NotFoundError):
            await engine.is_allowed(request_for("T"), namespace_id="ns2")

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        store = AsyncMock()
        store.find_user_by_external_id.side_effect = StorageError("store unreachable")

        with pytest.raises(StorageError):
            await AccessControlEngine(store).is_allowed(request_for("T"))

    @pytest.mark.asyncio
    async def test_scenario(self, trusty, scenario):
        allowed = await trusty.engine.is_allowed(request_for(scenario.tenant.id, "res", "act"))
        denied = await trusty.engine.is_allowed(request_for(scenario.tenant.id, "res", "other"))

        assert allowed.result is True
        assert denied.result is False
