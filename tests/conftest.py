"""Test configuration and fixtures."""

from types import SimpleNamespace

import pytest
import pytest_asyncio

from factories import product_data, role_data, tenant_data, user_data
from trusty.bootstrap import Trusty
from trusty.core.config import Settings
from trusty.domain.context import CallerContext
from trusty.infrastructure.stores.memory_store import MemoryDocumentStore


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(_env_file=None, STORE_BACKEND="memory", DELETE_POLICY="permissive")


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def trusty(settings, store):
    return Trusty(settings=settings, store=store)


@pytest.fixture
def ctx():
    return CallerContext(namespace="ns1")


@pytest_asyncio.fixture
async def scenario(trusty, ctx):
    """
    ns1 with product p1, tenant t1, role r1 granting ``res:act`` in t1, and
    user u1 holding r1.
    """
    namespace = await trusty.namespaces.create({"id": "ns1"})
    product = await trusty.products.create(ctx, product_data())
    tenant = await trusty.tenants.create(ctx, tenant_data(subscribed_products=["p1"]))
    role = await trusty.roles.create(ctx, role_data(tenant.id))
    user = await trusty.users.create(
        ctx, user_data(associated_tenants=[tenant.id], roles=[role.id])
    )
    return SimpleNamespace(
        namespace=namespace, product=product, tenant=tenant, role=role, user=user
    )
