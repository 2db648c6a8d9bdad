"""Wiring of store, validator, engine and services from settings."""

from typing import Optional

import structlog

from trusty.access_control.engine import AccessControlEngine
from trusty.core.config import Settings, get_settings
from trusty.core.exceptions import ConfigurationError
from trusty.infrastructure.database import Database
from trusty.infrastructure.stores.memory_store import MemoryDocumentStore
from trusty.infrastructure.stores.sql_store import SqlDocumentStore
from trusty.interfaces.document_store import DocumentStore
from trusty.services.deletion import DeletionCoordinator
from trusty.services.namespace_service import NamespaceService
from trusty.services.organization_profile_service import OrganizationProfileService
from trusty.services.product_service import ProductService
from trusty.services.role_service import RoleService
from trusty.services.tenant_service import TenantService
from trusty.services.user_service import UserService
from trusty.validation.integrity import IntegrityValidator

logger = structlog.get_logger()


def build_store(settings: Settings) -> DocumentStore:
    if settings.STORE_BACKEND == "memory":
        return MemoryDocumentStore()
    if settings.STORE_BACKEND == "sql":
        return SqlDocumentStore(Database(settings))
    raise ConfigurationError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")


class Trusty:
    """
    Facade over one store and everything built on it.

    Usage:
        async with Trusty() as trusty:
            await trusty.namespaces.create({"id": "ns1"})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[DocumentStore] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store or build_store(self.settings)
        self.validator = IntegrityValidator(self.store)
        self.engine = AccessControlEngine(self.store)
        self.deletion = DeletionCoordinator(self.store, policy=self.settings.DELETE_POLICY)

        services = (self.store, self.validator, self.deletion)
        self.namespaces = NamespaceService(*services)
        self.products = ProductService(*services)
        self.tenants = TenantService(*services)
        self.roles = RoleService(*services)
        self.users = UserService(*services)
        self.organization_profiles = OrganizationProfileService(*services)

    async def start(self) -> None:
        await self.store.connect()
        logger.info(
            "Trusty started",
            app=self.settings.APP_NAME,
            env=self.settings.APP_ENV,
            store_backend=self.settings.STORE_BACKEND,
            delete_policy=self.settings.DELETE_POLICY,
        )

    async def stop(self) -> None:
        await self.store.disconnect()

    async def __aenter__(self) -> "Trusty":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
