"""
Referential-integrity checks run before a mutation is persisted.

The store has no foreign keys, so every reference named in a payload is
looked up here. Checks run sequentially and stop at the first failure.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, Type

import structlog
from pydantic import BaseModel

from trusty.core.exceptions import MissingReferenceError, NotFoundError, UniquenessViolationError
from trusty.domain.kinds import EntityKind
from trusty.domain.namespace import NewNamespace
from trusty.domain.organization_profile import (
    NewOrganizationProfile,
    UpdateOrganizationProfile,
)
from trusty.domain.product import NewProduct, UpdateProduct
from trusty.domain.role import NewRole, UpdateRole
from trusty.domain.tenant import NewTenant, UpdateTenant
from trusty.domain.user import ExternalProvider, NewUser, UpdateUser
from trusty.interfaces.document_store import DocumentStore

logger = structlog.get_logger()


class IntegrityValidator:
    """Validates the cross-entity references and uniqueness of a payload."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self._checks: Dict[Type[BaseModel], Callable[..., Awaitable[None]]] = {
            NewNamespace: self._check_new_namespace,
            NewProduct: self._check_new_product,
            UpdateProduct: self._check_nothing,
            NewTenant: self._check_new_tenant,
            UpdateTenant: self._check_update_tenant,
            NewRole: self._check_new_role,
            UpdateRole: self._check_update_role,
            NewUser: self._check_new_user,
            UpdateUser: self._check_update_user,
            NewOrganizationProfile: self._check_new_organization_profile,
            UpdateOrganizationProfile: self._check_nothing,
        }

    async def validate(
        self,
        payload: BaseModel,
        namespace_id: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        """
        Validate a create or update payload against the current store.

        Args:
            payload: A New* or Update* payload model
            namespace_id: Namespace the mutation runs in; required for updates
                that carry product, tenant or role references
            entity_id: Id of the entity being updated, so it does not conflict
                with itself

        Raises:
            MissingReferenceError: A referenced entity does not exist
            UniquenessViolationError: The payload collides with an existing entity
            StorageError: The store failed; never translated
        """
        check = self._checks.get(type(payload))
        if check is None:
            raise TypeError(f"no integrity check for {type(payload).__name__}")
        await check(payload, namespace_id=namespace_id, entity_id=entity_id)

    async def _require(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Any:
        try:
            return await self.store.get(kind, entity_id, namespace_id=namespace_id)
        except NotFoundError as e:
            logger.info(
                "Missing reference",
                kind=kind.value,
                entity_id=entity_id,
                namespace_id=namespace_id,
            )
            raise MissingReferenceError(kind.label, entity_id, scope=namespace_id) from e

    async def _require_absent(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> None:
        try:
            await self.store.get(kind, entity_id, namespace_id=namespace_id)
        except NotFoundError:
            return
        raise UniquenessViolationError(kind.label, entity_id)

    async def _require_unique_provider(
        self, provider: ExternalProvider, user_id: Optional[str] = None
    ) -> None:
        try:
            existing = await self.store.find_user_by_external_id(
                provider.id, provider_type=provider.provider_type
            )
        except NotFoundError:
            return
        if existing.id != user_id:
            raise UniquenessViolationError("user", provider.id, field="external id")

    async def _check_nothing(self, payload, **_) -> None:
        return None

    async def _check_new_namespace(self, payload: NewNamespace, **_) -> None:
        await self._require_absent(EntityKind.NAMESPACE, payload.id)

    async def _check_new_product(self, payload: NewProduct, **_) -> None:
        await self._require(EntityKind.NAMESPACE, payload.namespace_id)
        await self._require_absent(
            EntityKind.PRODUCT, payload.id, namespace_id=payload.namespace_id
        )

    async def _check_new_tenant(self, payload: NewTenant, **_) -> None:
        await self._require(EntityKind.NAMESPACE, payload.namespace_id)
        for product_id in payload.subscribed_products:
            await self._require(
                EntityKind.PRODUCT, product_id, namespace_id=payload.namespace_id
            )

    async def _check_update_tenant(
        self, payload: UpdateTenant, namespace_id: Optional[str] = None, **_
    ) -> None:
        if payload.is_set("subscribed_products"):
            for product_id in payload.subscribed_products:
                await self._require(EntityKind.PRODUCT, product_id, namespace_id=namespace_id)

    # Tenants and roles are only referenced from inside their own namespace.

    async def _check_new_role(self, payload: NewRole, **_) -> None:
        await self._require(EntityKind.NAMESPACE, payload.namespace_id)
        await self._require(EntityKind.TENANT, payload.tenant_id, namespace_id=payload.namespace_id)
        await self._require(
            EntityKind.PRODUCT, payload.product_id, namespace_id=payload.namespace_id
        )

    async def _check_update_role(
        self, payload: UpdateRole, namespace_id: Optional[str] = None, **_
    ) -> None:
        if payload.is_set("tenant_id"):
            await self._require(EntityKind.TENANT, payload.tenant_id, namespace_id=namespace_id)
        if payload.is_set("product_id"):
            await self._require(EntityKind.PRODUCT, payload.product_id, namespace_id=namespace_id)

    async def _check_new_user(self, payload: NewUser, **_) -> None:
        await self._require(EntityKind.NAMESPACE, payload.namespace_id)
        await self._require_unique_provider(payload.external_provider)
        for tenant_id in payload.associated_tenants:
            await self._require(EntityKind.TENANT, tenant_id, namespace_id=payload.namespace_id)
        for role_id in payload.roles:
            await self._require(EntityKind.ROLE, role_id, namespace_id=payload.namespace_id)

    async def _check_update_user(
        self,
        payload: UpdateUser,
        namespace_id: Optional[str] = None,
        entity_id: Optional[str] = None,
        **_,
    ) -> None:
        if payload.is_set("external_provider"):
            await self._require_unique_provider(payload.external_provider, user_id=entity_id)
        if payload.is_set("associated_tenants"):
            for tenant_id in payload.associated_tenants:
                await self._require(EntityKind.TENANT, tenant_id, namespace_id=namespace_id)
        if payload.is_set("roles"):
            for role_id in payload.roles:
                await self._require(EntityKind.ROLE, role_id, namespace_id=namespace_id)

    async def _check_new_organization_profile(
        self, payload: NewOrganizationProfile, **_
    ) -> None:
        await self._require(EntityKind.NAMESPACE, payload.namespace_id)
        await self._require(EntityKind.TENANT, payload.tenant_id, namespace_id=payload.namespace_id)
