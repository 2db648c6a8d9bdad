"""
Document Store Interface

The narrow storage contract the validator, the access-control engine and the
administration services depend on. Every operation is atomic for a single
document; there are no multi-document transactions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from trusty.core.exceptions import NotFoundError
from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.product import Product
from trusty.domain.role import Role
from trusty.domain.tenant import PopulatedTenant, Tenant
from trusty.domain.user import User, UserInfo


def lookup_path(document: Dict[str, Any], path: str) -> Any:
    """Resolve a dotted path such as ``external_provider.id`` in a document."""
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def matches_filters(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    """
    Document-store filter semantics.

    A filter on a list-valued field matches when the list contains the value;
    anything else is an equality test.
    """
    for path, expected in (filters or {}).items():
        actual = lookup_path(document, path)
        if isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


class DocumentStore(ABC):
    """
    Abstract interface for entity persistence.

    ``namespace_id`` is part of the key for namespace-scoped kinds (products).
    For every other kind it is an optional filter: an entity in a different
    namespace is reported as not found.
    """

    async def connect(self) -> None:
        """Open connections. Stores without connections do nothing."""

    async def disconnect(self) -> None:
        """Release connections."""

    async def health_check(self) -> bool:
        return True

    @abstractmethod
    async def get(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        """
        Fetch one entity.

        Raises:
            NotFoundError: If no entity matches
            StorageError: On backend failure
        """
        pass

    @abstractmethod
    async def list(
        self,
        kind: EntityKind,
        namespace_id: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[Entity]:
        """
        List entities of a kind, optionally within a namespace.

        Args:
            kind: Entity kind to list
            namespace_id: Restrict to this namespace
            filters: Dotted document path to expected value

        Returns:
            List[Entity]: Matches in insertion order
        """
        pass

    @abstractmethod
    async def add(self, entity: Entity) -> None:
        """
        Insert a new entity.

        Raises:
            AlreadyExistsError: If the entity collides with a uniqueness key
            StorageError: On backend failure
        """
        pass

    @abstractmethod
    async def update(
        self,
        kind: EntityKind,
        entity_id: str,
        entity: Entity,
        namespace_id: Optional[str] = None,
    ) -> Entity:
        """
        Replace a stored entity with ``entity``.

        Raises:
            NotFoundError: If nothing is stored under the key
            AlreadyExistsError: If the new value collides with a uniqueness key
        """
        pass

    @abstractmethod
    async def delete(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        """
        Remove an entity and return the deleted value.

        Raises:
            NotFoundError: If nothing is stored under the key
        """
        pass

    async def find_user_by_external_id(
        self,
        external_id: str,
        provider_type: Optional[str] = None,
        namespace_id: Optional[str] = None,
    ) -> User:
        """
        Resolve a user by its external provider id.

        Raises:
            NotFoundError: If no user has that external id
        """
        filters: Dict[str, Any] = {"external_provider.id": external_id}
        if provider_type is not None:
            filters["external_provider.provider_type"] = provider_type
        users = await self.list(EntityKind.USER, namespace_id=namespace_id, filters=filters)
        if not users:
            raise NotFoundError(EntityKind.USER.label, external_id)
        return users[0]

    async def find_roles_matching(
        self, role_ids: List[str], tenant_id: str, permission: str
    ) -> List[Role]:
        """Roles among ``role_ids`` bound to ``tenant_id`` that grant ``permission``."""
        if not role_ids:
            return []
        candidates = await self.list(
            EntityKind.ROLE,
            filters={"tenant_id": tenant_id, "permissions": permission},
        )
        wanted = set(role_ids)
        return [role for role in candidates if role.id in wanted]

    async def get_user_authorization_view(
        self,
        external_id: str,
        provider_type: Optional[str] = None,
        namespace_id: Optional[str] = None,
    ) -> UserInfo:
        """
        Build the authorization view of a user.

        Tenants and roles that no longer exist are left out of the populated
        lists; their ids stay in ``associated_tenants`` and ``roles``.
        """
        user = await self.find_user_by_external_id(
            external_id, provider_type=provider_type, namespace_id=namespace_id
        )

        tenants: List[PopulatedTenant] = []
        for tenant_id in user.associated_tenants:
            try:
                tenant: Tenant = await self.get(EntityKind.TENANT, tenant_id)
            except NotFoundError:
                continue
            products: List[Product] = []
            for product_id in tenant.subscribed_products:
                try:
                    products.append(
                        await self.get(
                            EntityKind.PRODUCT, product_id, namespace_id=tenant.namespace_id
                        )
                    )
                except NotFoundError:
                    continue
            tenants.append(PopulatedTenant.from_tenant(tenant, products))

        roles: List[Role] = []
        for role_id in user.roles:
            try:
                roles.append(await self.get(EntityKind.ROLE, role_id))
            except NotFoundError:
                continue

        return UserInfo.from_user(user, tenants, roles)
