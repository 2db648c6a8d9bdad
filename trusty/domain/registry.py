"""Lookup from entity kind to its model class."""

from typing import Any, Dict, Type

from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.namespace import Namespace
from trusty.domain.organization_profile import OrganizationProfile
from trusty.domain.product import Product
from trusty.domain.role import Role
from trusty.domain.tenant import Tenant
from trusty.domain.user import User

ENTITY_TYPES: Dict[EntityKind, Type[Entity]] = {
    EntityKind.NAMESPACE: Namespace,
    EntityKind.PRODUCT: Product,
    EntityKind.TENANT: Tenant,
    EntityKind.ROLE: Role,
    EntityKind.USER: User,
    EntityKind.ORGANIZATION_PROFILE: OrganizationProfile,
}


def entity_type(kind: EntityKind) -> Type[Entity]:
    return ENTITY_TYPES[EntityKind(kind)]


def entity_from_document(kind: EntityKind, document: Dict[str, Any]) -> Entity:
    return entity_type(kind).model_validate(document)
