"""Uniqueness keys shared by the store adapters."""

from typing import Optional, Tuple

from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.user import User

DocumentKey = Tuple[str, str, str]


def scope_key(kind: EntityKind, namespace_id: Optional[str]) -> str:
    """Namespace part of the primary key; empty for globally keyed kinds."""
    if EntityKind(kind).namespace_scoped:
        return namespace_id or ""
    return ""


def document_key(kind: EntityKind, entity_id: str, namespace_id: Optional[str]) -> DocumentKey:
    kind = EntityKind(kind)
    return (kind.value, scope_key(kind, namespace_id), entity_id)


def entity_key(entity: Entity) -> DocumentKey:
    return document_key(entity.kind, entity.id, getattr(entity, "namespace_id", None))


def external_key(entity: Entity) -> Optional[str]:
    """Globally unique provider identity of a user, None for other kinds."""
    if isinstance(entity, User):
        return entity.external_provider.key
    return None
