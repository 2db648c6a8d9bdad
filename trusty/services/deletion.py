"""
Delete policies.

The store has no foreign keys, so deleting an entity can leave dangling
references behind. ``DeletionCoordinator`` decides what happens to them:

- ``permissive``: delete only the entity; references are left dangling
- ``restrict``: refuse while any other entity references it
- ``cascade``: delete owned entities and pull the id out of reference lists
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import structlog

from trusty.core.exceptions import DependentsExistError, NotFoundError
from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.interfaces.document_store import DocumentStore

logger = structlog.get_logger()

PERMISSIVE = "permissive"
RESTRICT = "restrict"
CASCADE = "cascade"
DELETE_POLICIES = (PERMISSIVE, RESTRICT, CASCADE)


@dataclass(frozen=True)
class Dependency:
    """
    Entities of ``kind`` that reference the target through ``field``.

    Owned dependents are deleted on cascade. The others hold the target id in
    a list field and only lose that entry.
    """

    kind: EntityKind
    field: str
    owned: bool
    same_namespace: bool = False


DEPENDENCIES: Dict[EntityKind, Tuple[Dependency, ...]] = {
    EntityKind.NAMESPACE: (
        Dependency(EntityKind.PRODUCT, "namespace_id", owned=True),
        Dependency(EntityKind.TENANT, "namespace_id", owned=True),
        Dependency(EntityKind.ROLE, "namespace_id", owned=True),
        Dependency(EntityKind.USER, "namespace_id", owned=True),
        Dependency(EntityKind.ORGANIZATION_PROFILE, "namespace_id", owned=True),
    ),
    EntityKind.PRODUCT: (
        Dependency(EntityKind.ROLE, "product_id", owned=True, same_namespace=True),
        Dependency(
            EntityKind.TENANT, "subscribed_products", owned=False, same_namespace=True
        ),
    ),
    EntityKind.TENANT: (
        Dependency(EntityKind.ROLE, "tenant_id", owned=True),
        Dependency(EntityKind.ORGANIZATION_PROFILE, "tenant_id", owned=True),
        Dependency(EntityKind.USER, "associated_tenants", owned=False),
    ),
    EntityKind.ROLE: (
        Dependency(EntityKind.USER, "roles", owned=False),
    ),
}


class DeletionCoordinator:
    """Deletes entities according to the configured delete policy."""

    def __init__(self, store: DocumentStore, policy: str = PERMISSIVE):
        if policy not in DELETE_POLICIES:
            raise ValueError(f"unknown delete policy: {policy}")
        self.store = store
        self.policy = policy

    async def delete(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        """
        Delete an entity and return the deleted value.

        Raises:
            NotFoundError: If the entity does not exist
            DependentsExistError: Under ``restrict`` while references remain
        """
        kind = EntityKind(kind)
        if self.policy == PERMISSIVE:
            return await self.store.delete(kind, entity_id, namespace_id=namespace_id)

        target = await self.store.get(kind, entity_id, namespace_id=namespace_id)
        if self.policy == RESTRICT:
            dependents = await self.find_dependents(target)
            if dependents:
                raise DependentsExistError(
                    kind.label,
                    entity_id,
                    {dep.kind.collection: len(found) for dep, found in dependents},
                )
            return await self.store.delete(kind, entity_id, namespace_id=namespace_id)

        return await self._cascade(target)

    async def find_dependents(self, target: Entity) -> List[Tuple[Dependency, List[Entity]]]:
        """Non-empty groups of entities referencing ``target``."""
        groups = []
        for dependency in DEPENDENCIES.get(target.kind, ()):
            namespace_id = target.namespace_id if dependency.same_namespace else None
            found = await self.store.list(
                dependency.kind,
                namespace_id=namespace_id,
                filters={dependency.field: target.id},
            )
            if found:
                groups.append((dependency, found))
        return groups

    async def _cascade(self, target: Entity) -> Entity:
        for dependency, found in await self.find_dependents(target):
            for dependent in found:
                try:
                    if dependency.owned:
                        await self._cascade(dependent)
                    else:
                        await self._pull_reference(dependent, dependency.field, target.id)
                except NotFoundError:
                    # Already removed through another branch of the cascade
                    continue

        deleted = await self.store.delete(target.kind, target.id, namespace_id=target.scope)
        logger.info(
            "Entity deleted with cascade",
            kind=target.kind.value,
            entity_id=target.id,
        )
        return deleted

    async def _pull_reference(self, dependent: Entity, field: str, target_id: str) -> None:
        # Re-read so an earlier step of the cascade is not overwritten
        current = await self.store.get(dependent.kind, dependent.id, namespace_id=dependent.scope)
        values = getattr(current, field)
        if target_id not in values:
            return
        setattr(current, field, [value for value in values if value != target_id])
        current.timestamps.touch()
        await self.store.update(current.kind, current.id, current, namespace_id=current.scope)
