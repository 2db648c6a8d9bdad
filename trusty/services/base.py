"""Shared plumbing of the administration services."""

from typing import Any, ClassVar, List, Optional, Type

import structlog
from pydantic import BaseModel

from trusty.domain.base import Entity
from trusty.domain.context import CallerContext
from trusty.domain.kinds import EntityKind
from trusty.domain.rules import UpdatePayload, parse_payload
from trusty.interfaces.document_store import DocumentStore
from trusty.services.deletion import DeletionCoordinator
from trusty.validation.integrity import IntegrityValidator

logger = structlog.get_logger()


class EntityService:
    """
    CRUD for one entity kind scoped to the caller's namespace.

    Mutations run input rules, the caller-scope check, the integrity
    validator and the store, in that order.
    """

    kind: ClassVar[EntityKind]
    model: ClassVar[Type[Entity]]
    create_payload: ClassVar[Type[BaseModel]]
    update_payload: ClassVar[Optional[Type[UpdatePayload]]] = None

    def __init__(
        self,
        store: DocumentStore,
        validator: IntegrityValidator,
        deletion: DeletionCoordinator,
    ):
        self.store = store
        self.validator = validator
        self.deletion = deletion

    def _store_namespace(self, ctx: CallerContext) -> Optional[str]:
        return ctx.namespace if self.kind.namespace_scoped else None

    async def _get_scoped(self, ctx: CallerContext, entity_id: str) -> Entity:
        entity = await self.store.get(
            self.kind, entity_id, namespace_id=self._store_namespace(ctx)
        )
        ctx.require_namespace(entity.namespace_id)
        return entity

    async def create(self, ctx: CallerContext, data: Any) -> Entity:
        payload = parse_payload(self.create_payload, data)
        ctx.require_namespace(payload.namespace_id)
        await self.validator.validate(payload)

        entity = self.model.new_from_input(payload)
        await self.store.add(entity)
        logger.info(
            "Entity created",
            kind=self.kind.value,
            entity_id=entity.id,
            namespace_id=ctx.namespace,
        )
        return entity

    async def update(self, ctx: CallerContext, entity_id: str, data: Any) -> Entity:
        payload = parse_payload(self.update_payload, data)
        entity = await self._get_scoped(ctx, entity_id)
        await self.validator.validate(
            payload, namespace_id=entity.namespace_id, entity_id=entity.id
        )
        return await self._save(entity, payload)

    async def _save(self, entity: Entity, payload: UpdatePayload) -> Entity:
        if not entity.apply_update(payload):
            return entity
        updated = await self.store.update(
            self.kind, entity.id, entity, namespace_id=entity.scope
        )
        logger.info("Entity updated", kind=self.kind.value, entity_id=entity.id)
        return updated

    async def get(self, ctx: CallerContext, entity_id: str) -> Entity:
        return await self._get_scoped(ctx, entity_id)

    async def list(self, ctx: CallerContext) -> List[Entity]:
        return await self.store.list(self.kind, namespace_id=ctx.namespace)

    async def delete(self, ctx: CallerContext, entity_id: str) -> Entity:
        entity = await self._get_scoped(ctx, entity_id)
        deleted = await self.deletion.delete(self.kind, entity.id, namespace_id=entity.scope)
        logger.info(
            "Entity deleted",
            kind=self.kind.value,
            entity_id=entity.id,
            policy=self.deletion.policy,
        )
        return deleted
