from typing import Any, List

import structlog

from trusty.domain.kinds import EntityKind
from trusty.domain.namespace import Namespace, NewNamespace
from trusty.domain.rules import parse_payload
from trusty.interfaces.document_store import DocumentStore
from trusty.services.deletion import DeletionCoordinator
from trusty.validation.integrity import IntegrityValidator

logger = structlog.get_logger()


class NamespaceService:
    """
    Namespace administration.

    Namespaces are the root scope, so these operations are not checked
    against a caller namespace.
    """

    def __init__(
        self,
        store: DocumentStore,
        validator: IntegrityValidator,
        deletion: DeletionCoordinator,
    ):
        self.store = store
        self.validator = validator
        self.deletion = deletion

    async def create(self, data: Any) -> Namespace:
        payload = parse_payload(NewNamespace, data)
        await self.validator.validate(payload)
        namespace = Namespace.new_from_input(payload)
        await self.store.add(namespace)
        logger.info("Namespace created", namespace_id=namespace.id)
        return namespace

    async def get(self, namespace_id: str) -> Namespace:
        return await self.store.get(EntityKind.NAMESPACE, namespace_id)

    async def list(self) -> List[Namespace]:
        return await self.store.list(EntityKind.NAMESPACE)

    async def delete(self, namespace_id: str) -> Namespace:
        deleted = await self.deletion.delete(EntityKind.NAMESPACE, namespace_id)
        logger.info(
            "Namespace deleted", namespace_id=namespace_id, policy=self.deletion.policy
        )
        return deleted
