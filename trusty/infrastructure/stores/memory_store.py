"""
In-process implementation of the document store.

Documents are kept as JSON-compatible dicts so callers never share mutable
state with the store. Each operation runs without suspending, which makes
every single-document operation atomic within the event loop.
"""

from typing import Any, Dict, List, Optional

import structlog

from trusty.core.exceptions import AlreadyExistsError, NotFoundError
from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.registry import entity_from_document
from trusty.infrastructure.stores.keys import (
    DocumentKey,
    document_key,
    entity_key,
    external_key,
)
from trusty.interfaces.document_store import DocumentStore, matches_filters

logger = structlog.get_logger()


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store enforcing the same uniqueness keys as the SQL store."""

    def __init__(self):
        self._documents: Dict[DocumentKey, Dict[str, Any]] = {}
        self._external_keys: Dict[str, DocumentKey] = {}

    def _find(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str]
    ) -> DocumentKey:
        key = document_key(kind, entity_id, namespace_id)
        document = self._documents.get(key)
        if document is None or (
            namespace_id is not None and document.get("namespace_id") != namespace_id
        ):
            raise NotFoundError(EntityKind(kind).label, entity_id)
        return key

    async def get(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        key = self._find(kind, entity_id, namespace_id)
        return entity_from_document(kind, self._documents[key])

    async def list(
        self,
        kind: EntityKind,
        namespace_id: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[Entity]:
        kind = EntityKind(kind)
        results = []
        for (doc_kind, _, _), document in self._documents.items():
            if doc_kind != kind.value:
                continue
            if namespace_id is not None and document.get("namespace_id") != namespace_id:
                continue
            if matches_filters(document, filters):
                results.append(entity_from_document(kind, document))
        return results

    async def add(self, entity: Entity) -> None:
        key = entity_key(entity)
        if key in self._documents:
            raise AlreadyExistsError(f"{entity.kind.label} already exists: {entity.id}")
        ext_key = external_key(entity)
        if ext_key is not None and ext_key in self._external_keys:
            raise AlreadyExistsError(f"user already exists with external id: {ext_key}")

        self._documents[key] = entity.to_document()
        if ext_key is not None:
            self._external_keys[ext_key] = key
        logger.debug("Document added", kind=entity.kind.value, entity_id=entity.id)

    async def update(
        self,
        kind: EntityKind,
        entity_id: str,
        entity: Entity,
        namespace_id: Optional[str] = None,
    ) -> Entity:
        key = self._find(kind, entity_id, namespace_id)
        if entity_key(entity) != key:
            raise ValueError("entity identity cannot change on update")

        old_ext_key = external_key(entity_from_document(kind, self._documents[key]))
        new_ext_key = external_key(entity)
        if new_ext_key != old_ext_key and new_ext_key in self._external_keys:
            raise AlreadyExistsError(f"user already exists with external id: {new_ext_key}")

        self._documents[key] = entity.to_document()
        if old_ext_key is not None and new_ext_key != old_ext_key:
            del self._external_keys[old_ext_key]
            self._external_keys[new_ext_key] = key
        logger.debug("Document updated", kind=EntityKind(kind).value, entity_id=entity_id)
        return entity_from_document(kind, self._documents[key])

    async def delete(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        key = self._find(kind, entity_id, namespace_id)
        deleted = entity_from_document(kind, self._documents.pop(key))
        ext_key = external_key(deleted)
        if ext_key is not None:
            self._external_keys.pop(ext_key, None)
        logger.debug("Document deleted", kind=EntityKind(kind).value, entity_id=entity_id)
        return deleted
