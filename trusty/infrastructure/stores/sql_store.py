"""
SQL implementation of the document store.

Uniqueness is enforced by the table's unique constraints, so a duplicate
that slips past the integrity validator under a race still fails with
AlreadyExistsError.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import structlog
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trusty.core.exceptions import AlreadyExistsError, NotFoundError, StorageError
from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.registry import entity_from_document
from trusty.domain.role import Role
from trusty.domain.user import User
from trusty.infrastructure.database import Database
from trusty.infrastructure.document_models import DocumentRecord
from trusty.infrastructure.stores.keys import entity_key, external_key, scope_key
from trusty.interfaces.document_store import DocumentStore, lookup_path, matches_filters

logger = structlog.get_logger()


class SqlDocumentStore(DocumentStore):
    """Stores each entity as a JSON document row through async SQLAlchemy."""

    def __init__(self, database: Database):
        """
        Initialize the SQL document store.

        Args:
            database: Database instance for session management
        """
        self.db = database

    async def connect(self) -> None:
        await self.db.connect()

    async def disconnect(self) -> None:
        await self.db.disconnect()

    async def health_check(self) -> bool:
        try:
            async with self.db.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Document store health check failed", error=str(e))
            return False

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Session whose backend failures surface as trusty errors."""
        async with self.db.get_session() as session:
            try:
                yield session
            except IntegrityError as e:
                await session.rollback()
                error_str = str(e.orig) if e.orig else str(e)
                raise AlreadyExistsError(f"Document already exists: {error_str}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Document store operation failed", error=str(e))
                raise StorageError(f"Document store operation failed: {e}") from e

    @staticmethod
    def _key_clause(kind: EntityKind, entity_id: str, namespace_id: Optional[str]):
        kind = EntityKind(kind)
        clause = [
            DocumentRecord.kind == kind.value,
            DocumentRecord.scope_key == scope_key(kind, namespace_id),
            DocumentRecord.entity_id == entity_id,
        ]
        if namespace_id is not None:
            clause.append(DocumentRecord.namespace_id == namespace_id)
        return clause

    async def _load(
        self,
        session: AsyncSession,
        kind: EntityKind,
        entity_id: str,
        namespace_id: Optional[str],
    ) -> DocumentRecord:
        result = await session.execute(
            select(DocumentRecord).where(*self._key_clause(kind, entity_id, namespace_id))
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(EntityKind(kind).label, entity_id)
        return record

    @staticmethod
    def _apply(record: DocumentRecord, entity: Entity) -> None:
        kind, scope, entity_id = entity_key(entity)
        record.kind = kind
        record.scope_key = scope
        record.entity_id = entity_id
        record.namespace_id = getattr(entity, "namespace_id", None)
        record.tenant_id = getattr(entity, "tenant_id", None)
        record.external_key = external_key(entity)
        record.body = entity.to_document()

    async def get(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        async with self._session() as session:
            record = await self._load(session, kind, entity_id, namespace_id)
            return entity_from_document(kind, record.body)

    async def list(
        self,
        kind: EntityKind,
        namespace_id: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[Entity]:
        kind = EntityKind(kind)
        query = select(DocumentRecord).where(DocumentRecord.kind == kind.value)
        if namespace_id is not None:
            query = query.where(DocumentRecord.namespace_id == namespace_id)
        async with self._session() as session:
            result = await session.execute(query.order_by(DocumentRecord.pk))
            records = result.scalars().all()
        return [
            entity_from_document(kind, record.body)
            for record in records
            if matches_filters(record.body, filters)
        ]

    async def add(self, entity: Entity) -> None:
        async with self._session() as session:
            record = DocumentRecord()
            self._apply(record, entity)
            session.add(record)
            await session.commit()
        logger.debug("Document added", kind=entity.kind.value, entity_id=entity.id)

    async def update(
        self,
        kind: EntityKind,
        entity_id: str,
        entity: Entity,
        namespace_id: Optional[str] = None,
    ) -> Entity:
        async with self._session() as session:
            record = await self._load(session, kind, entity_id, namespace_id)
            if entity_key(entity) != (record.kind, record.scope_key, record.entity_id):
                raise ValueError("entity identity cannot change on update")
            self._apply(record, entity)
            await session.commit()
            body = record.body
        logger.debug("Document updated", kind=EntityKind(kind).value, entity_id=entity_id)
        return entity_from_document(kind, body)

    async def delete(
        self, kind: EntityKind, entity_id: str, namespace_id: Optional[str] = None
    ) -> Entity:
        async with self._session() as session:
            record = await self._load(session, kind, entity_id, namespace_id)
            body = record.body
            await session.delete(record)
            await session.commit()
        logger.debug("Document deleted", kind=EntityKind(kind).value, entity_id=entity_id)
        return entity_from_document(kind, body)

    async def find_user_by_external_id(
        self,
        external_id: str,
        provider_type: Optional[str] = None,
        namespace_id: Optional[str] = None,
    ) -> User:
        query = select(DocumentRecord).where(DocumentRecord.kind == EntityKind.USER.value)
        if provider_type is not None:
            query = query.where(DocumentRecord.external_key == f"{provider_type}:{external_id}")
        else:
            query = query.where(
                DocumentRecord.external_key.endswith(f":{external_id}", autoescape=True)
            )
        if namespace_id is not None:
            query = query.where(DocumentRecord.namespace_id == namespace_id)
        async with self._session() as session:
            result = await session.execute(query.order_by(DocumentRecord.pk))
            records = result.scalars().all()
        # provider types never contain ":", but ids may
        for record in records:
            if lookup_path(record.body, "external_provider.id") == external_id:
                return entity_from_document(EntityKind.USER, record.body)
        raise NotFoundError(EntityKind.USER.label, external_id)

    async def find_roles_matching(
        self, role_ids: List[str], tenant_id: str, permission: str
    ) -> List[Role]:
        if not role_ids:
            return []
        query = (
            select(DocumentRecord)
            .where(
                DocumentRecord.kind == EntityKind.ROLE.value,
                DocumentRecord.entity_id.in_(role_ids),
                DocumentRecord.tenant_id == tenant_id,
            )
            .order_by(DocumentRecord.pk)
        )
        async with self._session() as session:
            result = await session.execute(query)
            records = result.scalars().all()
        # JSON containment differs per dialect; permissions are checked here
        return [
            entity_from_document(EntityKind.ROLE, record.body)
            for record in records
            if permission in record.body.get("permissions", [])
        ]
