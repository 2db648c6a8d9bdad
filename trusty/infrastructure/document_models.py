"""SQLAlchemy model for the document table.

One row per logical entity. The JSON body is the source of truth; the
other columns are extracted keys used for lookups and uniqueness.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, UniqueConstraint

from trusty.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentRecord(Base):
    __tablename__ = "documents"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(50), nullable=False)
    # namespace id for namespace-scoped kinds, empty otherwise
    scope_key = Column(String(255), nullable=False, default="")
    entity_id = Column(String(255), nullable=False)
    namespace_id = Column(String(255), nullable=True)
    tenant_id = Column(String(255), nullable=True)
    external_key = Column(String(255), nullable=True)
    body = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("kind", "scope_key", "entity_id", name="uq_documents_kind_scope_id"),
        UniqueConstraint("external_key", name="uq_documents_external_key"),
        Index("idx_documents_kind_namespace", "kind", "namespace_id"),
        Index("idx_documents_kind_tenant", "kind", "tenant_id"),
    )
