"""Common behaviour of stored entities."""

import copy
from typing import ClassVar, Optional

from pydantic import BaseModel, Field
from ulid import ULID

from trusty.domain.kinds import EntityKind
from trusty.domain.rules import UpdatePayload
from trusty.domain.timestamps import Timestamps


def new_id() -> str:
    """Generate a sortable unique identifier."""
    return str(ULID())


class Entity(BaseModel):
    """
    A document in the store.

    Subclasses set ``kind`` and declare their fields; ``timestamps`` is
    initialized on construction.
    """

    kind: ClassVar[EntityKind]

    id: str
    timestamps: Timestamps = Field(default_factory=Timestamps)

    @property
    def scope(self) -> Optional[str]:
        """Namespace that scopes the id, for kinds keyed by namespace."""
        if self.kind.namespace_scoped:
            return getattr(self, "namespace_id")
        return None

    def apply_update(self, update: UpdatePayload) -> bool:
        """
        Overwrite the fields present in ``update``.

        Returns:
            True if any field changed; ``updated_at`` is stamped in that case
        """
        changed = False
        for name, value in update.present_fields().items():
            if isinstance(value, BaseModel):
                value = value.model_copy(deep=True)
            else:
                value = copy.deepcopy(value)
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed:
            self.timestamps.touch()
        return changed

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
