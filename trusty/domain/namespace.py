from typing import ClassVar

from pydantic import BaseModel, Field

from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.rules import UrlSafeId


class NewNamespace(BaseModel):
    id: UrlSafeId = Field(..., min_length=2, max_length=30)


class Namespace(Entity):
    """
    Root scope of every other entity.

    There is no update operation: entities reference the namespace by id, so
    renaming it would silently orphan them.
    """

    kind: ClassVar[EntityKind] = EntityKind.NAMESPACE

    @classmethod
    def new_from_input(cls, new_namespace: NewNamespace) -> "Namespace":
        return cls(id=new_namespace.id)

    def apply_update(self, update) -> bool:
        raise TypeError("namespaces cannot be updated")
