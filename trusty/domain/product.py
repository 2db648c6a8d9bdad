from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, Field

from trusty.domain.base import Entity
from trusty.domain.kinds import EntityKind
from trusty.domain.rules import UpdatePayload, UrlSafeId
from trusty.domain.urn import UrnMixin


class NewProduct(BaseModel):
    """Payload for registering a product in a namespace."""

    id: UrlSafeId = Field(..., min_length=1)
    namespace_id: str
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    img: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    can_self_register: bool = False


class UpdateProduct(UpdatePayload):
    nullable_fields = frozenset({"metadata"})

    description: Optional[str] = Field(None, min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    img: Optional[str] = Field(None, min_length=1)
    url: Optional[str] = Field(None, min_length=1)
    can_self_register: Optional[bool] = None


class Product(UrnMixin, Entity):
    """A registerable offering, unique by (namespace_id, id)."""

    kind: ClassVar[EntityKind] = EntityKind.PRODUCT
    urn_kind: ClassVar[str] = "product"

    namespace_id: str
    name: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    img: str
    url: str
    can_self_register: bool = False

    @classmethod
    def new_from_input(cls, new_product: NewProduct) -> "Product":
        return cls(**new_product.model_dump())
