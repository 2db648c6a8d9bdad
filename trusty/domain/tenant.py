from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field

from trusty.domain.base import Entity, new_id
from trusty.domain.kinds import EntityKind
from trusty.domain.product import Product
from trusty.domain.rules import IdList, UpdatePayload
from trusty.domain.timestamps import Timestamps
from trusty.domain.urn import UrnMixin


class NewTenant(BaseModel):
    namespace_id: str
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    subscribed_products: IdList = Field(default_factory=list)


class UpdateTenant(UpdatePayload):
    """Partial tenant update. Identity and namespace are not updatable."""

    nullable_fields = frozenset({"metadata"})

    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = Field(None, min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    subscribed_products: Optional[IdList] = None


class Tenant(UrnMixin, Entity):
    """A customer organization inside a namespace."""

    kind: ClassVar[EntityKind] = EntityKind.TENANT
    urn_kind: ClassVar[str] = "tenant"

    namespace_id: str
    name: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    subscribed_products: List[str] = Field(default_factory=list)

    @classmethod
    def new_from_input(cls, new_tenant: NewTenant) -> "Tenant":
        return cls(id=new_id(), **new_tenant.model_dump())

    def _urn_tenant(self) -> Optional[str]:
        return self.id


class PopulatedTenant(BaseModel):
    """Tenant with its subscribed products resolved."""

    id: str
    namespace_id: str
    name: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    subscribed_products: List[str] = Field(default_factory=list)
    populated_subscribed_products: List[Product] = Field(default_factory=list)
    timestamps: Timestamps

    @classmethod
    def from_tenant(cls, tenant: Tenant, products: List[Product]) -> "PopulatedTenant":
        return cls(
            **tenant.model_dump(exclude={"timestamps"}),
            timestamps=tenant.timestamps,
            populated_subscribed_products=products,
        )
