from typing import Annotated, Any, ClassVar, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from trusty.domain.base import Entity, new_id
from trusty.domain.kinds import EntityKind
from trusty.domain.permission import validate_permissions
from trusty.domain.rules import UpdatePayload
from trusty.domain.urn import UrnMixin

PermissionList = Annotated[List[str], AfterValidator(validate_permissions)]


class NewRole(BaseModel):
    namespace_id: str
    tenant_id: str
    product_id: str
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    permissions: PermissionList = Field(default_factory=list)


class UpdateRole(UpdatePayload):
    nullable_fields = frozenset({"metadata"})

    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = Field(None, min_length=3, max_length=500)
    metadata: Optional[Dict[str, Any]] = None
    permissions: Optional[PermissionList] = None
    tenant_id: Optional[str] = None
    product_id: Optional[str] = None


class Role(UrnMixin, Entity):
    """Permission strings granted within one tenant for one product."""

    kind: ClassVar[EntityKind] = EntityKind.ROLE
    urn_kind: ClassVar[str] = "role"

    namespace_id: str
    tenant_id: str
    product_id: str
    name: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    permissions: List[str] = Field(default_factory=list)

    @classmethod
    def new_from_input(cls, new_role: NewRole) -> "Role":
        return cls(id=new_id(), **new_role.model_dump())

    def _urn_tenant(self) -> Optional[str]:
        return self.tenant_id

    def _urn_product(self) -> Optional[str]:
        return self.product_id
