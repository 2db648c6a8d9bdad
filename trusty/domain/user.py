from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from trusty.domain.base import Entity, new_id
from trusty.domain.kinds import EntityKind
from trusty.domain.role import Role
from trusty.domain.rules import IdList, ProviderType, UpdatePayload
from trusty.domain.tenant import PopulatedTenant
from trusty.domain.timestamps import Timestamps


class ExternalProvider(BaseModel):
    """Identity at an external provider. Replaced whole, never patched."""

    provider_type: ProviderType = Field(..., min_length=1, max_length=30)
    id: str = Field(..., min_length=3, max_length=50)

    @property
    def key(self) -> str:
        return f"{self.provider_type}:{self.id}"


class NewUser(BaseModel):
    namespace_id: str
    email: EmailStr
    external_provider: ExternalProvider
    first_name: str = Field(..., min_length=1, max_length=70)
    last_name: str = Field(..., min_length=1, max_length=70)
    is_active: bool = True
    is_invited: bool = False
    metadata: Optional[Dict[str, Any]] = None
    associated_tenants: IdList = Field(default_factory=list)
    roles: IdList = Field(default_factory=list)


class UpdateUser(UpdatePayload):
    nullable_fields = frozenset({"metadata"})

    email: Optional[EmailStr] = None
    external_provider: Optional[ExternalProvider] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=70)
    last_name: Optional[str] = Field(None, min_length=1, max_length=70)
    is_active: Optional[bool] = None
    is_invited: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None
    associated_tenants: Optional[IdList] = None
    roles: Optional[IdList] = None


class User(Entity):
    kind: ClassVar[EntityKind] = EntityKind.USER

    namespace_id: str
    email: str
    external_provider: ExternalProvider
    first_name: str
    last_name: str
    is_active: bool = True
    is_invited: bool = False
    metadata: Optional[Dict[str, Any]] = None
    associated_tenants: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)

    @classmethod
    def new_from_input(cls, new_user: NewUser) -> "User":
        return cls(id=new_id(), **new_user.model_dump())


class UserQuery(BaseModel):
    """Optional filters for listing users in a namespace."""

    id: Optional[str] = None
    email: Optional[str] = None
    external_provider_id: Optional[str] = None
    is_active: Optional[bool] = None
    is_invited: Optional[bool] = None
    associated_tenant: Optional[str] = None

    FIELD_PATHS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "email": "email",
        "external_provider_id": "external_provider.id",
        "is_active": "is_active",
        "is_invited": "is_invited",
        "associated_tenant": "associated_tenants",
    }

    def to_filters(self) -> Dict[str, Any]:
        """Document-path filters for the fields that were given."""
        return {
            self.FIELD_PATHS[name]: value
            for name, value in self.model_dump().items()
            if value is not None
        }


class UserInfo(BaseModel):
    """Authorization view of a user with tenants and roles resolved."""

    id: str
    namespace_id: str
    email: str
    external_provider: ExternalProvider
    first_name: str
    last_name: str
    is_active: bool
    is_invited: bool
    metadata: Optional[Dict[str, Any]] = None
    associated_tenants: List[str] = Field(default_factory=list)
    populated_tenants: List[PopulatedTenant] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    populated_roles: List[Role] = Field(default_factory=list)
    timestamps: Timestamps

    @classmethod
    def from_user(
        cls,
        user: User,
        tenants: List[PopulatedTenant],
        roles: List[Role],
    ) -> "UserInfo":
        return cls(
            **user.model_dump(exclude={"timestamps", "external_provider"}),
            external_provider=user.external_provider,
            timestamps=user.timestamps,
            populated_tenants=tenants,
            populated_roles=roles,
        )
