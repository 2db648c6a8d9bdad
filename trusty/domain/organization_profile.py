from typing import ClassVar, Optional

from pydantic import BaseModel, Field

from trusty.domain.base import Entity, new_id
from trusty.domain.kinds import EntityKind
from trusty.domain.rules import PhoneNumber, UpdatePayload
from trusty.domain.urn import UrnMixin


class NewOrganizationProfile(BaseModel):
    namespace_id: str
    tenant_id: str
    organization_name: str = Field(..., min_length=2, max_length=30)
    organization_type: str
    primary_contact_number: PhoneNumber = Field(..., min_length=5, max_length=50)
    registered_address_line_1: Optional[str] = Field(None, min_length=5, max_length=50)
    registered_address_line_2: Optional[str] = Field(None, max_length=50)
    city: str = Field(..., min_length=3, max_length=45)
    state: str = Field(..., min_length=2, max_length=2)
    zip: Optional[str] = Field(None, min_length=5, max_length=5)


class UpdateOrganizationProfile(UpdatePayload):
    nullable_fields = frozenset(
        {"registered_address_line_1", "registered_address_line_2", "zip"}
    )

    organization_name: Optional[str] = Field(None, min_length=2, max_length=30)
    organization_type: Optional[str] = None
    primary_contact_number: Optional[PhoneNumber] = Field(None, min_length=5, max_length=50)
    registered_address_line_1: Optional[str] = Field(None, min_length=5, max_length=50)
    registered_address_line_2: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, min_length=3, max_length=45)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    zip: Optional[str] = Field(None, min_length=5, max_length=5)


class OrganizationProfile(UrnMixin, Entity):
    """Registration details of the organization behind a tenant."""

    kind: ClassVar[EntityKind] = EntityKind.ORGANIZATION_PROFILE
    urn_kind: ClassVar[str] = "organizationprofile"

    namespace_id: str
    tenant_id: str
    organization_name: str
    organization_type: str
    primary_contact_number: str
    registered_address_line_1: Optional[str] = None
    registered_address_line_2: Optional[str] = None
    city: str
    state: str
    zip: Optional[str] = None

    @classmethod
    def new_from_input(cls, new_profile: NewOrganizationProfile) -> "OrganizationProfile":
        return cls(id=new_id(), **new_profile.model_dump())

    def _urn_tenant(self) -> Optional[str]:
        return self.tenant_id
