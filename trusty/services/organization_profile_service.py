from trusty.domain.kinds import EntityKind
from trusty.domain.organization_profile import (
    NewOrganizationProfile,
    OrganizationProfile,
    UpdateOrganizationProfile,
)
from trusty.services.base import EntityService


class OrganizationProfileService(EntityService):
    kind = EntityKind.ORGANIZATION_PROFILE
    model = OrganizationProfile
    create_payload = NewOrganizationProfile
    update_payload = UpdateOrganizationProfile
