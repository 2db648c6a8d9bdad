from trusty.domain.base import Entity, new_id
from trusty.domain.context import CallerContext
from trusty.domain.kinds import EntityKind
from trusty.domain.namespace import Namespace, NewNamespace
from trusty.domain.organization_profile import (
    NewOrganizationProfile,
    OrganizationProfile,
    UpdateOrganizationProfile,
)
from trusty.domain.permission import Permission
from trusty.domain.product import NewProduct, Product, UpdateProduct
from trusty.domain.rbac import IsAllowedRequest, IsAllowedResult
from trusty.domain.role import NewRole, Role, UpdateRole
from trusty.domain.tenant import NewTenant, PopulatedTenant, Tenant, UpdateTenant
from trusty.domain.timestamps import Timestamps
from trusty.domain.urn import Urn
from trusty.domain.user import (
    ExternalProvider,
    NewUser,
    UpdateUser,
    User,
    UserInfo,
    UserQuery,
)

__all__ = [
    "CallerContext",
    "Entity",
    "EntityKind",
    "ExternalProvider",
    "IsAllowedRequest",
    "IsAllowedResult",
    "Namespace",
    "NewNamespace",
    "NewOrganizationProfile",
    "NewProduct",
    "NewRole",
    "NewTenant",
    "NewUser",
    "OrganizationProfile",
    "Permission",
    "PopulatedTenant",
    "Product",
    "Role",
    "Tenant",
    "Timestamps",
    "UpdateOrganizationProfile",
    "UpdateProduct",
    "UpdateRole",
    "UpdateTenant",
    "UpdateUser",
    "Urn",
    "User",
    "UserInfo",
    "UserQuery",
    "new_id",
]
