from trusty.services.deletion import DeletionCoordinator
from trusty.services.namespace_service import NamespaceService
from trusty.services.organization_profile_service import OrganizationProfileService
from trusty.services.product_service import ProductService
from trusty.services.role_service import RoleService
from trusty.services.tenant_service import TenantService
from trusty.services.user_service import UserService

__all__ = [
    "DeletionCoordinator",
    "NamespaceService",
    "OrganizationProfileService",
    "ProductService",
    "RoleService",
    "TenantService",
    "UserService",
]
