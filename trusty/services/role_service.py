from trusty.domain.kinds import EntityKind
from trusty.domain.role import NewRole, Role, UpdateRole
from trusty.services.base import EntityService


class RoleService(EntityService):
    kind = EntityKind.ROLE
    model = Role
    create_payload = NewRole
    update_payload = UpdateRole
