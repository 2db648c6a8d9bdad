"""
User administration.

Users are addressed by their external provider id rather than the generated
id, since that is what callers hold after authentication.
"""

from typing import Any, List, Optional

import structlog

from trusty.core.exceptions import NotModifiedError
from trusty.domain.context import CallerContext
from trusty.domain.kinds import EntityKind
from trusty.domain.rules import parse_payload
from trusty.domain.user import NewUser, UpdateUser, User, UserInfo, UserQuery
from trusty.services.base import EntityService

logger = structlog.get_logger()


class UserService(EntityService):
    kind = EntityKind.USER
    model = User
    create_payload = NewUser
    update_payload = UpdateUser

    async def _get_scoped(self, ctx: CallerContext, external_id: str) -> User:
        user = await self.store.find_user_by_external_id(external_id)
        ctx.require_namespace(user.namespace_id)
        return user

    async def associate_with_tenant(
        self, ctx: CallerContext, external_id: str, tenant_id: str
    ) -> User:
        """
        Add a tenant to the user's associated tenants.

        Raises:
            NotFoundError: If the user or the tenant does not exist
            NotModifiedError: If the user is already associated
        """
        user = await self._get_scoped(ctx, external_id)
        tenant = await self.store.get(EntityKind.TENANT, tenant_id)
        ctx.require_namespace(tenant.namespace_id)
        if tenant_id in user.associated_tenants:
            raise NotModifiedError(f"User {external_id} is already associated with {tenant_id}")

        user.associated_tenants.append(tenant_id)
        user.timestamps.touch()
        updated = await self.store.update(self.kind, user.id, user)
        logger.info("User associated with tenant", external_id=external_id, tenant_id=tenant_id)
        return updated

    async def list(self, ctx: CallerContext, query: Optional[Any] = None) -> List[User]:
        filters = parse_payload(UserQuery, query or {}).to_filters()
        return await self.store.list(self.kind, namespace_id=ctx.namespace, filters=filters)

    async def get_user_info(self, ctx: CallerContext, external_id: str) -> UserInfo:
        info = await self.store.get_user_authorization_view(external_id)
        ctx.require_namespace(info.namespace_id)
        return info
