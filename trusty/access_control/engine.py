from typing import Optional

import structlog

from trusty.domain.rbac import IsAllowedRequest, IsAllowedResult
from trusty.interfaces.document_store import DocumentStore

logger = structlog.get_logger()


class AccessControlEngine:
    """
    Decides whether a user may perform an action on a resource in a tenant.

    Access is granted when any role bound to the user is scoped to the
    requested tenant and lists ``"<resource>:<action>"`` verbatim. There is no
    explicit deny and nothing is cached.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def is_allowed(
        self, request: IsAllowedRequest, namespace_id: Optional[str] = None
    ) -> IsAllowedResult:
        """
        Evaluate an authorization query.

        Args:
            request: The query
            namespace_id: Only resolve the user inside this namespace

        Returns:
            IsAllowedResult: ``result`` is True iff some role grants the permission

        Raises:
            NotFoundError: If the user does not exist
            StorageError: If the store fails
        """
        user = await self.store.find_user_by_external_id(
            request.external_user_id, namespace_id=namespace_id
        )
        if not user.roles:
            logger.debug("User has no roles", external_user_id=request.external_user_id)
            return IsAllowedResult(result=False)

        matching = await self.store.find_roles_matching(
            user.roles, request.tenant, request.permission
        )
        allowed = bool(matching)
        logger.debug(
            "Access decision",
            external_user_id=request.external_user_id,
            tenant=request.tenant,
            product=request.product,
            permission=request.permission,
            allowed=allowed,
        )
        return IsAllowedResult(result=allowed)
