import structlog

from trusty.core.exceptions import NotModifiedError
from trusty.domain.context import CallerContext
from trusty.domain.kinds import EntityKind
from trusty.domain.tenant import NewTenant, Tenant, UpdateTenant
from trusty.services.base import EntityService

logger = structlog.get_logger()


class TenantService(EntityService):
    kind = EntityKind.TENANT
    model = Tenant
    create_payload = NewTenant
    update_payload = UpdateTenant

    async def subscribe_to_product(
        self, ctx: CallerContext, tenant_id: str, product_id: str
    ) -> Tenant:
        """
        Add a product of the tenant's namespace to its subscriptions.

        Raises:
            NotFoundError: If the tenant or the product does not exist
            NotModifiedError: If the tenant is already subscribed
        """
        tenant = await self._get_scoped(ctx, tenant_id)
        await self.store.get(EntityKind.PRODUCT, product_id, namespace_id=tenant.namespace_id)
        if product_id in tenant.subscribed_products:
            raise NotModifiedError(f"Tenant {tenant_id} is already subscribed to {product_id}")

        tenant.subscribed_products.append(product_id)
        tenant.timestamps.touch()
        updated = await self.store.update(self.kind, tenant.id, tenant)
        logger.info("Tenant subscribed to product", tenant_id=tenant_id, product_id=product_id)
        return updated
