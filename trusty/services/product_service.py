from trusty.domain.kinds import EntityKind
from trusty.domain.product import NewProduct, Product, UpdateProduct
from trusty.services.base import EntityService


class ProductService(EntityService):
    """Products are keyed by (caller namespace, id)."""

    kind = EntityKind.PRODUCT
    model = Product
    create_payload = NewProduct
    update_payload = UpdateProduct
