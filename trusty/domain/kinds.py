from enum import Enum


class EntityKind(str, Enum):
    """Kinds of documents held by the store."""

    NAMESPACE = "namespace"
    PRODUCT = "product"
    TENANT = "tenant"
    ROLE = "role"
    USER = "user"
    ORGANIZATION_PROFILE = "organization_profile"

    @property
    def collection(self) -> str:
        return f"{self.value}s"

    @property
    def namespace_scoped(self) -> bool:
        """Whether ids are only unique within a namespace."""
        return self is EntityKind.PRODUCT

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")
