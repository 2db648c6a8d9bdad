"""Entity URNs: ``urn:<namespace>:<tenant>:<product>:<kind>:<id>``."""

from dataclasses import dataclass
from typing import ClassVar, Optional


@dataclass(frozen=True)
class Urn:
    namespace: str
    kind: str
    id: str
    tenant: str = ""
    product: str = ""

    PREFIX: ClassVar[str] = "urn"
    SEGMENTS: ClassVar[int] = 6

    def __post_init__(self) -> None:
        for name in ("namespace", "kind", "id"):
            if not getattr(self, name):
                raise ValueError(f"urn {name} cannot be empty")
        for name in ("namespace", "tenant", "product", "kind", "id"):
            if ":" in getattr(self, name):
                raise ValueError(f"urn {name} cannot contain ':'")

    @classmethod
    def parse(cls, value: str) -> "Urn":
        parts = value.split(":")
        if len(parts) != cls.SEGMENTS or parts[0] != cls.PREFIX:
            raise ValueError(f"malformed urn: {value}")
        _, namespace, tenant, product, kind, object_id = parts
        return cls(
            namespace=namespace,
            tenant=tenant,
            product=product,
            kind=kind,
            id=object_id,
        )

    def __str__(self) -> str:
        return ":".join(
            (self.PREFIX, self.namespace, self.tenant, self.product, self.kind, self.id)
        )


class UrnMixin:
    """Adds ``to_urn``/``matches_urn`` to entities that define ``urn_kind``."""

    urn_kind: ClassVar[str]

    def _urn_tenant(self) -> Optional[str]:
        return None

    def _urn_product(self) -> Optional[str]:
        return None

    def urn(self) -> Urn:
        return Urn(
            namespace=self.namespace_id,
            tenant=self._urn_tenant() or "",
            product=self._urn_product() or "",
            kind=self.urn_kind,
            id=self.id,
        )

    def to_urn(self) -> str:
        return str(self.urn())

    def matches_urn(self, value: str) -> bool:
        try:
            return Urn.parse(value) == self.urn()
        except ValueError:
            return False
