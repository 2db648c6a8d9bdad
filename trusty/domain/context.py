from dataclasses import dataclass
from typing import Optional

from trusty.core.exceptions import UnauthorizedError


@dataclass(frozen=True)
class CallerContext:
    """
    Scope of an already-authenticated caller.

    Token verification happens upstream; by the time a context exists its
    claims are trusted.
    """

    namespace: str
    tenant: Optional[str] = None
    product: Optional[str] = None

    def require_namespace(self, namespace_id: Optional[str]) -> None:
        """Raise UnauthorizedError unless ``namespace_id`` is the caller's."""
        if namespace_id != self.namespace:
            raise UnauthorizedError()
