"""Exceptions for trusty.

Every error carries an outward ``status_code`` so the routing layer can map
error kinds to responses without inspecting messages.
"""

from typing import Optional


class TrustyError(Exception):
    """Base exception for all trusty errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize TrustyError.

        Args:
            message: Error message
            status_code: Outward status code, defaults to the class value
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(TrustyError):
    """Raised when a looked-up entity does not exist."""

    status_code = 404

    def __init__(
        self,
        kind: str = "entity",
        identifier: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.identifier = identifier
        if message is None:
            message = (
                f"{kind} not found"
                if identifier is None
                else f"{kind} not found: {identifier}"
            )
        super().__init__(message)


class AlreadyExistsError(TrustyError):
    """Raised by a store when a write collides with an existing key."""

    status_code = 409


class ValidationError(TrustyError):
    """Business-rule or input-rule violation with a human-readable cause."""

    status_code = 400

    def __init__(self, cause: str, status_code: Optional[int] = None) -> None:
        self.cause = cause
        super().__init__(cause, status_code)


class MissingReferenceError(ValidationError):
    """A referenced entity could not be resolved."""

    def __init__(self, kind: str, identifier: str, scope: Optional[str] = None) -> None:
        self.kind = kind
        self.identifier = identifier
        self.scope = scope
        cause = f"Did not find {kind} with id: {identifier}"
        if scope:
            cause = f"{cause} in namespace: {scope}"
        super().__init__(cause)


class UniquenessViolationError(ValidationError):
    """A uniqueness constraint would be violated by the mutation."""

    status_code = 409

    def __init__(self, kind: str, identifier: str, field: str = "id") -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Found existing {kind} with {field}: {identifier}")


class DependentsExistError(ValidationError):
    """Deletion refused because other entities still reference the target."""

    status_code = 409

    def __init__(self, kind: str, identifier: str, dependents: dict) -> None:
        self.kind = kind
        self.identifier = identifier
        self.dependents = dependents
        summary = ", ".join(f"{count} {name}" for name, count in dependents.items())
        super().__init__(f"Cannot delete {kind} {identifier}: still referenced by {summary}")


class UnauthorizedError(TrustyError):
    """Caller scope does not match the entity's owning scope."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class StorageError(TrustyError):
    """The underlying store was unreachable or failed unexpectedly."""

    status_code = 503


class NotModifiedError(TrustyError):
    """The requested relationship already exists."""

    status_code = 304

    def __init__(self, message: str = "Not modified") -> None:
        super().__init__(message)


class ConfigurationError(TrustyError):
    """Configuration error"""
    pass
