"""Permission value type for ``"<resource>:<action>"`` strings."""

from dataclasses import dataclass
from typing import ClassVar, List


@dataclass(frozen=True)
class Permission:
    """
    A parsed permission.

    Matching is verbatim: no case-folding, trimming or wildcards. Resource
    and action must be non-empty and must not contain the separator.
    """

    resource: str
    action: str

    SEPARATOR: ClassVar[str] = ":"

    def __post_init__(self) -> None:
        for part, value in (("resource", self.resource), ("action", self.action)):
            if not value:
                raise ValueError(f"permission {part} cannot be empty")
            if self.SEPARATOR in value:
                raise ValueError(
                    f"permission {part} cannot contain '{self.SEPARATOR}': {value}"
                )

    @classmethod
    def parse(cls, value: str) -> "Permission":
        """
        Parse a ``resource:action`` string.

        Raises:
            ValueError: If the separator is missing or appears more than once
        """
        resource, separator, action = value.partition(cls.SEPARATOR)
        if not separator:
            raise ValueError(f"permission must have the form 'resource:action': {value}")
        return cls(resource=resource, action=action)

    @classmethod
    def format(cls, resource: str, action: str) -> str:
        """Render the stored form without validating the parts."""
        return f"{resource}{cls.SEPARATOR}{action}"

    def __str__(self) -> str:
        return self.format(self.resource, self.action)


def validate_permissions(values: List[str]) -> List[str]:
    """Check every entry parses; return the list unchanged."""
    for value in values:
        Permission.parse(value)
    return values
