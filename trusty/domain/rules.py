"""
Input rules shared by the entity payload models.

Patterns are compiled once at import and never mutated.
"""

import re
from typing import Annotated, Any, ClassVar, Dict, FrozenSet, List, Type, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from trusty.core.exceptions import ValidationError

URL_SAFE_ID_RE = re.compile(r"^[0-9a-zA-Z-]+$")
PROVIDER_TYPE_RE = re.compile(r"^auth0$")
PHONE_RE = re.compile(r"^\+?[0-9][0-9 ().-]*[0-9]$")

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def validate_url_safe_id(value: str) -> str:
    """Return the id if it contains only alphanumeric characters and dashes."""
    if not URL_SAFE_ID_RE.match(value):
        raise ValueError("id should only contain alphanumeric characters and dashes")
    return value


def validate_provider_type(value: str) -> str:
    if not PROVIDER_TYPE_RE.match(value):
        raise ValueError(f"unsupported external provider type: {value}")
    return value


def validate_phone(value: str) -> str:
    if not PHONE_RE.match(value):
        raise ValueError("primary_contact_number is not a valid phone number")
    return value


def validate_distinct_ids(value: List[str]) -> List[str]:
    """Reject reference lists that name the same id twice."""
    seen = set()
    for item in value:
        if item in seen:
            raise ValueError(f"duplicate id: {item}")
        seen.add(item)
    return value


UrlSafeId = Annotated[str, AfterValidator(validate_url_safe_id)]
ProviderType = Annotated[str, AfterValidator(validate_provider_type)]
PhoneNumber = Annotated[str, AfterValidator(validate_phone)]
IdList = Annotated[List[str], AfterValidator(validate_distinct_ids)]


def parse_payload(model: Type[PayloadT], data: Any) -> PayloadT:
    """
    Build a payload model from raw input, reporting rule violations as a
    trusty ValidationError.

    Args:
        model: The payload model class
        data: Raw mapping (or an instance of the model, returned as-is)

    Returns:
        The validated payload

    Raises:
        ValidationError: If any input rule fails
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {details}") from e


class UpdatePayload(BaseModel):
    """
    Base for partial updates.

    A field takes part in the update only when it was explicitly provided.
    Fields outside ``nullable_fields`` reject an explicit null.
    """

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def reject_null_for_required_fields(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} cannot be null")
        return self

    def is_set(self, name: str) -> bool:
        return name in self.model_fields_set

    def present_fields(self) -> Dict[str, Any]:
        """Provided fields in declaration order."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name in self.model_fields_set
        }
