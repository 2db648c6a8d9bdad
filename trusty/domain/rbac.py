from pydantic import BaseModel, Field

from trusty.domain.permission import Permission


class IsAllowedRequest(BaseModel):
    """Authorization query: may the external user act on the resource?"""

    external_user_id: str = Field(..., min_length=1)
    tenant: str = Field(..., min_length=1)
    product: str = Field(..., min_length=1)
    resource: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)

    @property
    def permission(self) -> str:
        return Permission.format(self.resource, self.action)


class IsAllowedResult(BaseModel):
    result: bool
