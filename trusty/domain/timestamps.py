from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Timestamps(BaseModel):
    """Creation and last-mutation times of an entity."""

    created_at: datetime = Field(default_factory=utcnow, frozen=True)
    updated_at: Optional[datetime] = None

    def touch(self) -> None:
        self.updated_at = utcnow()
