"""School schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class SchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str | None = None
