from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AlbumRecord(BaseModel):
    """A row of the `albums` collection."""

    id: UUID
    name: str = Field(..., min_length=1)
    description: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AlbumCreateRequest(BaseModel):
    # Emptiness is checked by the album form so it surfaces as a gallery ValidationError
    name: str = Field("", max_length=255, description="Album name")
    description: str | None = Field(None, description="Optional album description")
