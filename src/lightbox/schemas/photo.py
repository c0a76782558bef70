from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PhotoRecord(BaseModel):
    """A row of the `photos` collection, normalized once at the store boundary."""

    id: UUID
    title: str = Field(..., min_length=1)
    description: str | None = None
    image_url: str = Field(..., min_length=1)
    album_id: UUID | None = Field(None, description="Owning album, None for unsorted photos")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("title", "image_url", mode="before")
    @classmethod
    def strip_required(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "album_id", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # The store may hand back "" or whitespace for an absent value
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PhotoSubmitResponse(BaseModel):
    """Response for a successful photo submission"""

    photo: PhotoRecord
    message: str = "Image uploaded!"
