from uuid import UUID

from pydantic import BaseModel, Field

from lightbox.schemas.album import AlbumRecord
from lightbox.schemas.photo import PhotoRecord


class GalleryStateResponse(BaseModel):
    mode: str
    album_filter: UUID | None = None
    selected_photo: PhotoRecord | None = None
    album_form_open: bool = False
    loading: bool = False
    error: str | None = Field(None, description="Recoverable error from the last failed refresh")
    photos: list[PhotoRecord] = Field(default_factory=list, description="Currently visible photos")
    albums: list[AlbumRecord] = Field(default_factory=list)


class AlbumGroupResponse(BaseModel):
    album: AlbumRecord | None = Field(None, description="None for the unsorted group")
    title: str
    photos: list[PhotoRecord]


class GroupedGalleryResponse(BaseModel):
    groups: list[AlbumGroupResponse]
    error: str | None = None
