"""Photo upload and album creation forms."""

import logging
import mimetypes
import pathlib
import uuid
from dataclasses import dataclass

from lightbox.config import get_gallery_settings
from lightbox.controller import GalleryController
from lightbox.errors import StoreError, ValidationError
from lightbox.schemas.album import AlbumRecord
from lightbox.schemas.photo import PhotoRecord
from lightbox.store.external import ExternalStore

logger = logging.getLogger(__name__)

PHOTO_PREFIX = "photos"
# album_id value meaning "file into the album named by new_album_name"
NEW_ALBUM = "new"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff", ".heic", ".avif"}


@dataclass(frozen=True)
class PhotoSource:
    """Either an uploaded file or a URL to an already hosted image."""

    url: str | None = None
    data: bytes | None = None
    filename: str | None = None
    content_type: str | None = None

    @classmethod
    def from_url(cls, url: str) -> "PhotoSource":
        return cls(url=url)

    @classmethod
    def from_file(cls, data: bytes, filename: str | None, content_type: str | None = None) -> "PhotoSource":
        return cls(data=data, filename=filename, content_type=content_type)

    @property
    def is_file(self) -> bool:
        return self.data is not None

    @property
    def is_empty(self) -> bool:
        if self.is_file:
            return not self.data
        return not (self.url or "").strip()


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def generate_object_key(filename: str | None) -> str:
    """Object key for an uploaded file, e.g. 'photos/<hex>.jpg'."""
    ext = pathlib.Path(filename or "").suffix.lower()
    if ext not in IMAGE_EXTENSIONS:
        ext = ext or ".bin"
    return f"{PHOTO_PREFIX}/{uuid.uuid4().hex}{ext}"


def _content_type(source: PhotoSource) -> str:
    if source.content_type and source.content_type.startswith("image/"):
        return source.content_type
    guessed, _ = mimetypes.guess_type(source.filename or "")
    return guessed or "application/octet-stream"


async def _store_source(store: ExternalStore, source: PhotoSource) -> str:
    """Return the public location of the photo, uploading it first if it is a file."""
    if not source.is_file:
        return source.url.strip()

    object_key = generate_object_key(source.filename)
    logger.info(f"Uploading {source.filename or 'unnamed file'} ({len(source.data)} bytes) as {object_key}")
    await store.upload_binary(store.default_bucket, object_key, source.data, content_type=_content_type(source))
    return store.get_public_url(store.default_bucket, object_key)


async def submit_photo(
    controller: GalleryController,
    store: ExternalStore,
    title: str,
    description: str | None,
    source: PhotoSource | None,
    album_id: uuid.UUID | str | None = None,
    new_album_name: str | None = None,
) -> PhotoRecord:
    """Validate and store a photo, then refresh the gallery.

    Args:
        controller: The session's gallery controller
        store: External store receiving the binary and the record
        title: Required photo title
        description: Optional description
        source: Uploaded file or image URL
        album_id: Album to file the photo into, defaults to the album currently opened.
            NEW_ALBUM requires new_album_name
        new_album_name: Create this album first and file the photo into it

    Returns:
        The created photo record

    Raises:
        ValidationError: If a required field is missing, before any store call
        StoreError: If the upload or a record write fails
    """
    title = _clean(title)
    if not title:
        raise ValidationError("Please enter a photo title", field="title")
    if source is None or source.is_empty:
        raise ValidationError("Please choose a file or enter an image URL", field="source")

    max_size = get_gallery_settings().max_upload_size
    if source.is_file and len(source.data) > max_size:
        raise ValidationError(f"File too large (max {max_size // (1024 * 1024)}MB)", field="file")

    new_album_name = _clean(new_album_name)
    if album_id == NEW_ALBUM and not new_album_name:
        raise ValidationError("Please enter a name for the new album", field="new_album_name")

    # The binary goes first so a failed upload leaves no album behind
    image_url = await _store_source(store, source)

    album = None
    if new_album_name:
        album = await _create_album(controller, store, new_album_name, None)
        album_id = album.id
    elif album_id is None:
        album_id = controller.view.album_filter

    try:
        row = await store.insert(
            "photos",
            {
                "title": title,
                "description": _clean(description),
                "image_url": image_url,
                "album_id": album_id,
            },
        )
    except StoreError:
        if album is not None:
            # The new album exists in the store, keep this session in step with it
            await controller.refresh()
        raise
    photo = PhotoRecord.model_validate(row)
    controller.events.log_event("photo_submitted", photo_id=photo.id, album_id=album_id, uploaded=source.is_file)

    await controller.refresh()
    return photo


async def _create_album(controller: GalleryController, store: ExternalStore, name: str, description: str | None) -> AlbumRecord:
    row = await store.insert("albums", {"name": name, "description": description})
    album = AlbumRecord.model_validate(row)
    controller.events.log_event("album_created", album_id=album.id, name=album.name)
    return album


async def submit_album(controller: GalleryController, store: ExternalStore, name: str, description: str | None = None) -> AlbumRecord:
    """Create an album, refresh the gallery and dismiss the creation form.

    Raises:
        ValidationError: If the name is empty
        StoreError: If the record write fails
    """
    name = _clean(name)
    if not name:
        raise ValidationError("Please enter an album name", field="name")

    album = await _create_album(controller, store, name, _clean(description))
    await controller.refresh()
    controller.close_album_form()
    return album
