"""
Gallery view-state controller

One GalleryController exists per browser session. It holds the photos and
albums last fetched from the external store together with the user's
navigation state, and derives the photo list the gallery should render.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from pydantic import ValidationError as SchemaValidationError

from lightbox.errors import StoreError
from lightbox.logger import logger as event_logger
from lightbox.schemas.album import AlbumRecord
from lightbox.schemas.photo import PhotoRecord

logger = logging.getLogger(__name__)

UNSORTED_TITLE = "Unsorted"
DEFAULT_MAX_SESSIONS = 1000


class ViewMode(StrEnum):
    ALL_PHOTOS = "all-photos"
    ALBUMS = "albums"


class RecordReader(Protocol):
    async def select(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[dict[str, Any]]: ...


@dataclass
class GalleryViewState:
    """Client-local navigation state."""

    mode: ViewMode = ViewMode.ALL_PHOTOS
    album_filter: uuid.UUID | None = None
    selected_photo: PhotoRecord | None = None
    album_form_open: bool = False


@dataclass(frozen=True)
class AlbumGroup:
    album: AlbumRecord | None
    photos: list[PhotoRecord] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.album.name if self.album else UNSORTED_TITLE


def _parse_rows(model, rows: list[dict[str, Any]], collection: str) -> list:
    records = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except SchemaValidationError as e:
            logger.warning(f"Skipping malformed {collection} record {row.get('id')}: {e.error_count()} validation errors")
    return records


class GalleryController:
    def __init__(self, store: RecordReader, view: GalleryViewState | None = None, session_id: str | None = None):
        self.store = store
        self.session_id = session_id
        self.events = event_logger.bind(session=session_id) if session_id else event_logger
        self.view = view or GalleryViewState()
        self.photos: list[PhotoRecord] = []
        self.albums: list[AlbumRecord] = []
        self.loading = False
        self.error: str | None = None

    # Navigation

    def select_all_photos(self) -> None:
        self.view.mode = ViewMode.ALL_PHOTOS
        self.view.album_filter = None

    def select_albums_view(self) -> None:
        self.view.mode = ViewMode.ALBUMS

    def open_album(self, album_id: uuid.UUID) -> None:
        # Albums open as the photo grid filtered by that album
        self.view.mode = ViewMode.ALL_PHOTOS
        self.view.album_filter = album_id

    def clear_album_filter(self) -> None:
        self.view.album_filter = None

    def open_photo(self, photo: PhotoRecord) -> None:
        self.view.selected_photo = photo

    def close_photo(self) -> None:
        self.view.selected_photo = None

    def open_album_form(self) -> None:
        self.view.album_form_open = True

    def close_album_form(self) -> None:
        self.view.album_form_open = False

    def dismiss_error(self) -> None:
        self.error = None

    # Derived data

    @property
    def album_ids(self) -> set[uuid.UUID]:
        return {album.id for album in self.albums}

    def album_by_id(self, album_id: uuid.UUID) -> AlbumRecord | None:
        return next((album for album in self.albums if album.id == album_id), None)

    def photo_by_id(self, photo_id: uuid.UUID) -> PhotoRecord | None:
        return next((photo for photo in self.photos if photo.id == photo_id), None)

    def effective_album_id(self, photo: PhotoRecord) -> uuid.UUID | None:
        """Album a photo is displayed under, None when unset or dangling."""
        if photo.album_id is not None and photo.album_id in self.album_ids:
            return photo.album_id
        return None

    def visible_photos(self) -> list[PhotoRecord]:
        if self.view.album_filter is None:
            return list(self.photos)
        return [photo for photo in self.photos if photo.album_id == self.view.album_filter]

    def grouped_photos(self) -> list[AlbumGroup]:
        """Photos grouped per album in store order, followed by the unsorted ones."""
        members: dict[uuid.UUID | None, list[PhotoRecord]] = {album.id: [] for album in self.albums}
        members[None] = []
        for photo in self.photos:
            members[self.effective_album_id(photo)].append(photo)

        groups = [AlbumGroup(album=album, photos=members[album.id]) for album in self.albums]
        groups.append(AlbumGroup(album=None, photos=members[None]))
        return groups

    # Store synchronisation

    async def refresh(self) -> bool:
        """Re-fetch albums and photos, replacing both or neither.

        Returns:
            True if the local copies were replaced
        """
        self.loading = True
        try:
            album_rows = await self.store.select("albums", order_by="created_at", descending=True)
            photo_rows = await self.store.select("photos", order_by="created_at", descending=True)
        except StoreError as e:
            self.events.log_event("gallery_refresh_failed", level=logging.WARNING, operation=e.operation, error=e.message)
            self.error = e.message
            return False
        finally:
            self.loading = False

        albums = _parse_rows(AlbumRecord, album_rows, "albums")
        photos = _parse_rows(PhotoRecord, photo_rows, "photos")
        self.albums, self.photos = albums, photos
        self.error = None

        self._drop_vanished_selection()
        self.events.log_event("gallery_refreshed", albums=len(albums), photos=len(photos))
        return True

    def _drop_vanished_selection(self) -> None:
        if self.view.album_filter is not None and self.view.album_filter not in self.album_ids:
            self.view.album_filter = None
        selected = self.view.selected_photo
        if selected is not None:
            self.view.selected_photo = self.photo_by_id(selected.id)


class SessionRegistry:
    """Controllers keyed by the session ids this registry issued.

    Least recently used sessions are evicted once `max_sessions` is exceeded.
    """

    def __init__(self, store: RecordReader, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self.store = store
        self.max_sessions = max_sessions
        self._controllers: OrderedDict[str, GalleryController] = OrderedDict()

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def get(self, session_id: str | None) -> GalleryController | None:
        """Controller of a known session, None for unknown or evicted ids."""
        if not session_id:
            return None
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def issue(self) -> tuple[str, GalleryController]:
        session_id = uuid.uuid4().hex
        controller = GalleryController(self.store, session_id=session_id)
        self._controllers[session_id] = controller
        while len(self._controllers) > self.max_sessions:
            evicted, _ = self._controllers.popitem(last=False)
            logger.info(f"Evicted gallery controller for session {evicted}")
        logger.info(f"Created gallery controller for session {session_id}")
        return session_id, controller
