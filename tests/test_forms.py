"""Tests for the photo upload and album creation forms."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from lightbox.controller import GalleryController
from lightbox.errors import StoreError, ValidationError
from lightbox.forms import NEW_ALBUM, PhotoSource, generate_object_key, submit_album, submit_photo
from lightbox.store.external import ExternalStore
from tests.helpers import DummyAsyncS3Client


@pytest.fixture
def controller(store) -> GalleryController:
    return GalleryController(store)


@pytest.fixture
def untouched_store() -> MagicMock:
    store = MagicMock(spec=ExternalStore)
    store.insert = AsyncMock()
    store.upload_binary = AsyncMock()
    store.select = AsyncMock(return_value=[])
    return store


class TestPhotoValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   "])
    async def test_blank_title_rejected_before_store_calls(self, untouched_store, title):
        controller = GalleryController(untouched_store)
        with pytest.raises(ValidationError) as exc_info:
            await submit_photo(controller, untouched_store, title, None, PhotoSource.from_url("https://img/a.jpg"))
        assert exc_info.value.field == "title"
        untouched_store.insert.assert_not_called()
        untouched_store.upload_binary.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source", [None, PhotoSource.from_url("  "), PhotoSource.from_file(b"", "empty.jpg")])
    async def test_missing_source_rejected(self, untouched_store, source):
        controller = GalleryController(untouched_store)
        with pytest.raises(ValidationError) as exc_info:
            await submit_photo(controller, untouched_store, "Sunset", None, source)
        assert exc_info.value.field == "source"
        untouched_store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_oversized_file_rejected(self, untouched_store, monkeypatch):
        monkeypatch.setenv("GALLERY_MAX_UPLOAD_SIZE", "10")
        controller = GalleryController(untouched_store)
        with pytest.raises(ValidationError) as exc_info:
            await submit_photo(controller, untouched_store, "Big", None, PhotoSource.from_file(b"x" * 11, "big.jpg", "image/jpeg"))
        assert exc_info.value.field == "file"
        untouched_store.upload_binary.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "  "])
    async def test_new_album_requires_name(self, untouched_store, name):
        controller = GalleryController(untouched_store)
        with pytest.raises(ValidationError) as exc_info:
            await submit_photo(controller, untouched_store, "Dune", None, PhotoSource.from_url("https://img/dune.jpg"), album_id=NEW_ALBUM, new_album_name=name)
        assert exc_info.value.field == "new_album_name"
        untouched_store.insert.assert_not_called()


class TestSubmitPhoto:
    @pytest.mark.asyncio
    async def test_url_source_is_stored_directly(self, controller, store, s3_client):
        photo = await submit_photo(controller, store, "  Sunset ", "  ", PhotoSource.from_url("https://img/sunset.jpg"))

        assert photo.title == "Sunset"
        assert photo.description is None
        assert photo.image_url == "https://img/sunset.jpg"
        assert photo.album_id is None
        assert s3_client.uploads == []
        # Refresh picked up the new record
        assert [p.id for p in controller.photos] == [photo.id]

    @pytest.mark.asyncio
    async def test_file_source_is_uploaded_then_referenced(self, controller, store, s3_client):
        photo = await submit_photo(controller, store, "Cat", "On the sofa", PhotoSource.from_file(b"\xff\xd8data", "Cat.JPG", "image/jpeg"))

        assert len(s3_client.uploads) == 1
        bucket, path, data, content_type = s3_client.uploads[0]
        assert bucket == "photos"
        assert path.startswith("photos/") and path.endswith(".jpg")
        assert data == b"\xff\xd8data"
        assert content_type == "image/jpeg"
        assert photo.image_url == f"https://cdn.example.com/photos/{path}"
        assert photo.description == "On the sofa"

    @pytest.mark.asyncio
    async def test_photo_goes_into_currently_opened_album(self, controller, store):
        album = await submit_album(controller, store, "Travel")
        controller.open_album(album.id)

        photo = await submit_photo(controller, store, "Beach", None, PhotoSource.from_url("https://img/beach.jpg"))
        assert photo.album_id == album.id
        assert [p.title for p in controller.visible_photos()] == ["Beach"]

    @pytest.mark.asyncio
    async def test_explicit_album_overrides_filter(self, controller, store):
        travel = await submit_album(controller, store, "Travel")
        family = await submit_album(controller, store, "Family")
        controller.open_album(travel.id)

        photo = await submit_photo(controller, store, "Cake", None, PhotoSource.from_url("https://img/cake.jpg"), album_id=family.id)
        assert photo.album_id == family.id

    @pytest.mark.asyncio
    async def test_new_album_is_created_first(self, controller, store):
        photo = await submit_photo(controller, store, "Dune", None, PhotoSource.from_url("https://img/dune.jpg"), new_album_name=" Desert ")

        assert [album.name for album in controller.albums] == ["Desert"]
        assert photo.album_id == controller.albums[0].id

    @pytest.mark.asyncio
    async def test_upload_failure_raises_store_error_without_record(self, record_store):
        failing = ExternalStore(records=record_store, binaries=DummyAsyncS3Client(fail=True))
        controller = GalleryController(failing)

        with pytest.raises(StoreError):
            await submit_photo(controller, failing, "Cat", None, PhotoSource.from_file(b"data", "cat.png", "image/png"))
        assert await record_store.select("photos") == []

    @pytest.mark.asyncio
    async def test_insert_failure_propagates(self, untouched_store):
        untouched_store.insert.side_effect = StoreError("Could not save to photos", operation="insert")
        controller = GalleryController(untouched_store)

        with pytest.raises(StoreError):
            await submit_photo(controller, untouched_store, "Cat", None, PhotoSource.from_url("https://img/cat.jpg"))
        untouched_store.select.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_failure_creates_no_new_album(self, record_store):
        failing = ExternalStore(records=record_store, binaries=DummyAsyncS3Client(fail=True))
        controller = GalleryController(failing)

        with pytest.raises(StoreError):
            await submit_photo(controller, failing, "Cat", None, PhotoSource.from_file(b"x", "a.jpg"), new_album_name="Trip")
        assert await record_store.select("albums") == []
        assert await record_store.select("photos") == []

    @pytest.mark.asyncio
    async def test_photo_insert_failure_after_new_album_refreshes(self, controller, store, monkeypatch):
        insert = store.records.insert

        async def insert_albums_only(collection, record):
            if collection == "photos":
                raise StoreError("Could not save to photos", operation="insert")
            return await insert(collection, record)

        monkeypatch.setattr(store.records, "insert", insert_albums_only)

        with pytest.raises(StoreError):
            await submit_photo(controller, store, "Dune", None, PhotoSource.from_url("https://img/dune.jpg"), new_album_name="Desert")
        assert [album.name for album in controller.albums] == ["Desert"]
        assert controller.photos == []


class TestSubmitAlbum:
    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, untouched_store):
        controller = GalleryController(untouched_store)
        with pytest.raises(ValidationError) as exc_info:
            await submit_album(controller, untouched_store, "  ", "desc")
        assert exc_info.value.field == "name"
        untouched_store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_album_refreshes_and_dismisses_form(self, controller, store):
        controller.open_album_form()
        album = await submit_album(controller, store, "Weddings", " Summer 2025 ")

        assert album.name == "Weddings"
        assert album.description == "Summer 2025"
        assert controller.album_by_id(album.id) == album
        assert controller.view.album_form_open is False


class TestObjectKeys:
    def test_known_extension_is_kept(self):
        key = generate_object_key("holiday.PNG")
        assert key.startswith("photos/")
        assert key.endswith(".png")

    def test_missing_extension_defaults_to_bin(self):
        assert generate_object_key(None).endswith(".bin")

    def test_keys_are_unique(self):
        assert generate_object_key("a.jpg") != generate_object_key("a.jpg")
        assert uuid.UUID(generate_object_key("a.jpg")[len("photos/") : -len(".jpg")])
