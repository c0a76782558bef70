import logging
import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from lightbox.controller import GalleryController
from lightbox.dependencies import get_gallery_controller, get_store
from lightbox.errors import StoreError, ValidationError
from lightbox.forms import NEW_ALBUM, PhotoSource, submit_photo
from lightbox.schemas.photo import PhotoSubmitResponse
from lightbox.store.external import ExternalStore

router = APIRouter(prefix="/photos", tags=["photos"])
logger = logging.getLogger(__name__)


def _parse_album_id(raw: str | None) -> uuid.UUID | str | None:
    if raw is None or not raw.strip():
        return None
    if raw.strip() == NEW_ALBUM:
        return NEW_ALBUM
    try:
        return uuid.UUID(raw.strip())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid album id") from e


@router.post("", response_model=PhotoSubmitResponse, status_code=status.HTTP_201_CREATED)
async def create_photo(
    title: str = Form(""),
    description: str | None = Form(None),
    image_url: str | None = Form(None),
    album_id: str | None = Form(None),
    new_album_name: str | None = Form(None),
    file: UploadFile | None = File(None),
    controller: GalleryController = Depends(get_gallery_controller),
    store: ExternalStore = Depends(get_store),
) -> PhotoSubmitResponse:
    """Upload a photo file, or register an image URL, into the gallery."""
    source = None
    if file is not None and file.filename:
        contents = await file.read()
        source = PhotoSource.from_file(contents, file.filename, file.content_type)
    elif image_url:
        source = PhotoSource.from_url(image_url)

    try:
        photo = await submit_photo(
            controller,
            store,
            title=title,
            description=description,
            source=source,
            album_id=_parse_album_id(album_id),
            new_album_name=new_album_name,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    except StoreError as e:
        logger.error(f"Photo submission failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

    return PhotoSubmitResponse(photo=photo)
