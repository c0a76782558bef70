import logging

from fastapi import APIRouter, Depends, HTTPException, status

from lightbox.controller import GalleryController
from lightbox.dependencies import get_gallery_controller, get_store
from lightbox.errors import StoreError, ValidationError
from lightbox.forms import submit_album
from lightbox.schemas.album import AlbumCreateRequest, AlbumRecord
from lightbox.store.external import ExternalStore

router = APIRouter(prefix="/albums", tags=["albums"])
logger = logging.getLogger(__name__)


@router.post("", response_model=AlbumRecord, status_code=status.HTTP_201_CREATED)
async def create_album(
    request: AlbumCreateRequest,
    controller: GalleryController = Depends(get_gallery_controller),
    store: ExternalStore = Depends(get_store),
) -> AlbumRecord:
    try:
        return await submit_album(controller, store, request.name, request.description)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    except StoreError as e:
        logger.error(f"Album creation failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
