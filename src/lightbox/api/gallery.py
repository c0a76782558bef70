import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from lightbox.controller import GalleryController
from lightbox.dependencies import get_gallery_controller
from lightbox.schemas.gallery import AlbumGroupResponse, GalleryStateResponse, GroupedGalleryResponse

router = APIRouter(prefix="/gallery", tags=["gallery"])
logger = logging.getLogger(__name__)


def build_state_response(controller: GalleryController) -> GalleryStateResponse:
    view = controller.view
    return GalleryStateResponse(
        mode=view.mode.value,
        album_filter=view.album_filter,
        selected_photo=view.selected_photo,
        album_form_open=view.album_form_open,
        loading=controller.loading,
        error=controller.error,
        photos=controller.visible_photos(),
        albums=controller.albums,
    )


@router.get("", response_model=GalleryStateResponse)
def get_gallery(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    return build_state_response(controller)


@router.get("/albums", response_model=GroupedGalleryResponse)
def get_grouped_gallery(controller: GalleryController = Depends(get_gallery_controller)) -> GroupedGalleryResponse:
    return GroupedGalleryResponse(
        groups=[AlbumGroupResponse(album=group.album, title=group.title, photos=group.photos) for group in controller.grouped_photos()],
        error=controller.error,
    )


@router.post("/view/photos", response_model=GalleryStateResponse)
def select_all_photos(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.select_all_photos()
    return build_state_response(controller)


@router.post("/view/albums", response_model=GalleryStateResponse)
def select_albums_view(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.select_albums_view()
    return build_state_response(controller)


@router.post("/albums/{album_id}/open", response_model=GalleryStateResponse)
def open_album(album_id: uuid.UUID, controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    if controller.album_by_id(album_id) is None:
        logger.warning(f"Album {album_id} not found in loaded albums")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Album not found")
    controller.open_album(album_id)
    return build_state_response(controller)


@router.delete("/filter", response_model=GalleryStateResponse)
def clear_album_filter(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.clear_album_filter()
    return build_state_response(controller)


@router.post("/photos/{photo_id}/open", response_model=GalleryStateResponse)
def open_photo(photo_id: uuid.UUID, controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    photo = controller.photo_by_id(photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    controller.open_photo(photo)
    return build_state_response(controller)


@router.delete("/photo", response_model=GalleryStateResponse)
def close_photo(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.close_photo()
    return build_state_response(controller)


@router.post("/refresh", response_model=GalleryStateResponse)
async def refresh_gallery(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    await controller.refresh()
    return build_state_response(controller)


@router.delete("/error", response_model=GalleryStateResponse)
def dismiss_error(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.dismiss_error()
    return build_state_response(controller)


@router.post("/album-form", response_model=GalleryStateResponse)
def open_album_form(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.open_album_form()
    return build_state_response(controller)


@router.delete("/album-form", response_model=GalleryStateResponse)
def close_album_form(controller: GalleryController = Depends(get_gallery_controller)) -> GalleryStateResponse:
    controller.close_album_form()
    return build_state_response(controller)
