from fastapi import APIRouter, Depends, Query

from lightbox.dependencies import get_image_probe
from lightbox.fit import compute_fit
from lightbox.rendering import FittedImage, ImageProbe
from lightbox.schemas.render import FitResponse, RenderRequest, RenderResponse

router = APIRouter(prefix="/render", tags=["render"])


@router.get("/fit", response_model=FitResponse | None)
def get_fit(
    image_width: float = Query(..., gt=0),
    image_height: float = Query(..., gt=0),
    container_width: float = Query(..., ge=0),
    container_height: float = Query(..., ge=0),
) -> FitResponse | None:
    """Contain-fit dimensions, null while the container has no area."""
    fit = compute_fit(image_width, image_height, container_width, container_height)
    return FitResponse(**fit._asdict()) if fit else None


@router.post("/image", response_model=RenderResponse)
async def render_image(request: RenderRequest, probe: ImageProbe = Depends(get_image_probe)) -> RenderResponse:
    """Probe an image source and report the renderer state it ends up in."""
    image = FittedImage(probe)
    image.resize(request.container_width, request.container_height)
    image.set_source(request.src)
    await image.load()
    return RenderResponse(**image.snapshot())
