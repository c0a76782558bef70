from pydantic import BaseModel, Field


class FitResponse(BaseModel):
    width: int
    height: int
    scale: float


class RenderRequest(BaseModel):
    src: str = Field("", description="Image URL, an empty source renders the fallback")
    container_width: float = Field(..., ge=0)
    container_height: float = Field(..., ge=0)


class RenderResponse(BaseModel):
    state: str
    src: str
    container_width: float
    container_height: float
    fit: FitResponse | None = None
    fallback: str | None = Field(None, description="Glyph shown instead of the image in the error state")
