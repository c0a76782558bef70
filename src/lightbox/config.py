from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_SIZE = 15 * 1024 * 1024  # 15 MB


class GallerySettings(BaseSettings):
    """Application level settings, loaded from GALLERY_* environment variables."""

    max_upload_size: int = Field(MAX_UPLOAD_SIZE, ge=1)
    probe_timeout: float = Field(10.0, gt=0, description="Seconds before an image probe counts as a load failure")
    log_level: str = "INFO"
    # None colors the log only when stdout is a terminal
    log_color: bool | None = None
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    session_cookie: str = "lightbox_session"
    max_sessions: int = Field(1000, ge=1, description="Gallery sessions kept in memory, least recently used are dropped first")

    model_config = SettingsConfigDict(env_prefix="GALLERY_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache(maxsize=1)
def get_gallery_settings() -> GallerySettings:
    """Get cached gallery settings."""
    return GallerySettings()
