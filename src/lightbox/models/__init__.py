from .gallery import Album, Photo

__all__ = ["Album", "Photo"]
