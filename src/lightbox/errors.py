"""Error taxonomy shared by the forms, the store adapters and the renderer."""


class GalleryError(Exception):
    """Base class for every recoverable gallery failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GalleryError):
    """A required field is missing or invalid. Raised before any network call."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class StoreError(GalleryError):
    """A record read/write or a binary upload against the external store failed."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class RenderError(GalleryError):
    """An image source could not be probed. Handled by the renderer, never propagated."""


__all__ = ["GalleryError", "RenderError", "StoreError", "ValidationError"]
