"""
Dependency Injection for the external store and the per-session controllers

The store is initialized once during application startup and shared across
all requests. Each browser session gets its own GalleryController, found
through the session cookie.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Request, Response

from lightbox.config import GallerySettings, get_gallery_settings
from lightbox.controller import GalleryController, SessionRegistry
from lightbox.rendering import HttpImageProbe, ImageProbe
from lightbox.store.external import ExternalStore

logger = logging.getLogger(__name__)

# Global instances (initialized during app startup)
_store_instance: ExternalStore | None = None
_session_registry: SessionRegistry | None = None


async def get_store() -> AsyncGenerator[ExternalStore]:
    """Dependency injection function for the ExternalStore."""
    yield get_store_instance()


def set_store_instance(store: ExternalStore | None) -> None:
    """Set the global store instance and start a fresh session registry for it.

    This is called during application startup via the lifespan context manager.
    """
    global _store_instance, _session_registry
    _store_instance = store
    _session_registry = SessionRegistry(store, max_sessions=get_gallery_settings().max_sessions) if store is not None else None
    logger.info("External store instance set globally")


def get_store_instance() -> ExternalStore:
    """Get the global store instance without using dependency injection.

    Raises:
        RuntimeError: If the store is not initialized
    """
    if _store_instance is None:
        raise RuntimeError("External store not initialized. Make sure the application lifespan is properly configured.")
    return _store_instance


def get_session_registry() -> SessionRegistry:
    if _session_registry is None:
        raise RuntimeError("Session registry not initialized. Make sure the application lifespan is properly configured.")
    return _session_registry


async def get_gallery_controller(
    request: Request,
    response: Response,
    settings: GallerySettings = Depends(get_gallery_settings),
) -> GalleryController:
    """Controller of the caller's session.

    A missing, unknown or evicted session cookie gets a freshly issued session,
    whose controller loads the gallery once before it is handed out.
    """
    registry = get_session_registry()
    controller = registry.get(request.cookies.get(settings.session_cookie))
    if controller is None:
        session_id, controller = registry.issue()
        response.set_cookie(settings.session_cookie, session_id, httponly=True, samesite="lax")
        await controller.refresh()
    return controller


def get_image_probe(settings: GallerySettings = Depends(get_gallery_settings)) -> ImageProbe:
    return HttpImageProbe(timeout=settings.probe_timeout, max_bytes=settings.max_upload_size)
