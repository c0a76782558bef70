import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lightbox.api.album import router as album_router
from lightbox.api.gallery import router as gallery_router
from lightbox.api.photo import router as photo_router
from lightbox.api.render import router as render_router
from lightbox.config import get_gallery_settings
from lightbox.dependencies import get_store_instance, set_store_instance
from lightbox.store.external import ExternalStore

from .logging_config import configure_logging

settings = get_gallery_settings()

# uvicorn imports this module when starting the app, so logging is configured before it serves
configure_logging(level=settings.log_level, color=settings.log_color)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle: connect to the external store on startup, release it on shutdown."""
    logger.info("Starting up application...")
    try:
        set_store_instance(ExternalStore())
        logger.info("External store initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize external store: {e}")
        raise

    yield

    logger.info("Shutting down application...")
    try:
        await get_store_instance().close()
        logger.info("External store closed successfully")
    except Exception as e:
        logger.error(f"Error during external store shutdown: {e}")
    finally:
        set_store_instance(None)


app = FastAPI(title="Lightbox", redoc_url=None, redirect_slashes=False, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gallery_router)
app.include_router(photo_router)
app.include_router(album_router)
app.include_router(render_router)


@app.get("/")
def read_root():
    return {"message": "Hello from lightbox!"}
