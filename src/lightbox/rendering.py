"""
Fitted image rendering

A FittedImage owns the measured size of its container and the source it
displays. It probes the source for its intrinsic size, feeds both into the
fit calculator and walks through measuring -> loading -> loaded | error.

Probes are asynchronous and may complete out of order. Every source or
container change bumps a request counter; a probe that finishes under an
older counter value is discarded, so the last source always wins.
"""

import asyncio
import io
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

import httpx
from PIL import Image

from lightbox.config import MAX_UPLOAD_SIZE
from lightbox.errors import RenderError
from lightbox.fit import FitResult, compute_fit

logger = logging.getLogger(__name__)

FALLBACK_GLYPH = "\U0001f4f7"

ImageProbe = Callable[[str], Awaitable[tuple[int, int]]]


class RenderState(StrEnum):
    MEASURING = "measuring"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class HttpImageProbe:
    """Fetch an image over HTTP and read its intrinsic size with Pillow.

    The body is streamed and abandoned once it exceeds `max_bytes`.
    """

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None, max_bytes: int = MAX_UPLOAD_SIZE):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._client = client

    async def _download(self, client: httpx.AsyncClient, src: str) -> bytes:
        async with client.stream("GET", src, timeout=self.timeout, follow_redirects=True) as response:
            response.raise_for_status()
            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > self.max_bytes:
                raise RenderError(f"Image larger than {self.max_bytes} bytes: {src}")

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > self.max_bytes:
                    raise RenderError(f"Image larger than {self.max_bytes} bytes: {src}")
            return bytes(body)

    async def __call__(self, src: str) -> tuple[int, int]:
        try:
            if self._client is not None:
                content = await self._download(self._client, src)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    content = await self._download(client, src)
        except httpx.TimeoutException as e:
            raise RenderError(f"Timed out loading image {src}") from e
        except httpx.HTTPError as e:
            raise RenderError(f"Failed to load image {src}: {e}") from e

        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
        except Exception as e:
            # Pillow signals unreadable input with several unrelated types (DecompressionBombError among them)
            logger.warning("Could not read image size of %s: %s", src, e)
            raise RenderError(f"Not a readable image: {src}") from e

        if width <= 0 or height <= 0:
            raise RenderError(f"Image has no area: {src}")
        return width, height


class FittedImage:
    """Loading/error/loaded state machine around a single image element."""

    def __init__(self, probe: ImageProbe, src: str = "", fallback: str = FALLBACK_GLYPH, timeout: float | None = None):
        self._probe = probe
        self.timeout = timeout
        self.fallback = fallback
        self.src = src
        self.container_width = 0.0
        self.container_height = 0.0
        self.state = RenderState.MEASURING if src else RenderState.ERROR
        self.fit: FitResult | None = None
        self.intrinsic_size: tuple[int, int] | None = None
        self._request = 0

    @property
    def has_container(self) -> bool:
        return self.container_width > 0 and self.container_height > 0

    def _invalidate(self) -> None:
        self._request += 1

    def resize(self, width: float, height: float) -> bool:
        """Record a new container size.

        Returns:
            True if the size changed and a new fit is pending
        """
        if (width, height) == (self.container_width, self.container_height):
            return False

        self.container_width = width
        self.container_height = height
        if self.state == RenderState.ERROR:
            # Terminal for the current source
            return False

        self._invalidate()
        self.fit = None
        self.state = RenderState.LOADING if self.has_container else RenderState.MEASURING
        return True

    def set_source(self, src: str) -> None:
        """Restart the machine for a new source."""
        if src == self.src and self.state != RenderState.MEASURING:
            return

        self._invalidate()
        self.src = src
        self.fit = None
        self.intrinsic_size = None
        if not src:
            self.state = RenderState.ERROR
            return
        self.state = RenderState.LOADING if self.has_container else RenderState.MEASURING

    async def load(self) -> RenderState:
        """Probe the current source and apply the fit, unless a newer request superseded it."""
        if self.state != RenderState.LOADING:
            return self.state

        request = self._request
        src = self.src
        try:
            size = self.intrinsic_size or await asyncio.wait_for(self._probe(src), self.timeout)
        except (RenderError, TimeoutError) as e:
            if request == self._request:
                logger.warning("Image failed to load: %s", e)
                self.state = RenderState.ERROR
            return self.state

        if request != self._request:
            logger.debug("Discarding stale probe result for %s", src)
            return self.state

        self.intrinsic_size = size
        self.fit = compute_fit(size[0], size[1], self.container_width, self.container_height)
        self.state = RenderState.LOADED if self.fit is not None else RenderState.MEASURING
        if self.fit is not None:
            logger.debug("Fitted %s: %sx%s -> %sx%s (scale %.1f%%)", src, size[0], size[1], self.fit.width, self.fit.height, self.fit.scale * 100)
        return self.state

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "src": self.src,
            "container_width": self.container_width,
            "container_height": self.container_height,
            "fit": self.fit._asdict() if self.fit else None,
            "fallback": self.fallback if self.state == RenderState.ERROR else None,
        }
