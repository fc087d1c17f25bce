"""Image download and preparation for PDF rendering.

Downloads run concurrently with httpx; preparation is synchronous Pillow:
EXIF orientation, resize, RGB JPEG conversion. Any image that cannot be
downloaded or decoded is left out and its slot renders without a picture.
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass

import httpx
from PIL import Image, ImageOps

from src.config import settings

logger = logging.getLogger(__name__)

MAX_LONG_SIDE = 1600
JPEG_QUALITY = 85


class ImagePreparationError(Exception):
    """Raised when downloaded bytes are not a usable image."""


@dataclass(frozen=True)
class PreparedImage:
    """Decoded image ready for the PDF renderer."""

    jpeg_bytes: bytes
    width: int
    height: int

    @property
    def aspect(self) -> float:
        """Height / width ratio."""
        return self.height / self.width if self.width else 1.0


def prepare_image(raw_bytes: bytes) -> PreparedImage:
    """Decode, orient, downscale and re-encode an image as RGB JPEG.

    Raises:
        ImagePreparationError: If the bytes cannot be decoded.
    """
    try:
        img = Image.open(io.BytesIO(raw_bytes))
        img.load()
    except Exception as exc:
        raise ImagePreparationError(f"Cannot decode image: {exc}") from exc

    img = ImageOps.exif_transpose(img) or img

    long_side = max(img.size)
    if long_side > MAX_LONG_SIDE:
        ratio = MAX_LONG_SIDE / long_side
        img = img.resize((int(img.width * ratio), int(img.height * ratio)), Image.LANCZOS)

    if img.mode != "RGB":
        img = img.convert("RGB")

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=JPEG_QUALITY)
    return PreparedImage(jpeg_bytes=buf.getvalue(), width=img.width, height=img.height)


class ImageFetcher:
    """Downloads the images referenced by a quote document."""

    def __init__(self, timeout: float | None = None, max_bytes: int | None = None) -> None:
        self._timeout = httpx.Timeout(timeout or settings.render.image_timeout, connect=5.0)
        self._max_bytes = max_bytes or settings.render.max_image_bytes

    async def fetch_all(self, urls: list[str]) -> dict[str, PreparedImage]:
        """Fetch and prepare every URL; failures are logged and omitted."""
        if not urls:
            return {}
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            results = await asyncio.gather(*(self._fetch_one(client, url) for url in urls))
        return {url: image for url, image in zip(urls, results, strict=True) if image is not None}

    async def _fetch_one(self, client: httpx.AsyncClient, url: str) -> PreparedImage | None:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Image download timed out: %s", url)
            return None
        except httpx.HTTPStatusError as exc:
            logger.warning("Image download failed with HTTP %s: %s", exc.response.status_code, url)
            return None
        except httpx.HTTPError as exc:
            logger.warning("Image download failed: %s (%s)", url, exc)
            return None

        content = response.content
        if len(content) > self._max_bytes:
            logger.warning("Image too large (%d bytes), skipped: %s", len(content), url)
            return None

        try:
            return prepare_image(content)
        except ImagePreparationError as exc:
            logger.warning("Unusable image %s: %s", url, exc)
            return None
