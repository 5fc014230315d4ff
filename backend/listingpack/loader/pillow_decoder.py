"""Pillow-backed bitmap decoder."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from ..exceptions import DecodeError, PixelAccessError
from .base_decoder import BaseDecoder, Bitmap

logger = logging.getLogger("listingpack.loader.pillow")


class PillowBitmap(Bitmap):
    """Bitmap over an RGBA PIL image.

    ``image`` is None when the header parsed but the pixel data did not
    (e.g. a truncated download): dimensions are known, pixels are not.
    """

    def __init__(self, size: tuple[int, int], image: Image.Image | None) -> None:
        self._size = size
        self._image = image

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    def _require_image(self) -> Image.Image:
        if self._image is None:
            raise PixelAccessError("Pixel data unavailable for this bitmap")
        return self._image

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        return self._require_image().getpixel((x, y))

    def to_image(self) -> Image.Image:
        return self._require_image().copy()


class PillowDecoder(BaseDecoder):
    """Decode with Pillow; everything is normalised to RGBA."""

    name = "pillow"

    def decode(self, data: bytes, source: str = "<bytes>") -> Bitmap:
        try:
            img = Image.open(io.BytesIO(data))
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
            raise DecodeError(source, source, f"not a decodable image ({e})") from e

        size = img.size
        try:
            img.load()
            rgba = img.convert("RGBA")
        except (OSError, SyntaxError, ValueError) as e:
            logger.warning("Pixel data unreadable for %s (%dx%d): %s", source, size[0], size[1], e)
            return PillowBitmap(size, None)

        return PillowBitmap(size, rgba)
