"""Abstract pixel-decoding capability."""

from __future__ import annotations

from abc import ABC, abstractmethod

from PIL import Image


class Bitmap(ABC):
    """A decoded image: its dimensions plus read access to its pixels."""

    @property
    @abstractmethod
    def width(self) -> int: ...

    @property
    @abstractmethod
    def height(self) -> int: ...

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @abstractmethod
    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (r, g, b, a) value at (x, y) on a 0-255 scale.

        Raises:
            PixelAccessError: If the pixel data could not be read.
        """
        ...

    @abstractmethod
    def to_image(self) -> Image.Image:
        """Return the bitmap as an RGBA PIL image for drawing.

        Raises:
            PixelAccessError: If the pixel data could not be read.
        """
        ...


class BaseDecoder(ABC):
    """Abstract base class for bitmap decoders."""

    name: str = "base"

    @abstractmethod
    def decode(self, data: bytes, source: str = "<bytes>") -> Bitmap:
        """Decode encoded image bytes.

        Args:
            data: Encoded image bytes (PNG, JPEG, WEBP, GIF).
            source: Where the bytes came from, for error messages.

        Returns:
            A Bitmap.

        Raises:
            DecodeError: If the bytes are not a recognisable image.
        """
        ...
