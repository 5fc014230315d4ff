"""OpenCV-backed bitmap decoder."""

from __future__ import annotations

import cv2
import numpy as np
from PIL import Image

from ..exceptions import DecodeError
from .base_decoder import BaseDecoder, Bitmap


class OpenCVBitmap(Bitmap):
    """Bitmap over a BGRA uint8 array."""

    def __init__(self, bgra: np.ndarray) -> None:
        self._bgra = bgra

    @property
    def width(self) -> int:
        return int(self._bgra.shape[1])

    @property
    def height(self) -> int:
        return int(self._bgra.shape[0])

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        b, g, r, a = self._bgra[y, x]
        return (int(r), int(g), int(b), int(a))

    def to_image(self) -> Image.Image:
        rgba = cv2.cvtColor(self._bgra, cv2.COLOR_BGRA2RGBA)
        return Image.fromarray(rgba)


class OpenCVDecoder(BaseDecoder):
    """Decode with cv2.imdecode, keeping any alpha channel."""

    name = "opencv"

    def decode(self, data: bytes, source: str = "<bytes>") -> Bitmap:
        buf = np.frombuffer(data, dtype=np.uint8)
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED) if buf.size else None
        if arr is None:
            raise DecodeError(source, source, "not a decodable image (cv2.imdecode returned None)")

        if arr.dtype == np.uint16:
            arr = (arr / 257).astype(np.uint8)

        if arr.ndim == 2:
            bgra = cv2.cvtColor(arr, cv2.COLOR_GRAY2BGRA)
        elif arr.shape[2] == 3:
            bgra = cv2.cvtColor(arr, cv2.COLOR_BGR2BGRA)
        else:
            bgra = arr

        return OpenCVBitmap(bgra)
