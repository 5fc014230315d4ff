"""PNG data URLs and package archives."""

from __future__ import annotations

import base64
import binascii
import io
import zipfile
from collections.abc import Sequence

from PIL import Image

from .constants import PNG_DATA_URL_PREFIX
from .exceptions import ValidationError


def to_png_data_url(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return PNG_DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")


def data_url_to_bytes(data_url: str) -> bytes:
    """Decode a PNG data URL back to PNG bytes.

    Raises:
        ValidationError: If the string is not a base64 PNG data URL.
    """
    if not data_url.startswith(PNG_DATA_URL_PREFIX):
        raise ValidationError("Not a PNG data URL")
    try:
        return base64.b64decode(data_url[len(PNG_DATA_URL_PREFIX):], validate=True)
    except binascii.Error as e:
        raise ValidationError(f"Malformed PNG data URL: {e}") from e


def data_url_to_image(data_url: str) -> Image.Image:
    image = Image.open(io.BytesIO(data_url_to_bytes(data_url)))
    image.load()
    return image


def package_filename(listing_id: str | None, index: int) -> str:
    """Download name for one image: ``<listing>_<n>.png``, 1-based."""
    return f"{listing_id or 'listing'}_{index + 1}.png"


def package_to_zip(images: Sequence[str]) -> bytes:
    """Bundle data URLs into a ZIP of ``1.png``, ``2.png``, ... in order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for index, data_url in enumerate(images):
            zf.writestr(f"{index + 1}.png", data_url_to_bytes(data_url))
    return buffer.getvalue()
