"""Error placeholder image for sources that could not be composed."""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw, ImageFont

from ..constants import (
    PLACEHOLDER_BACKGROUND,
    PLACEHOLDER_CAPTION,
    PLACEHOLDER_CAPTION_SIZE,
    PLACEHOLDER_FILENAME_MAX_CHARS,
    PLACEHOLDER_FILENAME_SIZE,
    PLACEHOLDER_TEXT_COLOR,
)

logger = logging.getLogger("listingpack.composition.placeholder")

_BOLD_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")
_REGULAR_FONTS = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")


def _load_font(candidates: tuple[str, ...], size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def display_filename(url: str, max_chars: int = PLACEHOLDER_FILENAME_MAX_CHARS) -> str:
    """Last path segment of a URL, truncated with an ellipsis."""
    name = url[url.rfind("/") + 1:]
    if len(name) > max_chars:
        name = name[:max_chars] + "..."
    return name


def render_error_placeholder(original_url: str, size: tuple[int, int]) -> Image.Image:
    """Light-gray image with a bold error caption and the source filename."""
    width, height = size
    image = Image.new("RGB", size, PLACEHOLDER_BACKGROUND)
    draw = ImageDraw.Draw(image)

    caption_font = _load_font(_BOLD_FONTS, PLACEHOLDER_CAPTION_SIZE)
    filename_font = _load_font(_REGULAR_FONTS, PLACEHOLDER_FILENAME_SIZE)

    draw.text(
        (width / 2, height / 2 - 10),
        PLACEHOLDER_CAPTION,
        fill=PLACEHOLDER_TEXT_COLOR,
        font=caption_font,
        anchor="mm",
    )
    draw.text(
        (width / 2, height / 2 + 10),
        display_filename(original_url),
        fill=PLACEHOLDER_TEXT_COLOR,
        font=filename_font,
        anchor="mm",
    )
    return image
