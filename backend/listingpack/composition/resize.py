"""High-quality resampling with gamma correction."""

from __future__ import annotations

import logging
import math

import numpy as np
from PIL import Image

from ..config import Config
from ..exceptions import CompositionFailure
from ..models import CropArea

logger = logging.getLogger("listingpack.composition.resize")


def high_quality_resize(
    image: Image.Image,
    target_size: tuple[int, int],
    box: tuple[float, float, float, float] | None = None,
) -> Image.Image:
    """High-quality resize with gamma correction.

    Performs resize in linear color space for more accurate results.

    Args:
        image: Source PIL image.
        target_size: Target (width, height).
        box: Optional source region (x0, y0, x1, y1), fractional allowed,
            to resample instead of the whole image.

    Returns:
        Resized image.
    """
    if target_size[0] <= 0 or target_size[1] <= 0:
        return image

    # Ensure image is in a supported mode
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    # Only linearise the pixels the box touches
    if box is not None:
        x0, y0, x1, y1 = box
        ix0, iy0 = max(0, math.floor(x0)), max(0, math.floor(y0))
        ix1, iy1 = min(image.width, math.ceil(x1)), min(image.height, math.ceil(y1))
        image = image.crop((ix0, iy0, ix1, iy1))
        box = (x0 - ix0, y0 - iy0, x1 - ix0, y1 - iy0)

    # Convert to numpy for gamma correction
    arr = np.array(image).astype(np.float32) / 255.0

    # Gamma decode (to linear)
    rgb = arr[:, :, :3]
    alpha = arr[:, :, 3:4] if arr.shape[2] == 4 else None

    linear = np.power(np.clip(rgb, 0, 1), Config.GAMMA)

    if alpha is not None:
        linear = np.concatenate([linear, alpha], axis=2)

    # Resize
    pil_linear = Image.fromarray(np.round(linear * 255).astype(np.uint8))
    resized = pil_linear.resize(target_size, Config.RESIZE_QUALITY, box=box)

    # Gamma encode (back to sRGB)
    arr_resized = np.array(resized).astype(np.float32) / 255.0
    rgb_resized = arr_resized[:, :, :3]

    encoded = np.power(np.clip(rgb_resized, 0, 1), 1.0 / Config.GAMMA)

    if alpha is not None:
        alpha_resized = arr_resized[:, :, 3:4]
        encoded = np.concatenate([encoded, alpha_resized], axis=2)

    return Image.fromarray(np.round(encoded * 255).astype(np.uint8))


def draw_source_region(
    canvas: Image.Image, source: Image.Image, area: CropArea
) -> Image.Image:
    """Draw ``area`` of ``source`` stretched over the whole canvas.

    Parts of ``area`` outside the source bounds are clipped and leave the
    canvas untouched underneath, so a crop hanging off an edge shows the
    canvas base color there.

    Args:
        canvas: RGBA canvas, modified in place.
        source: RGBA source image.
        area: Source rectangle in source pixel coordinates.

    Returns:
        The canvas.
    """
    canvas_w, canvas_h = canvas.size
    if area.width <= 0 or area.height <= 0:
        raise CompositionFailure(f"Source rectangle has no area: {area}")

    scale_x = canvas_w / area.width
    scale_y = canvas_h / area.height

    left, top, right, bottom = area.to_box()
    x0, y0 = max(left, 0), max(top, 0)
    x1, y1 = min(right, source.width), min(bottom, source.height)
    if x1 <= x0 or y1 <= y0:
        logger.warning("Crop %s lies outside the %dx%d source", area, *source.size)
        return canvas

    dest = (
        round((x0 - left) * scale_x),
        round((y0 - top) * scale_y),
        round((x1 - left) * scale_x),
        round((y1 - top) * scale_y),
    )
    dest_w, dest_h = dest[2] - dest[0], dest[3] - dest[1]
    if dest_w <= 0 or dest_h <= 0:
        return canvas

    region = high_quality_resize(source.convert("RGBA"), (dest_w, dest_h), box=(x0, y0, x1, y1))
    canvas.alpha_composite(region, dest=(dest[0], dest[1]))
    return canvas
