"""Crop rectangle helpers: default center square and auto-adjust."""

from __future__ import annotations

import logging

from ..config import Config
from ..exceptions import AutoAdjustUnavailableError, ValidationError
from ..models import CropArea, ImageAnalysisResult, ImageEditState, Point

logger = logging.getLogger("listingpack.composition.crop")


def default_crop(width: float, height: float) -> CropArea:
    """Largest centered square inside a width x height image."""
    size = min(width, height)
    return CropArea(
        x=(width - size) / 2,
        y=(height - size) / 2,
        width=size,
        height=size,
    )


def auto_adjust_crop(
    width: float, height: float, zoom: float = Config.AUTO_ADJUST_ZOOM
) -> CropArea:
    """Shrink the default crop by ``zoom`` and re-center it in that square.

    This approximates the tighter crop a user would pick by hand to drop a
    letterbox band.
    """
    if zoom <= 0:
        raise ValidationError(f"Auto-adjust zoom must be positive, got {zoom}")

    base = default_crop(width, height)
    new_w = base.width / zoom
    new_h = base.height / zoom
    return CropArea(
        x=base.x + (base.width - new_w) / 2,
        y=base.y + (base.height - new_h) / 2,
        width=new_w,
        height=new_h,
    )


def auto_adjust_edit_state(
    analysis: ImageAnalysisResult | None, zoom: float = Config.AUTO_ADJUST_ZOOM
) -> ImageEditState:
    """Build an auto-adjusted edit state from a prior analysis.

    Raises:
        AutoAdjustUnavailableError: If the analysis has no dimensions; the
            caller should fall back to the manual editor.
    """
    if analysis is None or not analysis.has_dimensions:
        raise AutoAdjustUnavailableError(
            "Natural dimensions unknown; open the manual editor instead"
        )

    area = auto_adjust_crop(analysis.natural_width, analysis.natural_height, zoom)
    logger.debug(
        "Auto-adjust %dx%d -> %.2fx%.2f at (%.2f, %.2f)",
        analysis.natural_width, analysis.natural_height,
        area.width, area.height, area.x, area.y,
    )
    return ImageEditState(
        crop=Point(0, 0),
        zoom=zoom,
        cropped_area_pixels=area,
        sharpness=None,
        auto_adjusted=True,
    )
