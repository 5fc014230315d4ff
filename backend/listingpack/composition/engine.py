"""Composition engine for assembling final package images."""

from __future__ import annotations

import logging

from PIL import Image

from ..config import Config
from ..export import to_png_data_url
from ..loader import RemoteImageLoader
from ..models import ComposedImage, CropArea, ImageEditState, OverlaySet
from .crop import default_crop
from .placeholder import render_error_placeholder
from .resize import draw_source_region, high_quality_resize

logger = logging.getLogger("listingpack.composition")

DEFAULT_TARGET = (Config.TARGET_DIMENSION, Config.TARGET_DIMENSION)


class CompositionEngine:
    """Render one selected photo into a fixed-size PNG.

    Steps:
    - White base canvas at the exact target size
    - Source crop (confirmed or default center square) stretched to fill
    - Optional branding overlay, then optional closing overlay
    - PNG data URL export

    ``compose`` never raises for a bad source or overlay. A source that
    cannot be loaded or drawn becomes an error placeholder flagged
    ``source_failed``; an overlay that cannot be loaded is skipped with a
    warning. ``target_size`` must already be valid (PackageOrchestrator
    checks it).
    """

    def __init__(self, loader: RemoteImageLoader) -> None:
        self.loader = loader

    def compose(
        self,
        image_url: str,
        edit_state: ImageEditState | None = None,
        overlays: OverlaySet | None = None,
        target_size: tuple[int, int] = DEFAULT_TARGET,
    ) -> ComposedImage:
        """Compose a single package image.

        Args:
            image_url: Source photo URL.
            edit_state: Crop/sharpness state, or None for the default crop.
            overlays: Branding and closing overlays for this position.
            target_size: Output (width, height).

        Returns:
            ComposedImage with a PNG data URL.
        """
        warnings: list[str] = []

        try:
            canvas = self._compose_base(image_url, edit_state, target_size)
        except Exception as e:
            logger.error("Error processing image %s: %s", image_url, e, exc_info=True)
            return self._placeholder(image_url, target_size, f"Source failed: {e}")

        overlays = overlays or OverlaySet()

        if overlays.branding is not None and overlays.branding.overlay_url:
            kind = overlays.branding.kind
            self._apply_overlay(
                canvas, overlays.branding.overlay_url, f"{kind.value} overlay", warnings
            )

        if overlays.closing_overlay_url:
            self._apply_overlay(canvas, overlays.closing_overlay_url, "closing overlay", warnings)

        try:
            data_url = to_png_data_url(canvas.convert("RGB"))
        except Exception as e:
            logger.error("PNG export failed for %s: %s", image_url, e, exc_info=True)
            return self._placeholder(image_url, target_size, f"Export failed: {e}")

        return ComposedImage(data_url=data_url, source_failed=False, warnings=warnings)

    def _compose_base(
        self,
        image_url: str,
        edit_state: ImageEditState | None,
        target_size: tuple[int, int],
    ) -> Image.Image:
        """Load the source and draw its crop over a white canvas."""
        # White base so transparent sources don't leave holes
        canvas = Image.new("RGBA", target_size, (255, 255, 255, 255))

        sharpness = edit_state.sharpness if edit_state else None
        loaded = self.loader.load(image_url, sharpness=sharpness)
        source = loaded.bitmap.to_image()

        area = self._source_rect(edit_state, source.size)
        return draw_source_region(canvas, source, area)

    @staticmethod
    def _source_rect(
        edit_state: ImageEditState | None, source_size: tuple[int, int]
    ) -> CropArea:
        if edit_state is not None and edit_state.cropped_area_pixels is not None:
            return edit_state.cropped_area_pixels
        return default_crop(*source_size)

    def _apply_overlay(
        self,
        canvas: Image.Image,
        overlay_url: str,
        label: str,
        warnings: list[str],
    ) -> None:
        """Draw a full-canvas overlay; failures are logged and skipped."""
        try:
            overlay = self.loader.load(overlay_url).bitmap.to_image()
            overlay = high_quality_resize(overlay, canvas.size)
            canvas.alpha_composite(overlay)
        except Exception as e:
            logger.error("Failed to load/draw %s (%s): %s", label, overlay_url, e)
            warnings.append(f"Could not apply {label}: {e}")

    @staticmethod
    def _placeholder(image_url: str, target_size: tuple[int, int], reason: str) -> ComposedImage:
        placeholder = render_error_placeholder(image_url, target_size)
        return ComposedImage(
            data_url=to_png_data_url(placeholder),
            source_failed=True,
            warnings=[reason],
        )
