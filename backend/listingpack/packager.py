"""Package orchestrator: sequences composition over the selected photos."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .composition import CompositionEngine
from .composition.engine import DEFAULT_TARGET
from .context import PipelineContext
from .loader import RemoteImageLoader
from .models import (
    BrandingOverlay,
    ImageAnalysisResult,
    ImageEditState,
    OverlaySet,
    PackageResult,
)
from .validators import validate_dimensions

logger = logging.getLogger("listingpack.packager")


class PackageOrchestrator:
    """Turn an ordered photo selection into a branded image package.

    Photos are composed one at a time, in order. Branding goes on the first
    image and the closing overlay on the last. A failed photo yields a
    placeholder at its index; processing always continues.
    """

    def __init__(
        self,
        context: PipelineContext,
        compositor: CompositionEngine | None = None,
    ) -> None:
        self.context = context
        self.loader = RemoteImageLoader(context)
        self.compositor = compositor or CompositionEngine(self.loader)

    def overlays_for(
        self, index: int, total: int, branding: BrandingOverlay | None
    ) -> OverlaySet:
        """Overlays that apply at a given position in the selection."""
        return OverlaySet(
            branding=branding if index == 0 else None,
            closing_overlay_url=self.context.closing_overlay_url if index == total - 1 else None,
        )

    def generate_package(
        self,
        ordered_urls: Sequence[str],
        edit_states: Mapping[str, ImageEditState] | None = None,
        overlay: BrandingOverlay | None = None,
        target_size: tuple[int, int] = DEFAULT_TARGET,
    ) -> PackageResult:
        """Compose every selected photo.

        Args:
            ordered_urls: Selected photo URLs in package order.
            edit_states: Per-URL edit state; missing entries use the default crop.
            overlay: Branding for the first image.
            target_size: Output (width, height) of every image.

        Returns:
            PackageResult, index-aligned with ``ordered_urls``.

        Raises:
            ValidationError: If ``target_size`` is not a drawable size. This is
                checked before any image is processed.
        """
        validate_dimensions(*target_size)
        edit_states = edit_states or {}
        result = PackageResult()
        total = len(ordered_urls)

        logger.info("Generating package of %d image(s) at %dx%d", total, *target_size)

        for index, url in enumerate(ordered_urls):
            edit_state = edit_states.get(url)
            composed = self.compositor.compose(
                url,
                edit_state,
                self.overlays_for(index, total, overlay),
                target_size,
            )
            result.successful_images.append(composed.data_url)

            for warning in composed.warnings:
                logger.warning("Image %d (%s): %s", index + 1, url, warning)

            if composed.source_failed:
                result.failed_image_original_urls.append(url)
                result.image_analysis[url] = ImageAnalysisResult()
            else:
                # A confirmed crop means strips were dealt with; resolution is not re-checked
                result.image_analysis[url] = ImageAnalysisResult(
                    has_significant_strips=False
                    if edit_state is not None and edit_state.has_confirmed_crop
                    else None,
                )

        if result.has_failures:
            logger.warning(result.failure_message())
        else:
            logger.info("Package complete: %d image(s)", total)

        return result
