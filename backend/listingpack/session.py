"""Per-listing edit session: photos, selection, edits and analysis."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .analysis import ImageAnalyzer
from .composition import auto_adjust_edit_state
from .config import Config
from .constants import IMAGE_URL_PATTERN
from .enums import ImageStatus
from .models import CropArea, ImageAnalysisResult, ImageEditState, Point
from .validators import validate_crop_area, validate_sharpness

logger = logging.getLogger("listingpack.session")


def gallery_urls(photo_gallery: str | Sequence[str]) -> list[str]:
    """Image URLs from a space-separated gallery string (or a list)."""
    parts = photo_gallery.split() if isinstance(photo_gallery, str) else photo_gallery
    return [u.strip() for u in parts if u.strip() and IMAGE_URL_PATTERN.search(u.strip())]


def image_status(
    analysis: ImageAnalysisResult | None, edit_state: ImageEditState | None
) -> ImageStatus:
    """Gallery tag for a photo.

    Warnings only apply while no crop has been confirmed.
    """
    if edit_state is not None and edit_state.auto_adjusted:
        return ImageStatus.AUTO_ADJUSTED
    if edit_state is not None and edit_state.has_confirmed_crop:
        return ImageStatus.EDITED

    shape = analysis is not None and analysis.has_significant_strips is True
    low_res = analysis is not None and analysis.is_potentially_low_resolution is True
    if shape and low_res:
        return ImageStatus.SHAPE_AND_LOW_RES
    if shape:
        return ImageStatus.SHAPE
    if low_res:
        return ImageStatus.LOW_RES
    return ImageStatus.OK


class EditSession:
    """State for one listing search.

    Holds the gallery photos, the ordered selection (first = branded),
    per-photo edit states and pre-flight analyses. ``start`` wipes all of
    it for a fresh search.
    """

    def __init__(
        self,
        analyzer: ImageAnalyzer | None = None,
        max_selections: int = Config.MAX_IMAGE_SELECTIONS,
    ) -> None:
        self.analyzer = analyzer
        self.max_selections = max_selections
        self.photos: list[str] = []
        self.selected: list[str] = []
        self.edit_states: dict[str, ImageEditState] = {}
        self.analyses: dict[str, ImageAnalysisResult] = {}

    def start(self, photo_gallery: str | Sequence[str]) -> list[str]:
        """Begin a fresh search over a listing's photo gallery."""
        self.photos = gallery_urls(photo_gallery)
        self.selected = []
        self.edit_states = {}
        self.analyses = {}
        logger.info("Session started with %d photo(s)", len(self.photos))
        return self.photos

    def run_analysis(self) -> dict[str, ImageAnalysisResult]:
        """Pre-flight scan of every gallery photo.

        Photos that already have a confirmed edit keep their handled result;
        only ``start`` clears those.
        """
        if self.analyzer is None:
            raise RuntimeError("No analyzer configured for this session")
        pending = [url for url in self.photos if url not in self.edit_states]
        for url, result in self.analyzer.analyze_all(pending).items():
            self.record_analysis(url, result)
        return self.analyses

    def record_analysis(self, url: str, result: ImageAnalysisResult) -> None:
        self.analyses[url] = result

    def toggle_selection(self, url: str) -> bool:
        """Select or deselect a photo. Returns whether it is now selected.

        Selecting beyond ``max_selections`` is ignored.
        """
        if url in self.selected:
            self.selected.remove(url)
            return False
        if len(self.selected) < self.max_selections:
            self.selected.append(url)
            return True
        return False

    def sync_selection(self, checked: Sequence[str] | None) -> list[str]:
        """Bring the ordered selection in line with a set of checked photos.

        Unchecked photos are dropped, newly checked ones are appended in the
        order given, and the cap still applies. Click order survives, so the
        first photo picked stays first (branded).
        """
        checked = list(checked or [])
        for url in list(self.selected):
            if url not in checked:
                self.toggle_selection(url)
        for url in checked:
            if url not in self.selected:
                self.toggle_selection(url)
        return list(self.selected)

    def save_edit(
        self,
        url: str,
        crop: Point,
        zoom: float,
        cropped_area_pixels: CropArea,
        sharpness: int | None = None,
        auto_adjusted: bool = False,
    ) -> ImageEditState:
        """Store a confirmed edit and clear the photo's warning flags.

        Raises:
            ValidationError: If sharpness or the crop area is invalid.
        """
        validate_sharpness(sharpness)
        validate_crop_area(cropped_area_pixels)

        state = ImageEditState(
            crop=crop,
            zoom=zoom,
            cropped_area_pixels=cropped_area_pixels,
            sharpness=sharpness or None,  # 0 means no sharpening
            auto_adjusted=auto_adjusted,
        )
        self.edit_states[url] = state
        self.analyses[url] = (self.analyses.get(url) or ImageAnalysisResult()).mark_handled()
        return state

    def auto_adjust(self, url: str) -> ImageEditState:
        """Apply the automatic square crop using recorded dimensions.

        Raises:
            AutoAdjustUnavailableError: If no dimensions are known for ``url``.
        """
        state = auto_adjust_edit_state(self.analyses.get(url))
        return self.save_edit(
            url,
            state.crop,
            state.zoom,
            state.cropped_area_pixels,
            sharpness=None,
            auto_adjusted=True,
        )

    def status(self, url: str) -> ImageStatus:
        return image_status(self.analyses.get(url), self.edit_states.get(url))
