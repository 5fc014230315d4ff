"""Pre-flight analysis of listing photos."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..config import Config
from ..exceptions import ImageLoadError, PixelAccessError, ProxyError
from ..loader import RemoteImageLoader
from ..models import ImageAnalysisResult
from .strips import StripDetectionSettings, is_low_resolution, measure_strips

logger = logging.getLogger("listingpack.analysis")


class ImageAnalyzer:
    """Flag letterbox strips and low resolution before the user edits.

    ``analyze`` never raises for load or sampling problems. The failure
    branches are explicit:

    - decode/network failure: everything indeterminate (None)
    - mirror failure: strips flagged, resolution unknown
    - pixels unreadable: strips flagged, dimensions kept
    """

    def __init__(
        self,
        loader: RemoteImageLoader,
        settings: StripDetectionSettings | None = None,
        target_dimension: int = Config.TARGET_DIMENSION,
        low_resolution_factor: float = Config.LOW_RESOLUTION_FACTOR,
    ) -> None:
        self.loader = loader
        self.settings = settings or StripDetectionSettings()
        self.target_dimension = target_dimension
        self.low_resolution_factor = low_resolution_factor

    def analyze(self, url: str) -> ImageAnalysisResult:
        """Analyze one photo.

        Args:
            url: Source image URL.

        Returns:
            ImageAnalysisResult; see class docstring for failure semantics.
        """
        try:
            loaded = self.loader.load(url)
        except ProxyError as e:
            logger.error("Mirror failed for %s, flagging cautiously: %s", url, e)
            return self._proxy_caution()
        except ImageLoadError as e:
            logger.error("Could not load %s for analysis: %s", url, e)
            return self._indeterminate()

        width, height = loaded.natural_width, loaded.natural_height
        if width == 0 or height == 0:
            logger.warning("Image %s decoded with zero dimensions", url)
            return ImageAnalysisResult(
                has_significant_strips=False,
                is_potentially_low_resolution=False,
                natural_width=width,
                natural_height=height,
            )

        low_res = is_low_resolution(
            width, height, self.target_dimension, self.low_resolution_factor
        )
        if low_res:
            logger.info("LowRes FLAGGED: %s (%dx%d)", url, width, height)

        try:
            report = measure_strips(loaded.bitmap, self.settings)
        except PixelAccessError as e:
            logger.warning("Pixel sampling unavailable for %s: %s", url, e)
            return self._pixel_caution(width, height, low_res)
        except Exception as e:
            logger.error("Strip detection failed for %s: %s", url, e, exc_info=True)
            return self._pixel_caution(width, height, low_res)

        strips = report.is_significant(self.settings)
        logger.info(
            "Strips %s: %s (top %d, bottom %d, %.1f%%)",
            "FLAGGED" if strips else "OK",
            url,
            report.top_rows,
            report.bottom_rows,
            report.combined_ratio * 100,
        )

        return ImageAnalysisResult(
            has_significant_strips=strips,
            is_potentially_low_resolution=low_res,
            natural_width=width,
            natural_height=height,
        )

    def analyze_all(self, urls: Iterable[str]) -> dict[str, ImageAnalysisResult]:
        """Sequential bulk pre-scan; one bad photo never stops the rest."""
        results: dict[str, ImageAnalysisResult] = {}
        for url in urls:
            try:
                results[url] = self.analyze(url)
            except Exception as e:
                logger.warning("Failed to analyze %s during scan: %s", url, e, exc_info=True)
                results[url] = self._indeterminate()
        return results

    @staticmethod
    def _indeterminate() -> ImageAnalysisResult:
        return ImageAnalysisResult()

    @staticmethod
    def _proxy_caution() -> ImageAnalysisResult:
        return ImageAnalysisResult(has_significant_strips=True)

    @staticmethod
    def _pixel_caution(width: int, height: int, low_res: bool) -> ImageAnalysisResult:
        return ImageAnalysisResult(
            has_significant_strips=True,
            is_potentially_low_resolution=low_res,
            natural_width=width,
            natural_height=height,
        )
