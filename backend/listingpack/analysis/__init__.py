"""Pre-flight photo analysis for ListingPack."""

from .analyzer import ImageAnalyzer
from .strips import StripDetectionSettings, StripReport, is_low_resolution, measure_strips

__all__ = [
    "ImageAnalyzer",
    "StripDetectionSettings",
    "StripReport",
    "is_low_resolution",
    "measure_strips",
]
