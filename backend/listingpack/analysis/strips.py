"""Letterbox strip and low-resolution detection over a decoded bitmap."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import Config
from ..loader.base_decoder import Bitmap


@dataclass(frozen=True)
class StripDetectionSettings:
    """Tuning knobs for strip detection. Defaults come from Config."""
    white_threshold: int = Config.WHITE_THRESHOLD
    alpha_threshold: int = Config.ALPHA_THRESHOLD
    row_pixel_percent: float = Config.STRIP_ROW_PIXEL_PERCENT
    check_row_percent: float = Config.CHECK_ROW_PERCENT
    min_check_rows: int = Config.MIN_CHECK_ROWS
    significant_percent: float = Config.SIGNIFICANT_STRIP_PERCENT
    sample_x_ratios: tuple[float, ...] = Config.SAMPLE_POINTS_X_RATIOS


@dataclass
class StripReport:
    """Consecutive white rows found walking inward from each edge."""
    top_rows: int
    bottom_rows: int
    height: int

    @property
    def combined_ratio(self) -> float:
        if self.height <= 0:
            return 0.0
        return (self.top_rows + self.bottom_rows) / self.height

    def is_significant(self, settings: StripDetectionSettings) -> bool:
        if self.top_rows == 0 and self.bottom_rows == 0:
            return False
        return self.combined_ratio >= settings.significant_percent


def check_row_count(height: int, settings: StripDetectionSettings) -> int:
    """Rows inspected per edge: a fixed share of height, with a floor."""
    return max(settings.min_check_rows, math.floor(height * settings.check_row_percent))


def sample_columns(width: int, settings: StripDetectionSettings) -> list[int]:
    return [max(0, min(width - 1, math.floor(width * r))) for r in settings.sample_x_ratios]


def is_white_row(
    bitmap: Bitmap, y: int, columns: list[int], settings: StripDetectionSettings
) -> bool:
    white = 0
    for x in columns:
        r, g, b, a = bitmap.get_pixel(x, y)
        if (
            r >= settings.white_threshold
            and g >= settings.white_threshold
            and b >= settings.white_threshold
            and a >= settings.alpha_threshold
        ):
            white += 1
    return white / len(columns) >= settings.row_pixel_percent


def measure_strips(bitmap: Bitmap, settings: StripDetectionSettings) -> StripReport:
    """Count white rows from the top and bottom edges.

    Each walk stops at the first non-white row or after check_row_count rows.

    Raises:
        PixelAccessError: If the bitmap's pixels can't be read.
    """
    width, height = bitmap.width, bitmap.height
    limit = min(check_row_count(height, settings), height)
    columns = sample_columns(width, settings)

    top = 0
    for y in range(limit):
        if not is_white_row(bitmap, y, columns, settings):
            break
        top += 1

    bottom = 0
    for y in range(height - 1, height - 1 - limit, -1):
        if not is_white_row(bitmap, y, columns, settings):
            break
        bottom += 1

    return StripReport(top_rows=top, bottom_rows=bottom, height=height)


def is_low_resolution(
    width: int,
    height: int,
    target_dimension: int = Config.TARGET_DIMENSION,
    factor: float = Config.LOW_RESOLUTION_FACTOR,
) -> bool:
    """True when either side is below ``factor`` of the target dimension."""
    threshold = target_dimension * factor
    return width < threshold or height < threshold
