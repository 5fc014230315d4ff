"""Tests for strip detection, low-resolution detection and the analyzer."""

import pytest
from PIL import Image

from backend.listingpack.analysis import (
    ImageAnalyzer,
    StripDetectionSettings,
    is_low_resolution,
    measure_strips,
)
from backend.listingpack.analysis.strips import check_row_count
from backend.listingpack.loader import RemoteImageLoader
from backend.listingpack.loader.pillow_decoder import PillowBitmap
from backend.listingpack.loader.remote import LoadedImage
from backend.listingpack.models import ImageAnalysisResult

SETTINGS = StripDetectionSettings()


def _bitmap(image: Image.Image) -> PillowBitmap:
    return PillowBitmap(image.size, image.convert("RGBA"))


class StubLoader:
    """Loader double returning canned results or raising per URL."""

    def __init__(self, results: dict):
        self.results = results

    def load(self, url, sharpness=None):
        result = self.results[url]
        if isinstance(result, Exception):
            raise result
        return result


class TestStripDetection:
    def test_ten_percent_bands_flagged(self, banded_image):
        report = measure_strips(_bitmap(banded_image()), SETTINGS)
        assert report.top_rows == 20
        assert report.bottom_rows == 20
        assert report.is_significant(SETTINGS) is True

    def test_two_percent_bands_not_flagged(self, banded_image):
        report = measure_strips(_bitmap(banded_image(top=0.02, bottom=0.02)), SETTINGS)
        assert report.top_rows == 4
        assert report.bottom_rows == 4
        assert report.combined_ratio == pytest.approx(0.04)
        assert report.is_significant(SETTINGS) is False

    def test_single_edge_band_counts(self, banded_image):
        report = measure_strips(_bitmap(banded_image(top=0.06, bottom=0.0)), SETTINGS)
        assert report.bottom_rows == 0
        assert report.is_significant(SETTINGS) is True

    def test_no_bands(self, banded_image):
        report = measure_strips(_bitmap(banded_image(top=0.0, bottom=0.0)), SETTINGS)
        assert (report.top_rows, report.bottom_rows) == (0, 0)
        assert report.is_significant(SETTINGS) is False

    def test_walk_stops_at_check_row_limit(self, banded_image):
        # 30% bands, but only 10% of rows are inspected per edge
        report = measure_strips(_bitmap(banded_image(top=0.3, bottom=0.3)), SETTINGS)
        assert report.top_rows == check_row_count(200, SETTINGS) == 20

    def test_minimum_check_rows(self):
        assert check_row_count(20, SETTINGS) == 5
        assert check_row_count(1000, SETTINGS) == 100

    def test_one_dark_sample_point_still_white(self, banded_image):
        img = banded_image()
        img.paste((0, 0, 0, 255), (50, 0, 51, 200))  # column at the 50% sample point
        assert measure_strips(_bitmap(img), SETTINGS).is_significant(SETTINGS) is True

    def test_two_dark_sample_points_break_row(self, banded_image):
        img = banded_image()
        img.paste((0, 0, 0, 255), (10, 0, 11, 200))
        img.paste((0, 0, 0, 255), (30, 0, 31, 200))
        report = measure_strips(_bitmap(img), SETTINGS)
        assert (report.top_rows, report.bottom_rows) == (0, 0)

    def test_near_white_threshold(self, banded_image):
        assert measure_strips(
            _bitmap(banded_image(band_color=(240, 240, 240, 255))), SETTINGS
        ).top_rows == 20
        assert measure_strips(
            _bitmap(banded_image(band_color=(239, 250, 250, 255))), SETTINGS
        ).top_rows == 0

    def test_transparent_bands_ignored(self, banded_image):
        report = measure_strips(_bitmap(banded_image(band_color=(255, 255, 255, 100))), SETTINGS)
        assert report.is_significant(SETTINGS) is False

    def test_threshold_is_configurable(self, banded_image):
        strict = StripDetectionSettings(significant_percent=0.25)
        report = measure_strips(_bitmap(banded_image()), strict)
        assert report.is_significant(strict) is False


class TestLowResolution:
    def test_800_is_low(self):
        assert is_low_resolution(800, 800) is True

    def test_900_is_fine(self):
        assert is_low_resolution(900, 900) is False

    def test_boundary_is_fine(self):
        assert is_low_resolution(864, 864) is False

    def test_either_side_counts(self):
        assert is_low_resolution(2000, 800) is True

    def test_custom_target(self):
        assert is_low_resolution(500, 500, target_dimension=600) is False


class TestImageAnalyzer:
    URL = "https://photos.example.com/house.png"

    def test_clean_large_photo(self, context, remote, banded_image):
        remote.add_image(self.URL, banded_image(1200, 1000, top=0.0, bottom=0.0))
        result = ImageAnalyzer(RemoteImageLoader(context)).analyze(self.URL)
        assert result == ImageAnalysisResult(False, False, 1200, 1000)

    def test_letterboxed_low_res_photo(self, context, remote, banded_image):
        remote.add_image(self.URL, banded_image(800, 800))
        result = ImageAnalyzer(RemoteImageLoader(context)).analyze(self.URL)
        assert result.has_significant_strips is True
        assert result.is_potentially_low_resolution is True
        assert (result.natural_width, result.natural_height) == (800, 800)

    def test_analysis_is_repeatable(self, context, remote, banded_image):
        remote.add_image(self.URL, banded_image(900, 900, top=0.03, bottom=0.03))
        analyzer = ImageAnalyzer(RemoteImageLoader(context))
        assert analyzer.analyze(self.URL) == analyzer.analyze(self.URL)

    def test_unreachable_is_indeterminate(self, context):
        result = ImageAnalyzer(RemoteImageLoader(context)).analyze(self.URL)
        assert result == ImageAnalysisResult()
        assert result.is_indeterminate

    def test_mirror_failure_flags_strips(self, context):
        url = "https://ddfcdn.realtor.ca/listing/refused.jpg"
        result = ImageAnalyzer(RemoteImageLoader(context)).analyze(url)
        assert result.has_significant_strips is True
        assert result.is_potentially_low_resolution is None
        assert not result.has_dimensions

    def test_unreadable_pixels_flag_strips_keep_dimensions(self, context, remote, truncated_jpeg):
        remote.add_bytes(self.URL, truncated_jpeg)
        result = ImageAnalyzer(RemoteImageLoader(context)).analyze(self.URL)
        assert result.has_significant_strips is True
        assert result.is_potentially_low_resolution is True
        assert (result.natural_width, result.natural_height) == (400, 300)

    def test_zero_dimensions(self):
        bitmap = PillowBitmap((0, 0), None)
        loader = StubLoader({self.URL: LoadedImage(self.URL, self.URL, bitmap)})
        result = ImageAnalyzer(loader).analyze(self.URL)
        assert result == ImageAnalysisResult(False, False, 0, 0)

    def test_custom_settings_are_used(self, context, remote, banded_image):
        remote.add_image(self.URL, banded_image(1200, 1200))
        analyzer = ImageAnalyzer(
            RemoteImageLoader(context),
            settings=StripDetectionSettings(significant_percent=0.5),
            target_dimension=2000,
        )
        result = analyzer.analyze(self.URL)
        assert result.has_significant_strips is False
        assert result.is_potentially_low_resolution is True

    def test_analyze_all_survives_unexpected_errors(self, banded_image):
        good = "https://photos.example.com/good.png"
        bad = "https://photos.example.com/bad.png"
        bitmap = _bitmap(banded_image(1080, 1080, top=0.0, bottom=0.0))
        loader = StubLoader({
            bad: RuntimeError("boom"),
            good: LoadedImage(good, good, bitmap),
        })

        results = ImageAnalyzer(loader).analyze_all([bad, good])
        assert list(results) == [bad, good]
        assert results[bad].is_indeterminate
        assert results[good] == ImageAnalysisResult(False, False, 1080, 1080)
