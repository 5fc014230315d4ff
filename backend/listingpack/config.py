"""Global configuration for ListingPack."""

from __future__ import annotations

from PIL import Image


class Config:
    """Global configuration."""

    # Output
    TARGET_DIMENSION = 1080
    MAX_IMAGE_SIZE = 4096
    MIN_IMAGE_SIZE = 10
    MAX_IMAGE_SELECTIONS = 10

    # Low resolution detection
    LOW_RESOLUTION_FACTOR = 0.8  # Flag if either side < 80% of target

    # Strip detection
    WHITE_THRESHOLD = 240
    ALPHA_THRESHOLD = 128
    STRIP_ROW_PIXEL_PERCENT = 0.8  # Share of sample points that must be white
    CHECK_ROW_PERCENT = 0.10
    MIN_CHECK_ROWS = 5
    SIGNIFICANT_STRIP_PERCENT = 0.05  # Combined top + bottom height
    SAMPLE_POINTS_X_RATIOS = (0.1, 0.3, 0.5, 0.7, 0.9)

    # Cropping
    AUTO_ADJUST_ZOOM = 1.17
    MAX_SHARPNESS = 20

    # Quality
    RESIZE_QUALITY = Image.Resampling.LANCZOS
    GAMMA = 2.2

    # Network
    FETCH_TIMEOUT_SECONDS = 30.0
    MIRROR_POLL_INTERVAL_SECONDS = 0.5
    MIRROR_MAX_POLLS = 60

    # Decoding
    DECODER_BACKEND = "pillow"
