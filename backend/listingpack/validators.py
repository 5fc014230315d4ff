"""Input validation for ListingPack."""

from __future__ import annotations

from collections.abc import Sequence

from .config import Config
from .exceptions import ValidationError
from .models import BrandingOverlay, CropArea


def validate_dimensions(width: int, height: int) -> None:
    """Validate target dimensions.

    Args:
        width: Target width in pixels.
        height: Target height in pixels.

    Raises:
        ValidationError: If dimensions are invalid.
    """
    if not isinstance(width, int | float) or not isinstance(height, int | float):
        raise ValidationError(
            f"Dimensions must be numbers, got {type(width).__name__} and {type(height).__name__}"
        )

    width = int(width)
    height = int(height)

    if width <= 0 or height <= 0:
        raise ValidationError(f"Dimensions must be positive, got {width}x{height}")
    if width > Config.MAX_IMAGE_SIZE or height > Config.MAX_IMAGE_SIZE:
        raise ValidationError(
            f"Dimensions exceed maximum {Config.MAX_IMAGE_SIZE}, got {width}x{height}"
        )
    if width < Config.MIN_IMAGE_SIZE or height < Config.MIN_IMAGE_SIZE:
        raise ValidationError(
            f"Dimensions below minimum {Config.MIN_IMAGE_SIZE}, got {width}x{height}"
        )


def validate_sharpness(value: int | None) -> None:
    """Validate a sharpening strength (None means no sharpening).

    Raises:
        ValidationError: If the value is not an integer in 0..MAX_SHARPNESS.
    """
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Sharpness must be an integer, got {type(value).__name__}")
    if not 0 <= value <= Config.MAX_SHARPNESS:
        raise ValidationError(
            f"Sharpness must be between 0 and {Config.MAX_SHARPNESS}, got {value}"
        )


def validate_crop_area(area: CropArea) -> None:
    """Validate a crop rectangle has a drawable size."""
    if area.width <= 0 or area.height <= 0:
        raise ValidationError(
            f"Crop area must have a positive size, got {area.width}x{area.height}"
        )


def validate_package_request(
    urls: Sequence[str], branding: BrandingOverlay | None
) -> None:
    """Caller-level checks before a package is generated.

    Raises:
        ValidationError: If no image or no branding is selected.
    """
    if not urls:
        raise ValidationError("Please select at least one image.")
    if len(urls) > Config.MAX_IMAGE_SELECTIONS:
        raise ValidationError(
            f"At most {Config.MAX_IMAGE_SELECTIONS} images can be selected, got {len(urls)}"
        )
    if branding is None or branding.overlay_url is None:
        raise ValidationError("Branding is required. Please select an Agent or a Team.")
