"""Data structures for ListingPack."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .enums import BrandingKind


@dataclass
class Point:
    """Crop-editor pan offset."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CropArea:
    """Crop rectangle in source-image pixel coordinates.

    Coordinates may be fractional; width and height are expected to be
    equal for square output but this is not enforced here.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_box(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.x2, self.y2)


@dataclass
class ImageEditState:
    """Per-image edit state produced by the crop editor or auto-adjust.

    ``cropped_area_pixels`` of None means no crop has been confirmed yet and
    the default center square is used.
    """
    crop: Point = field(default_factory=Point)
    zoom: float = 1.0
    cropped_area_pixels: CropArea | None = None
    sharpness: int | None = None  # 0-20, None = no sharpening
    auto_adjusted: bool = False

    @property
    def has_confirmed_crop(self) -> bool:
        return self.cropped_area_pixels is not None


@dataclass
class ImageAnalysisResult:
    """Pre-flight verdict for one photo.

    None in any field means "not run yet" or "indeterminate", which is
    distinct from False ("checked, not flagged").
    """
    has_significant_strips: bool | None = None
    is_potentially_low_resolution: bool | None = None
    natural_width: int | None = None
    natural_height: int | None = None

    @property
    def is_indeterminate(self) -> bool:
        return self.has_significant_strips is None and self.is_potentially_low_resolution is None

    @property
    def has_dimensions(self) -> bool:
        return self.natural_width is not None and self.natural_height is not None

    def mark_handled(self) -> ImageAnalysisResult:
        """Clear both warning flags once the user has dealt with the image."""
        return replace(self, has_significant_strips=False, is_potentially_low_resolution=False)

    def to_dict(self) -> dict:
        return {
            "hasSignificantStrips": self.has_significant_strips,
            "isPotentiallyLowResolution": self.is_potentially_low_resolution,
            "naturalWidth": self.natural_width,
            "naturalHeight": self.natural_height,
        }


@dataclass
class Agent:
    id: str
    name: str
    overlay_image: str  # URL of a full-canvas transparent overlay


@dataclass
class Team:
    id: str
    name: str
    overlay_logo: str


@dataclass
class BrandingOverlay:
    """Branding for the first image. Agent wins when both are set."""
    agent: Agent | None = None
    team: Team | None = None

    @property
    def kind(self) -> BrandingKind | None:
        if self.agent is not None and self.agent.overlay_image:
            return BrandingKind.AGENT
        if self.team is not None and self.team.overlay_logo:
            return BrandingKind.TEAM
        return None

    @property
    def overlay_url(self) -> str | None:
        kind = self.kind
        if kind == BrandingKind.AGENT:
            return self.agent.overlay_image
        if kind == BrandingKind.TEAM:
            return self.team.overlay_logo
        return None


@dataclass
class OverlaySet:
    """Position-dependent overlays for a single compose call."""
    branding: BrandingOverlay | None = None  # first position only
    closing_overlay_url: str | None = None  # last position only


@dataclass
class ComposedImage:
    """Output of one composition: the PNG plus what went wrong, if anything."""
    data_url: str
    source_failed: bool = False
    warnings: list[str] = field(default_factory=list)


@dataclass
class PackageResult:
    """Aggregate result of one package generation.

    ``successful_images`` is index-aligned with the input selection; failed
    sources are represented by an error placeholder, never dropped.
    """
    successful_images: list[str] = field(default_factory=list)
    failed_image_original_urls: list[str] = field(default_factory=list)
    image_analysis: dict[str, ImageAnalysisResult] = field(default_factory=dict)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_image_original_urls)

    def failure_message(self) -> str | None:
        count = len(self.failed_image_original_urls)
        if not count:
            return None
        plural = "" if count == 1 else "s"
        return f"Warning: {count} image{plural} could not be processed. Placeholders used."
