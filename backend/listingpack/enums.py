"""Enumerations shared across ListingPack."""

from __future__ import annotations

from enum import Enum


class BrandingKind(Enum):
    """Which branding overlay is drawn on the first image."""
    AGENT = "agent"
    TEAM = "team"


class ImageStatus(Enum):
    """Review state of one gallery photo, as shown next to its thumbnail."""
    OK = ""
    AUTO_ADJUSTED = "Auto-Adjusted"
    EDITED = "Edited"
    SHAPE_AND_LOW_RES = "Shape & Low Res?"
    SHAPE = "Adjust Shape"
    LOW_RES = "Low Res?"

    @property
    def label(self) -> str:
        return self.value

    @property
    def needs_review(self) -> bool:
        return self in (ImageStatus.SHAPE_AND_LOW_RES, ImageStatus.SHAPE, ImageStatus.LOW_RES)
