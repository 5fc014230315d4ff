"""Custom exception hierarchy for ListingPack."""

from __future__ import annotations


class ListingPackError(Exception):
    """Base exception for all ListingPack errors."""


class ImageLoadError(ListingPackError):
    """Raised when a remote image cannot be fetched or decoded."""

    def __init__(self, original_url: str, resolved_url: str, cause: str) -> None:
        self.original_url = original_url
        self.resolved_url = resolved_url
        self.cause = cause
        message = f"Image load failed for {resolved_url}"
        if resolved_url != original_url:
            message += f" (original URL: {original_url})"
        super().__init__(f"{message}: {cause}")


class DecodeError(ImageLoadError):
    """Raised when fetched bytes are not a decodable image."""


class ProxyError(ListingPackError):
    """Raised when the mirror service fails to take in a URL."""

    def __init__(self, original_url: str, cause: str) -> None:
        self.original_url = original_url
        self.cause = cause
        super().__init__(f"Mirror service failed to process URL {original_url}: {cause}")


class PixelAccessError(ListingPackError):
    """Raised when a bitmap has known dimensions but its pixels can't be read."""


class CompositionFailure(ListingPackError):
    """Raised inside the composition engine when the base image can't be drawn."""


class AutoAdjustUnavailableError(ListingPackError):
    """Raised when auto-adjust is requested for an image with unknown dimensions."""


class ValidationError(ListingPackError):
    """Raised when input validation fails."""
