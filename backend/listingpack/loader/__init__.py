"""Image loading and decoding for ListingPack."""

from __future__ import annotations

from ..exceptions import ValidationError
from .base_decoder import BaseDecoder, Bitmap
from .opencv_decoder import OpenCVDecoder
from .pillow_decoder import PillowDecoder
from .proxy import CdnProxyResolver
from .remote import LoadedImage, RemoteImageLoader

_DECODERS: dict[str, type[BaseDecoder]] = {
    PillowDecoder.name: PillowDecoder,
    OpenCVDecoder.name: OpenCVDecoder,
}


def get_decoder(name: str = "pillow") -> BaseDecoder:
    """Get a decoder backend by name.

    Args:
        name: Backend name ("pillow" or "opencv").

    Returns:
        A decoder instance.

    Raises:
        ValidationError: If the backend is unknown.
    """
    try:
        return _DECODERS[name.lower()]()
    except KeyError:
        raise ValidationError(
            f"Unknown decoder '{name}'. Supported: {', '.join(_DECODERS)}"
        ) from None


__all__ = [
    "get_decoder",
    "BaseDecoder",
    "Bitmap",
    "PillowDecoder",
    "OpenCVDecoder",
    "CdnProxyResolver",
    "LoadedImage",
    "RemoteImageLoader",
]
