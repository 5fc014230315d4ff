"""Remote image loading with optional mirror proxying."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

from ..exceptions import DecodeError, ImageLoadError
from .base_decoder import Bitmap
from .proxy import CdnProxyResolver, canonical_base_url, uuid_from_url, with_sharpen

if TYPE_CHECKING:
    from ..context import PipelineContext

logger = logging.getLogger("listingpack.loader.remote")


@dataclass
class LoadedImage:
    """A decoded remote image and the URL it was actually fetched from."""
    original_url: str
    resolved_url: str
    bitmap: Bitmap

    @property
    def natural_width(self) -> int:
        return self.bitmap.width

    @property
    def natural_height(self) -> int:
        return self.bitmap.height


class RemoteImageLoader:
    """Fetch and decode images by URL.

    Routing:
    1. URLs already on the mirror CDN are rebuilt from their file id.
    2. Problematic hosts, or any non-zero sharpening, go through the
       CdnProxyResolver first.
    3. Everything else is fetched directly.

    There is no retry; ProxyError and ImageLoadError go to the caller.
    """

    def __init__(
        self,
        context: PipelineContext,
        resolver: CdnProxyResolver | None = None,
    ) -> None:
        self.context = context
        self.resolver = resolver or CdnProxyResolver(context)

    def is_problematic_host(self, url: str) -> bool:
        host = (urlparse(url).hostname or "").lower()
        return any(host == h or host.endswith("." + h) for h in self.context.problematic_hosts)

    def resolve_url(self, url: str, sharpness: int | None = None) -> str:
        """Work out which URL to fetch.

        Raises:
            ProxyError: If mirroring is required and fails.
        """
        base_url: str | None = None
        uuid = uuid_from_url(url)
        if uuid:
            base_url = canonical_base_url(uuid, self.context.mirror.cdn_base)

        wants_sharpen = bool(sharpness and sharpness > 0)
        if base_url is None and (wants_sharpen or self.is_problematic_host(url)):
            base_url = self.resolver.resolve(url)

        if base_url is None:
            return url
        return with_sharpen(base_url, sharpness)

    def load(self, url: str, sharpness: int | None = None) -> LoadedImage:
        """Fetch and decode an image.

        Args:
            url: Source image URL.
            sharpness: Optional server-side sharpen strength (0-20).

        Returns:
            LoadedImage with the decoded bitmap.

        Raises:
            ProxyError: If mirror resolution fails.
            ImageLoadError: On network, HTTP status, or decode failure.
        """
        resolved_url = self.resolve_url(url, sharpness)
        if resolved_url != url:
            logger.debug("Loading %s via %s", url, resolved_url)

        data = self._fetch(url, resolved_url)

        try:
            bitmap = self.context.decoder.decode(data, source=resolved_url)
        except DecodeError as e:
            raise DecodeError(url, resolved_url, e.cause) from e

        return LoadedImage(original_url=url, resolved_url=resolved_url, bitmap=bitmap)

    def _fetch(self, original_url: str, resolved_url: str) -> bytes:
        try:
            response = self.context.http_client.get(resolved_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageLoadError(
                original_url, resolved_url,
                f"server rejected the request with HTTP {e.response.status_code}",
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ImageLoadError(
                original_url, resolved_url, f"network error: {e.__class__.__name__}: {e}"
            ) from e

        if not response.content:
            raise DecodeError(original_url, resolved_url, "empty response body")
        return response.content
