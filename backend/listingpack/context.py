"""Explicit runtime context for the image pipeline.

Every network-touching component receives a PipelineContext instead of
reaching for module-level clients or credentials, so tests can swap in an
httpx.MockTransport and a stub mirror key.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import httpx

from .config import Config
from .constants import (
    CLOSING_OVERLAY_URL,
    MIRROR_CDN_BASE,
    MIRROR_UPLOAD_BASE,
    PROBLEMATIC_CDN_HOSTS,
)
from .loader import BaseDecoder, get_decoder

logger = logging.getLogger("listingpack.context")


@dataclass
class MirrorSettings:
    """Connection details for the content-addressed mirror service."""
    public_key: str = ""
    upload_base: str = MIRROR_UPLOAD_BASE
    cdn_base: str = MIRROR_CDN_BASE
    store: str = "auto"
    poll_interval: float = Config.MIRROR_POLL_INTERVAL_SECONDS
    max_polls: int = Config.MIRROR_MAX_POLLS


def build_http_client(
    timeout: float = Config.FETCH_TIMEOUT_SECONDS,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Credential-less client; redirects are followed as a browser would."""
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        transport=transport,
    )


@dataclass
class PipelineContext:
    http_client: httpx.Client
    mirror: MirrorSettings = field(default_factory=MirrorSettings)
    problematic_hosts: tuple[str, ...] = PROBLEMATIC_CDN_HOSTS
    closing_overlay_url: str = CLOSING_OVERLAY_URL
    decoder: BaseDecoder = field(default_factory=get_decoder)

    @classmethod
    def from_env(cls, transport: httpx.BaseTransport | None = None) -> PipelineContext:
        """Build a context from LISTINGPACK_* environment variables."""
        timeout = float(os.environ.get("LISTINGPACK_FETCH_TIMEOUT", Config.FETCH_TIMEOUT_SECONDS))
        public_key = os.environ.get("LISTINGPACK_UPLOADCARE_PUBLIC_KEY", "")
        decoder_name = os.environ.get("LISTINGPACK_DECODER", Config.DECODER_BACKEND)

        if not public_key:
            logger.warning(
                "LISTINGPACK_UPLOADCARE_PUBLIC_KEY is not set; proxied and sharpened loads will fail"
            )

        return cls(
            http_client=build_http_client(timeout, transport),
            mirror=MirrorSettings(public_key=public_key),
            decoder=get_decoder(decoder_name),
        )

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> PipelineContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
