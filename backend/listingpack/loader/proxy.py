"""CDN proxy resolution through a content-addressed mirror (Uploadcare)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from ..config import Config
from ..constants import MIRROR_CDN_BASE, MIRROR_UUID_PATTERN
from ..exceptions import ProxyError

if TYPE_CHECKING:
    from ..context import PipelineContext

logger = logging.getLogger("listingpack.loader.proxy")


def uuid_from_url(url: str) -> str | None:
    """Return the mirror file identifier embedded in a CDN URL, if any."""
    match = MIRROR_UUID_PATTERN.search(url)
    return match.group(1) if match else None


def canonical_base_url(uuid: str, cdn_base: str = MIRROR_CDN_BASE) -> str:
    return f"{cdn_base.rstrip('/')}/{uuid}/"


def with_sharpen(base_url: str, strength: int | None) -> str:
    """Append a server-side sharpen transform to a canonical URL.

    Strengths outside 1..MAX_SHARPNESS leave the URL untouched.
    """
    if not strength or not 0 < strength <= Config.MAX_SHARPNESS:
        return base_url
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}-/sharp/{strength}/"


class CdnProxyResolver:
    """Mirror an arbitrary URL and return its canonical CDN URL.

    Uses the two-step upload-from-URL API: submit the source URL, then poll
    the returned token until the mirror reports success or error. Nothing is
    cached between calls.
    """

    def __init__(self, context: PipelineContext) -> None:
        self.context = context

    def resolve(self, original_url: str) -> str:
        """Resolve a source URL to a canonical CDN URL.

        Args:
            original_url: URL to mirror.

        Returns:
            Canonical base URL (``https://ucarecdn.com/<uuid>/``).

        Raises:
            ProxyError: If the mirror rejects, fails, or never finishes.
        """
        settings = self.context.mirror
        if not settings.public_key:
            raise ProxyError(original_url, "no mirror public key configured")

        payload = self._request_json(
            original_url,
            "POST",
            f"{settings.upload_base.rstrip('/')}/from_url/",
            data={
                "pub_key": settings.public_key,
                "source_url": original_url,
                "store": settings.store,
            },
        )

        # Already-known content may come back immediately
        if payload.get("type") == "file_info" and payload.get("uuid"):
            uuid = payload["uuid"]
        else:
            token = payload.get("token")
            if not token:
                raise ProxyError(original_url, f"unexpected upload response: {payload}")
            uuid = self._wait_for_upload(original_url, token)

        canonical = canonical_base_url(uuid, settings.cdn_base)
        logger.info("Mirrored %s -> %s", original_url, canonical)
        return canonical

    def _wait_for_upload(self, original_url: str, token: str) -> str:
        settings = self.context.mirror
        status_url = f"{settings.upload_base.rstrip('/')}/from_url/status/"

        for attempt in range(1, settings.max_polls + 1):
            payload = self._request_json(
                original_url, "GET", status_url, params={"token": token}
            )
            status = payload.get("status")

            if status == "success":
                uuid = payload.get("uuid")
                if not uuid:
                    raise ProxyError(original_url, "mirror reported success without a file id")
                return uuid
            if status in ("error", "unknown"):
                detail = payload.get("error") or status
                raise ProxyError(original_url, f"mirror reported {detail}")

            logger.debug("Mirror status for %s: %s (poll %d)", original_url, status, attempt)
            if settings.poll_interval > 0:
                time.sleep(settings.poll_interval)

        raise ProxyError(
            original_url, f"upload not finished after {settings.max_polls} status checks"
        )

    def _request_json(self, original_url: str, method: str, url: str, **kwargs) -> dict:
        try:
            response = self.context.http_client.request(method, url, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise ProxyError(original_url, f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise ProxyError(original_url, f"{method} {url} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise ProxyError(original_url, f"{method} {url} returned {type(payload).__name__}")
        return payload
