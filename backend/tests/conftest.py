"""Shared pytest fixtures for ListingPack tests."""

from __future__ import annotations

import io
from urllib.parse import parse_qs

import httpx
import numpy as np
import pytest
from PIL import Image

from backend.listingpack.context import MirrorSettings, PipelineContext
from backend.listingpack.loader import PillowDecoder

UPLOAD_BASE = "https://upload.test-mirror.example"
CDN_BASE = "https://ucarecdn.com"
CLOSING_URL = "https://assets.example.com/closing.png"


def encode(image: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class FakeRemote:
    """In-memory web: image routes plus a simulated upload-from-URL mirror."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.requests: list[httpx.Request] = []
        self.mirrored: dict[str, str] = {}  # source URL -> uuid
        self.mirror_errors: set[str] = set()
        self.pending_polls = 1  # "progress" answers before "success"
        self._poll_counts: dict[str, int] = {}

    def add_image(self, url: str, image: Image.Image, fmt: str = "PNG") -> None:
        self.routes[url] = (200, encode(image, fmt))

    def add_bytes(self, url: str, content: bytes, status: int = 200) -> None:
        self.routes[url] = (status, content)

    def add_mirror(self, source_url: str, uuid: str, image: Image.Image) -> None:
        self.mirrored[source_url] = uuid
        self.add_image(f"{CDN_BASE}/{uuid}/", image)

    def urls_requested(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if url.startswith(UPLOAD_BASE):
            return self._mirror(request)

        if url in self.routes:
            status, content = self.routes[url]
            return httpx.Response(status, content=content)

        # CDN transforms serve the untransformed bytes
        if "/-/" in url:
            base = url.split("-/", 1)[0]
            if base in self.routes:
                status, content = self.routes[base]
                return httpx.Response(status, content=content)

        return httpx.Response(404, content=b"not found")

    def _mirror(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            form = parse_qs(request.read().decode())
            source = form.get("source_url", [""])[0]
            if form.get("pub_key", [""])[0] != "test-key":
                return httpx.Response(403, json={"error": "bad key"})
            if source in self.mirror_errors:
                return httpx.Response(200, json={"type": "token", "token": "tok-error"})
            if source not in self.mirrored:
                return httpx.Response(400, json={"error": "source refused"})
            return httpx.Response(
                200, json={"type": "token", "token": f"tok-{self.mirrored[source]}"}
            )

        token = request.url.params.get("token", "")
        if token == "tok-error":
            return httpx.Response(200, json={"status": "error", "error": "Couldn't download"})
        uuid = token.removeprefix("tok-")
        if uuid not in self.mirrored.values():
            return httpx.Response(200, json={"status": "unknown"})

        count = self._poll_counts.get(token, 0)
        self._poll_counts[token] = count + 1
        if count < self.pending_polls:
            return httpx.Response(200, json={"status": "progress"})
        return httpx.Response(200, json={"status": "success", "uuid": uuid})


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def context(remote: FakeRemote) -> PipelineContext:
    """Pipeline context wired to the fake remote, no real network."""
    client = httpx.Client(transport=httpx.MockTransport(remote.handler))
    ctx = PipelineContext(
        http_client=client,
        mirror=MirrorSettings(
            public_key="test-key",
            upload_base=UPLOAD_BASE,
            cdn_base=CDN_BASE,
            poll_interval=0,
            max_polls=3,
        ),
        closing_overlay_url=CLOSING_URL,
        decoder=PillowDecoder(),
    )
    yield ctx
    ctx.close()


@pytest.fixture
def banded_image():
    """Factory: dark body with white bands of the given fraction top and bottom."""

    def _make(
        width: int = 100,
        height: int = 200,
        top: float = 0.10,
        bottom: float = 0.10,
        band_color: tuple = (255, 255, 255, 255),
    ) -> Image.Image:
        img = Image.new("RGBA", (width, height), (30, 30, 30, 255))
        top_rows = int(height * top)
        bottom_rows = int(height * bottom)
        if top_rows:
            img.paste(band_color, (0, 0, width, top_rows))
        if bottom_rows:
            img.paste(band_color, (0, height - bottom_rows, width, height))
        return img

    return _make


@pytest.fixture
def solid_image():
    def _make(size: tuple[int, int] = (100, 100), color: tuple = (0, 0, 255, 255)) -> Image.Image:
        return Image.new("RGBA", size, color)

    return _make


@pytest.fixture
def corner_overlay():
    """Factory: transparent overlay with an opaque square in one corner."""

    def _make(
        size: int = 100, color: tuple = (255, 0, 0, 255), corner: str = "top_left"
    ) -> Image.Image:
        img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        square = size * 3 // 10
        if corner == "top_left":
            box = (0, 0, square, square)
        else:
            box = (size - square, size - square, size, size)
        img.paste(color, box)
        return img

    return _make


@pytest.fixture
def truncated_jpeg() -> bytes:
    """JPEG whose header parses but whose scan data is cut short."""
    rng = np.random.default_rng(7)
    noise = rng.integers(0, 256, size=(300, 400, 3), dtype=np.uint8)
    data = encode(Image.fromarray(noise), "JPEG")
    return data[: len(data) // 2]
