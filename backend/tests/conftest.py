"""Shared fixtures: in-memory test images, a recording stand-in for the external APIs,
and a TestClient wired to it."""
import io
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imagepro import config
from imagepro.main import app
from imagepro.proxy.client import get_http_client


def make_image(fmt: str = "JPEG", size=(64, 48), mode: str = "RGB", noise: bool = False) -> bytes:
    """Encode a small test image. ``noise`` gives detail so lossy quality changes the size."""
    if noise:
        img = Image.effect_noise(size, 64).convert(mode)
    else:
        img = Image.new(mode, size, (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


class Upstream:
    """Callable for httpx.MockTransport that records every outbound request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._handler = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def respond(self, status_code: int = 200, **kwargs) -> None:
        self._handler = lambda request: httpx.Response(status_code, **kwargs)

    def fail_with(self, exc_type=httpx.ConnectError, message: str = "connection refused") -> None:
        def handler(request):
            raise exc_type(message, request=request)

        self._handler = handler


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def client(upstream, monkeypatch):
    """TestClient with credentials set and outbound calls routed to ``upstream``."""
    monkeypatch.setattr(config, "ARK_API_KEY", "ark-test-key")
    monkeypatch.setattr(config, "REMOVE_BG_API_KEY", "rbg-test-key")

    async def mock_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = mock_http_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def jpeg_bytes():
    return make_image("JPEG")


@pytest.fixture
def png_bytes():
    return make_image("PNG", mode="RGBA")
