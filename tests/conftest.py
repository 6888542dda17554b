"""
Test configuration and shared fixtures for den_stitcher.

This module defines reusable pytest fixtures for image generation, an
in-memory page driver, and configuration objects. These fixtures
support all test modules in the test suite.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from __future__ import annotations

import asyncio
import io
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import pytest
from PIL import Image

from den_stitcher.collector import ImageElement
from den_stitcher.config import StitcherConfig
from den_stitcher.constants import COLOR_MODE_RGB
from den_stitcher.errors import FetchError
from den_stitcher.harvest.signals import ReadySignalHub
from den_stitcher.logging_utils import logger

DEN_URL = "https://www.bearish.af/den"
HIBERNATE_URL = "https://www.bearish.af/den?tab=hibernate"
PREFIX = "BEARISH #"


class FakePageDriver:
    """
    In-memory PageDriver.

    ``pages`` maps a URL to the images shown there and ``images`` maps an
    image URL to its encoded bytes. Navigating to a URL in ``silent_urls``
    never fires a load signal.
    """

    def __init__(  # noqa: PLR0913
        self,
        signals: ReadySignalHub,
        pages: Mapping[str, list[ImageElement]],
        images: Mapping[str, bytes],
        *,
        start_url: str = "about:blank",
        context_id: str = "tab-1",
        silent_urls: Iterable[str] = (),
        fetch_delays: Mapping[str, float] | None = None,
    ) -> None:
        self.signals = signals
        self.pages = dict(pages)
        self.images = dict(images)
        self.url = start_url
        self.context_id = context_id
        self.silent_urls = set(silent_urls)
        self.fetch_delays = dict(fetch_delays or {})
        self.visited: list[str] = []
        self.fetched: list[str] = []
        self.enumerate_calls = 0
        self.max_in_flight = 0
        self._in_flight = 0
        self.detached = False

    def detach(self) -> None:
        self.detached = True

    async def current_url(self) -> str:
        return self.url

    async def navigate(self, url: str) -> None:
        self.visited.append(url)
        self.url = url
        if url not in self.silent_urls:
            loop = asyncio.get_running_loop()
            loop.call_soon(self.signals.notify, self.context_id)

    async def enumerate_images(self, prefix: str) -> list[ImageElement]:
        self.enumerate_calls += 1
        return [
            el for el in self.pages.get(self.url, [])
            if el.alt.startswith(prefix)
        ]

    async def fetch_bytes(self, url: str) -> bytes:
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            await asyncio.sleep(self.fetch_delays.get(url, 0))
            self.fetched.append(url)
            if url not in self.images:
                raise FetchError(url, "HTTP 404", status=404)
            return self.images[url]
        finally:
            self._in_flight -= 1


def png_bytes(
    size: tuple[int, int],
    color: str | tuple[int, ...] = "red",
    mode: str = COLOR_MODE_RGB,
) -> bytes:
    """Encode a solid image as PNG bytes."""
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


def bear(number: int, src: str | None = None, *,
         rendered: bool = True) -> ImageElement:
    """Build a matching ImageElement."""
    url = src or f"https://cdn.example/bear-{number}.png"
    side = 10 if rendered else 0
    return ImageElement(
        alt=f"{PREFIX}{number}",
        src=url,
        current_src=url,
        natural_width=side,
        natural_height=side,
    )


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory for PNG-encoded solid images."""
    return png_bytes


@pytest.fixture
def make_bear() -> Callable[..., ImageElement]:
    """Factory for matching page elements."""
    return bear


@pytest.fixture
def signals() -> ReadySignalHub:
    """A fresh signal hub."""
    return ReadySignalHub()


@pytest.fixture
def make_driver(signals: ReadySignalHub) -> Callable[..., FakePageDriver]:
    """Factory for in-memory page drivers sharing the signals fixture."""

    def _build(
        pages: Mapping[str, list[ImageElement]],
        images: Mapping[str, bytes],
        **kwargs: Any,
    ) -> FakePageDriver:
        return FakePageDriver(signals, pages, images, **kwargs)

    return _build


@pytest.fixture
def make_config(tmp_path: Any) -> Callable[..., StitcherConfig]:
    """
    Build StitcherConfig instances with optional section overrides.

    Settle delay is zero and the navigation timeout short so tests stay
    fast. Output and preferences point into tmp_path.
    """

    def _build(**sections: dict[str, Any]) -> StitcherConfig:
        data: dict[str, Any] = {
            "harvest": {"settle_delay_ms": 0, "navigation_timeout_s": 0.2},
            "output": {
                "output": str(tmp_path / "out"),
                "preferences": str(tmp_path / "prefs.toml"),
            },
        }
        for name, values in sections.items():
            data.setdefault(name, {}).update(values)
        return StitcherConfig.model_validate(data)

    return _build


@pytest.fixture
def sample_image() -> Image.Image:
    """Create a sample 100x100 red RGB PIL image."""
    return Image.new(COLOR_MODE_RGB, (100, 100), color="red")


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the shared logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)


@pytest.fixture
def den_urls() -> tuple[str, str]:
    """The two default harvest sources, in visiting order."""
    return DEN_URL, HIBERNATE_URL
