"""PageDriver implementation backed by Playwright's async API."""

from __future__ import annotations

import itertools
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from den_stitcher.collector import ImageElement
from den_stitcher.constants import READY_EVENT
from den_stitcher.errors import FetchError, NavigationError
from den_stitcher.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import AsyncIterator

    from playwright.async_api import Page

    from den_stitcher.config import BrowserConfig
    from den_stitcher.harvest.signals import ReadySignalHub

_ENUMERATE_IMAGES_JS = """
(prefix) => Array.from(document.querySelectorAll("img"))
  .filter((img) => (img.getAttribute("alt") || "").startsWith(prefix))
  .map((img) => ({
    alt: img.getAttribute("alt") || "",
    src: img.src || "",
    currentSrc: img.currentSrc || "",
    naturalWidth: img.naturalWidth || 0,
    naturalHeight: img.naturalHeight || 0,
  }))
"""

_context_ids = itertools.count(1)


class PlaywrightPageDriver:
    """Drive a single Playwright page and report its load events."""

    def __init__(
        self,
        page: Page,
        signals: ReadySignalHub,
        *,
        context_id: str | None = None,
    ) -> None:
        self.page = page
        self.context_id = context_id or f"page-{next(_context_ids)}"
        self._signals = signals
        page.on(READY_EVENT, self._on_load)

    def _on_load(self, _page: Page) -> None:
        # Not tied to a particular navigation; callers wait for each load
        # before issuing the next goto.
        self._signals.notify(self.context_id)

    def detach(self) -> None:
        """Stop forwarding load events."""
        self.page.remove_listener(READY_EVENT, self._on_load)

    async def current_url(self) -> str:
        return self.page.url

    async def navigate(self, url: str) -> None:
        logger.debug("Navigating %s to %s", self.context_id, url)
        try:
            await self.page.goto(url, wait_until="commit")
        except PlaywrightError as e:
            msg = f"Could not open {url}: {e.message}"
            raise NavigationError(msg) from e

    async def enumerate_images(self, prefix: str) -> list[ImageElement]:
        raw = await self.page.evaluate(_ENUMERATE_IMAGES_JS, prefix)
        return [ImageElement.from_mapping(item) for item in raw or []]

    async def fetch_bytes(self, url: str) -> bytes:
        try:
            response = await self.page.request.get(url)
            if not response.ok:
                raise FetchError(
                    url, f"HTTP {response.status}", status=response.status,
                )
            return await response.body()
        except PlaywrightError as e:
            raise FetchError(url, e.message) from e


@asynccontextmanager
async def open_page(cfg: BrowserConfig) -> AsyncIterator[Page]:
    """
    Launch Chromium and yield a fresh page.

    With ``user_data_dir`` set the profile is persistent, so a signed-in
    session survives between runs.
    """
    async with async_playwright() as p:
        if cfg.user_data_dir:
            context = await p.chromium.launch_persistent_context(
                cfg.user_data_dir, headless=cfg.headless,
            )
            try:
                page = (
                    context.pages[0] if context.pages
                    else await context.new_page()
                )
                yield page
            finally:
                await context.close()
        else:
            browser = await p.chromium.launch(headless=cfg.headless)
            try:
                context = await browser.new_context()
                yield await context.new_page()
            finally:
                await browser.close()
