"""
Harvest state machine.

Dual-source runs visit the den and its alternate tab in turn, collect
matching images on each, merge and deduplicate them, then load, lay out,
compose and export the grid before sending the tab back to where it
started. Single-page runs collect from whatever page is already open.
"""

from __future__ import annotations

import asyncio
from contextlib import ExitStack, asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from den_stitcher.collector import collect_sources, dedup
from den_stitcher.errors import (
    AllLoadsFailedError,
    EmptyInputError,
    HarvestInProgressError,
    NavigationTimeoutError,
    NotFoundError,
    RestoreFailure,
    TooManyImagesError,
)
from den_stitcher.image_grid import compose_grid, export_canvas, plan_layout
from den_stitcher.image_io import load_images
from den_stitcher.logging_utils import logger
from den_stitcher.site import SiteUrls
from den_stitcher.type_defs import LAYOUT_MODES

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

    from den_stitcher.config import StitcherConfig
    from den_stitcher.harvest.driver import PageDriver
    from den_stitcher.harvest.signals import ReadySignalHub
    from den_stitcher.image_grid import CompositionResult
    from den_stitcher.type_defs import (
        LayoutMode,
        SourceDescriptor,
        SourceScope,
    )


class HarvestPhase(Enum):
    """Phases of a harvest, in the order a dual-source run visits them."""

    IDLE = "idle"
    NAVIGATE_A = "navigate-a"
    COLLECT_A = "collect-a"
    NAVIGATE_B = "navigate-b"
    COLLECT_B = "collect-b"
    MERGE = "merge"
    LOAD = "load"
    COMPOSE = "compose"
    RESTORE = "restore"
    DONE = "done"
    FAILED = "failed"


@dataclass
class HarvestState:
    """Progress of the current or most recent harvest."""

    phase: HarvestPhase = HarvestPhase.IDLE
    origin_url: str | None = None
    history: list[HarvestPhase] = field(
        default_factory=lambda: [HarvestPhase.IDLE],
    )
    failure: BaseException | None = None


class HarvestOrchestrator:
    """
    Run one harvest at a time against one browser tab.

    The layout mode is passed to each entry point; nothing is read from
    preferences once a run has started.
    """

    # Context ids with a harvest in flight, shared by all orchestrators.
    _busy: ClassVar[set[str]] = set()

    def __init__(
        self,
        driver: PageDriver,
        config: StitcherConfig,
        *,
        signals: ReadySignalHub,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.driver = driver
        self.config = config
        self.signals = signals
        self.site = SiteUrls.from_config(config.site)
        self.state = HarvestState()
        self._sleep = sleep
        self._restore_task: asyncio.Task[None] | None = None

    @property
    def restore_task(self) -> asyncio.Task[None] | None:
        """The fire-and-forget return navigation, if one was started."""
        return self._restore_task

    def _enter(self, phase: HarvestPhase) -> None:
        self.state.phase = phase
        self.state.history.append(phase)
        logger.info("Harvest %s: %s", self.driver.context_id, phase.value)

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        """Hold the busy flag for this context and record failures."""
        context_id = self.driver.context_id
        if context_id in self._busy:
            msg = f"A stitch is already running in {context_id}"
            raise HarvestInProgressError(msg)
        self._busy.add(context_id)
        self.state = HarvestState()
        self._restore_task = None
        try:
            yield
        except BaseException as exc:
            self.state.failure = exc
            self._enter(HarvestPhase.FAILED)
            raise
        finally:
            self._busy.discard(context_id)

    async def navigate_and_wait(self, url: str) -> None:
        """
        Navigate the tab to url and wait for its load signal.

        The waiter is armed before the request goes out and is removed
        whatever happens. The tab must be idle when this is called: a
        load event still pending from the previous document would resolve
        the new waiter early, so every navigation is awaited before the
        next one starts.

        Raises:
            NavigationTimeoutError: If the page does not finish loading
                within ``harvest.navigation_timeout_s``.

        """
        timeout_s = self.config.harvest.navigation_timeout_s
        waiter = self.signals.arm(self.driver.context_id)
        try:
            await self.driver.navigate(url)
        except BaseException:
            waiter.cancel()
            raise
        try:
            await waiter.wait(timeout_s)
        except TimeoutError as exc:
            raise NavigationTimeoutError(
                self.driver.context_id, url, timeout_s,
            ) from exc

    async def _collect(
        self,
        *,
        limit: int | None = None,
        require_rendered: bool = False,
    ) -> list[SourceDescriptor]:
        prefix = self.config.site.alt_prefix
        elements = await self.driver.enumerate_images(prefix)
        found = collect_sources(
            elements, prefix, limit=limit, require_rendered=require_rendered,
        )
        logger.info("Collected %d matching images", len(found))
        return found

    async def harvest_both(self, mode: LayoutMode) -> CompositionResult:
        """
        Harvest both den tabs and return the composed grid.

        Raises:
            NotFoundError: Neither tab had matching images.
            TooManyImagesError: The merged set exceeds the ceiling.
            AllLoadsFailedError: No image could be loaded.
            NavigationTimeoutError: A tab never finished loading.

        """
        _check_mode(mode)
        async with self._exclusive():
            self.state.origin_url = await self.driver.current_url()
            url_a, url_b = self.site.source_urls()

            self._enter(HarvestPhase.NAVIGATE_A)
            await self.navigate_and_wait(url_a)
            self._enter(HarvestPhase.COLLECT_A)
            found_a = await self._collect()

            self._enter(HarvestPhase.NAVIGATE_B)
            await self.navigate_and_wait(url_b)
            self._enter(HarvestPhase.COLLECT_B)
            found_b = await self._collect()

            self._enter(HarvestPhase.MERGE)
            sources = dedup([*found_a, *found_b])
            if not sources:
                msg = (
                    "No images found across both tabs. Try again, or "
                    "stitch a single tab instead."
                )
                raise NotFoundError(msg)
            limit = self.config.harvest.max_dual_images
            if len(sources) > limit:
                raise TooManyImagesError(len(sources), limit)

            result = await self._load_and_compose(sources, mode, "dual")

            self._enter(HarvestPhase.RESTORE)
            self._restore()
            self._enter(HarvestPhase.DONE)
            return result

    async def harvest_current(self, mode: LayoutMode) -> CompositionResult:
        """
        Harvest the page already shown in the tab.

        Waits the settle delay so lazily loaded images can finish, then
        collects at most ``harvest.single_page_max_images`` rendered
        images.
        """
        _check_mode(mode)
        async with self._exclusive():
            harvest_cfg = self.config.harvest
            await self._sleep(harvest_cfg.settle_delay_ms / 1000)

            self._enter(HarvestPhase.COLLECT_A)
            found = await self._collect(
                limit=harvest_cfg.single_page_max_images,
                require_rendered=True,
            )
            sources = dedup(found)
            if not sources:
                msg = "No matching images found on this page."
                raise NotFoundError(msg)

            result = await self._load_and_compose(sources, mode, "single")
            self._enter(HarvestPhase.DONE)
            return result

    async def _load_and_compose(
        self,
        sources: Sequence[SourceDescriptor],
        mode: LayoutMode,
        scope: SourceScope,
    ) -> CompositionResult:
        self._enter(HarvestPhase.LOAD)
        loaded = await load_images(
            sources,
            self.driver.fetch_bytes,
            concurrency=self.config.harvest.load_concurrency,
        )
        if not loaded:
            msg = "Found images, but none could be loaded for stitching."
            raise AllLoadsFailedError(msg)

        with ExitStack() as stack:
            for image in loaded:
                stack.callback(image.close)

            self._enter(HarvestPhase.COMPOSE)
            layout_cfg = self.config.layout
            try:
                plan = plan_layout(
                    [im.size for im in loaded], mode,
                    padding=layout_cfg.padding,
                )
            except EmptyInputError as exc:
                msg = "Found images, but none could be loaded for stitching."
                raise AllLoadsFailedError(msg) from exc
            canvas = compose_grid(
                loaded,
                plan,
                fit_mode=layout_cfg.fit_mode,
                bg_color=layout_cfg.background_rgb,
            )
        return export_canvas(canvas, scope=scope, mode=mode)

    def _restore(self) -> None:
        """Send the tab back to where it started, without waiting."""
        origin = self.state.origin_url
        if not origin or not self.site.is_site(origin):
            logger.debug("Not restoring off-site origin %r", origin)
            return
        try:
            task = asyncio.create_task(self.driver.navigate(origin))
        except Exception as exc:  # noqa: BLE001
            _log_restore_failure(origin, exc)
            return

        def _done(t: asyncio.Task[None]) -> None:
            if not t.cancelled() and t.exception() is not None:
                _log_restore_failure(origin, t.exception())

        task.add_done_callback(_done)
        self._restore_task = task


def _check_mode(mode: str) -> None:
    if mode not in LAYOUT_MODES:
        msg = f"Unknown layout mode: {mode!r}"
        raise ValueError(msg)


def _log_restore_failure(origin: str, exc: BaseException | None) -> None:
    failure = RestoreFailure(f"Could not return to {origin}: {exc}")
    logger.debug("%s", failure)
