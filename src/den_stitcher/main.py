"""Top-level orchestration for one stitch run."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import den_stitcher.runtime as sd_runtime
from den_stitcher.errors import NotFoundError
from den_stitcher.harvest import HarvestOrchestrator, ReadySignalHub
from den_stitcher.harvest.playwright_driver import (
    PlaywrightPageDriver,
    open_page,
)
from den_stitcher.image_grid import save_artifact
from den_stitcher.logging_utils import logger
from den_stitcher.site import SiteUrls

if TYPE_CHECKING:  # pragma: no cover
    from pathlib import Path

    from den_stitcher.config import StitcherConfig
    from den_stitcher.image_grid import CompositionResult
    from den_stitcher.type_defs import LayoutMode, SourceScope


async def stitch(
    config: StitcherConfig,
    *,
    scope: SourceScope,
    mode: LayoutMode,
) -> Path:
    """
    Open a browser, run one harvest and write the artifact.

    Single-scope runs stitch one den tab: ``browser.start_url`` when it
    points at the den, the default den page otherwise. If that tab has no
    matching images the other tab is tried once. Dual-scope runs start
    from ``browser.start_url`` when one is set, and the tab is sent back
    there before the browser closes.
    """
    output_dir = sd_runtime.setup_output_directory(config.output.output)
    site = SiteUrls.from_config(config.site)
    signals = ReadySignalHub()

    async with open_page(config.browser) as page:
        driver = PlaywrightPageDriver(page, signals)
        orchestrator = HarvestOrchestrator(driver, config, signals=signals)
        try:
            if scope == "single":
                result = await _harvest_single(
                    orchestrator, site, config.browser.start_url, mode,
                )
            else:
                if config.browser.start_url:
                    await orchestrator.navigate_and_wait(
                        config.browser.start_url,
                    )
                result = await orchestrator.harvest_both(mode)
                # The restore runs detached; let it land before the
                # browser closes. Its failures are already logged.
                if orchestrator.restore_task is not None:
                    await asyncio.gather(
                        orchestrator.restore_task, return_exceptions=True,
                    )
        finally:
            driver.detach()

    logger.info("Harvest finished: %s", " -> ".join(
        phase.value for phase in orchestrator.state.history))
    return save_artifact(result, output_dir)


def single_start_url(site: SiteUrls, requested: str | None) -> str:
    """Return the den tab a single-scope run should open."""
    if requested is None:
        return site.primary_url
    if not site.is_den(requested):
        logger.warning("%s is not a den page, using %s instead",
                       requested, site.primary_url)
        return site.primary_url
    return requested


async def _harvest_single(
    orchestrator: HarvestOrchestrator,
    site: SiteUrls,
    requested: str | None,
    mode: LayoutMode,
) -> CompositionResult:
    start_url = single_start_url(site, requested)
    await orchestrator.navigate_and_wait(start_url)
    try:
        return await orchestrator.harvest_current(mode)
    except NotFoundError:
        other_url = site.other_tab_url(start_url)
        logger.warning("No matching images on %s, trying %s",
                       start_url, other_url)
    await orchestrator.navigate_and_wait(other_url)
    return await orchestrator.harvest_current(mode)
