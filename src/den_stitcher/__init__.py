"""Public package exports for the den stitcher."""

from __future__ import annotations

from .collector import ImageElement, collect_sources, dedup
from .harvest import HarvestOrchestrator, HarvestPhase, ReadySignalHub
from .image_grid import (
    CompositionResult,
    LayoutPlan,
    compose_grid,
    export_canvas,
    plan_layout,
)

__all__ = [
    "CompositionResult",
    "HarvestOrchestrator",
    "HarvestPhase",
    "ImageElement",
    "LayoutPlan",
    "ReadySignalHub",
    "collect_sources",
    "compose_grid",
    "dedup",
    "export_canvas",
    "plan_layout",
]
