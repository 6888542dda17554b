"""
Image grid utilities split into core primitives, layouts, and naming helpers.

The package exposes the most commonly used entry points directly so
callers can plan, compose and export a grid from a single import.
"""

from __future__ import annotations

from . import core, layouts, naming
from .core import Rect, draw_fit, fit_rect, make_canvas, to_rgb
from .layouts import (
    LayoutPlan,
    cell_rect,
    compose_grid,
    grid_dimensions,
    plan_layout,
)
from .naming import (
    CompositionResult,
    artifact_filename,
    export_canvas,
    save_artifact,
)

__all__ = [
    "CompositionResult",
    "LayoutPlan",
    "Rect",
    "artifact_filename",
    "cell_rect",
    "compose_grid",
    "core",
    "draw_fit",
    "export_canvas",
    "fit_rect",
    "grid_dimensions",
    "layouts",
    "make_canvas",
    "naming",
    "plan_layout",
    "save_artifact",
    "to_rgb",
]
